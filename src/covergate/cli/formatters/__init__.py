"""
Output formatters for ``covergate verify``.

Supports multiple output formats for CI/CD integration:
- table: Human-readable report grouped by profile (default)
- json: Machine-readable JSON
- junit: JUnit XML for CI test results
- markdown: PR comment format
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable

from covergate.policy.models import ValidationResult

from .json_fmt import format_json
from .junit import format_junit
from .markdown import format_markdown
from .table import format_table


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    JUNIT = "junit"
    MARKDOWN = "markdown"


FORMATTERS: dict[OutputFormat, Callable[[ValidationResult], str]] = {
    OutputFormat.TABLE: format_table,
    OutputFormat.JSON: format_json,
    OutputFormat.JUNIT: format_junit,
    OutputFormat.MARKDOWN: format_markdown,
}


def format_result(
    result: ValidationResult,
    output_format: OutputFormat | str = OutputFormat.TABLE,
    output_file: Path | str | None = None,
) -> str:
    """
    Format a validation result in the specified format.

    Args:
        result: The validation result to format
        output_format: Output format (table, json, junit, markdown)
        output_file: Optional file path to write output to

    Returns:
        Formatted string output
    """
    if isinstance(output_format, str):
        output_format = OutputFormat(output_format)

    output = FORMATTERS[output_format](result)

    if output_file:
        path = Path(output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(output, encoding="utf-8")

    return output


__all__ = [
    "OutputFormat",
    "FORMATTERS",
    "format_result",
    "format_json",
    "format_junit",
    "format_markdown",
    "format_table",
]
