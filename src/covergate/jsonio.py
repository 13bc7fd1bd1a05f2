"""
Lenient JSON reading shared by the config loader and the coverage parser.

Coverage reports and policy files are often hand-edited, so both accept
``//`` and ``/* */`` comments and trailing commas. Field names are matched
case-insensitively. Floats are parsed as Decimal so thresholds such as
``0.6`` keep their exact decimal value.
"""

from __future__ import annotations

import json
import re
from decimal import Decimal
from typing import Any, Mapping

from covergate.core.errors import MalformedInputError

_STRING = r'"(?:\\.|[^"\\])*"'
_COMMENT_RE = re.compile(rf"{_STRING}|//[^\n]*|/\*.*?\*/", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(rf"{_STRING}|,(?=\s*[\]}}])")


def _drop_comment(match: re.Match[str]) -> str:
    token = match.group(0)
    if token.startswith('"'):
        return token
    # Keep line numbers stable for parser error messages
    return "\n" * token.count("\n") or " "


def _drop_trailing_comma(match: re.Match[str]) -> str:
    token = match.group(0)
    return token if token.startswith('"') else ""


def strip_json_extensions(text: str) -> str:
    """Remove comments and trailing commas outside of string literals."""
    text = _COMMENT_RE.sub(_drop_comment, text)
    return _TRAILING_COMMA_RE.sub(_drop_trailing_comma, text)


def loads_lenient(text: str, source: str = "JSON") -> Any:
    """Parse JSON text tolerating comments and trailing commas.

    Raises:
        MalformedInputError: If the text is not valid JSON after cleanup
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    try:
        return json.loads(strip_json_extensions(text), parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise MalformedInputError(
            f"Failed to parse {source}: {e.msg} (line {e.lineno}, column {e.colno})",
            source=source,
            detail=str(e),
        ) from e


def get_field(mapping: Mapping[str, Any], name: str, default: Any = None) -> Any:
    """Look up a key, falling back to a case-insensitive match."""
    if name in mapping:
        return mapping[name]
    folded = name.casefold()
    for key, value in mapping.items():
        if isinstance(key, str) and key.casefold() == folded:
            return value
    return default


def has_field(mapping: Mapping[str, Any], name: str) -> bool:
    """Check for a key using the same matching rules as get_field."""
    sentinel = object()
    return get_field(mapping, name, sentinel) is not sentinel
