"""
Human-readable report: violations grouped by profile, then a summary.
"""

from __future__ import annotations

import io
from fractions import Fraction

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from covergate.cli.ux import COVERGATE_THEME
from covergate.policy.models import ValidationResult


def _pct(rate: Fraction) -> str:
    return f"{float(rate) * 100:.1f}%"


def render_table(result: ValidationResult, target: Console) -> None:
    """Render a validation result onto a rich console."""
    if result.success:
        target.print(f"[success]✓ {result.summary()}[/success]")
    else:
        target.print(
            f"[error]✗ Coverage policy violations found "
            f"({result.files_failed} of {result.total_files_checked} files)[/error]"
        )
        target.print()

        for profile, violations in result.by_profile().items():
            table = Table(title=f"Profile: {escape(profile)}", title_justify="left", show_lines=False)
            table.add_column("File")
            table.add_column("Metric")
            table.add_column("Required", justify="right")
            table.add_column("Actual", justify="right")
            table.add_column("Covered", justify="right")

            for violation in violations:
                table.add_row(
                    escape(violation.file_path),
                    violation.violation_type.metric,
                    _pct(violation.required_coverage),
                    f"[error]{_pct(violation.actual_coverage)}[/error]",
                    f"{violation.covered_items}/{violation.total_items}",
                )
            target.print(table)
            target.print()

        target.print(f"Summary: {result.summary()}")

    if result.profile_counts:
        failed = result.failed_by_profile()
        parts = [
            f"{escape(name)}: {count - failed.get(name, 0)}/{count} passed"
            for name, count in sorted(result.profile_counts.items())
        ]
        target.print(f"[muted]Profiles: {', '.join(parts)}[/muted]")


def format_table(result: ValidationResult) -> str:
    """Format a validation result as plain text."""
    buffer = io.StringIO()
    capture = Console(
        file=buffer,
        theme=COVERGATE_THEME,
        width=120,
        no_color=True,
        force_terminal=False,
        highlight=False,
    )
    render_table(result, capture)
    return buffer.getvalue()
