"""
Markdown output formatter for pull request comments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from covergate.policy.models import ValidationResult


def _cell(text: str) -> str:
    return text.replace("|", "\\|")


def format_markdown(result: ValidationResult) -> str:
    """Format a validation result as a Markdown comment."""
    lines = []
    icon = "✅" if result.success else "❌"
    lines.append(f"## {icon} Coverage policy")
    lines.append("")
    lines.append(result.summary())
    lines.append("")

    for profile, violations in result.by_profile().items():
        lines.append(f"### {profile}")
        lines.append("")
        lines.append("| File | Metric | Required | Actual | Covered |")
        lines.append("|------|--------|---------:|-------:|--------:|")
        for v in violations:
            lines.append(
                f"| `{_cell(v.file_path)}` | {v.violation_type.metric} "
                f"| {float(v.required_coverage) * 100:.1f}% "
                f"| {float(v.actual_coverage) * 100:.1f}% "
                f"| {v.covered_items}/{v.total_items} |"
            )
        lines.append("")

    if result.profile_counts:
        failed = result.failed_by_profile()
        lines.append("<details><summary>Files checked per profile</summary>")
        lines.append("")
        lines.append("| Profile | Checked | Failed |")
        lines.append("|---------|--------:|-------:|")
        for name, count in sorted(result.profile_counts.items()):
            lines.append(f"| {_cell(name)} | {count} | {failed.get(name, 0)} |")
        lines.append("")
        lines.append("</details>")
        lines.append("")

    return "\n".join(lines)
