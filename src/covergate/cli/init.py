"""
Init command: write a starter policy file.
"""

from __future__ import annotations

from rich.markup import escape

from covergate.cli.ux import console, success
from covergate.config.loader import DEFAULT_CONFIG_FILE
from covergate.config.templates import get_template, write_template
from covergate.core.errors import ExitCode, main_with_error_handling
from covergate.profiles.markers import format_marker


@main_with_error_handling()
def init_command(
    template: str = "basic",
    output: str = DEFAULT_CONFIG_FILE,
    force: bool = False,
) -> int:
    """
    Create a policy file from a built-in template.

    Args:
        template: basic, strict or relaxed
        output: Path of the file to create
        force: Overwrite an existing file

    Returns:
        Exit code (0 = created, 10 = unknown template or file exists)
    """
    config = get_template(template)
    path = write_template(template, output, overwrite=force)

    success(f"Created {escape(str(path))} with '{template.lower()}' template")
    console.print()
    console.print("[bold]Profiles:[/bold]")
    for name, thresholds in config.profiles.items():
        parts = []
        if thresholds.min_line is not None:
            parts.append(f"{float(thresholds.min_line) * 100:.0f}% lines")
        if thresholds.min_branch is not None:
            parts.append(f"{float(thresholds.min_branch) * 100:.0f}% branches")
        default = " [muted](default)[/muted]" if name == config.default_profile else ""
        console.print(f"  • {name}: {', '.join(parts)}{default}")
    console.print()
    console.print(f"Tag files with: {format_marker('ProfileName')}", markup=False)

    return ExitCode.SUCCESS
