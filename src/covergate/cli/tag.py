"""
Tagging commands: add, remove and suggest profile markers.

Commands:
    covergate tag Critical --files src/Auth/TokenService.cs
    covergate tag Dto --dir src/Models
    covergate tag BusinessLogic --pattern "**/*Service.cs" --base src --dry-run
    covergate tag Critical --list critical-files.txt --backup
    covergate untag src/Auth/TokenService.cs
    covergate suggest src/
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from covergate.cli.ux import console, error, header, print_table, success, warning
from covergate.core.errors import ExitCode, main_with_error_handling
from covergate.profiles.tagging import (
    SOURCE_SUFFIX,
    TaggingResult,
    TaggingService,
    read_file_list,
    suggest_profiles,
)


def _report(result: TaggingResult, verb: str, dry_run: bool = False) -> int:
    prefix = "Would be " if dry_run else ""
    for path in result.tagged:
        console.print(f"  [success]•[/success] {prefix}{verb}: {escape(path)}")
    for path in result.skipped:
        console.print(f"  [muted]•[/muted] unchanged: {escape(path)}")
    for path, message in result.errors:
        console.print(f"  [error]•[/error] {escape(path)}: {escape(message)}")

    console.print()
    summary = (
        f"{result.files_matched} matched, {result.files_tagged} {verb}, "
        f"{result.files_skipped} unchanged, {result.files_errored} failed"
    )
    if result.errors:
        error(summary)
        return ExitCode.POLICY_FAILED
    if result.files_matched == 0:
        warning("No files matched")
    else:
        success(summary)
    return ExitCode.SUCCESS


@main_with_error_handling()
def tag_command(
    profile: str,
    files: list[str] | None = None,
    directory: str | None = None,
    pattern: str | None = None,
    base: str = ".",
    file_list: str | None = None,
    recursive: bool = True,
    backup: bool = False,
    dry_run: bool = False,
) -> int:
    """
    Tag source files with a profile marker.

    Exactly one selector (files, directory, pattern, file_list) is expected;
    the CLI parser enforces this.

    Returns:
        Exit code (0 = success, 1 = some files failed, 11 = selector not found)
    """
    service = TaggingService()
    header(f"Tag files: {escape(profile)}" + (" (dry run)" if dry_run else ""))

    if directory:
        result = service.tag_directory(directory, profile, recursive, backup, dry_run)
    elif pattern:
        result = service.tag_by_pattern(base, pattern, profile, backup, dry_run)
    elif file_list:
        result = service.tag_files(read_file_list(file_list), profile, backup, dry_run)
    else:
        result = service.tag_files(files or [], profile, backup, dry_run)

    return _report(result, "tagged", dry_run)


@main_with_error_handling()
def untag_command(files: list[str], backup: bool = False) -> int:
    """Remove profile markers from source files."""
    header("Remove profile markers")
    result = TaggingService().untag_files(files, backup=backup)
    return _report(result, "untagged")


def _expand(paths: list[str]) -> list[Path]:
    expanded: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            expanded.extend(sorted(p for p in path.rglob(f"*{SOURCE_SUFFIX}") if p.is_file()))
        else:
            expanded.append(path)
    return expanded


@main_with_error_handling()
def suggest_command(paths: list[str]) -> int:
    """Print a suggested profile for each source file."""
    suggestions = suggest_profiles(_expand(paths))
    if not suggestions:
        warning("No source files found")
        return ExitCode.SUCCESS

    print_table(
        "Suggested profiles",
        ["File", "Profile"],
        [[escape(path), profile] for path, profile in suggestions.items()],
    )
    return ExitCode.SUCCESS
