"""
Profile marker writing.

Adds, replaces and removes ``[CoverageProfile("...")]`` markers in source
files. New markers are written as a line comment placed before the first
namespace declaration, else before the first type declaration, else after
the last using directive, else at the top of the file.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path

import structlog

from covergate.core.errors import ConfigurationError, NotFoundError
from covergate.profiles.markers import MARKER_PATTERN, extract_profile, format_marker

logger = structlog.get_logger()

NAMESPACE_RE = re.compile(r"^[ \t]*namespace\s+", re.MULTILINE)
TYPE_DECLARATION_RE = re.compile(
    r"^[ \t]*(?:(?:public|internal|private|protected|static|abstract|sealed|partial"
    r"|file|readonly|unsafe)\s+)*(?:class|interface|enum|record|struct)\s+",
    re.MULTILINE,
)
USING_RE = re.compile(r"^[ \t]*using\s+[^\n]*;", re.MULTILINE)
MARKER_ONLY_LINE_RE = re.compile(r"^[ \t]*(?://+|#)?[ \t]*$")
EXCESS_BLANK_LINES_RE = re.compile(r"(\r?\n)[ \t]*\r?\n(?:[ \t]*\r?\n)+")


def _check_profile_name(profile_name: str) -> None:
    if not profile_name or not profile_name.strip() or '"' in profile_name:
        raise ConfigurationError(
            f"Invalid profile name for a marker: {profile_name!r}",
            {"profile": profile_name},
        )


def _read(path: Path) -> str:
    if not path.is_file():
        raise NotFoundError(f"Source file not found: {path}", path=str(path))
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _write(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def _newline(content: str) -> str:
    return "\r\n" if "\r\n" in content else "\n"


def insert_marker(content: str, profile_name: str) -> str:
    """Return ``content`` with a new marker comment inserted."""
    nl = _newline(content)
    tag = f"// {format_marker(profile_name)}"

    for pattern in (NAMESPACE_RE, TYPE_DECLARATION_RE):
        match = pattern.search(content)
        if match:
            index = match.start()
            before = content[:index]
            if before.strip() and not before.endswith(nl + nl):
                tag = nl + tag
            return before + tag + nl + content[index:]

    usings = list(USING_RE.finditer(content))
    if usings:
        index = usings[-1].end()
        return content[:index] + nl + nl + tag + content[index:]

    return tag + nl + nl + content


def replace_marker(content: str, profile_name: str) -> str:
    """Return ``content`` with the first marker renamed to ``profile_name``."""
    return MARKER_PATTERN.sub(lambda _: format_marker(profile_name), content, count=1)


def strip_marker(content: str) -> str:
    """Return ``content`` without its first marker.

    A line holding nothing but the marker (and a comment token) is removed
    entirely; otherwise only the marker text is cut out.
    """
    match = MARKER_PATTERN.search(content)
    if not match:
        return content

    line_start = content.rfind("\n", 0, match.start()) + 1
    line_end = content.find("\n", match.end())
    line_end = len(content) if line_end == -1 else line_end + 1
    rest = content[line_start : match.start()] + content[match.end() : line_end]

    if MARKER_ONLY_LINE_RE.match(rest.rstrip("\r\n")):
        content = content[:line_start] + content[line_end:]
    else:
        content = content[: match.start()] + content[match.end() :]

    return EXCESS_BLANK_LINES_RE.sub(lambda m: m.group(1) * 2, content)


def write_marker(file_path: str | Path, profile_name: str, backup: bool = False) -> bool:
    """
    Add or update the profile marker of a source file.

    Args:
        file_path: Source file to modify
        profile_name: Profile to assign
        backup: Copy the original to ``<file>.backup`` before writing

    Returns:
        True if the file was modified, False if it already had this profile

    Raises:
        NotFoundError: When the file does not exist
        ConfigurationError: When the profile name cannot be written as a marker
    """
    _check_profile_name(profile_name)
    path = Path(file_path)
    content = _read(path)
    existing = extract_profile(content)

    if existing == profile_name:
        return False

    if backup:
        shutil.copy2(path, f"{path}.backup")

    if existing is not None:
        new_content = replace_marker(content, profile_name)
    else:
        new_content = insert_marker(content, profile_name)

    _write(path, new_content)
    logger.info("profile_marker_written", file=str(path), profile=profile_name, previous=existing)
    return True


def remove_marker(file_path: str | Path, backup: bool = False) -> bool:
    """
    Remove the first profile marker from a source file.

    Returns:
        True if a marker was removed, False if the file had none

    Raises:
        NotFoundError: When the file does not exist
    """
    path = Path(file_path)
    content = _read(path)
    existing = extract_profile(content)

    if existing is None:
        return False

    if backup:
        shutil.copy2(path, f"{path}.backup")

    _write(path, strip_marker(content))
    logger.info("profile_marker_removed", file=str(path), profile=existing)
    return True
