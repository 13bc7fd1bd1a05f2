"""
Batch tagging of source files with profile markers.

Selects files by explicit list, directory or glob pattern, writes markers
through the writer module and collects per-file failures instead of
stopping at the first one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import structlog

from covergate.core.errors import CoverGateError, NotFoundError
from covergate.profiles.markers import read_profile
from covergate.profiles.writer import remove_marker, write_marker

logger = structlog.get_logger()

SOURCE_SUFFIX = ".cs"


@dataclass
class TaggingResult:
    """Outcome of a batch tagging operation."""

    files_matched: int = 0
    tagged: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def files_tagged(self) -> int:
        return len(self.tagged)

    @property
    def files_skipped(self) -> int:
        return len(self.skipped)

    @property
    def files_errored(self) -> int:
        return len(self.errors)

    @property
    def success(self) -> bool:
        return not self.errors


# Ordered (profile, file name suffixes, name fragments, directory fragments)
SUGGESTION_RULES: list[tuple[str, tuple[str, ...], tuple[str, ...], tuple[str, ...]]] = [
    ("Critical", (), ("security", "payment"), ("security", "auth")),
    ("Integration", ("controller.cs", "adapter.cs"), (), ("controllers", "adapters")),
    ("BusinessLogic", ("service.cs", "manager.cs"), (), ("services", "business")),
    (
        "Dto",
        ("dto.cs", "viewmodel.cs", "model.cs"),
        (),
        ("models", "dtos", "viewmodels"),
    ),
]

DEFAULT_SUGGESTION = "Standard"


def suggest_profile(file_path: str | Path) -> str:
    """Suggest a profile from a file's name and parent directory name."""
    path = Path(file_path)
    name = path.name.lower()
    directory = path.parent.name.lower()

    for profile, suffixes, name_parts, dir_parts in SUGGESTION_RULES:
        if any(name.endswith(suffix) for suffix in suffixes):
            return profile
        if any(part in name for part in name_parts):
            return profile
        if any(part in directory for part in dir_parts):
            return profile

    return DEFAULT_SUGGESTION


def suggest_profiles(file_paths: Iterable[str | Path]) -> dict[str, str]:
    """Suggest a profile for each path."""
    return {str(path): suggest_profile(path) for path in file_paths}


def read_file_list(list_path: str | Path) -> list[str]:
    """
    Read file paths from a text file, one per line.

    Blank lines and lines starting with '#' are ignored.

    Raises:
        NotFoundError: When the list file does not exist
    """
    path = Path(list_path)
    if not path.is_file():
        raise NotFoundError(f"File list not found: {path}", path=str(path))

    files = []
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        files.append(stripped)
    return files


class TaggingService:
    """Applies profile markers to many files at once."""

    def tag_files(
        self,
        file_paths: Iterable[str | Path],
        profile_name: str,
        backup: bool = False,
        dry_run: bool = False,
    ) -> TaggingResult:
        """
        Tag the given files with a profile.

        Files already carrying the profile are skipped. With ``dry_run`` the
        files that would change are reported as tagged but left untouched.
        """
        paths = [Path(p) for p in file_paths]
        result = TaggingResult(files_matched=len(paths))

        for path in paths:
            if not path.is_file():
                result.errors.append((str(path), "File not found"))
                continue

            try:
                if read_profile(path) == profile_name:
                    result.skipped.append(str(path))
                    continue
                if not dry_run:
                    write_marker(path, profile_name, backup=backup)
            except (CoverGateError, OSError, UnicodeError) as e:
                message = e.message if isinstance(e, CoverGateError) else str(e)
                result.errors.append((str(path), message))
                continue

            result.tagged.append(str(path))

        logger.info(
            "files_tagged",
            profile=profile_name,
            matched=result.files_matched,
            tagged=result.files_tagged,
            skipped=result.files_skipped,
            errors=result.files_errored,
            dry_run=dry_run,
        )
        return result

    def tag_directory(
        self,
        directory: str | Path,
        profile_name: str,
        recursive: bool = True,
        backup: bool = False,
        dry_run: bool = False,
    ) -> TaggingResult:
        """
        Tag every source file in a directory.

        Raises:
            NotFoundError: When the directory does not exist
        """
        base = Path(directory)
        if not base.is_dir():
            raise NotFoundError(f"Directory not found: {base}", path=str(base))

        pattern = f"*{SOURCE_SUFFIX}"
        files = sorted(base.rglob(pattern) if recursive else base.glob(pattern))
        return self.tag_files([f for f in files if f.is_file()], profile_name, backup, dry_run)

    def tag_by_pattern(
        self,
        base_directory: str | Path,
        pattern: str,
        profile_name: str,
        backup: bool = False,
        dry_run: bool = False,
    ) -> TaggingResult:
        """Tag source files under ``base_directory`` matching a glob (e.g. ``**/*Service.cs``)."""
        base = Path(base_directory)
        if not base.is_dir():
            raise NotFoundError(f"Directory not found: {base}", path=str(base))

        files = sorted(
            f for f in base.glob(pattern) if f.is_file() and f.name.lower().endswith(SOURCE_SUFFIX)
        )
        return self.tag_files(files, profile_name, backup, dry_run)

    def untag_files(self, file_paths: Iterable[str | Path], backup: bool = False) -> TaggingResult:
        """Remove markers from the given files; files without one are skipped."""
        paths = [Path(p) for p in file_paths]
        result = TaggingResult(files_matched=len(paths))

        for path in paths:
            try:
                if remove_marker(path, backup=backup):
                    result.tagged.append(str(path))
                else:
                    result.skipped.append(str(path))
            except (CoverGateError, OSError, UnicodeError) as e:
                message = e.message if isinstance(e, CoverGateError) else str(e)
                result.errors.append((str(path), message))

        logger.info(
            "files_untagged",
            matched=result.files_matched,
            removed=result.files_tagged,
            skipped=result.files_skipped,
            errors=result.files_errored,
        )
        return result
