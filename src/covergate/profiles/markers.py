"""
Profile marker reading.

A source file opts into a profile with a marker of the form::

    [CoverageProfile("Critical")]
    // [CoverageProfile("Critical")]

The marker is found by a single textual pattern, anywhere in the file,
including inside strings and unrelated comments. The first occurrence
wins; later ones are ignored. A file that cannot be read has no marker,
so it falls back to the configuration's default profile.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from covergate.coverage.models import CoverageReport, FileCoverage

logger = structlog.get_logger()

MARKER_PATTERN = re.compile(r'\[CoverageProfile\s*\(\s*"([^"]+)"\s*\)\]')


def format_marker(profile_name: str) -> str:
    """Render the canonical marker text for a profile."""
    return f'[CoverageProfile("{profile_name}")]'


def extract_profile(content: str) -> str | None:
    """Return the profile named by the first marker in ``content``, if any."""
    match = MARKER_PATTERN.search(content)
    return match.group(1) if match else None


def read_profile(file_path: str | Path) -> str | None:
    """
    Read the profile marker from a source file.

    Missing or unreadable files yield None. Bytes that are not valid UTF-8
    are replaced, so files saved in a legacy code page keep their marker.
    """
    path = Path(file_path)
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("profile_marker_unreadable", file=str(path), error=str(e))
        return None
    return extract_profile(content)


class ProfileResolver:
    """
    Attaches the explicit profile of every file in a coverage report.

    Args:
        source_root: Base directory for relative paths in the report
        workers: Number of threads used for marker reads (1 = sequential)
    """

    def __init__(self, source_root: str | Path | None = None, workers: int = 1):
        self.source_root = Path(source_root) if source_root else None
        self.workers = max(1, workers)

    def source_path(self, file_path: str) -> Path:
        path = Path(file_path)
        if self.source_root is not None and not path.is_absolute():
            return self.source_root / path
        return path

    def resolve_file(self, coverage: FileCoverage) -> str | None:
        coverage.assigned_profile = read_profile(self.source_path(coverage.file_path))
        return coverage.assigned_profile

    def resolve(self, report: CoverageReport) -> CoverageReport:
        """Set ``assigned_profile`` on each file of the report and return it."""
        files = report.all_files()

        if self.workers == 1 or len(files) <= 1:
            for coverage in files:
                self.resolve_file(coverage)
        else:
            # Each task writes only to its own FileCoverage
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                list(pool.map(self.resolve_file, files))

        tagged = sum(1 for f in files if f.assigned_profile is not None)
        logger.debug("profiles_resolved", files=len(files), tagged=tagged)
        return report


def resolve_profiles(
    report: CoverageReport,
    source_root: str | Path | None = None,
    workers: int = 1,
) -> CoverageReport:
    """Convenience wrapper around ProfileResolver.resolve."""
    return ProfileResolver(source_root=source_root, workers=workers).resolve(report)
