"""
Normalized coverage data models.

One FileCoverage per source file, no matter how many modules, classes or
methods of the raw instrumentation data referenced it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from fractions import Fraction
from typing import Any, Iterator


@dataclass
class FileCoverage:
    """Coverage statistics for a single file."""

    file_path: str
    total_lines: int = 0
    covered_lines: int = 0

    # Branch data is absent when the source report has none for this file
    total_branches: int | None = None
    covered_branches: int | None = None

    # Set once by the profile resolver; None means no marker was found
    assigned_profile: str | None = None

    def __post_init__(self) -> None:
        if self.total_lines < 0 or self.covered_lines < 0:
            raise ValueError(f"{self.file_path}: line counts must be non-negative")
        if self.covered_lines > self.total_lines:
            raise ValueError(
                f"{self.file_path}: covered lines ({self.covered_lines}) exceed "
                f"total lines ({self.total_lines})"
            )
        if (self.total_branches is None) != (self.covered_branches is None):
            raise ValueError(f"{self.file_path}: branch counts must be given together")
        if self.total_branches is not None and self.covered_branches is not None:
            if not 0 <= self.covered_branches <= self.total_branches:
                raise ValueError(
                    f"{self.file_path}: covered branches ({self.covered_branches}) must be "
                    f"between 0 and total branches ({self.total_branches})"
                )

    @property
    def line_rate(self) -> Fraction:
        """Covered lines over total lines; 0 for a file with no coverable lines."""
        if self.total_lines == 0:
            return Fraction(0)
        return Fraction(self.covered_lines, self.total_lines)

    @property
    def has_branch_data(self) -> bool:
        return bool(self.total_branches)

    @property
    def branch_rate(self) -> Fraction | None:
        if not self.total_branches or self.covered_branches is None:
            return None
        return Fraction(self.covered_branches, self.total_branches)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        branch_rate = self.branch_rate
        return {
            "file": self.file_path,
            "total_lines": self.total_lines,
            "covered_lines": self.covered_lines,
            "line_rate": float(self.line_rate),
            "total_branches": self.total_branches,
            "covered_branches": self.covered_branches,
            "branch_rate": float(branch_rate) if branch_rate is not None else None,
            "assigned_profile": self.assigned_profile,
        }


@dataclass
class CoverageReport:
    """Per-file coverage keyed by file path."""

    files: dict[str, FileCoverage] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def add(self, coverage: FileCoverage) -> None:
        self.files[coverage.file_path] = coverage

    def get_file(self, file_path: str) -> FileCoverage | None:
        """Get a file's coverage by path, or None if not present."""
        return self.files.get(file_path)

    def all_files(self) -> list[FileCoverage]:
        return list(self.files.values())

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[FileCoverage]:
        return iter(self.files.values())

    def __contains__(self, file_path: object) -> bool:
        return file_path in self.files
