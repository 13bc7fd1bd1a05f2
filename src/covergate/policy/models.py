"""
Validation result models.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from fractions import Fraction
from typing import Any


class ViolationType(str, Enum):
    """Kind of coverage violation."""

    LINE_COVERAGE_TOO_LOW = "line_coverage_too_low"
    BRANCH_COVERAGE_TOO_LOW = "branch_coverage_too_low"

    @property
    def metric(self) -> str:
        return "line" if self is ViolationType.LINE_COVERAGE_TOO_LOW else "branch"


def _percent(rate: Fraction) -> str:
    return f"{float(rate) * 100:.1f}%"


@dataclass(frozen=True)
class CoverageViolation:
    """A file whose coverage is strictly below its profile's threshold."""

    file_path: str
    profile_name: str
    violation_type: ViolationType
    required_coverage: Fraction
    actual_coverage: Fraction
    total_items: int = 0
    covered_items: int = 0

    @property
    def kind(self) -> str:
        """Stable discriminator for renderers."""
        return self.violation_type.value

    @property
    def missing_items(self) -> int:
        return self.total_items - self.covered_items

    def message(self) -> str:
        """Long description of the violation."""
        metric = self.violation_type.metric
        return (
            f"{self.file_path} ({self.profile_name}): {metric} coverage is "
            f"{_percent(self.actual_coverage)}, required {_percent(self.required_coverage)} "
            f"({self.covered_items}/{self.total_items} {metric}s covered, "
            f"{self.missing_items} missing)"
        )

    def short_message(self) -> str:
        metric = self.violation_type.metric
        return (
            f"{self.file_path}: {metric} {_percent(self.actual_coverage)} "
            f"< {_percent(self.required_coverage)}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "file": self.file_path,
            "profile": self.profile_name,
            "kind": self.kind,
            "required": float(self.required_coverage),
            "actual": float(self.actual_coverage),
            "total": self.total_items,
            "covered": self.covered_items,
            "missing": self.missing_items,
        }


@dataclass
class ValidationResult:
    """Outcome of validating a coverage report against a policy."""

    violations: list[CoverageViolation] = field(default_factory=list)
    total_files_checked: int = 0
    skipped_files: int = 0

    # Files checked per effective profile
    profile_counts: dict[str, int] = field(default_factory=dict)

    is_filtered_run: bool = False
    validated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def files_failed(self) -> int:
        """Number of distinct files with at least one violation."""
        return len({v.file_path for v in self.violations})

    @property
    def files_passed(self) -> int:
        return self.total_files_checked - self.files_failed

    @property
    def success(self) -> bool:
        return not self.violations

    def sorted_violations(self) -> list[CoverageViolation]:
        """Violations ordered by profile, then file, then kind."""
        return sorted(self.violations, key=lambda v: (v.profile_name, v.file_path, v.kind))

    def by_profile(self) -> dict[str, list[CoverageViolation]]:
        """Sorted violations grouped by profile name."""
        groups: dict[str, list[CoverageViolation]] = {}
        for violation in self.sorted_violations():
            groups.setdefault(violation.profile_name, []).append(violation)
        return groups

    def failed_by_profile(self) -> dict[str, int]:
        """Distinct failing files per profile."""
        counter: Counter[str] = Counter()
        for profile, _file in {(v.profile_name, v.file_path) for v in self.violations}:
            counter[profile] += 1
        return dict(counter)

    def summary(self) -> str:
        """One-line summary of the result."""
        skipped = (
            f", {self.skipped_files} skipped (filtered run)" if self.skipped_files > 0 else ""
        )

        if self.success:
            return f"All {self.total_files_checked} files meet coverage requirements{skipped}"

        return (
            f"{self.files_failed} file(s) with {len(self.violations)} violation(s) "
            f"(checked {self.total_files_checked} files, {self.files_passed} passed{skipped})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON export."""
        failed = self.failed_by_profile()
        return {
            "success": self.success,
            "validated_at": self.validated_at.isoformat(),
            "filtered_run": self.is_filtered_run,
            "summary": {
                "files_checked": self.total_files_checked,
                "files_passed": self.files_passed,
                "files_failed": self.files_failed,
                "files_skipped": self.skipped_files,
                "violations": len(self.violations),
            },
            "profiles": {
                name: {
                    "checked": count,
                    "failed": failed.get(name, 0),
                }
                for name, count in sorted(self.profile_counts.items())
            },
            "violations": [v.to_dict() for v in self.sorted_violations()],
        }
