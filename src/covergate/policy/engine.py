"""
Coverage policy validation engine.

Compares each file's coverage against the thresholds of its effective
profile (its marker, else the configuration default). A file violates a
threshold only when its rate is strictly below it.

Filtered test runs instrument whole assemblies but exercise only the
targeted code, so files with zero covered lines are skipped instead of
failed. Any file with at least one covered line is always validated.
"""

from __future__ import annotations

import structlog

from covergate.config.models import PolicyConfiguration, ProfileThresholds
from covergate.core.errors import ProfileReferenceError
from covergate.coverage.models import CoverageReport, FileCoverage
from covergate.policy.models import CoverageViolation, ValidationResult, ViolationType

logger = structlog.get_logger()


class PolicyEngine:
    """Validates coverage reports against a policy configuration."""

    def validate(
        self,
        config: PolicyConfiguration,
        report: CoverageReport,
        is_filtered_run: bool = False,
    ) -> ValidationResult:
        """
        Validate a coverage report.

        Neither input is modified.

        Args:
            config: The policy configuration
            report: Coverage report with profiles already resolved
            is_filtered_run: Skip files with zero covered lines

        Returns:
            ValidationResult with violations, checked and skipped counts

        Raises:
            ConfigurationError: If the configuration is invalid
            ProfileReferenceError: If a file resolves to an undefined profile
        """
        config.validate()

        result = ValidationResult(is_filtered_run=is_filtered_run)

        for coverage in report:
            if is_filtered_run and coverage.covered_lines == 0:
                result.skipped_files += 1
                continue

            profile_name = config.effective_profile(coverage.assigned_profile)
            thresholds = config.thresholds_for(profile_name)
            if thresholds is None:
                raise ProfileReferenceError(
                    coverage.file_path,
                    profile_name,
                    available=list(config.profiles),
                )

            result.violations.extend(self.check_file(coverage, profile_name, thresholds))
            result.total_files_checked += 1
            result.profile_counts[profile_name] = result.profile_counts.get(profile_name, 0) + 1

        logger.info(
            "validation_complete",
            files_checked=result.total_files_checked,
            files_skipped=result.skipped_files,
            violations=len(result.violations),
            filtered_run=is_filtered_run,
            success=result.success,
        )
        return result

    def check_file(
        self,
        coverage: FileCoverage,
        profile_name: str,
        thresholds: ProfileThresholds,
    ) -> list[CoverageViolation]:
        """Compare one file against one profile's thresholds."""
        violations = []

        if thresholds.min_line is not None and coverage.line_rate < thresholds.min_line:
            violations.append(
                CoverageViolation(
                    file_path=coverage.file_path,
                    profile_name=profile_name,
                    violation_type=ViolationType.LINE_COVERAGE_TOO_LOW,
                    required_coverage=thresholds.min_line,
                    actual_coverage=coverage.line_rate,
                    total_items=coverage.total_lines,
                    covered_items=coverage.covered_lines,
                )
            )

        branch_rate = coverage.branch_rate
        if (
            thresholds.min_branch is not None
            and branch_rate is not None
            and branch_rate < thresholds.min_branch
        ):
            violations.append(
                CoverageViolation(
                    file_path=coverage.file_path,
                    profile_name=profile_name,
                    violation_type=ViolationType.BRANCH_COVERAGE_TOO_LOW,
                    required_coverage=thresholds.min_branch,
                    actual_coverage=branch_rate,
                    total_items=coverage.total_branches or 0,
                    covered_items=coverage.covered_branches or 0,
                )
            )

        return violations


def validate_coverage(
    config: PolicyConfiguration,
    report: CoverageReport,
    is_filtered_run: bool = False,
) -> ValidationResult:
    """Convenience wrapper around PolicyEngine.validate."""
    return PolicyEngine().validate(config, report, is_filtered_run=is_filtered_run)
