"""Tests for the policy validation engine."""

from fractions import Fraction

import pytest

from covergate.config.models import PolicyConfiguration, ProfileThresholds
from covergate.core.errors import ConfigurationError, ProfileReferenceError
from covergate.coverage.models import FileCoverage
from covergate.policy.engine import PolicyEngine, validate_coverage
from covergate.policy.models import ViolationType


@pytest.fixture
def engine():
    return PolicyEngine()


def single_profile(name="Standard", min_line=0.6, min_branch=None):
    return PolicyConfiguration(
        default_profile=name,
        profiles={name: ProfileThresholds(min_line=min_line, min_branch=min_branch)},
        coverage_report_path="coverage.json",
    )


class TestThresholdComparison:
    """Tests for the strict less-than rule."""

    def test_rate_equal_to_threshold_passes(self, engine, make_report):
        report = make_report(FileCoverage("Foo.cs", total_lines=10, covered_lines=6))
        result = engine.validate(single_profile(min_line=0.60), report)

        assert result.success
        assert result.violations == []
        assert result.total_files_checked == 1

    def test_rate_below_threshold_fails(self, engine, make_report):
        report = make_report(FileCoverage("Foo.cs", total_lines=10, covered_lines=5))
        result = engine.validate(single_profile(min_line=0.60), report)

        assert not result.success
        [violation] = result.violations
        assert violation.file_path == "Foo.cs"
        assert violation.profile_name == "Standard"
        assert violation.violation_type == ViolationType.LINE_COVERAGE_TOO_LOW
        assert violation.kind == "line_coverage_too_low"
        assert violation.actual_coverage == Fraction(1, 2)
        assert violation.required_coverage == Fraction(3, 5)
        assert (violation.total_items, violation.covered_items) == (10, 5)

    @pytest.mark.parametrize("total", [3, 7, 10, 30, 1000])
    def test_boundary_is_inclusive(self, engine, make_report, total):
        threshold = Fraction(2, 3) if total % 3 == 0 else Fraction(total - 1, total)
        covered = int(threshold * total)
        config = single_profile(min_line=threshold)

        at = engine.validate(config, make_report(FileCoverage("a.cs", total, covered)))
        below = engine.validate(config, make_report(FileCoverage("a.cs", total, covered - 1)))

        assert at.success
        assert not below.success

    def test_zero_threshold_accepts_zero_coverage(self, engine, make_report):
        config = single_profile(name="NoCoverage", min_line=0)
        report = make_report(FileCoverage("Untested.cs", total_lines=20, covered_lines=0))

        result = engine.validate(config, report)
        assert result.success
        assert result.total_files_checked == 1

    def test_file_without_lines_fails_nonzero_threshold(self, engine, make_report):
        report = make_report(FileCoverage("Empty.cs"))
        result = engine.validate(single_profile(min_line=0.5), report)
        assert result.violations[0].actual_coverage == 0

    def test_full_coverage_meets_critical(self, engine, make_report):
        report = make_report(FileCoverage("a.cs", 8, 8))
        assert engine.validate(single_profile(min_line=1), report).success


class TestBranchCoverage:
    """Tests for branch thresholds."""

    def test_branch_violation(self, engine, make_report):
        report = make_report(FileCoverage("a.cs", 10, 10, total_branches=4, covered_branches=2))
        result = engine.validate(single_profile(min_line=0.5, min_branch=0.75), report)

        [violation] = result.violations
        assert violation.violation_type == ViolationType.BRANCH_COVERAGE_TOO_LOW
        assert violation.actual_coverage == Fraction(1, 2)
        assert violation.missing_items == 2

    def test_line_and_branch_violations_for_one_file(self, engine, make_report):
        report = make_report(FileCoverage("a.cs", 10, 1, total_branches=2, covered_branches=0))
        result = engine.validate(single_profile(min_line=0.5, min_branch=0.5), report)

        assert len(result.violations) == 2
        assert result.files_failed == 1

    def test_no_branch_data_is_not_checked(self, engine, make_report):
        report = make_report(FileCoverage("a.cs", 10, 10))
        assert engine.validate(single_profile(min_line=0.5, min_branch=1), report).success

    def test_branch_only_profile_ignores_lines(self, engine, make_report):
        report = make_report(FileCoverage("a.cs", 10, 0, total_branches=2, covered_branches=2))
        assert engine.validate(single_profile(min_line=None, min_branch=1), report).success


class TestProfileSelection:
    """Tests for effective profile lookup."""

    def test_marker_overrides_default(self, engine, standard_config, make_report):
        report = make_report(
            FileCoverage("Strict.cs", 10, 9, assigned_profile="Critical"),
            FileCoverage("Loose.cs", 10, 9),
        )
        result = engine.validate(standard_config, report)

        [violation] = result.violations
        assert violation.file_path == "Strict.cs"
        assert violation.profile_name == "Critical"
        assert result.profile_counts == {"Critical": 1, "Standard": 1}

    def test_marker_can_loosen(self, engine, make_report):
        config = PolicyConfiguration(
            default_profile="Strict",
            profiles={
                "Strict": ProfileThresholds(min_line=1),
                "Dto": ProfileThresholds(min_line=0),
            },
        )
        report = make_report(FileCoverage("Model.cs", 10, 0, assigned_profile="Dto"))
        assert engine.validate(config, report).success

    def test_unknown_profile_aborts(self, engine, standard_config, make_report):
        report = make_report(
            FileCoverage("Fine.cs", 10, 10),
            FileCoverage("src/Haunted.cs", 10, 10, assigned_profile="Ghost"),
        )
        with pytest.raises(ProfileReferenceError) as exc_info:
            engine.validate(standard_config, report)

        error = exc_info.value
        assert "Ghost" in str(error)
        assert "src/Haunted.cs" in str(error)
        assert error.details["file"] == "src/Haunted.cs"
        assert error.details["profile"] == "Ghost"

    def test_unknown_profile_aborts_in_filtered_run(self, engine, standard_config, make_report):
        report = make_report(FileCoverage("x.cs", 10, 3, assigned_profile="Ghost"))
        with pytest.raises(ProfileReferenceError):
            engine.validate(standard_config, report, is_filtered_run=True)

    def test_invalid_configuration_rejected(self, engine, make_report):
        config = PolicyConfiguration(default_profile="Missing", profiles={"A": ProfileThresholds(min_line=0.5)})
        with pytest.raises(ConfigurationError, match="defaultProfile 'Missing'"):
            engine.validate(config, make_report(FileCoverage("a.cs", 1, 1)))


class TestFilteredRun:
    """Tests for filtered-run skipping."""

    def test_zero_coverage_files_skipped(self, engine, make_report):
        report = make_report(
            FileCoverage("a.cs", 10, 0),
            FileCoverage("b.cs", 5, 0),
            FileCoverage("c.cs", 7, 0),
            FileCoverage("d.cs", 10, 9),
        )
        result = engine.validate(single_profile(min_line=0.8), report, is_filtered_run=True)

        assert result.skipped_files == 3
        assert result.total_files_checked == 1
        assert result.success
        assert result.is_filtered_run is True

    def test_skip_ignores_profile(self, engine, standard_config, make_report):
        report = make_report(FileCoverage("Auth.cs", 10, 0, assigned_profile="Critical"))
        result = engine.validate(standard_config, report, is_filtered_run=True)

        assert result.success
        assert result.skipped_files == 1
        assert result.total_files_checked == 0

    def test_skipped_unknown_profile_is_not_looked_up(self, engine, standard_config, make_report):
        report = make_report(FileCoverage("Old.cs", 10, 0, assigned_profile="Ghost"))
        result = engine.validate(standard_config, report, is_filtered_run=True)
        assert result.skipped_files == 1

    def test_partially_covered_file_still_validated(self, engine, make_report):
        report = make_report(FileCoverage("a.cs", 10, 1))
        result = engine.validate(single_profile(min_line=0.5), report, is_filtered_run=True)

        assert result.skipped_files == 0
        assert len(result.violations) == 1

    def test_full_run_does_not_skip(self, engine, make_report):
        report = make_report(FileCoverage("a.cs", 10, 0))
        result = engine.validate(single_profile(min_line=0.5), report)

        assert result.skipped_files == 0
        assert len(result.violations) == 1

    def test_filtered_and_full_runs_agree(self, engine, standard_config, make_report):
        files = [
            ("Auth.cs", 10, 0, "Critical"),
            ("Util.cs", 10, 5, None),
            ("Math.cs", 10, 0, None),
            ("Core.cs", 4, 4, "Critical"),
            ("Io.cs", 10, 8, None),
        ]

        def build():
            return make_report(*(FileCoverage(p, t, c, assigned_profile=a) for p, t, c, a in files))

        filtered = engine.validate(standard_config, build(), is_filtered_run=True)
        full = engine.validate(standard_config, build(), is_filtered_run=False)

        assert filtered.skipped_files + filtered.total_files_checked == full.total_files_checked
        full_failures = {v.file_path for v in full.violations}
        filtered_failures = {v.file_path for v in filtered.violations}
        assert filtered_failures <= full_failures
        assert {"Auth.cs", "Math.cs"} <= full_failures - filtered_failures


class TestEngineProperties:
    """Tests for general engine behavior."""

    def test_inputs_not_modified(self, engine, standard_config, make_report):
        report = make_report(FileCoverage("a.cs", 10, 1))
        before = [f.to_dict() for f in report]
        engine.validate(standard_config, report)
        assert [f.to_dict() for f in report] == before

    def test_empty_report(self, engine, standard_config, make_report):
        result = engine.validate(standard_config, make_report())
        assert result.success
        assert result.total_files_checked == 0

    def test_order_does_not_change_violations(self, engine, standard_config, make_report):
        files = [FileCoverage(f"f{i}.cs", 10, i) for i in range(10)]
        forward = engine.validate(standard_config, make_report(*files))
        backward = engine.validate(standard_config, make_report(*reversed(files)))
        assert forward.sorted_violations() == backward.sorted_violations()

    def test_serialized_configuration_gives_same_outcome(self, engine, standard_config, make_report):
        report = make_report(
            FileCoverage("a.cs", 10, 6),
            FileCoverage("b.cs", 10, 9, assigned_profile="Critical"),
            FileCoverage("c.cs", 3, 1),
        )
        reloaded = PolicyConfiguration.from_dict(standard_config.to_dict())

        original = engine.validate(standard_config, report)
        again = engine.validate(reloaded, report)
        assert original.sorted_violations() == again.sorted_violations()
        assert original.total_files_checked == again.total_files_checked

    def test_validate_coverage_wrapper(self, standard_config, make_report):
        result = validate_coverage(standard_config, make_report(FileCoverage("a.cs", 5, 3)))
        assert result.success
