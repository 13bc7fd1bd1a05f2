"""Root test configuration."""

import json
import logging
import os
from fractions import Fraction

import pytest
import structlog

from covergate.config.models import PolicyConfiguration, ProfileThresholds
from covergate.config.settings import get_settings
from covergate.coverage.models import CoverageReport, FileCoverage


def _quiet_logging():
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    _quiet_logging()


@pytest.fixture
def restore_logging():
    """Put the quiet test logging back after a test reconfigures it."""
    yield
    _quiet_logging()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from COVERGATE_* variables and the settings cache."""
    for key in list(os.environ):
        if key.startswith("COVERGATE_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def standard_config():
    """Two-profile policy: Standard (60% lines) default, Critical (100%)."""
    return PolicyConfiguration(
        default_profile="Standard",
        profiles={
            "Standard": ProfileThresholds(min_line=Fraction(3, 5)),
            "Critical": ProfileThresholds(min_line=Fraction(1), min_branch=Fraction(1)),
        },
        coverage_report_path="coverage.json",
    )


def _make_report(*files: FileCoverage) -> CoverageReport:
    report = CoverageReport()
    for coverage in files:
        report.add(coverage)
    return report


def _lines(total: int, covered: int) -> dict[str, int]:
    """Build a Coverlet Lines map with ``covered`` hit lines out of ``total``."""
    return {str(n): (1 if n <= covered else 0) for n in range(1, total + 1)}


def _coverlet_json(files: dict[str, tuple[int, int]], module: str = "App.dll") -> str:
    """Render a native Coverlet report with one method per file."""
    data = {
        module: {
            path: {
                "App.Type": {
                    "System.Void App.Type::Run()": {
                        "Lines": _lines(total, covered),
                        "Branches": [],
                    }
                }
            }
            for path, (total, covered) in files.items()
        }
    }
    return json.dumps(data, indent=2)


@pytest.fixture
def project(tmp_path):
    """
    A small project directory with a policy, sources and a coverage report.

    src/Auth.cs is tagged Critical and fully covered; src/Util.cs is
    untagged and at 50% against Standard's 60%.
    """
    (tmp_path / "covergate.json").write_text(
        json.dumps(
            {
                "coverageReportPath": "TestResults/coverage.json",
                "defaultProfile": "Standard",
                "profiles": {
                    "Standard": {"minLine": 0.6},
                    "Critical": {"minLine": 1.0},
                },
            }
        )
    )
    src = tmp_path / "src"
    src.mkdir()
    (src / "Auth.cs").write_text(
        '// [CoverageProfile("Critical")]\nnamespace App;\n\npublic class Auth { }\n'
    )
    (src / "Util.cs").write_text("namespace App;\n\npublic class Util { }\n")

    results = tmp_path / "TestResults"
    results.mkdir()
    auth = str(src / "Auth.cs")
    util = str(src / "Util.cs")
    (results / "coverage.json").write_text(_coverlet_json({auth: (4, 4), util: (10, 5)}))
    return tmp_path


@pytest.fixture
def make_report():
    """Factory building a CoverageReport from FileCoverage entries."""
    return _make_report


@pytest.fixture
def coverlet_json():
    """Factory rendering {path: (total, covered)} as a Coverlet report."""
    return _coverlet_json
