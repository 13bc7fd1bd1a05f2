"""
covergate - profile-based per-file code coverage enforcement.

Typical use::

    from covergate import (
        CoverageReportParser, PolicyEngine, load_config, resolve_profiles,
    )

    config = load_config("covergate.json")
    report = CoverageReportParser().parse_file(config.coverage_report_path)
    resolve_profiles(report)
    result = PolicyEngine().validate(config, report)
"""

from covergate.config import (
    PolicyConfiguration,
    ProfileThresholds,
    load_config,
    load_config_smart,
)
from covergate.core.errors import (
    ConfigurationError,
    CoverGateError,
    MalformedInputError,
    NotFoundError,
    ProfileReferenceError,
)
from covergate.coverage import CoverageReport, CoverageReportParser, FileCoverage
from covergate.policy import (
    CoverageViolation,
    PolicyEngine,
    ValidationResult,
    ViolationType,
    validate_coverage,
)
from covergate.profiles import ProfileResolver, extract_profile, read_profile, resolve_profiles

__version__ = "0.4.0"

__all__ = [
    "__version__",
    # Config
    "PolicyConfiguration",
    "ProfileThresholds",
    "load_config",
    "load_config_smart",
    # Coverage
    "CoverageReport",
    "CoverageReportParser",
    "FileCoverage",
    # Profiles
    "ProfileResolver",
    "extract_profile",
    "read_profile",
    "resolve_profiles",
    # Policy
    "CoverageViolation",
    "PolicyEngine",
    "ValidationResult",
    "ViolationType",
    "validate_coverage",
    # Errors
    "CoverGateError",
    "NotFoundError",
    "MalformedInputError",
    "ConfigurationError",
    "ProfileReferenceError",
]
