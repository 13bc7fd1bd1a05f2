"""
Coverage policy validation.

Resolves each file's effective profile, compares its coverage against the
profile thresholds and reports violations.
"""

from covergate.policy.engine import PolicyEngine, validate_coverage
from covergate.policy.models import CoverageViolation, ValidationResult, ViolationType

__all__ = [
    "PolicyEngine",
    "validate_coverage",
    "CoverageViolation",
    "ValidationResult",
    "ViolationType",
]
