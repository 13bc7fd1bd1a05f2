"""
Policy configuration models.

A policy maps profile names to coverage thresholds and names the profile
applied to files that carry no explicit marker. Thresholds are exact
rationals in [0, 1].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
from types import MappingProxyType
from typing import Any, Mapping

from covergate.core.errors import ConfigurationError, MalformedInputError
from covergate.jsonio import get_field, has_field

DEFAULT_COVERAGE_REPORT_PATH = "TestResults/coverage.json"


def to_rational(value: Any) -> Fraction | None:
    """
    Convert a threshold or rate to an exact Fraction.

    Floats go through their shortest repr so ``0.6`` becomes ``3/5``
    rather than the nearest binary fraction.

    Raises:
        TypeError: For booleans and non-numeric values
        ValueError: For NaN, infinities and unparseable strings
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("boolean is not a coverage threshold")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        return Fraction(repr(value))
    if isinstance(value, (int, Decimal)):
        return Fraction(value)
    if isinstance(value, str):
        return Fraction(value.strip())
    raise TypeError(f"expected a number, got {type(value).__name__}")


@dataclass(frozen=True)
class ProfileThresholds:
    """Coverage thresholds for a profile.

    At least one of ``min_line`` and ``min_branch`` must be set; each set
    value must lie in [0, 1]. Branch coverage is optional because many
    instrumentation runs report it unreliably.
    """

    min_line: Fraction | None = None
    min_branch: Fraction | None = None

    def __post_init__(self) -> None:
        for name in ("min_line", "min_branch"):
            raw = getattr(self, name)
            try:
                object.__setattr__(self, name, to_rational(raw))
            except (TypeError, ValueError, ArithmeticError) as e:
                raise ConfigurationError(
                    f"Invalid {name} value {raw!r}: {e}",
                    {"field": name},
                ) from e

    def validate(self, profile_name: str) -> None:
        """
        Check threshold ranges and presence.

        Args:
            profile_name: Profile name used in error messages

        Raises:
            ConfigurationError: When a value is out of range or both are missing
        """
        if self.min_line is not None and not 0 <= self.min_line <= 1:
            raise ConfigurationError(
                f"Profile '{profile_name}': minLine must be between 0.0 and 1.0, "
                f"got {float(self.min_line)}",
                {"profile": profile_name, "field": "minLine"},
            )

        if self.min_branch is not None and not 0 <= self.min_branch <= 1:
            raise ConfigurationError(
                f"Profile '{profile_name}': minBranch must be between 0.0 and 1.0, "
                f"got {float(self.min_branch)}",
                {"profile": profile_name, "field": "minBranch"},
            )

        if self.min_line is None and self.min_branch is None:
            raise ConfigurationError(
                f"Profile '{profile_name}': at least one threshold "
                "(minLine or minBranch) must be specified",
                {"profile": profile_name},
            )

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary, omitting unset thresholds."""
        data: dict[str, float] = {}
        if self.min_line is not None:
            data["minLine"] = float(self.min_line)
        if self.min_branch is not None:
            data["minBranch"] = float(self.min_branch)
        return data

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        profile_name: str = "",
        source: str = "configuration",
    ) -> ProfileThresholds:
        """
        Build thresholds from a mapping with case-insensitive keys.

        Raises:
            MalformedInputError: When a threshold is not a number
        """
        values: dict[str, Fraction | None] = {}
        for name, key in (("min_line", "minLine"), ("min_branch", "minBranch")):
            raw = get_field(data, key)
            try:
                values[name] = to_rational(raw)
            except (TypeError, ValueError, ArithmeticError) as e:
                error = MalformedInputError(
                    f"Configuration from {source}: profile '{profile_name}' "
                    f"{key} must be a number, got {raw!r}",
                    source=source,
                    detail=str(e),
                )
                error.details["profile"] = profile_name
                raise error from e
        return cls(**values)


@dataclass(frozen=True)
class PolicyConfiguration:
    """
    Coverage policy: profiles, the default profile and the report location.

    Instances are read-only. ``profiles`` is exposed as a read-only mapping;
    a profile may map to ``None`` only so that validate() can report it.
    """

    default_profile: str
    profiles: Mapping[str, ProfileThresholds | None] = field(default_factory=dict)
    coverage_report_path: str = DEFAULT_COVERAGE_REPORT_PATH

    def __post_init__(self) -> None:
        object.__setattr__(self, "profiles", MappingProxyType(dict(self.profiles or {})))

    def validate(self) -> PolicyConfiguration:
        """
        Check the configuration, stopping at the first broken rule.

        Rules are checked in this order: default profile set, profiles
        present, default profile defined, no null thresholds, each profile's
        own thresholds valid, coverage report path set.

        Returns:
            self, so that loading code can chain the call

        Raises:
            ConfigurationError: Identifying the rule (and profile) that failed
        """
        if not self.default_profile or not self.default_profile.strip():
            raise ConfigurationError(
                "Configuration error: 'defaultProfile' is required",
                {"field": "defaultProfile"},
            )

        if not self.profiles:
            raise ConfigurationError(
                "Configuration error: 'profiles' must contain at least one profile",
                {"field": "profiles"},
            )

        if self.default_profile not in self.profiles:
            raise ConfigurationError(
                f"Configuration error: defaultProfile '{self.default_profile}' does not "
                f"exist in profiles. Available profiles: {', '.join(self.profiles)}",
                {"field": "defaultProfile", "profile": self.default_profile},
            )

        for name, thresholds in self.profiles.items():
            if thresholds is None:
                raise ConfigurationError(
                    f"Configuration error: Profile '{name}' has null thresholds",
                    {"field": "profiles", "profile": name},
                )

        for name, thresholds in self.profiles.items():
            assert thresholds is not None
            thresholds.validate(name)

        if not self.coverage_report_path or not self.coverage_report_path.strip():
            raise ConfigurationError(
                "Configuration error: 'coverageReportPath' cannot be empty",
                {"field": "coverageReportPath"},
            )

        return self

    def effective_profile(self, assigned_profile: str | None) -> str:
        """Profile name that applies to a file with the given marker."""
        return assigned_profile if assigned_profile is not None else self.default_profile

    def thresholds_for(self, profile_name: str) -> ProfileThresholds | None:
        return self.profiles.get(profile_name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk camelCase layout."""
        return {
            "coverageReportPath": self.coverage_report_path,
            "defaultProfile": self.default_profile,
            "profiles": {
                name: thresholds.to_dict() if thresholds is not None else None
                for name, thresholds in self.profiles.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Any, source: str = "configuration") -> PolicyConfiguration:
        """
        Build a configuration from parsed JSON/YAML data.

        Field names are case-insensitive. The result is not validated;
        call validate() before use.

        Raises:
            MalformedInputError: When the document has the wrong shape,
                including thresholds that are not numbers
        """
        if not isinstance(data, Mapping):
            raise MalformedInputError(
                f"Configuration from {source} must be an object",
                source=source,
                detail=f"got {type(data).__name__}",
            )

        default_profile = get_field(data, "defaultProfile") or ""
        if not isinstance(default_profile, str):
            raise MalformedInputError(
                f"Configuration from {source}: 'defaultProfile' must be a string",
                source=source,
            )

        raw_profiles = get_field(data, "profiles") or {}
        if not isinstance(raw_profiles, Mapping):
            raise MalformedInputError(
                f"Configuration from {source}: 'profiles' must be an object",
                source=source,
            )

        profiles: dict[str, ProfileThresholds | None] = {}
        for name, raw in raw_profiles.items():
            if raw is None:
                profiles[str(name)] = None
            elif isinstance(raw, Mapping):
                profiles[str(name)] = ProfileThresholds.from_dict(raw, str(name), source)
            else:
                raise MalformedInputError(
                    f"Configuration from {source}: profile '{name}' must be an object",
                    source=source,
                )

        if has_field(data, "coverageReportPath"):
            report_path = get_field(data, "coverageReportPath")
            if report_path is None:
                report_path = ""
            elif not isinstance(report_path, str):
                raise MalformedInputError(
                    f"Configuration from {source}: 'coverageReportPath' must be a string",
                    source=source,
                )
        else:
            report_path = DEFAULT_COVERAGE_REPORT_PATH

        return cls(
            default_profile=default_profile,
            profiles=profiles,
            coverage_report_path=report_path,
        )
