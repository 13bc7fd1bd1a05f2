"""
Built-in policy templates used by ``covergate init``.
"""

from __future__ import annotations

from fractions import Fraction
from pathlib import Path
from typing import Callable

import structlog

from covergate.config.loader import DEFAULT_CONFIG_FILE, save_config
from covergate.config.models import (
    DEFAULT_COVERAGE_REPORT_PATH,
    PolicyConfiguration,
    ProfileThresholds,
)
from covergate.core.errors import ConfigurationError

logger = structlog.get_logger()


def _t(min_line: str | None, min_branch: str | None = None) -> ProfileThresholds:
    return ProfileThresholds(
        min_line=Fraction(min_line) if min_line is not None else None,
        min_branch=Fraction(min_branch) if min_branch is not None else None,
    )


def basic_template() -> PolicyConfiguration:
    """Balanced defaults: most code at 70%, critical paths at 100%."""
    return PolicyConfiguration(
        coverage_report_path=DEFAULT_COVERAGE_REPORT_PATH,
        default_profile="Standard",
        profiles={
            "Standard": _t("0.70", "0.60"),
            "BusinessLogic": _t("0.90", "0.80"),
            "Critical": _t("1.00", "1.00"),
            "Dto": _t("0.00", "0.00"),
        },
    )


def strict_template() -> PolicyConfiguration:
    """High coverage requirements everywhere."""
    return PolicyConfiguration(
        coverage_report_path=DEFAULT_COVERAGE_REPORT_PATH,
        default_profile="High",
        profiles={
            "High": _t("0.90", "0.85"),
            "Critical": _t("1.00", "1.00"),
            "Moderate": _t("0.75", "0.70"),
            "Low": _t("0.50", "0.40"),
        },
    )


def relaxed_template() -> PolicyConfiguration:
    """Low default requirements for legacy code bases."""
    return PolicyConfiguration(
        coverage_report_path=DEFAULT_COVERAGE_REPORT_PATH,
        default_profile="Low",
        profiles={
            "Low": _t("0.50"),
            "Moderate": _t("0.70"),
            "Important": _t("0.80", "0.70"),
            "Critical": _t("1.00", "1.00"),
        },
    )


TEMPLATES: dict[str, Callable[[], PolicyConfiguration]] = {
    "basic": basic_template,
    "strict": strict_template,
    "relaxed": relaxed_template,
}


def get_template(name: str) -> PolicyConfiguration:
    """
    Get a configuration template by name (case-insensitive).

    Raises:
        ConfigurationError: For unknown template names
    """
    factory = TEMPLATES.get(name.lower())
    if factory is None:
        raise ConfigurationError(
            f"Unknown template '{name}'. Valid templates: {', '.join(TEMPLATES)}",
            {"template": name},
        )
    return factory()


def write_template(
    name: str = "basic",
    path: str | Path = DEFAULT_CONFIG_FILE,
    overwrite: bool = False,
) -> Path:
    """
    Write a template configuration file.

    Raises:
        ConfigurationError: For unknown templates or when the file exists
            and ``overwrite`` is False
    """
    config = get_template(name)
    target = Path(path)
    if target.exists() and not overwrite:
        raise ConfigurationError(
            f"Config file already exists: {target}",
            {"path": str(target)},
        )

    save_config(config, target)
    logger.info("template_written", template=name.lower(), path=str(target))
    return target
