"""
Policy configuration for covergate.

Provides:
- PolicyConfiguration / ProfileThresholds models and their rules
- Lenient JSON (and YAML) loading with parent-directory discovery
- Built-in templates for ``covergate init``
- Environment-based tool settings
"""

from covergate.config.loader import (
    DEFAULT_CONFIG_FILE,
    find_config_file,
    load_config,
    load_config_from_text,
    load_config_smart,
    save_config,
)
from covergate.config.models import (
    DEFAULT_COVERAGE_REPORT_PATH,
    PolicyConfiguration,
    ProfileThresholds,
)
from covergate.config.settings import Settings, get_settings
from covergate.config.templates import TEMPLATES, get_template, write_template

__all__ = [
    # Models
    "PolicyConfiguration",
    "ProfileThresholds",
    "DEFAULT_COVERAGE_REPORT_PATH",
    # Loader
    "DEFAULT_CONFIG_FILE",
    "find_config_file",
    "load_config",
    "load_config_from_text",
    "load_config_smart",
    "save_config",
    # Templates
    "TEMPLATES",
    "get_template",
    "write_template",
    # Settings
    "Settings",
    "get_settings",
]
