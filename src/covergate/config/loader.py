"""
Policy configuration file loading and saving.

Search order for ``load_config_smart``:
1. The argument itself, when it names an existing file
2. A file with that name in the start directory
3. The same name in each parent directory up to the filesystem root
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
import yaml

from covergate.config.models import PolicyConfiguration
from covergate.core.errors import ConfigurationError, MalformedInputError, NotFoundError
from covergate.jsonio import loads_lenient

logger = structlog.get_logger()

DEFAULT_CONFIG_FILE = "covergate.json"

YAML_SUFFIXES = {".yaml", ".yml"}


def parse_config_text(text: str, source: str = "JSON", fmt: str = "json") -> Any:
    """Parse raw configuration text as JSON (lenient) or YAML."""
    if fmt == "yaml":
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise MalformedInputError(
                f"Failed to parse configuration from {source}: {e}",
                source=source,
                detail=str(e),
            ) from e
    return loads_lenient(text, source=f"configuration from {source}")


def load_config_from_text(text: str, source: str = "JSON", fmt: str = "json") -> PolicyConfiguration:
    """
    Load and validate a configuration from a string.

    Args:
        text: Configuration document
        source: Source identifier for error messages
        fmt: "json" or "yaml"

    Returns:
        Validated PolicyConfiguration

    Raises:
        MalformedInputError: When the document cannot be parsed
        ConfigurationError: When the configuration breaks a rule
    """
    data = parse_config_text(text, source=source, fmt=fmt)
    if data is None:
        raise MalformedInputError(
            f"Configuration from {source} is empty",
            source=source,
        )

    config = PolicyConfiguration.from_dict(data, source=source)
    try:
        return config.validate()
    except ConfigurationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {source}: {e.message}",
            {"source": source, **e.details},
        ) from e


def load_config(path: str | Path) -> PolicyConfiguration:
    """
    Load and validate a configuration file.

    Files ending in .yaml/.yml are read as YAML, everything else as JSON.

    Raises:
        NotFoundError: When the file does not exist
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise NotFoundError(f"Configuration file not found: {config_path}", path=str(config_path))

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MalformedInputError(
            f"Failed to read configuration file {config_path}: {e}",
            source=str(config_path),
            detail=str(e),
        ) from e

    fmt = "yaml" if config_path.suffix.lower() in YAML_SUFFIXES else "json"
    config = load_config_from_text(text, source=str(config_path), fmt=fmt)
    logger.debug(
        "config_loaded",
        path=str(config_path),
        default_profile=config.default_profile,
        profiles=len(config.profiles),
    )
    return config


def find_config_file(
    start_dir: str | Path | None = None,
    config_name: str = DEFAULT_CONFIG_FILE,
) -> Path | None:
    """
    Find a configuration file in the start directory or any parent.

    Returns:
        Path to the first match, or None if not found
    """
    directory = Path(start_dir) if start_dir else Path.cwd()
    directory = directory.resolve()

    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / config_name
        if candidate.is_file():
            return candidate

    return None


def load_config_from_parents(
    start_dir: str | Path | None = None,
    config_name: str = DEFAULT_CONFIG_FILE,
) -> tuple[PolicyConfiguration, Path]:
    """Find and load a configuration file, searching parent directories."""
    config_path = find_config_file(start_dir, config_name)
    if config_path is None:
        search_start = str(start_dir or Path.cwd())
        raise NotFoundError(
            f"Configuration file '{config_name}' not found in '{search_start}' "
            "or any parent directory",
            path=config_name,
        )
    return load_config(config_path), config_path


def load_config_smart(
    path_or_name: str | Path = DEFAULT_CONFIG_FILE,
    start_dir: str | Path | None = None,
) -> tuple[PolicyConfiguration, Path]:
    """
    Load a configuration given either a file path or a bare file name.

    An existing file is loaded directly; otherwise the name is searched for
    in ``start_dir`` (default: current directory) and its parents.

    Returns:
        Tuple of (configuration, path it was loaded from)
    """
    candidate = Path(path_or_name)
    if candidate.is_file():
        return load_config(candidate), candidate

    return load_config_from_parents(start_dir, str(path_or_name))


def config_to_json(config: PolicyConfiguration) -> str:
    """Serialize a configuration as indented JSON."""
    return json.dumps(config.to_dict(), indent=2) + "\n"


def save_config(config: PolicyConfiguration, path: str | Path) -> Path:
    """Write a configuration to disk as JSON or YAML (by suffix)."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    if target.suffix.lower() in YAML_SUFFIXES:
        target.write_text(
            yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
    else:
        target.write_text(config_to_json(config), encoding="utf-8")

    logger.info("config_saved", path=str(target))
    return target
