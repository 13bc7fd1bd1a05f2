"""
Tool settings using Pydantic.

Provides environment-based defaults with the COVERGATE_ prefix. Command-line
flags always take precedence over these values.
"""

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from covergate.core.errors import UsageError

ENV_PREFIX = "COVERGATE_"


class Settings(BaseSettings):
    """Tool settings."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Policy file name or path
    config_file: str = "covergate.json"

    # Overrides the policy's coverageReportPath when set
    coverage_report: str | None = None

    # Filtered test run (skip files with zero covered lines)
    filtered_run: bool = False

    # Output
    output_format: str = "table"
    log_level: str = "WARNING"
    log_json: bool = False

    # Parallel marker reads
    resolver_workers: int = Field(default=1, ge=1)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Raises:
        UsageError: When an environment setting has an invalid value
    """
    try:
        return Settings()
    except ValidationError as e:
        first = e.errors()[0]
        name = f"{ENV_PREFIX}{str(first['loc'][0]).upper()}" if first["loc"] else ENV_PREFIX
        raise UsageError(
            f"Invalid setting {name}: {first['msg']}",
            {"setting": name},
        ) from e
