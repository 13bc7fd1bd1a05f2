"""Tests for environment-based settings."""

import pytest
from pydantic import ValidationError

from covergate.config.settings import Settings, get_settings
from covergate.core.errors import ExitCode, UsageError


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = Settings()
        assert settings.config_file == "covergate.json"
        assert settings.coverage_report is None
        assert settings.filtered_run is False
        assert settings.output_format == "table"
        assert settings.log_level == "WARNING"
        assert settings.resolver_workers == 1

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("COVERGATE_FILTERED_RUN", "true")
        monkeypatch.setenv("COVERGATE_COVERAGE_REPORT", "out/cov.json")
        monkeypatch.setenv("COVERGATE_RESOLVER_WORKERS", "4")

        settings = Settings()
        assert settings.filtered_run is True
        assert settings.coverage_report == "out/cov.json"
        assert settings.resolver_workers == 4

    def test_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("COVERGATE_OUTPUT_FORMAT=json\n")
        assert Settings().output_format == "json"

    def test_workers_must_be_positive(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("COVERGATE_RESOLVER_WORKERS", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert get_settings() is get_settings()

    def test_get_settings_reports_bad_value_as_usage_error(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("COVERGATE_RESOLVER_WORKERS", "0")
        with pytest.raises(UsageError) as exc_info:
            get_settings()
        assert exc_info.value.exit_code == ExitCode.USAGE_ERROR
        assert exc_info.value.details["setting"] == "COVERGATE_RESOLVER_WORKERS"
        assert "COVERGATE_RESOLVER_WORKERS" in exc_info.value.message
