"""Unit tests for parser_tools.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from parser_tools.config import Settings, load_settings
from parser_tools.sql_toolkit import Dialect

# ---------------------------------------------------------------------------
# Settings - default values
# ---------------------------------------------------------------------------


class TestSettingsDefaults:
    def test_default_dialect(self):
        assert Settings().dialect == Dialect.DUCKDB

    def test_default_debug(self):
        assert Settings().debug is False

    def test_default_log_level(self):
        assert Settings().log_level == "INFO"

    def test_default_structured_logging(self):
        assert Settings().structured_logging is False


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------


class TestSettingsEnvOverrides:
    def test_env_var_overrides_dialect(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_DIALECT", "postgres")
        assert Settings().dialect == Dialect.POSTGRES

    def test_dialect_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_DIALECT", " Snowflake ")
        assert Settings().dialect == Dialect.SNOWFLAKE

    def test_env_var_overrides_debug(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_DEBUG", "true")
        assert Settings().debug is True

    def test_env_var_overrides_log_level(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_LOG_LEVEL", "warning")
        assert Settings().log_level == "WARNING"

    def test_env_var_overrides_structured_logging(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_STRUCTURED_LOGGING", "1")
        assert Settings().structured_logging is True

    def test_unrelated_env_vars_ignored(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_SOMETHING_ELSE", "x")
        assert Settings().dialect == Dialect.DUCKDB


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestSettingsValidation:
    def test_unknown_dialect_rejected(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_DIALECT", "cobol")
        with pytest.raises(ValidationError):
            Settings()

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            Settings(log_level="chatty")

    def test_effective_log_level_follows_log_level(self):
        assert Settings(log_level="ERROR").effective_log_level == "ERROR"

    def test_debug_forces_debug_level(self):
        assert Settings(debug=True, log_level="ERROR").effective_log_level == "DEBUG"


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


class TestLoadSettings:
    def test_returns_settings(self):
        assert isinstance(load_settings(), Settings)

    def test_overrides_applied(self):
        settings = load_settings(dialect="bigquery", debug=True)
        assert settings.dialect == Dialect.BIGQUERY
        assert settings.debug is True

    def test_override_beats_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PARSER_TOOLS_DIALECT", "mysql")
        assert load_settings(dialect="sqlite").dialect == Dialect.SQLITE
