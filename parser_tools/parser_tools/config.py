"""Parser tools configuration loaded from environment variables."""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from parser_tools.sql_toolkit import Dialect

logger = logging.getLogger(__name__)

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class Settings(BaseSettings):
    """Settings loaded from environment variables with PARSER_TOOLS_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="PARSER_TOOLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Dialect used to read SQL when a caller does not name one.
    dialect: Dialect = Dialect.DUCKDB

    debug: bool = False

    # Logging
    log_level: str = "INFO"
    structured_logging: bool = False

    @field_validator("dialect", mode="before")
    @classmethod
    def lowercase_dialect(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'")
        return level

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info("Loaded settings with default dialect: %s", settings.dialect.value)

    return settings
