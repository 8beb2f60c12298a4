"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for fatal-error reporting and the
library's own logging. Supports .env files and nested configuration.

Example:
    >>> from errtrail.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.exit_status
    1
    >>> settings.report.path_segments
    2

    # Or with environment variables:
    # ERRTRAIL_EXIT_STATUS=70
    # ERRTRAIL_REPORT_COLORS=false
    # ERRTRAIL_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportSettings(BaseSettings):
    """Defaults for the table reporter."""

    model_config = SettingsConfigDict(
        env_prefix="ERRTRAIL_REPORT_",
        extra="ignore",
    )

    colors: bool | None = Field(default=None, description="Force ANSI colors on/off (None = detect tty)")
    compress: bool = Field(default=True, description="Merge a trailing foreign error into a passthrough row")
    path_segments: PositiveInt = Field(default=2, description="Trailing path segments shown per frame")
    min_message_width: PositiveInt = Field(default=10, description="Never clip the message column below this")
    function_style: Literal["short", "qualified", "bare"] = "short"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ERRTRAIL_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ErrtrailSettings(BaseSettings):
    """Root settings for errtrail.

    Loads configuration from environment variables with ERRTRAIL_ prefix.

    Example environment variables:
        ERRTRAIL_EXIT_STATUS=2
        ERRTRAIL_REPORT_COMPRESS=false
        ERRTRAIL_REPORT_FUNCTION_STYLE=qualified
        ERRTRAIL_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="ERRTRAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    exit_status: Annotated[int, Field(ge=0, le=255)] = 1

    report: ReportSettings = Field(default_factory=ReportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> ErrtrailSettings:
    """Get the global settings instance (cached)."""
    return ErrtrailSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
