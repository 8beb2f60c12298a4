"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    ErrtrailSettings,
    LoggingSettings,
    ReportSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "ErrtrailSettings",
    "LoggingSettings",
    "ReportSettings",
    "clear_settings_cache",
    "get_settings",
]
