"""Configuration package."""

from alokasi.config.settings import (
    DEFAULT_SAVINGS_PERCENT,
    SAVINGS_PERCENT_OPTIONS,
    AppSettings,
    ReportSettings,
    Settings,
    ShareSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_SAVINGS_PERCENT",
    "SAVINGS_PERCENT_OPTIONS",
    "AppSettings",
    "ReportSettings",
    "Settings",
    "ShareSettings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
