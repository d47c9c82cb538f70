"""Configuration package."""

from finance_exports.config.settings import (
    SUPPORTED_LOCALES,
    AppSettings,
    ExportSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "SUPPORTED_LOCALES",
    "AppSettings",
    "ExportSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
