"""Configuration package."""

from taxviet.config.settings import (
    AppSettings,
    Settings,
    StorageSettings,
    TaxSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "StorageSettings",
    "TaxSettings",
    "get_settings",
    "validate_all_settings",
]
