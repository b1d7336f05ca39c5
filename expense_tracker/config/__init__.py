"""Configuration package."""

from expense_tracker.config.settings import (
    AppSettings,
    LedgerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
