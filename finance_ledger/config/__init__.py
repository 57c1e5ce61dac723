"""Configuration package."""

from finance_ledger.config.settings import (
    LOG_LEVELS,
    LedgerSettings,
    get_settings,
)

__all__ = [
    "LOG_LEVELS",
    "LedgerSettings",
    "get_settings",
]
