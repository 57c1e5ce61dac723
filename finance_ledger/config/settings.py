"""
Configuration Management for the Finance Ledger

Uses pydantic-settings for type-safe configuration from environment
variables (prefix ``FINANCE_LEDGER_``) and an optional ``.env`` file.

DESIGN DECISION: All configuration is centralized here.
Command-line flags override these values in the entry point; nothing
else in the code reads the environment directly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LedgerSettings(BaseSettings):
    """
    Application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Persistence
    data_file: Path = Field(
        default=Path("data.json"),
        description="File holding all users, ledgers and budgets"
    )

    # Stats output
    stats_file: Path = Field(
        default=Path("stats.txt"),
        description="File that stats are appended to in file mode"
    )
    stats_to_file: bool = Field(
        default=False,
        description="Start with stats output going to stats_file"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level for diagnostic output on stderr"
    )
    log_json: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console text"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}. Allowed: {', '.join(LOG_LEVELS)}")
        return level


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
