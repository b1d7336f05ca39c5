"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger defaults (starting balance, storage location, storage keys)
live next to the application knobs so they are validated together at startup.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Wallet ledger and persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_balance: Decimal = Field(
        default=Decimal("5000"),
        ge=0,
        description="Wallet balance used when nothing has been saved yet"
    )

    # Persistence
    storage_backend: Literal["json", "memory"] = Field(
        default="json",
        description="Where ledger state survives restarts"
    )
    storage_path: str = Field(
        default="data/ledger.json",
        description="Path of the JSON file used by the json backend"
    )
    balance_key: str = Field(
        default="walletBalance",
        min_length=1,
        description="Storage key holding the wallet balance"
    )
    expenses_key: str = Field(
        default="expenses",
        min_length=1,
        description="Storage key holding the expense list"
    )

    # Display
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol used in user-facing messages"
    )

    # Money precision
    amount_decimal_places: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Most decimal places an amount may carry"
    )
    max_amount_digits: int = Field(
        default=15,
        ge=1,
        le=20,
        description="Most significant digits an amount may carry, decimals included"
    )

    # Review thresholds (warnings only, never block an operation)
    max_expense_amount: Decimal = Field(
        default=Decimal("1000000"),
        gt=0,
        description="Expenses above this amount are flagged for review"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future an expense date can be"
    )

    @field_validator('max_amount_digits')
    @classmethod
    def digits_must_leave_room_for_units(cls, v: int, info) -> int:
        places = info.data.get("amount_decimal_places", 0)
        if v <= places:
            raise ValueError("max_amount_digits must exceed amount_decimal_places")
        return v

    @field_validator('expenses_key')
    @classmethod
    def keys_must_differ(cls, v: str, info) -> str:
        """Balance and expenses share one store, so their keys must not collide."""
        if v == info.data.get("balance_key"):
            raise ValueError("expenses_key must differ from balance_key")
        return v


class AppSettings(BaseSettings):
    """Process-wide knobs that are not about the ledger itself."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (console rendering otherwise)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings:
    """
    Entry point to both settings groups.

    Each group is read from the environment when first asked for, so a bad
    value in one group does not stop the other from loading.
    """

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Shared Settings instance.

    Tests that change the environment call get_settings.cache_clear().
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Load every settings group once and report which ones failed.

    Returns:
        {"ledger": bool, "app": bool}, plus "<group>_error" for each failure.
        Meant for a startup check before anything touches storage.
    """
    settings = get_settings()
    results: dict[str, object] = {}

    for group in ("ledger", "app"):
        try:
            getattr(settings, group)
        except ValidationError as e:
            results[group] = False
            results[f"{group}_error"] = str(e)
        else:
            results[group] = True

    return results
