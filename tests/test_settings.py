"""Tests for environment-driven configuration."""

from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from expense_tracker.config import AppSettings, LedgerSettings, get_settings, validate_all_settings


class TestLedgerSettings:

    def test_defaults(self, ledger_settings):
        assert ledger_settings.default_balance == Decimal("5000")
        assert ledger_settings.storage_backend == "json"
        assert ledger_settings.balance_key == "walletBalance"
        assert ledger_settings.expenses_key == "expenses"
        assert ledger_settings.currency_symbol == "$"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LEDGER_DEFAULT_BALANCE", "120.50")
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")

        settings = LedgerSettings(_env_file=None)

        assert settings.default_balance == Decimal("120.50")
        assert settings.storage_backend == "memory"

    def test_negative_default_balance_rejected(self):
        with pytest.raises(PydanticValidationError):
            LedgerSettings(_env_file=None, default_balance=Decimal("-1"))

    def test_unknown_backend_rejected(self):
        with pytest.raises(PydanticValidationError):
            LedgerSettings(_env_file=None, storage_backend="sheets")

    def test_money_scale_defaults(self, ledger_settings):
        assert ledger_settings.amount_decimal_places == 2
        assert ledger_settings.max_amount_digits == 15

    def test_digits_must_exceed_decimal_places(self):
        with pytest.raises(PydanticValidationError):
            LedgerSettings(_env_file=None, amount_decimal_places=4, max_amount_digits=4)

    def test_keys_must_differ(self):
        with pytest.raises(PydanticValidationError):
            LedgerSettings(_env_file=None, balance_key="data", expenses_key="data")


class TestAppSettings:

    def test_log_level_is_normalised(self):
        assert AppSettings(_env_file=None, log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            AppSettings(_env_file=None, log_level="chatty")


class TestGetSettings:

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, monkeypatch):
        monkeypatch.setenv("LEDGER_CURRENCY_SYMBOL", "£")
        get_settings.cache_clear()

        assert get_settings().ledger.currency_symbol == "£"

    def test_validate_all_settings(self, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        assert validate_all_settings() == {"ledger": True, "app": True}

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        results = validate_all_settings()

        assert results["app"] is False
        assert "app_error" in results


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
