"""Tests for the two-stage expense validator."""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from expense_tracker.config import LedgerSettings
from expense_tracker.models.expense import ExpenseCategory, ExpenseFields
from expense_tracker.validation import ExpenseValidator, to_amount, to_category, to_date


class TestConverters:
    """Tests for the input converters."""

    @pytest.mark.parametrize("value,expected", [
        (20, Decimal("20")),
        (0.1, Decimal("0.1")),
        ("12.50", Decimal("12.50")),
        (" 7 ", Decimal("7")),
        (Decimal("3.3"), Decimal("3.3")),
    ])
    def test_to_amount_accepts_positive_numbers(self, value, expected):
        assert to_amount(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "   ", "abc", 0, -1, "-5", "0.00",
        float("nan"), float("inf"), "NaN", "Infinity",
        True, False, [10], {"amount": 10},
    ])
    def test_to_amount_rejects_unusable_values(self, value):
        assert to_amount(value) is None

    def test_to_category(self):
        assert to_category(ExpenseCategory.BILLS) is ExpenseCategory.BILLS
        assert to_category(" Travel ") is ExpenseCategory.TRAVEL
        assert to_category("travel") is None
        assert to_category("") is None
        assert to_category(None) is None
        assert to_category(3) is None

    def test_to_date(self):
        assert to_date(date(2024, 1, 1)) == date(2024, 1, 1)
        assert to_date(datetime(2024, 1, 1, 15, 30)) == date(2024, 1, 1)
        assert to_date("2024-01-01") == date(2024, 1, 1)
        assert to_date("01/01/2024") is None
        assert to_date("") is None
        assert to_date(None) is None


class TestParseFields:
    """Stage 1: blocking field checks."""

    def test_valid_fields(self, validator):
        result = validator.parse_fields("  Lunch ", "20", "Food", "2024-01-01")

        assert result.is_valid
        assert result.fields == ExpenseFields(
            title="Lunch",
            price=Decimal("20"),
            category=ExpenseCategory.FOOD,
            date=date(2024, 1, 1),
        )

    def test_all_missing_fields_are_reported(self, validator):
        """Every problem comes back at once, not just the first."""
        result = validator.parse_fields("", None, None, None)

        assert not result.is_valid
        assert result.fields is None
        assert [i.field for i in result.issues] == ["title", "price", "category", "date"]
        assert all(i.issue_type == "missing" for i in result.issues)

    @pytest.mark.parametrize("price", ["abc", 0, -10, "NaN", True])
    def test_invalid_price(self, validator, price):
        result = validator.parse_fields("Lunch", price, "Food", "2024-01-01")

        assert not result.is_valid
        assert len(result.issues) == 1
        assert result.issues[0].field == "price"
        assert result.issues[0].issue_type == "invalid_value"

    def test_unknown_category(self, validator):
        result = validator.parse_fields("Lunch", 5, "Groceries", "2024-01-01")

        assert result.issues[0].field == "category"
        assert result.issues[0].issue_type == "invalid_value"

    def test_bad_date_format(self, validator):
        result = validator.parse_fields("Lunch", 5, "Food", "yesterday")

        assert result.issues[0].field == "date"
        assert result.issues[0].issue_type == "invalid_format"

    def test_title_too_long(self, validator):
        result = validator.parse_fields("x" * 201, 5, "Food", "2024-01-01")

        assert result.issues[0].field == "title"
        assert result.issues[0].issue_type == "invalid_value"

    def test_whitespace_title_is_missing(self, validator):
        result = validator.parse_fields("   ", 5, "Food", "2024-01-01")

        assert result.issues[0].issue_type == "missing"


class TestAmountPrecision:
    """Amounts must fit the configured money scale exactly."""

    @pytest.mark.parametrize("price", ["20.1", "20.10", "20.00", "0.01", "9999999999999.99"])
    def test_within_scale(self, validator, price):
        assert validator.parse_fields("Lunch", price, "Food", "2024-01-01").is_valid

    @pytest.mark.parametrize("price", ["20.001", "0.005", "0.0000000000000000000000001"])
    def test_too_many_decimals(self, validator, price):
        result = validator.parse_fields("Lunch", price, "Food", "2024-01-01")

        assert [i.issue_type for i in result.issues] == ["too_precise"]

    @pytest.mark.parametrize("price", ["10000000000000", "1E+30"])
    def test_too_many_digits(self, validator, price):
        result = validator.parse_fields("Lunch", price, "Food", "2024-01-01")

        assert [i.issue_type for i in result.issues] == ["out_of_range"]

    def test_amounts_are_not_rounded(self, validator):
        amount, issues = validator.parse_amount("12.5")
        assert amount == Decimal("12.5")
        assert str(amount) == "12.5"

    def test_scale_is_configurable(self):
        validator = ExpenseValidator(LedgerSettings(_env_file=None, amount_decimal_places=0))

        amount, issues = validator.parse_amount("1.5")

        assert amount is None
        assert issues[0].issue_type == "too_precise"
        assert validator.parse_amount("15")[0] == Decimal("15")


class TestParseAmount:

    def test_valid(self, validator):
        amount, issues = validator.parse_amount("100")
        assert amount == Decimal("100")
        assert issues == []

    def test_blank_is_missing(self, validator):
        amount, issues = validator.parse_amount("")
        assert amount is None
        assert issues[0].issue_type == "missing"
        assert issues[0].field == "amount"

    def test_negative_is_invalid(self, validator):
        amount, issues = validator.parse_amount(-5)
        assert amount is None
        assert issues[0].issue_type == "invalid_value"


class TestReview:
    """Stage 2: non-blocking warnings."""

    def _fields(self, price="20", on=date(2024, 1, 1)):
        return ExpenseFields(title="T", price=Decimal(price), category=ExpenseCategory.FOOD, date=on)

    def test_ordinary_expense_has_no_warnings(self, validator):
        assert validator.review(self._fields(), today=date(2024, 1, 1)) == []

    def test_future_date_within_tolerance(self, validator):
        today = date(2024, 1, 1)
        fields = self._fields(on=today + timedelta(days=7))
        assert validator.review(fields, today=today) == []

    def test_future_date_beyond_tolerance(self, validator):
        today = date(2024, 1, 1)
        issues = validator.review(self._fields(on=today + timedelta(days=8)), today=today)

        assert len(issues) == 1
        assert issues[0].issue_type == "future_date"
        assert issues[0].severity == "warning"

    def test_large_amount(self):
        validator = ExpenseValidator(LedgerSettings(_env_file=None, max_expense_amount=Decimal("100")))
        issues = validator.review(self._fields(price="100.01"), today=date(2024, 1, 1))

        assert [i.issue_type for i in issues] == ["suspicious_value"]

    def test_summary_puts_errors_first(self, validator):
        warnings = validator.review(self._fields(on=date(2030, 1, 1)), today=date(2024, 1, 1))
        errors = validator.parse_fields("", 5, "Food", "2024-01-01").issues

        summary = validator.get_user_friendly_summary(warnings + errors)

        assert summary.splitlines()[0] == "• Title is required"
        assert validator.get_user_friendly_summary([]) == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
