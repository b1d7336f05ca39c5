"""
Two-Stage Expense Validation

STAGE 1 - FIELD PARSING (blocking):
- Required field presence (title, price, category, date)
- Price is a finite number greater than zero, within the configured
  number of decimal places and digits
- Category is one of the known categories
- Date is a calendar date
Any error here rejects the operation before the ledger is touched.

STAGE 2 - REVIEW (non-blocking):
- Dates far in the future
- Unusually large amounts
These are reported as warnings next to a committed operation.

IMPORTANT: Validation NEVER silently fixes issues and never has side effects.
The only normalisation is stripping whitespace from the title.
"""

import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from expense_tracker.config import LedgerSettings, get_settings
from expense_tracker.models.expense import (
    ExpenseCategory,
    ExpenseFields,
    ValidationIssue,
    ValidationResult,
)


MAX_TITLE_LENGTH = 200


def to_amount(value: Any) -> Optional[Decimal]:
    """
    Convert user input to a positive, finite Decimal.

    Floats go through str() so 0.1 stays 0.1. Returns None for anything
    that is not a usable amount.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        text = str(value).strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def to_category(value: Any) -> Optional[ExpenseCategory]:
    """Accept an ExpenseCategory or its label ("Food", "Travel", ...)."""
    if isinstance(value, ExpenseCategory):
        return value
    if isinstance(value, str):
        try:
            return ExpenseCategory(value.strip())
        except ValueError:
            return None
    return None


def to_date(value: Any) -> Optional[datetime.date]:
    """Accept a date, a datetime (its date part) or an ISO YYYY-MM-DD string."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class ExpenseValidator:
    """
    Validates expense input through a two-stage pipeline.

    Stage 1: Field parsing (errors, blocking)
    Stage 2: Review (warnings, never blocking)
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings().ledger

    def parse_amount(self, value: Any, field: str = "amount") -> tuple[Optional[Decimal], list[ValidationIssue]]:
        """Parse an income amount (or any positive amount)."""
        amount = to_amount(value)
        if amount is not None:
            issue = self._precision_issue(amount, field)
            if issue:
                return None, [issue]
            return amount, []

        return None, [ValidationIssue(
            field=field,
            issue_type="missing" if _is_blank(value) else "invalid_value",
            message="Amount must be a number greater than zero",
            severity="error",
            suggested_fix="Enter a positive amount",
        )]

    def parse_fields(
        self,
        title: Any,
        price: Any,
        category: Any,
        date: Any,
    ) -> ValidationResult:
        """
        Stage 1: parse and check all four expense fields.

        Every field is checked so the caller can report all problems at once.
        """
        issues = []

        parsed_title = title.strip() if isinstance(title, str) else None
        if not parsed_title:
            issues.append(ValidationIssue(
                field="title",
                issue_type="missing",
                message="Title is required",
                severity="error",
                suggested_fix="Describe what the money was spent on",
            ))
        elif len(parsed_title) > MAX_TITLE_LENGTH:
            issues.append(ValidationIssue(
                field="title",
                issue_type="invalid_value",
                message=f"Title is longer than {MAX_TITLE_LENGTH} characters",
                severity="error",
                suggested_fix="Shorten the title",
            ))

        parsed_price = to_amount(price)
        if parsed_price is None:
            issues.append(ValidationIssue(
                field="price",
                issue_type="missing" if _is_blank(price) else "invalid_value",
                message="Price must be a number greater than zero",
                severity="error",
                suggested_fix="Enter the amount that was spent",
            ))
        else:
            issue = self._precision_issue(parsed_price, "price")
            if issue:
                issues.append(issue)

        parsed_category = to_category(category)
        if parsed_category is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing" if _is_blank(category) else "invalid_value",
                message="Category is required",
                severity="error",
                suggested_fix="Choose one of: " + ", ".join(c.value for c in ExpenseCategory),
            ))

        parsed_date = to_date(date)
        if parsed_date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing" if _is_blank(date) else "invalid_format",
                message="Date is required",
                severity="error",
                suggested_fix="Use the YYYY-MM-DD format",
            ))

        if issues:
            return ValidationResult(issues=issues)

        return ValidationResult(
            fields=ExpenseFields(
                title=parsed_title,
                price=parsed_price,
                category=parsed_category,
                date=parsed_date,
            ),
        )

    def _precision_issue(self, amount: Decimal, field: str) -> Optional[ValidationIssue]:
        """
        Reject amounts the ledger cannot add up exactly.

        An amount may carry at most `amount_decimal_places` decimals and
        `max_amount_digits` significant digits in total. Nothing is rounded.
        """
        places = self._settings.amount_decimal_places
        whole_digits = self._settings.max_amount_digits - places

        if amount.adjusted() + 1 > whole_digits:
            return ValidationIssue(
                field=field,
                issue_type="out_of_range",
                message=f"Amount is too large (at most {whole_digits} digits before the decimal point)",
                severity="error",
                suggested_fix="Enter a smaller amount",
            )

        if amount != amount.quantize(Decimal(1).scaleb(-places)):
            return ValidationIssue(
                field=field,
                issue_type="too_precise",
                message=f"Amount can have at most {places} decimal places",
                severity="error",
                suggested_fix=f"Round the amount to {places} decimal places",
            )

        return None

    def review(
        self,
        fields: ExpenseFields,
        today: Optional[datetime.date] = None,
    ) -> list[ValidationIssue]:
        """
        Stage 2: flag values worth a second look.

        Only warnings are produced; the operation has already been accepted.
        """
        issues = []
        today = today or datetime.date.today()

        max_future_date = today + datetime.timedelta(days=self._settings.future_date_tolerance_days)
        if fields.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Expense date ({fields.date}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        if fields.price > self._settings.max_expense_amount:
            issues.append(ValidationIssue(
                field="price",
                issue_type="suspicious_value",
                message=f"Amount ({fields.price:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        return issues

    def get_user_friendly_summary(self, issues: list[ValidationIssue]) -> str:
        """One line per issue, errors first."""
        if not issues:
            return ""

        ordered = sorted(issues, key=lambda i: i.severity != "error")
        return "\n".join(f"• {issue.message}" for issue in ordered)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
