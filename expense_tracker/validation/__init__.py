"""Validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidator,
    to_amount,
    to_category,
    to_date,
)

__all__ = ["ExpenseValidator", "to_amount", "to_category", "to_date"]
