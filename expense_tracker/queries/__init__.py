"""Derived views over the expense list."""

from expense_tracker.queries.aggregator import (
    category_totals,
    category_trend,
    expense_overview,
    filter_expenses,
)

__all__ = [
    "category_totals",
    "category_trend",
    "expense_overview",
    "filter_expenses",
]
