"""
Expense Aggregation

DESIGN DECISION: Aggregates are DERIVED, never stored.
Every function here recomputes from the expense list it is given. Edits and
deletes move totals up and down, so keeping running totals would be one
missed refund away from a wrong chart.

All functions are pure: no state, no side effects, safe to call as often
as a page renders.
"""

import datetime
from decimal import Decimal
from typing import Iterable, Optional

from expense_tracker.models.expense import (
    CategoryTrendPoint,
    Expense,
    ExpenseCategory,
    ExpenseOverview,
)


def category_totals(expenses: Iterable[Expense]) -> dict[ExpenseCategory, Decimal]:
    """
    Sum of price per category.

    Categories without expenses are absent, not zero. Iteration order
    follows first appearance in `expenses` and carries no meaning.
    """
    totals: dict[ExpenseCategory, Decimal] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, Decimal("0")) + expense.price
    return totals


def category_trend(expenses: Iterable[Expense]) -> list[CategoryTrendPoint]:
    """Same aggregation as category_totals, as (category, amount) points for charts."""
    return [
        CategoryTrendPoint(category=category, amount=amount)
        for category, amount in category_totals(expenses).items()
    ]


def expense_overview(expenses: Iterable[Expense]) -> ExpenseOverview:
    """
    Quick summary: how many expenses, how much in total, and the latest one.

    "Latest" is the front of the list, i.e. the most recently added.
    """
    items = list(expenses)
    return ExpenseOverview(
        expense_count=len(items),
        total_spent=sum((e.price for e in items), Decimal("0")),
        latest_expense=items[0] if items else None,
    )


def filter_expenses(
    expenses: Iterable[Expense],
    category: Optional[ExpenseCategory] = None,
    date_from: Optional[datetime.date] = None,
    date_to: Optional[datetime.date] = None,
) -> list[Expense]:
    """
    Expenses matching every given filter, in their original order.

    Date bounds are inclusive.
    """
    results = []
    for expense in expenses:
        if category is not None and expense.category != category:
            continue
        if date_from is not None and expense.date < date_from:
            continue
        if date_to is not None and expense.date > date_to:
            continue
        results.append(expense)
    return results
