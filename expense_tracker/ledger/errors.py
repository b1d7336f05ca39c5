"""
Ledger Errors

Every rejection leaves the ledger exactly as it was. None of these are fatal:
the caller can retry with different input or abandon the action.
"""

from decimal import Decimal
from typing import Optional

from expense_tracker.models.expense import LedgerErrorKind, ValidationIssue


class LedgerError(Exception):
    """Base exception for rejected ledger operations."""

    kind: LedgerErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Required fields missing, empty, or semantically invalid."""

    kind = LedgerErrorKind.VALIDATION

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues if issue.severity == "error"]


class InsufficientFundsError(LedgerError):
    """The operation would drive the wallet balance below zero."""

    kind = LedgerErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, available: Decimal, required: Decimal):
        super().__init__(
            f"Insufficient balance. Available: {available}, Required: {required}"
        )
        self.available = available
        self.required = required


class NotFoundError(LedgerError):
    """An edit references an expense that is not in the ledger."""

    kind = LedgerErrorKind.NOT_FOUND

    def __init__(self, expense_id: str):
        super().__init__(f"Expense not found: {expense_id}")
        self.expense_id = expense_id
