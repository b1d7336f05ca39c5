"""Ledger package: the wallet/expense store and its error taxonomy."""

from expense_tracker.ledger.errors import (
    InsufficientFundsError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from expense_tracker.ledger.store import LedgerStore

__all__ = [
    "InsufficientFundsError",
    "LedgerError",
    "LedgerStore",
    "NotFoundError",
    "ValidationError",
]
