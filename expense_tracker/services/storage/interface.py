"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a key-value interface.
This allows us to:
1. Swap the JSON file for a database later
2. Use in-memory storage for testing
3. Keep ledger rules decoupled from storage technology

Two keys are stored: the wallet balance and the expense list. Backends only
move JSON-compatible values in and out; encoding and decoding of ledger
state lives here, once, for every backend.
"""

from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from expense_tracker.models.expense import Expense


_EXPENSE_LIST = TypeAdapter(list[Expense])


class StoredLedger(BaseModel):
    """
    What a backend could recover at startup.

    None means the piece was absent (or unreadable, see `issues`) and the
    caller should fall back to its defaults.
    """

    balance: Optional[Decimal] = None
    expenses: Optional[list[Expense]] = None
    issues: list[str] = Field(
        default_factory=list,
        description="Pieces that were present but could not be decoded"
    )


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Subclasses implement raw key access; this class turns ledger state
    into stored values and back.
    """

    def __init__(self, balance_key: str = "walletBalance", expenses_key: str = "expenses"):
        self._balance_key = balance_key
        self._expenses_key = expenses_key

    @abstractmethod
    def get_value(self, key: str) -> Optional[Any]:
        """
        Read a stored value.

        Returns:
            The JSON-compatible value, or None if the key is absent

        Raises:
            CorruptDataError: If the backing store cannot be read at all
        """
        pass

    @abstractmethod
    def set_value(self, key: str, value: Any) -> None:
        """
        Store a JSON-compatible value under a key.

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    def load(self) -> StoredLedger:
        """
        Load the ledger state.

        Absent keys and undecodable values both come back as None; the
        latter are described in `issues`.

        Raises:
            CorruptDataError: If the backing store cannot be read at all
        """
        issues = []

        raw_balance = self.get_value(self._balance_key)
        balance = None
        if raw_balance is not None:
            balance = decode_balance(raw_balance)
            if balance is None:
                issues.append(f"Stored balance is not a valid amount: {raw_balance!r}")

        raw_expenses = self.get_value(self._expenses_key)
        expenses = None
        if raw_expenses is not None:
            try:
                expenses = decode_expenses(raw_expenses)
            except CorruptDataError as e:
                issues.append(str(e))

        return StoredLedger(balance=balance, expenses=expenses, issues=issues)

    def save_balance(self, balance: Decimal) -> None:
        """Persist the wallet balance."""
        self.set_value(self._balance_key, str(balance))

    def save_expenses(self, expenses: Sequence[Expense]) -> None:
        """Persist the full expense list, in order."""
        self.set_value(
            self._expenses_key,
            [expense.model_dump(mode="json") for expense in expenses],
        )


def decode_balance(raw: Any) -> Optional[Decimal]:
    """Decode a stored balance; None if it is not a finite, non-negative number."""
    if isinstance(raw, bool):
        return None
    try:
        balance = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return None
    if not balance.is_finite() or balance < 0:
        return None
    return balance


def decode_expenses(raw: Any) -> list[Expense]:
    """
    Decode a stored expense list.

    Raises:
        CorruptDataError: If any record is invalid or ids repeat
    """
    try:
        expenses = _EXPENSE_LIST.validate_python(raw)
    except PydanticValidationError as e:
        raise CorruptDataError(f"Stored expenses are invalid: {e.error_count()} errors") from e

    seen = set()
    for expense in expenses:
        if expense.id in seen:
            raise CorruptDataError(f"Stored expenses repeat id {expense.id}")
        seen.add(expense.id)

    return expenses


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored data exists but cannot be decoded."""
    pass


class StorageWriteError(StorageError):
    """Could not write to the storage backend."""
    pass
