"""
Ledger Store

Owns the wallet balance and the expense list and keeps them reconciled:

    balance == opening_balance + income_total - sum(price of current expenses)
    balance >= 0

Every mutation is validate-fully-then-apply: checks never touch state, and
once they pass, the new balance and the new expense list are computed aside
and swapped in together. A rejected operation leaves both untouched.

All balance arithmetic goes through `exact_sum`, which refuses to round.

Persistence happens after each committed mutation and is best effort. The
in-memory ledger is authoritative for the lifetime of the process.
"""

import decimal
import threading
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.ledger.errors import (
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from expense_tracker.models.expense import (
    Expense,
    ExpenseFields,
    LedgerSnapshot,
    new_expense_id,
)
from expense_tracker.services.storage import (
    LedgerStorageInterface,
    StorageError,
    StoredLedger,
)
from expense_tracker.validation import ExpenseValidator


# Ledger sums are exact or they fail
_EXACT = decimal.Context(prec=28, traps=[decimal.Inexact, decimal.InvalidOperation, decimal.Overflow])


def exact_sum(*amounts: Decimal) -> Decimal:
    """
    Add amounts without rounding. Debits are passed as `price.copy_negate()`.

    Raises:
        ValidationError: If the result cannot be represented exactly
    """
    try:
        with decimal.localcontext(_EXACT):
            total = Decimal("0")
            for amount in amounts:
                total += amount
            return total
    except (decimal.Inexact, decimal.InvalidOperation, decimal.Overflow) as e:
        raise ValidationError("amount cannot be represented exactly") from e


class LedgerStore:
    """
    The single owner of ledger state.

    Mutating operations and snapshots run under one lock, so the
    (balance, expenses) pair is never seen half-updated.
    """

    def __init__(
        self,
        initial_balance: Decimal = Decimal("0"),
        expenses: Iterable[Expense] = (),
        storage: Optional[LedgerStorageInterface] = None,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        id_factory: Callable[[], str] = new_expense_id,
    ):
        balance = Decimal(str(initial_balance))
        if not balance.is_finite() or balance < 0:
            raise ValueError(f"Initial balance must be a finite amount >= 0, got {initial_balance}")

        expense_list = list(expenses)
        ids = [e.id for e in expense_list]
        if len(ids) != len(set(ids)):
            raise ValueError("Expense ids must be unique")

        self._balance = balance
        self._expenses: list[Expense] = expense_list
        try:
            opening_balance = exact_sum(balance, *(e.price for e in expense_list))
        except ValidationError as e:
            raise ValueError("Balance and expense prices cannot be added up exactly") from e

        self._opening_balance = opening_balance
        self._income_total = Decimal("0")
        self._issued_ids: set[str] = set(ids)

        self._storage = storage
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._id_factory = id_factory
        self._lock = threading.RLock()

    @classmethod
    def from_storage(
        cls,
        storage: LedgerStorageInterface,
        default_balance: Decimal,
        **kwargs: Any,
    ) -> "LedgerStore":
        """
        Build a store from persisted state.

        Missing or unreadable pieces fall back to `default_balance` and an
        empty expense list. Storage problems are logged, never raised.
        """
        audit_logger = kwargs.get("audit_logger") or AuditLogger()
        kwargs["audit_logger"] = audit_logger

        try:
            stored = storage.load()
        except StorageError as e:
            audit_logger.log_storage_failed(operation="load", error_message=str(e))
            stored = StoredLedger()

        for issue in stored.issues:
            audit_logger.log_storage_failed(operation="load", error_message=issue)

        balance = stored.balance if stored.balance is not None else default_balance
        expenses = stored.expenses if stored.expenses is not None else []

        try:
            store = cls(initial_balance=balance, expenses=expenses, storage=storage, **kwargs)
        except ValueError as e:
            audit_logger.log_storage_failed(operation="load", error_message=str(e))
            store = cls(initial_balance=default_balance, storage=storage, **kwargs)

        audit_logger.log_ledger_loaded(balance=store.balance, expense_count=len(store.expenses))
        return store

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """Expenses, newest first."""
        return tuple(self._expenses)

    @property
    def opening_balance(self) -> Decimal:
        """Balance the ledger started from, before any expense was debited."""
        return self._opening_balance

    @property
    def income_total(self) -> Decimal:
        """Income added since the store was created."""
        return self._income_total

    def snapshot(self) -> LedgerSnapshot:
        """Point-in-time (balance, expenses) pair. Never mutates."""
        with self._lock:
            return LedgerSnapshot(balance=self._balance, expenses=tuple(self._expenses))

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        with self._lock:
            index = self._index_of(expense_id)
            return self._expenses[index] if index is not None else None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_income(self, amount: Any) -> Decimal:
        """
        Credit the wallet.

        Returns:
            The new balance

        Raises:
            ValidationError: If amount is not a finite number > 0, or the
                new balance cannot be represented exactly
        """
        parsed, issues = self._validator.parse_amount(amount)
        if parsed is None:
            raise ValidationError("invalid amount", issues)

        with self._lock:
            new_balance = exact_sum(self._balance, parsed)
            new_income_total = exact_sum(self._income_total, parsed)
            self._balance, self._income_total = new_balance, new_income_total
            self._persist(balance=True, expenses=False)
            return self._balance

    def add_expense(self, title: Any, price: Any, category: Any, date: Any) -> Expense:
        """
        Debit the wallet and record a new expense at the front of the list.

        Raises:
            ValidationError: If any field is missing or invalid, or the new
                balance cannot be represented exactly
            InsufficientFundsError: If price exceeds the balance
        """
        fields = self._parse(title, price, category, date)

        with self._lock:
            if fields.price > self._balance:
                raise InsufficientFundsError(available=self._balance, required=fields.price)

            new_balance = exact_sum(self._balance, fields.price.copy_negate())
            expense = Expense(id=self._allocate_id(), **fields.model_dump())
            new_expenses = [expense] + self._expenses

            self._commit(new_balance, new_expenses)
            self._issued_ids.add(expense.id)
            self._persist(balance=True, expenses=True)
            return expense

    def edit_expense(
        self,
        expense_id: str,
        title: Any,
        price: Any,
        category: Any,
        date: Any,
    ) -> tuple[Expense, Expense]:
        """
        Replace an expense wholesale, keeping its id and list position.

        The old price is refunded and the new price debited in one step.

        Returns:
            (replaced, updated): the record that was there and the one
            that took its place

        Raises:
            NotFoundError: If no expense has this id
            ValidationError: If any field is missing or invalid, or the new
                balance cannot be represented exactly
            InsufficientFundsError: If the balance would go below zero
        """
        with self._lock:
            index = self._index_of(expense_id)
            if index is None:
                raise NotFoundError(expense_id)

            fields = self._parse(title, price, category, date)

            old = self._expenses[index]
            available = exact_sum(self._balance, old.price)
            tentative_balance = exact_sum(available, fields.price.copy_negate())
            if tentative_balance < 0:
                raise InsufficientFundsError(
                    available=available,
                    required=fields.price,
                )

            updated = Expense(id=old.id, **fields.model_dump())
            new_expenses = list(self._expenses)
            new_expenses[index] = updated

            self._commit(tentative_balance, new_expenses)
            self._persist(balance=True, expenses=True)
            return old, updated

    def delete_expense(self, expense_id: str) -> Optional[Expense]:
        """
        Remove an expense and refund its price.

        Deleting an id that is not in the ledger is a no-op.

        Returns:
            The removed expense, or None if there was nothing to delete

        Raises:
            ValidationError: If the refunded balance cannot be represented exactly
        """
        with self._lock:
            index = self._index_of(expense_id)
            if index is None:
                return None

            removed = self._expenses[index]
            new_balance = exact_sum(self._balance, removed.price)
            new_expenses = self._expenses[:index] + self._expenses[index + 1:]

            self._commit(new_balance, new_expenses)
            self._persist(balance=True, expenses=True)
            return removed

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self) -> bool:
        """Write balance and expenses to storage. False if anything failed."""
        with self._lock:
            return self._persist(balance=True, expenses=True)

    def close(self) -> None:
        """Final save at shutdown."""
        self.save()

    def _persist(self, balance: bool, expenses: bool) -> bool:
        if self._storage is None:
            return True

        ok = True
        if balance:
            try:
                self._storage.save_balance(self._balance)
            except StorageError as e:
                self._audit_logger.log_storage_failed(operation="save_balance", error_message=str(e))
                ok = False
        if expenses:
            try:
                self._storage.save_expenses(self._expenses)
            except StorageError as e:
                self._audit_logger.log_storage_failed(operation="save_expenses", error_message=str(e))
                ok = False
        return ok

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _parse(self, title: Any, price: Any, category: Any, date: Any) -> ExpenseFields:
        result = self._validator.parse_fields(title, price, category, date)
        if not result.is_valid:
            raise ValidationError("missing required field", result.issues)
        return result.fields

    def _commit(self, balance: Decimal, expenses: list[Expense]) -> None:
        # Both values are fully built; nothing below can fail
        self._balance, self._expenses = balance, expenses

    def _index_of(self, expense_id: str) -> Optional[int]:
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return index
        return None

    def _allocate_id(self) -> str:
        expense_id = self._id_factory()
        while expense_id in self._issued_ids:
            expense_id = self._id_factory()
        return expense_id
