"""
Main Orchestrator for Expense Tracker

This module ties the ledger, validation, aggregation, storage and audit
components together and defines what the UI talks to:

1. Wallet top-up (amount -> validate -> credit -> save)
2. Expense add / edit / delete (fields -> validate -> reconcile -> save)
3. Derived views (snapshot -> category totals, trend, overview)

DESIGN DECISION: The orchestrator is the notification boundary.
LedgerStore raises on rejection; LedgerService turns every outcome into an
OperationResult with a user-facing message. The UI only renders results,
it never interprets exceptions or touches the store directly.
"""

from decimal import Decimal
from typing import Any, Optional

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import LedgerSettings, get_settings
from expense_tracker.ledger import (
    InsufficientFundsError,
    LedgerError,
    LedgerStore,
    NotFoundError,
)
from expense_tracker.models.expense import (
    CategoryTrendPoint,
    Expense,
    ExpenseCategory,
    ExpenseFields,
    ExpenseOverview,
    LedgerSnapshot,
    OperationResult,
)
from expense_tracker.queries import (
    category_totals,
    category_trend,
    expense_overview,
)
from expense_tracker.services.storage import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
)
from expense_tracker.validation import ExpenseValidator


# User-facing messages
MSG_INVALID_AMOUNT = "Please enter a valid amount"
MSG_MISSING_FIELDS = "Please fill all required fields"
MSG_INSUFFICIENT_FOR_EXPENSE = "Insufficient wallet balance for this expense"
MSG_INSUFFICIENT_FOR_CHANGE = "Insufficient wallet balance for this change"
MSG_NOT_FOUND = "Original expense not found"
MSG_EXPENSE_ADDED = "Expense added"
MSG_EXPENSE_UPDATED = "Expense updated"
MSG_EXPENSE_DELETED = "Expense deleted"
MSG_NOTHING_TO_DELETE = "Expense already removed"
MSG_DELETE_CANCELLED = "Deletion cancelled"
MSG_DELETE_FAILED = "Expense could not be deleted"


class LedgerService:
    """
    Operation contract used by the UI.

    Flow for every mutation:
    1. Call the store (which validates, then commits atomically and saves)
    2. Audit the outcome
    3. Return an OperationResult

    Nothing here raises for a rejected operation.
    """

    def __init__(
        self,
        store: LedgerStore,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._store = store
        self._settings = settings or get_settings().ledger
        self._validator = validator or ExpenseValidator(self._settings)
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def store(self) -> LedgerStore:
        return self._store

    def format_amount(self, amount: Decimal) -> str:
        return f"{self._settings.currency_symbol}{amount:.2f}"

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_income(self, amount: Any) -> OperationResult:
        """Credit the wallet."""
        try:
            balance = self._store.add_income(amount)
        except LedgerError as e:
            return self._rejected("add_income", e, MSG_INVALID_AMOUNT)

        parsed, _ = self._validator.parse_amount(amount)
        self._audit_logger.log_income_added(amount=parsed, balance=balance)

        return OperationResult(
            success=True,
            message=f"Added {self.format_amount(parsed)} to wallet",
            changed=True,
            balance=balance,
        )

    def add_expense(self, title: Any, price: Any, category: Any, date: Any) -> OperationResult:
        """Record a new expense and debit its price."""
        try:
            expense = self._store.add_expense(title, price, category, date)
        except InsufficientFundsError as e:
            return self._rejected("add_expense", e, MSG_INSUFFICIENT_FOR_EXPENSE)
        except LedgerError as e:
            return self._rejected("add_expense", e, MSG_MISSING_FIELDS)

        balance = self._store.balance
        self._audit_logger.log_expense_added(
            expense_id=expense.id,
            title=expense.title,
            price=expense.price,
            category=expense.category.value,
            balance=balance,
        )

        return OperationResult(
            success=True,
            message=MSG_EXPENSE_ADDED,
            changed=True,
            expense=expense,
            balance=balance,
            warnings=self._review(expense),
        )

    def edit_expense(
        self,
        expense_id: str,
        title: Any,
        price: Any,
        category: Any,
        date: Any,
    ) -> OperationResult:
        """Replace an expense, refunding the old price and debiting the new one."""
        try:
            old, expense = self._store.edit_expense(expense_id, title, price, category, date)
        except NotFoundError as e:
            return self._rejected("edit_expense", e, MSG_NOT_FOUND, expense_id=expense_id)
        except InsufficientFundsError as e:
            return self._rejected("edit_expense", e, MSG_INSUFFICIENT_FOR_CHANGE, expense_id=expense_id)
        except LedgerError as e:
            return self._rejected("edit_expense", e, MSG_MISSING_FIELDS, expense_id=expense_id)

        balance = self._store.balance
        self._audit_logger.log_expense_updated(
            expense_id=expense.id,
            old_price=old.price,
            new_price=expense.price,
            balance=balance,
        )

        return OperationResult(
            success=True,
            message=MSG_EXPENSE_UPDATED,
            changed=True,
            expense=expense,
            balance=balance,
            warnings=self._review(expense),
        )

    def delete_expense(self, expense_id: str, confirmed: bool = True) -> OperationResult:
        """
        Remove an expense and refund it.

        `confirmed` is the caller's answer to "Delete this expense?". The
        question itself belongs to the UI.
        """
        if not confirmed:
            return OperationResult(
                success=False,
                message=MSG_DELETE_CANCELLED,
                balance=self._store.balance,
            )

        try:
            removed = self._store.delete_expense(expense_id)
        except LedgerError as e:
            return self._rejected("delete_expense", e, MSG_DELETE_FAILED, expense_id=expense_id)

        balance = self._store.balance

        if removed is None:
            return OperationResult(
                success=True,
                message=MSG_NOTHING_TO_DELETE,
                balance=balance,
            )

        self._audit_logger.log_expense_deleted(
            expense_id=removed.id,
            refund=removed.price,
            balance=balance,
        )

        return OperationResult(
            success=True,
            message=MSG_EXPENSE_DELETED,
            changed=True,
            expense=removed,
            balance=balance,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def snapshot(self) -> LedgerSnapshot:
        return self._store.snapshot()

    def category_totals(self) -> dict[ExpenseCategory, Decimal]:
        return category_totals(self._store.snapshot().expenses)

    def category_trend(self) -> list[CategoryTrendPoint]:
        return category_trend(self._store.snapshot().expenses)

    def overview(self) -> ExpenseOverview:
        return expense_overview(self._store.snapshot().expenses)

    def close(self) -> None:
        """Final save at shutdown."""
        self._store.close()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _rejected(
        self,
        operation: str,
        error: LedgerError,
        message: str,
        expense_id: Optional[str] = None,
    ) -> OperationResult:
        self._audit_logger.log_rejected(
            operation=operation,
            error_kind=error.kind.value,
            error_message=error.message,
            expense_id=expense_id,
        )
        return OperationResult(
            success=False,
            message=message,
            error_kind=error.kind,
            balance=self._store.balance,
        )

    def _review(self, expense: Expense) -> list[str]:
        fields = ExpenseFields(
            title=expense.title,
            price=expense.price,
            category=expense.category,
            date=expense.date,
        )
        return [issue.message for issue in self._validator.review(fields)]


def create_storage(settings: LedgerSettings) -> LedgerStorageInterface:
    """Build the configured storage backend."""
    if settings.storage_backend == "memory":
        return InMemoryLedgerStorage(
            balance_key=settings.balance_key,
            expenses_key=settings.expenses_key,
        )
    return JsonFileLedgerStorage(
        settings.storage_path,
        balance_key=settings.balance_key,
        expenses_key=settings.expenses_key,
    )


def create_app_components(
    storage: Optional[LedgerStorageInterface] = None,
    ledger_settings: Optional[LedgerSettings] = None,
    setup_logging: bool = True,
) -> LedgerService:
    """
    Factory function to create the application components.

    Args:
        storage: Storage backend to use. Built from settings when None.
        ledger_settings: Ledger settings. Loaded from the environment when None.
        setup_logging: Whether to configure structlog from app settings.

    Returns:
        A LedgerService over a store loaded from storage
    """
    settings = get_settings()
    ledger_settings = ledger_settings or settings.ledger

    if setup_logging:
        app_settings = settings.app
        configure_logging(app_settings.log_level, app_settings.log_json)

    audit_logger = AuditLogger()
    validator = ExpenseValidator(ledger_settings)
    storage = storage or create_storage(ledger_settings)

    store = LedgerStore.from_storage(
        storage,
        default_balance=ledger_settings.default_balance,
        validator=validator,
        audit_logger=audit_logger,
    )

    return LedgerService(
        store,
        validator=validator,
        audit_logger=audit_logger,
        settings=ledger_settings,
    )
