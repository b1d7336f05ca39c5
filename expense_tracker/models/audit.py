"""
Audit Models for Expense Tracker

Every ledger operation produces one structured event, whether it committed
or was rejected. Events are written to the application log; they are not a
persisted history of the ledger.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Literal, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Wallet
    INCOME_ADDED = "income_added"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Rejections
    OPERATION_REJECTED = "operation_rejected"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    STORAGE_FAILED = "storage_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    One ledger event.

    `balance` is the wallet balance once the event took effect. Rejections
    and storage failures change nothing, so they leave it empty.
    """

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_at: datetime = Field(default_factory=_utcnow, description="UTC")
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO
    source: Literal["user", "system"] = Field(
        default="user",
        description="'system' for startup and persistence events"
    )

    expense_id: Optional[str] = None
    balance: Optional[Decimal] = None
    summary: str = Field(..., max_length=500)
    data: dict[str, Any] = Field(default_factory=dict)

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict[str, Any]:
        """JSON-safe keyword arguments for a structlog call. Empty fields are dropped."""
        return self.model_dump(mode="json", exclude_none=True)


class AuditEventBuilder:
    """
    One constructor per ledger event.

    Usage:
        event = AuditEventBuilder.income_added(amount, balance)
        event = AuditEventBuilder.expense_deleted(expense_id, refund, balance)
    """

    @staticmethod
    def income_added(amount: Decimal, balance: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INCOME_ADDED,
            summary=f"Wallet credited with {amount}",
            balance=balance,
            data={"amount": amount},
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        title: str,
        price: Decimal,
        category: str,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            summary=f"Spent {price} on {title!r}",
            expense_id=expense_id,
            balance=balance,
            data={"title": title, "price": price, "category": category},
        )

    @staticmethod
    def expense_updated(
        expense_id: str,
        old_price: Decimal,
        new_price: Decimal,
        balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            summary=f"Expense repriced from {old_price} to {new_price}",
            expense_id=expense_id,
            balance=balance,
            data={"old_price": old_price, "new_price": new_price},
        )

    @staticmethod
    def expense_deleted(expense_id: str, refund: Decimal, balance: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            summary=f"Expense removed, {refund} refunded",
            expense_id=expense_id,
            balance=balance,
            data={"refund": refund},
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        error_kind: str,
        error_message: str,
        expense_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            summary=f"{operation} rejected ({error_kind})",
            expense_id=expense_id,
            data={"operation": operation},
            error_code=error_kind,
            error_message=error_message,
        )

    @staticmethod
    def ledger_loaded(balance: Decimal, expense_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            source="system",
            summary=f"Ledger loaded with {expense_count} expenses",
            balance=balance,
            data={"expense_count": expense_count},
        )

    @staticmethod
    def storage_failed(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FAILED,
            severity=AuditSeverity.ERROR,
            source="system",
            summary=f"Could not {operation.replace('_', ' ')}",
            data={"operation": operation},
            error_message=error_message,
        )
