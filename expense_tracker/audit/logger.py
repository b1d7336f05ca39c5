"""
Audit Logger

DESIGN DECISION: Every ledger operation is logged, committed or rejected.
This provides:
1. Traceability of every balance change
2. Debugging capability when a user reports a wrong balance
3. Visibility into storage failures, which never reach the user

The audit logger:
- Is synchronous, like the ledger it observes
- Gracefully handles failures (doesn't break an operation if logging fails)
- Writes to the application log only, never to ledger storage
"""

import logging
from decimal import Decimal
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of stdlib logging.

    Call once at startup; repeated calls simply reconfigure.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=log_level)
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    One structured log line per ledger event.
    """

    def __init__(self, logger_name: str = "expense_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Write one event at the level matching its severity.

        Returns False if the event could not be written.
        """
        emit = getattr(self._logger, event.severity.value)
        try:
            emit("audit_event", **event.to_log_dict())
        except Exception:
            # A broken log handler must not undo a committed operation
            return False
        return True

    def log_income_added(self, amount: Decimal, balance: Decimal) -> None:
        """Log a wallet top-up."""
        self.log(AuditEventBuilder.income_added(amount=amount, balance=balance))

    def log_expense_added(
        self,
        expense_id: str,
        title: str,
        price: Decimal,
        category: str,
        balance: Decimal,
    ) -> None:
        """Log a new expense."""
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense_id,
            title=title,
            price=price,
            category=category,
            balance=balance,
        ))

    def log_expense_updated(
        self,
        expense_id: str,
        old_price: Decimal,
        new_price: Decimal,
        balance: Decimal,
    ) -> None:
        """Log an expense replacement."""
        self.log(AuditEventBuilder.expense_updated(
            expense_id=expense_id,
            old_price=old_price,
            new_price=new_price,
            balance=balance,
        ))

    def log_expense_deleted(
        self,
        expense_id: str,
        refund: Decimal,
        balance: Decimal,
    ) -> None:
        """Log an expense removal and its refund."""
        self.log(AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            refund=refund,
            balance=balance,
        ))

    def log_rejected(
        self,
        operation: str,
        error_kind: str,
        error_message: str,
        expense_id: Optional[str] = None,
    ) -> None:
        """Log an operation that left the ledger untouched."""
        self.log(AuditEventBuilder.operation_rejected(
            operation=operation,
            error_kind=error_kind,
            error_message=error_message,
            expense_id=expense_id,
        ))

    def log_ledger_loaded(self, balance: Decimal, expense_count: int) -> None:
        self.log(AuditEventBuilder.ledger_loaded(
            balance=balance,
            expense_count=expense_count,
        ))

    def log_storage_failed(self, operation: str, error_message: str) -> None:
        """Log a persistence failure. The in-memory ledger stays authoritative."""
        self.log(AuditEventBuilder.storage_failed(
            operation=operation,
            error_message=error_message,
        ))
