"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the ledger must conform to these schemas.
"""

from expense_tracker.models.expense import (
    CategoryTrendPoint,
    Expense,
    ExpenseCategory,
    ExpenseFields,
    ExpenseOverview,
    LedgerErrorKind,
    LedgerSnapshot,
    OperationResult,
    ValidationIssue,
    ValidationResult,
    new_expense_id,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CategoryTrendPoint",
    "Expense",
    "ExpenseCategory",
    "ExpenseFields",
    "ExpenseOverview",
    "LedgerErrorKind",
    "LedgerSnapshot",
    "OperationResult",
    "ValidationIssue",
    "ValidationResult",
    "new_expense_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
