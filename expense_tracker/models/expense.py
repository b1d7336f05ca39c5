"""
Core Data Models for Expense Tracker

These models define the strict schemas for the ledger:
1. Expense records (immutable, replaced wholesale on edit)
2. Point-in-time snapshots of the ledger
3. Validation findings
4. Operation results handed to the UI
5. Derived aggregation views

DESIGN DECISION: Money is Decimal everywhere.
The ledger invariant (balance = start + income - expenses) is checked with
equality, which floats cannot promise.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    The values double as the persisted representation and the labels
    shown in the UI.
    """
    FOOD = "Food"
    TRAVEL = "Travel"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    OTHER = "Other"


class LedgerErrorKind(str, Enum):
    """Error kinds an operation can be rejected with."""
    VALIDATION = "validation"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NOT_FOUND = "not_found"


def new_expense_id() -> str:
    """Allocate an opaque expense identifier."""
    return str(uuid4())


# =============================================================================
# CORE LEDGER MODELS
# =============================================================================

class Expense(BaseModel):
    """
    A single expense debited from the wallet.

    Frozen: an edit never mutates a record, it replaces it with a new
    Expense carrying the same id.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_expense_id,
        min_length=1,
        description="Opaque identifier, stable for the record's lifetime"
    )
    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Label of the expense"
    )
    price: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount debited from the wallet"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    date: datetime.date = Field(
        ...,
        description="Date of the transaction (not necessarily creation time)"
    )

    def same_fields(self, other: "Expense") -> bool:
        """True when both records carry identical values apart from the id."""
        return (
            self.title == other.title
            and self.price == other.price
            and self.category == other.category
            and self.date == other.date
        )


class ExpenseFields(BaseModel):
    """
    A fully parsed and checked set of expense fields.

    Produced by the validator, consumed by the store when it builds
    (or rebuilds) an Expense.
    """
    model_config = ConfigDict(frozen=True)

    title: str
    price: Decimal
    category: ExpenseCategory
    date: datetime.date


class LedgerSnapshot(BaseModel):
    """
    Read-only, point-in-time view of the ledger.

    Input for aggregation and persistence. Expenses are a tuple so a
    consumer cannot reorder or extend the store's list through it.
    """
    model_config = ConfigDict(frozen=True)

    balance: Decimal = Field(
        ...,
        ge=0,
        description="Wallet balance at snapshot time"
    )
    expenses: tuple[Expense, ...] = Field(
        default=(),
        description="Expenses, newest first"
    )

    @property
    def total_spent(self) -> Decimal:
        return sum((e.price for e in self.expenses), Decimal("0"))

    def find(self, expense_id: str) -> Optional[Expense]:
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Outcome of parsing a set of expense fields.

    `fields` is only set when there are no error-level issues.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)
    fields: Optional[ExpenseFields] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return self.fields is not None and not self.has_errors


# =============================================================================
# OPERATION RESULTS (notification boundary)
# =============================================================================

class OperationResult(BaseModel):
    """
    Structured outcome of a ledger operation.

    The UI renders this (toast, alert); the core never presents anything itself.
    """

    success: bool
    message: str = Field(
        default="",
        description="User-facing message"
    )
    error_kind: Optional[LedgerErrorKind] = None
    changed: bool = Field(
        default=False,
        description="Did the ledger state change?"
    )
    expense: Optional[Expense] = Field(
        default=None,
        description="Expense created, updated or removed by the operation"
    )
    balance: Decimal = Field(
        ...,
        description="Wallet balance after the operation"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking review notes"
    )


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class CategoryTrendPoint(BaseModel):
    """One (category, amount) pair for charting consumers."""
    model_config = ConfigDict(frozen=True)

    category: ExpenseCategory
    amount: Decimal


class ExpenseOverview(BaseModel):
    """Quick summary of the expense list."""
    model_config = ConfigDict(frozen=True)

    expense_count: int = Field(ge=0)
    total_spent: Decimal = Field(ge=0)
    latest_expense: Optional[Expense] = None
