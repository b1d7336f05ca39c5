"""Shared fixtures for the Expense Tracker tests."""

import itertools
from decimal import Decimal

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.config import LedgerSettings, get_settings
from expense_tracker.ledger import LedgerStore
from expense_tracker.orchestrator import LedgerService
from expense_tracker.services.storage import InMemoryLedgerStorage
from expense_tracker.validation import ExpenseValidator


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Never leak cached settings between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    return LedgerSettings(_env_file=None)


@pytest.fixture
def validator(ledger_settings) -> ExpenseValidator:
    return ExpenseValidator(ledger_settings)


@pytest.fixture
def id_factory():
    """Deterministic ids: exp-1, exp-2, ..."""
    counter = itertools.count(1)
    return lambda: f"exp-{next(counter)}"


@pytest.fixture
def storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def store(storage, validator, id_factory) -> LedgerStore:
    return LedgerStore(
        initial_balance=Decimal("5000"),
        storage=storage,
        validator=validator,
        audit_logger=AuditLogger(),
        id_factory=id_factory,
    )


@pytest.fixture
def service(store, validator, ledger_settings) -> LedgerService:
    return LedgerService(
        store,
        validator=validator,
        audit_logger=AuditLogger(),
        settings=ledger_settings,
    )
