"""
Storage Services Package

Provides the abstract ledger storage interface and concrete implementations.
The JSON file backend is the default; the in-memory backend serves tests.
"""

from expense_tracker.services.storage.interface import (
    CorruptDataError,
    LedgerStorageInterface,
    StorageError,
    StorageWriteError,
    StoredLedger,
    decode_balance,
    decode_expenses,
)
from expense_tracker.services.storage.json_file import JsonFileLedgerStorage
from expense_tracker.services.storage.memory import InMemoryLedgerStorage

__all__ = [
    # Interface
    "LedgerStorageInterface",
    "StoredLedger",
    "decode_balance",
    "decode_expenses",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
]
