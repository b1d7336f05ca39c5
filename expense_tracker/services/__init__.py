"""Services package."""

from expense_tracker.services.storage import (
    CorruptDataError,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    StorageError,
    StorageWriteError,
    StoredLedger,
)

__all__ = [
    # Storage services
    "CorruptDataError",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "LedgerStorageInterface",
    "StorageError",
    "StorageWriteError",
    "StoredLedger",
]
