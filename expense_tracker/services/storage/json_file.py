"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document keyed like a browser's local storage:
{"walletBalance": "4980", "expenses": [...]}.

TRADEOFFS:
- Whole document is rewritten on every save (fine for one person's expenses)
- Writes go to a temp file first and are moved into place, so a crash
  mid-write never leaves a half-written ledger behind
- Amounts are stored as strings to round-trip Decimal losslessly
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.services.storage.interface import (
    CorruptDataError,
    LedgerStorageInterface,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileLedgerStorage(LedgerStorageInterface):
    """Ledger storage backed by one JSON file on disk."""

    def __init__(
        self,
        path: str | Path,
        balance_key: str = "walletBalance",
        expenses_key: str = "expenses",
    ):
        super().__init__(balance_key=balance_key, expenses_key=expenses_key)
        self._path = Path(path)
        self._document: Optional[dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, Any]:
        """Read the whole document from disk."""
        if not self._path.exists():
            return {}

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Ledger file is not valid JSON: {self._path}: {e}") from e
        except OSError as e:
            raise CorruptDataError(f"Ledger file cannot be read: {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise CorruptDataError(f"Ledger file does not hold an object: {self._path}")

        return data

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write_document(self, document: dict[str, Any]) -> None:
        """Atomically replace the file with `document`."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
            text=True,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get_value(self, key: str) -> Optional[Any]:
        if self._document is None:
            self._document = self._read_document()
        return self._document.get(key)

    def set_value(self, key: str, value: Any) -> None:
        if self._document is None:
            try:
                self._document = self._read_document()
            except CorruptDataError as e:
                # Start over rather than never saving again
                logger.warning("ledger_file_reset", path=str(self._path), error=str(e))
                self._document = {}

        document = dict(self._document)
        document[key] = value

        try:
            self._write_document(document)
        except OSError as e:
            raise StorageWriteError(f"Failed to write ledger file {self._path}: {e}") from e

        self._document = document
