"""In-memory ledger storage, for tests and throwaway sessions."""

import copy
from typing import Any, Optional

from expense_tracker.services.storage.interface import LedgerStorageInterface


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Keeps stored values in a dict. Values are deep-copied in and out."""

    def __init__(
        self,
        initial: Optional[dict[str, Any]] = None,
        balance_key: str = "walletBalance",
        expenses_key: str = "expenses",
    ):
        super().__init__(balance_key=balance_key, expenses_key=expenses_key)
        self._values: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.write_count = 0

    def get_value(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._values.get(key))

    def set_value(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)
        self.write_count += 1

    def dump(self) -> dict[str, Any]:
        """Everything currently stored."""
        return copy.deepcopy(self._values)
