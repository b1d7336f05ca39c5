"""Tests for the ledger storage backends."""

import json
from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.models.expense import Expense
from expense_tracker.services.storage import (
    CorruptDataError,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    StorageWriteError,
)
from expense_tracker.services.storage.interface import decode_balance, decode_expenses


def make_expense(expense_id="1", price="20"):
    return Expense(id=expense_id, title="Lunch", price=Decimal(price), category="Food", date=date(2024, 1, 1))


class TestDecoding:

    @pytest.mark.parametrize("raw,expected", [
        ("4980", Decimal("4980")),
        ("0", Decimal("0")),
        (12.5, Decimal("12.5")),
        (7, Decimal("7")),
    ])
    def test_decode_balance(self, raw, expected):
        assert decode_balance(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "-1", "NaN", "Infinity", True, [], ""])
    def test_decode_balance_rejects(self, raw):
        assert decode_balance(raw) is None

    def test_decode_expenses(self):
        raw = [make_expense().model_dump(mode="json")]
        assert decode_expenses(raw) == [make_expense()]

    def test_decode_expenses_rejects_bad_record(self):
        with pytest.raises(CorruptDataError):
            decode_expenses([{"id": "1", "title": "Lunch", "price": "-3", "category": "Food", "date": "2024-01-01"}])

    def test_decode_expenses_rejects_non_list(self):
        with pytest.raises(CorruptDataError):
            decode_expenses({"expenses": []})

    def test_decode_expenses_rejects_repeated_ids(self):
        raw = [make_expense("1").model_dump(mode="json"), make_expense("1", "5").model_dump(mode="json")]
        with pytest.raises(CorruptDataError):
            decode_expenses(raw)


class TestInMemoryStorage:

    def test_load_empty(self):
        stored = InMemoryLedgerStorage().load()

        assert stored.balance is None
        assert stored.expenses is None
        assert stored.issues == []

    def test_round_trip(self):
        storage = InMemoryLedgerStorage()
        storage.save_balance(Decimal("4980.10"))
        storage.save_expenses([make_expense("2"), make_expense("1")])

        stored = storage.load()

        assert stored.balance == Decimal("4980.10")
        assert [e.id for e in stored.expenses] == ["2", "1"]
        assert storage.write_count == 2

    def test_values_are_copied(self):
        storage = InMemoryLedgerStorage()
        value = [{"a": 1}]
        storage.set_value("k", value)
        value[0]["a"] = 2

        fetched = storage.get_value("k")
        fetched[0]["a"] = 3

        assert storage.get_value("k") == [{"a": 1}]

    def test_custom_keys(self):
        storage = InMemoryLedgerStorage(balance_key="bal", expenses_key="items")
        storage.save_balance(Decimal("1"))
        storage.save_expenses([])

        assert storage.dump() == {"bal": "1", "items": []}

    def test_undecodable_pieces_are_reported(self):
        storage = InMemoryLedgerStorage({"walletBalance": "-5", "expenses": "oops"})

        stored = storage.load()

        assert stored.balance is None
        assert stored.expenses is None
        assert len(stored.issues) == 2


class TestJsonFileStorage:

    def test_missing_file_loads_empty(self, tmp_path):
        stored = JsonFileLedgerStorage(tmp_path / "ledger.json").load()

        assert stored.balance is None
        assert stored.expenses is None

    def test_round_trip(self, tmp_path):
        path = tmp_path / "data" / "ledger.json"
        storage = JsonFileLedgerStorage(path)
        storage.save_balance(Decimal("4980"))
        storage.save_expenses([make_expense()])

        stored = JsonFileLedgerStorage(path).load()

        assert stored.balance == Decimal("4980")
        assert stored.expenses == [make_expense()]

    def test_file_layout(self, tmp_path):
        path = tmp_path / "ledger.json"
        storage = JsonFileLedgerStorage(path)
        storage.save_balance(Decimal("4980"))
        storage.save_expenses([make_expense()])

        document = json.loads(path.read_text(encoding="utf-8"))

        assert document["walletBalance"] == "4980"
        assert document["expenses"][0]["price"] == "20"
        assert document["expenses"][0]["date"] == "2024-01-01"

    def test_no_temp_files_left_behind(self, tmp_path):
        storage = JsonFileLedgerStorage(tmp_path / "ledger.json")
        storage.save_balance(Decimal("1"))
        storage.save_balance(Decimal("2"))

        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CorruptDataError):
            JsonFileLedgerStorage(path).load()

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(CorruptDataError):
            JsonFileLedgerStorage(path).load()

    def test_write_after_corrupt_file_starts_over(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{not json", encoding="utf-8")

        storage = JsonFileLedgerStorage(path)
        storage.save_balance(Decimal("10"))

        assert json.loads(path.read_text(encoding="utf-8")) == {"walletBalance": "10"}

    def test_write_failure_raises_storage_write_error(self, tmp_path):
        # A directory where the file should be cannot be replaced
        path = tmp_path / "ledger.json"
        path.mkdir()

        storage = JsonFileLedgerStorage(path)

        with pytest.raises(StorageWriteError):
            storage.save_balance(Decimal("10"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
