"""
Tests for the key-value store backends

Every backend honours the same fail-soft contract:
- get returns None for missing or unreadable keys
- save returns False instead of raising
- remove is idempotent
"""

from unittest.mock import MagicMock

import pytest

from finanzas.services.storage import (
    GoogleSheetsStore,
    InMemoryStore,
    JSONFileStore,
)
from finanzas.services.storage.google_sheets import STORE_COLUMNS


class FakeWorksheet:
    """Minimal stand-in for gspread.Worksheet, kept as a list of rows."""

    def __init__(self):
        self.rows = [list(STORE_COLUMNS)]

    def get_all_values(self):
        return [list(row) for row in self.rows]

    def append_row(self, row, value_input_option=None):
        self.rows.append(list(row))

    def update_cell(self, row, col, value):
        self.rows[row - 1][col - 1] = value

    def delete_rows(self, index):
        del self.rows[index - 1]


@pytest.fixture
def json_store(tmp_path) -> JSONFileStore:
    return JSONFileStore(tmp_path / "data")


@pytest.fixture
def worksheet() -> FakeWorksheet:
    return FakeWorksheet()


@pytest.fixture
def sheets_store(worksheet) -> GoogleSheetsStore:
    client = MagicMock()
    client.get_store_sheet.return_value = worksheet
    return GoogleSheetsStore(client)


class TestInMemoryStore:
    """Tests for the process-local store."""

    def test_missing_key_is_none(self, store):
        assert store.get("nope") is None

    def test_save_and_get(self, store):
        assert store.save("k", [{"id": 1, "amount": "10.50"}]) is True
        assert store.get("k") == [{"id": 1, "amount": "10.50"}]
        assert "k" in store

    def test_get_returns_independent_copy(self, store):
        store.save("k", {"items": [1]})
        value = store.get("k")
        value["items"].append(2)
        assert store.get("k") == {"items": [1]}

    def test_unserializable_value_is_rejected(self, store):
        assert store.save("k", {"bad": object()}) is False
        assert store.get("k") is None

    def test_remove_is_idempotent(self, store):
        store.save("k", 1)
        store.remove("k")
        store.remove("k")
        assert store.get("k") is None


class TestJSONFileStore:
    """Tests for the file-per-key store."""

    def test_save_creates_directory(self, json_store):
        assert not json_store.data_dir.exists()
        assert json_store.save("finanzas_users", []) is True
        assert json_store.path_for("finanzas_users").exists()

    def test_round_trip_keeps_unicode(self, json_store):
        json_store.save("k", {"category": "Alimentación"})
        assert json_store.get("k") == {"category": "Alimentación"}
        text = json_store.path_for("k").read_text(encoding="utf-8")
        assert "Alimentación" in text

    def test_missing_key_is_none(self, json_store):
        assert json_store.get("absent") is None

    def test_corrupt_file_reads_as_none(self, json_store):
        path = json_store.path_for("k")
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        assert json_store.get("k") is None

    def test_blank_file_reads_as_none(self, json_store):
        path = json_store.path_for("k")
        path.parent.mkdir(parents=True)
        path.write_text("  \n", encoding="utf-8")
        assert json_store.get("k") is None

    def test_overwrite_replaces_value(self, json_store):
        json_store.save("k", [1])
        json_store.save("k", [2, 3])
        assert json_store.get("k") == [2, 3]
        leftovers = [p.name for p in json_store.data_dir.iterdir() if p.suffix == ".tmp"]
        assert leftovers == []

    def test_unserializable_value_leaves_file_untouched(self, json_store):
        json_store.save("k", [1])
        assert json_store.save("k", [object()]) is False
        assert json_store.get("k") == [1]

    def test_unsafe_key_characters_are_replaced(self, json_store):
        path = json_store.path_for("../etc/passwd")
        assert path.parent == json_store.data_dir
        assert path.name == ".._etc_passwd.json"

    def test_remove_is_idempotent(self, json_store):
        json_store.save("k", 1)
        json_store.remove("k")
        json_store.remove("k")
        assert json_store.get("k") is None

    def test_survives_new_instance(self, json_store):
        json_store.save("k", {"a": 1})
        assert JSONFileStore(json_store.data_dir).get("k") == {"a": 1}


class TestGoogleSheetsStore:
    """Tests for the Sheets backend against an in-memory worksheet."""

    def test_save_appends_row(self, sheets_store, worksheet):
        assert sheets_store.save("finanzas_users", [{"id": 1}]) is True
        assert len(worksheet.rows) == 2
        key, value_json, updated_at = worksheet.rows[1]
        assert key == "finanzas_users"
        assert value_json == '[{"id": 1}]'
        assert updated_at

    def test_save_updates_existing_row(self, sheets_store, worksheet):
        sheets_store.save("k", 1)
        sheets_store.save("k", 2)
        assert len(worksheet.rows) == 2
        assert sheets_store.get("k") == 2

    def test_get_missing_key(self, sheets_store):
        assert sheets_store.get("absent") is None

    def test_header_row_is_not_a_key(self, sheets_store):
        assert sheets_store.get("key") is None

    def test_corrupt_cell_reads_as_none(self, sheets_store, worksheet):
        worksheet.rows.append(["k", "{oops", ""])
        assert sheets_store.get("k") is None

    def test_remove_deletes_row(self, sheets_store, worksheet):
        sheets_store.save("a", 1)
        sheets_store.save("b", 2)
        sheets_store.remove("a")
        sheets_store.remove("a")
        assert sheets_store.get("a") is None
        assert sheets_store.get("b") == 2
        assert len(worksheet.rows) == 2

    def test_unreachable_sheet_reads_as_none(self):
        client = MagicMock()
        client.get_store_sheet.side_effect = RuntimeError("quota exceeded")
        store = GoogleSheetsStore(client)
        assert store.get("k") is None
        store.remove("k")

    def test_write_failure_returns_false(self, sheets_store, monkeypatch):
        monkeypatch.setattr(
            sheets_store, "_write", MagicMock(side_effect=RuntimeError("503"))
        )
        assert sheets_store.save("k", 1) is False

    def test_unserializable_value_is_rejected(self, sheets_store, worksheet):
        assert sheets_store.save("k", object()) is False
        assert len(worksheet.rows) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
