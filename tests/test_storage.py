"""Tests for the key-value state storage backends."""

import json
import pytest

from alokasi.services.storage import (
    InMemoryStateStorage,
    JsonFileStateStorage,
    StorageReadError,
)


class TestInMemoryStateStorage:
    """Tests for InMemoryStateStorage."""

    def test_get_missing(self):
        """Test missing keys read as None."""
        assert InMemoryStateStorage().get("k") is None

    def test_set_get_delete(self):
        """Test the basic slot lifecycle."""
        storage = InMemoryStateStorage()
        storage.set("k", "v")
        assert storage.get("k") == "v"
        assert storage.write_count == 1
        assert storage.delete("k") is True
        assert storage.delete("k") is False

    def test_initial_data_copied(self):
        """Test initial data is not aliased."""
        initial = {"k": "v"}
        storage = InMemoryStateStorage(initial)
        storage.set("k", "w")
        assert initial["k"] == "v"


class TestJsonFileStateStorage:
    """Tests for JsonFileStateStorage."""

    def test_missing_file_reads_none(self, tmp_path):
        """Test a store that was never written is empty."""
        storage = JsonFileStateStorage(tmp_path / "state.json")
        assert storage.get("budgetApp_v1") is None

    def test_set_creates_file_and_parents(self, tmp_path):
        """Test the first write creates directories and the file."""
        path = tmp_path / "nested" / "state.json"
        storage = JsonFileStateStorage(path)
        storage.set("budgetApp_v1", '{"a": 1}')
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == {"budgetApp_v1": '{"a": 1}'}

    def test_round_trip(self, tmp_path):
        """Test values read back exactly, across instances."""
        path = tmp_path / "state.json"
        JsonFileStateStorage(path).set("k", "Rp 5.000.000 ✓")
        assert JsonFileStateStorage(path).get("k") == "Rp 5.000.000 ✓"

    def test_keys_independent(self, tmp_path):
        """Test writing one key keeps the others."""
        storage = JsonFileStateStorage(tmp_path / "state.json")
        storage.set("a", "1")
        storage.set("b", "2")
        assert storage.get("a") == "1"
        assert storage.delete("a") is True
        assert storage.get("a") is None
        assert storage.get("b") == "2"

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic writes clean up after themselves."""
        storage = JsonFileStateStorage(tmp_path / "state.json")
        storage.set("k", "v")
        storage.set("k", "w")
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_corrupt_file_raises_on_read(self, tmp_path):
        """Test a corrupt file is reported, not silently emptied."""
        path = tmp_path / "state.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(StorageReadError):
            JsonFileStateStorage(path).get("k")

    def test_corrupt_file_overwritten_on_write(self, tmp_path):
        """Test a write still succeeds over a corrupt file."""
        path = tmp_path / "state.json"
        path.write_text("{oops", encoding="utf-8")
        storage = JsonFileStateStorage(path)
        storage.set("k", "v")
        assert storage.get("k") == "v"

    def test_invalid_utf8_raises_on_read(self, tmp_path):
        """Test undecodable bytes are reported as a read error."""
        path = tmp_path / "state.json"
        path.write_bytes(b'{"budgetApp_v1": "\xff\xfe"}')
        with pytest.raises(StorageReadError):
            JsonFileStateStorage(path).get("budgetApp_v1")

    def test_invalid_utf8_overwritten_on_write(self, tmp_path):
        """Test a write replaces a file that is not UTF-8."""
        path = tmp_path / "state.json"
        path.write_bytes(b"\xff\xfe garbage")
        storage = JsonFileStateStorage(path)
        storage.set("k", "v")
        assert storage.get("k") == "v"

    def test_non_string_value_returned_as_json(self, tmp_path):
        """Test a hand-edited object value is handed back as JSON text."""
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"k": {"period": {"month": 1, "year": 2025}}}), encoding="utf-8")
        assert json.loads(JsonFileStateStorage(path).get("k")) == {
            "period": {"month": 1, "year": 2025}
        }


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
