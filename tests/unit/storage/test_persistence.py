"""Tests for the sheet store and persistence adapter."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from dh_sheet.core.exceptions import SheetImportError, StorageError
from dh_sheet.engine import editing
from dh_sheet.models import LOG_LIMIT, CharacterDocument
from dh_sheet.storage import (
    SheetPersistence,
    SheetStore,
    export_bytes,
    export_filename,
    import_bytes,
    parse_document,
    serialize,
)


class TestSheetStore:
    """Tests for the SQLite key-value store."""

    def test_creates_database(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "sheets.db"

        SheetStore(path)

        assert path.exists()

    def test_put_and_get(self, sheet_store: SheetStore) -> None:
        sheet_store.put("dh-sheet:a", '{"x": 1}')

        record = sheet_store.get("dh-sheet:a")

        assert record is not None
        assert record.payload == '{"x": 1}'

    def test_get_missing(self, sheet_store: SheetStore) -> None:
        assert sheet_store.get("dh-sheet:missing") is None

    def test_put_replaces(self, sheet_store: SheetStore) -> None:
        sheet_store.put("k", "one")
        sheet_store.put("k", "two")

        assert sheet_store.get("k").payload == "two"
        assert sheet_store.keys() == ["k"]

    def test_clear_removes_everything(self, sheet_store: SheetStore) -> None:
        sheet_store.put("dh-sheet:a", "1")
        sheet_store.put("other:b", "2")

        assert sheet_store.clear() == 2
        assert sheet_store.keys() == []


class TestSerialization:
    """Tests for JSON export and import."""

    def test_export_is_indented_json(self, named_sheet: CharacterDocument) -> None:
        text = serialize(named_sheet)

        assert text.startswith('{\n  "id"')
        assert json.loads(text)["meta"]["name"] == "Vex"

    def test_round_trip(self, named_sheet: CharacterDocument) -> None:
        assert import_bytes(export_bytes(named_sheet)) == named_sheet

    def test_byte_order_mark_accepted(self, named_sheet: CharacterDocument) -> None:
        raw = b"\xef\xbb\xbf" + export_bytes(named_sheet)

        assert import_bytes(raw).id == named_sheet.id

    @pytest.mark.parametrize(
        "raw",
        [b"not json", b"[1, 2, 3]", b'"text"', b'{"meta": {"name": "No class"}}', b"\xff\xfe\x00"],
    )
    def test_invalid_import(self, raw: bytes) -> None:
        with pytest.raises(SheetImportError):
            import_bytes(raw)

    def test_invalid_json_reason(self) -> None:
        with pytest.raises(SheetImportError) as exc_info:
            parse_document("not json")

        assert exc_info.value.message == "Invalid JSON"
        assert "reason" in exc_info.value.details

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("Vex", "Vex.json"), ("", "Rogue.json"), ("a/b:c", "a_b_c.json"), ("   ", "sheet.json")],
    )
    def test_export_filename(self, rogue_sheet: CharacterDocument, name: str, expected: str) -> None:
        doc = rogue_sheet.patch(meta=rogue_sheet.meta.model_copy(update={"name": name}))

        assert export_filename(doc) == expected


class TestSheetPersistence:
    """Tests for keyed load and save."""

    def test_load_missing_creates_default(self, persistence: SheetPersistence) -> None:
        doc = persistence.load("default", "Warrior")

        assert doc.class_key == "Warrior"
        assert doc.evasion == 11

    def test_save_then_load(self, persistence: SheetPersistence, named_sheet: CharacterDocument) -> None:
        persistence.save("default", named_sheet)

        assert persistence.load("default", "Rogue") == named_sheet

    def test_storage_key(self, persistence: SheetPersistence, sheet_store: SheetStore) -> None:
        persistence.save("main", persistence.load("main", "Rogue"))

        assert persistence.storage_key("main") == "dh-sheet:main"
        assert sheet_store.keys() == ["dh-sheet:main"]

    def test_corrupt_record_falls_back(self, persistence: SheetPersistence, sheet_store: SheetStore) -> None:
        """Test that an unreadable record is replaced, not raised."""
        sheet_store.put("dh-sheet:default", "{not json")

        doc = persistence.load("default", "Bard")

        assert doc.class_key == "Bard"
        assert doc.activity_log == []

    def test_reset_all(self, persistence: SheetPersistence, sheet_store: SheetStore,
                       named_sheet: CharacterDocument) -> None:
        persistence.save("default", named_sheet)
        sheet_store.put("unrelated", "x")

        persistence.reset_all()

        assert sheet_store.keys() == []
        assert persistence.load("default", "Rogue").meta.name == ""

    def test_unreadable_store_falls_back(self, tmp_path: Path, library: object) -> None:
        """Test that a store damaged after opening still yields a default sheet."""
        path = tmp_path / "sheets.db"
        store = SheetStore(path)
        path.write_bytes(b"this is not a sqlite database" * 64)

        doc = SheetPersistence(store, library).load("default", "Seraph")

        assert doc.class_key == "Seraph"


class TestCorruptStore:
    """Tests for a database file that is not SQLite."""

    def test_open_raises_storage_error(self, tmp_path: Path) -> None:
        path = tmp_path / "sheets.db"
        path.write_bytes(b"this is not a sqlite database" * 64)

        with pytest.raises(StorageError) as exc_info:
            SheetStore(path)

        assert exc_info.value.details["path"] == str(path)

    def test_store_errors_wrapped(self, tmp_path: Path) -> None:
        """Test that reads on a damaged file raise StorageError, not sqlite3 errors."""
        path = tmp_path / "sheets.db"
        store = SheetStore(path)
        path.write_bytes(b"this is not a sqlite database" * 64)

        with pytest.raises(StorageError):
            store.keys()
        with pytest.raises(StorageError) as exc_info:
            store.get("dh-sheet:default")

        assert exc_info.value.details["key"] == "dh-sheet:default"


class TestImportNormalization:
    """Tests for documents that break sheet invariants on the way in."""

    def test_duplicate_experience_ids_made_unique(self, rogue_sheet: CharacterDocument) -> None:
        data = rogue_sheet.to_json_dict()
        data["experiences"] = [
            {"id": "a", "text": "Sneaky", "bonus": 2, "active": False},
            {"id": "a", "text": "Quick", "bonus": 3, "active": False},
        ]

        doc = import_bytes(json.dumps(data).encode("utf-8"))

        ids = [exp.id for exp in doc.experiences]
        assert ids[0] == "a"
        assert len(set(ids)) == 2
        assert [exp.text for exp in doc.experiences] == ["Sneaky", "Quick"]

    def test_toggle_after_duplicate_import(self, rogue_sheet: CharacterDocument) -> None:
        """Test that toggling a formerly repeated id flips one experience only."""
        data = rogue_sheet.to_json_dict()
        data["experiences"] = [{"id": "a"}, {"id": "a"}]
        doc = import_bytes(json.dumps(data).encode("utf-8"))

        toggled = editing.toggle_experience(doc, "a")

        assert [exp.active for exp in toggled.experiences] == [True, False]

    def test_long_activity_log_truncated(self, rogue_sheet: CharacterDocument) -> None:
        data = rogue_sheet.to_json_dict()
        data["activityLog"] = [f"line {index}" for index in range(50)]

        doc = import_bytes(json.dumps(data).encode("utf-8"))

        assert len(doc.activity_log) == LOG_LIMIT
        assert doc.activity_log[0] == "line 0"
        assert doc.activity_log[-1] == f"line {LOG_LIMIT - 1}"
