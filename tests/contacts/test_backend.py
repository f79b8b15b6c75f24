"""Tests for the JSON file snapshot backend."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from rolodex.contacts import (
    JsonFileBackend,
    MalformedSnapshotError,
    SnapshotNotFoundError,
)

RECORDS = [
    {"id": "a1", "name": "Ana Lee", "phone": "5551234", "email": "ana@example.com"},
    {"id": "b2", "name": "Bob", "phone": "555 9876", "email": ""},
]


@pytest.fixture
def backend(tmp_path: Path) -> JsonFileBackend:
    return JsonFileBackend(tmp_path / "contacts.json")


class TestRead:
    def test_missing_file(self, backend: JsonFileBackend):
        """read raises SnapshotNotFoundError when the file does not exist."""
        with pytest.raises(SnapshotNotFoundError):
            backend.read()

    def test_reads_array(self, backend: JsonFileBackend):
        backend.path.write_text(json.dumps(RECORDS), encoding="utf-8")
        assert backend.read() == RECORDS

    def test_not_json(self, backend: JsonFileBackend):
        """Unparsable content is reported as malformed."""
        backend.path.write_text("not json", encoding="utf-8")
        with pytest.raises(MalformedSnapshotError, match="Invalid JSON"):
            backend.read()

    def test_oversized_integer(self, backend: JsonFileBackend):
        """An integer literal too long to convert is malformed, not a crash."""
        backend.path.write_text(
            '[{"id": "a", "name": "Ana", "phone": ' + "1" * 5000 + "}]",
            encoding="utf-8",
        )
        with pytest.raises(MalformedSnapshotError, match="Cannot parse"):
            backend.read()

    def test_deep_nesting(self, backend: JsonFileBackend):
        backend.path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        with pytest.raises(MalformedSnapshotError):
            backend.read()

    def test_empty_file(self, backend: JsonFileBackend):
        backend.path.write_text("", encoding="utf-8")
        with pytest.raises(MalformedSnapshotError):
            backend.read()

    def test_object_instead_of_array(self, backend: JsonFileBackend):
        backend.path.write_text('{"id": "a1"}', encoding="utf-8")
        with pytest.raises(MalformedSnapshotError, match="Expected a JSON array"):
            backend.read()

    def test_non_object_entry(self, backend: JsonFileBackend):
        backend.path.write_text('[{"id": "a1"}, "oops"]', encoding="utf-8")
        with pytest.raises(MalformedSnapshotError, match="Entry 1"):
            backend.read()

    def test_directory_at_path(self, tmp_path: Path):
        """A directory where the file should be is malformed, not a crash."""
        path = tmp_path / "contacts.json"
        path.mkdir()
        with pytest.raises(MalformedSnapshotError):
            JsonFileBackend(path).read()


class TestWrite:
    def test_writes_pretty_json(self, backend: JsonFileBackend):
        """Output is an indented UTF-8 JSON array."""
        backend.write(RECORDS)
        text = backend.path.read_text(encoding="utf-8")
        assert json.loads(text) == RECORDS
        assert '\n  {\n    "id": "a1"' in text
        assert text.endswith("\n")

    def test_keeps_unicode_readable(self, backend: JsonFileBackend):
        backend.write([{"id": "x", "name": "José Ñúñez", "phone": "5551234", "email": ""}])
        assert "José Ñúñez" in backend.path.read_text(encoding="utf-8")

    def test_creates_parent_directory(self, tmp_path: Path):
        backend = JsonFileBackend(tmp_path / "nested" / "dir" / "contacts.json")
        backend.write(RECORDS)
        assert backend.path.exists()

    def test_no_backup_for_first_write(self, backend: JsonFileBackend):
        """Nothing to back up when the destination does not exist yet."""
        backend.write(RECORDS)
        assert not backend.backup_path.exists()

    def test_backup_is_previous_content(self, backend: JsonFileBackend):
        """The backup holds the exact bytes the destination had before."""
        backend.write(RECORDS[:1])
        before = backend.path.read_bytes()

        backend.write(RECORDS)

        assert backend.backup_path.read_bytes() == before
        assert json.loads(backend.path.read_text(encoding="utf-8")) == RECORDS

    def test_backup_is_overwritten(self, backend: JsonFileBackend):
        backend.write([])
        backend.write(RECORDS[:1])
        second = backend.path.read_bytes()
        backend.write(RECORDS)
        assert backend.backup_path.read_bytes() == second

    def test_backup_path_naming(self, tmp_path: Path):
        backend = JsonFileBackend(tmp_path / "contacts.json", backup_suffix=".old")
        assert backend.backup_path == tmp_path / "contacts.json.old"

    def test_empty_backup_suffix_rejected(self, tmp_path: Path):
        with pytest.raises(ValueError, match="backup_suffix"):
            JsonFileBackend(tmp_path / "contacts.json", backup_suffix="")

    def test_failed_write_keeps_destination(self, backend: JsonFileBackend):
        """A failure mid-write leaves the destination and no temp files."""
        backend.write(RECORDS)
        original = backend.path.read_bytes()

        with patch("rolodex.contacts.backend.json.dump", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                backend.write(RECORDS[:1])

        assert backend.path.read_bytes() == original
        leftovers = [p for p in backend.path.parent.iterdir() if p.suffix == ".tmp"]
        assert leftovers == []

    def test_location(self, backend: JsonFileBackend):
        assert backend.location == str(backend.path)
