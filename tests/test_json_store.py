"""
Tests for the JSON file store: round-trips, fail-soft loading and
atomic replacement of the registry document.
"""

import json
import os
from datetime import datetime, timedelta, timezone

import pytest

from shortlink.core.exceptions import StoreUnreadableError, StoreWriteError
from shortlink.db.json_store import JsonFileStore
from shortlink.db.models import UrlEntry


def make_entries():
    return {
        "000042": UrlEntry(short_code="000042", long_url="https://example.com", note="demo"),
        "913377": UrlEntry(
            short_code="913377",
            long_url="not even a url",
            note="",
            visit_count=7,
            last_visit=datetime(2025, 3, 4, 5, 6, 7, 890123, tzinfo=timezone.utc),
        ),
    }


class TestRoundTrip:
    """save() followed by read() reproduces the mapping."""

    def test_roundtrip_preserves_every_field(self, store):
        entries = make_entries()
        store.save(entries)
        assert store.read() == entries

    def test_roundtrip_empty_mapping(self, store, store_path):
        store.save({})
        assert store_path.exists()
        assert store.read() == {}

    def test_document_layout(self, store, store_path):
        """The file is a map of code to entry with the wire field names."""
        store.save(make_entries())
        document = json.loads(store_path.read_text())

        assert set(document) == {"000042", "913377"}
        assert document["000042"] == {
            "short_url": "000042",
            "long_url": "https://example.com",
            "note": "demo",
            "visit_count": 0,
            "last_visit": None,
        }
        assert document["913377"]["last_visit"].startswith("2025-03-04T05:06:07.890123")

    def test_save_overwrites_previous_document(self, store):
        store.save(make_entries())
        only = {"111111": UrlEntry(short_code="111111", long_url="https://a.example")}
        store.save(only)
        assert store.read() == only

    def test_save_creates_missing_directory(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "dir" / "urls.json")
        store.save(make_entries())
        assert store.read() == make_entries()


class TestLoad:
    """load() never fails; read() reports damaged files."""

    def test_missing_file_is_empty(self, store, store_path):
        assert not store_path.exists()
        assert store.read() == {}
        assert store.load() == {}

    def test_invalid_json(self, store, store_path):
        store_path.write_text("{ this is not json")

        with pytest.raises(StoreUnreadableError) as exc_info:
            store.read()
        assert exc_info.value.path == str(store_path)
        assert store.load() == {}

    def test_wrong_shape(self, store, store_path):
        store_path.write_text(json.dumps({"000001": {"long_url": 5}}))

        with pytest.raises(StoreUnreadableError):
            store.read()
        assert store.load() == {}

    def test_negative_visit_count_is_rejected(self, store, store_path):
        store_path.write_text(json.dumps({
            "000001": {"short_url": "000001", "long_url": "x", "note": "", "visit_count": -1, "last_visit": None}
        }))
        assert store.load() == {}

    def test_unreadable_path(self, tmp_path):
        directory = tmp_path / "urls.json"
        directory.mkdir()
        store = JsonFileStore(directory)

        with pytest.raises(StoreUnreadableError) as exc_info:
            store.read()
        assert isinstance(exc_info.value.original_error, OSError)
        assert store.load() == {}

    def test_load_logs_warning_on_corruption(self, store, store_path, caplog):
        store_path.write_text("[]")
        with caplog.at_level("WARNING"):
            assert store.load() == {}
        assert "unreadable" in caplog.text

    def test_mismatched_key_is_rekeyed(self, store, store_path):
        store_path.write_text(json.dumps({
            "wrong": {"short_url": "123456", "long_url": "https://example.com", "note": "n",
                      "visit_count": 2, "last_visit": None}
        }))

        entries = store.read()

        assert list(entries) == ["123456"]
        assert entries["123456"].visit_count == 2

    def test_reads_nanosecond_timestamps(self, store, store_path):
        store_path.write_text(json.dumps({
            "654321": {"short_url": "654321", "long_url": "https://example.com", "note": "",
                       "visit_count": 1, "last_visit": "2024-05-01T10:00:00.123456789Z"}
        }))

        entry = store.read()["654321"]

        assert entry.last_visit == datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)

    @pytest.mark.parametrize("stamp, expected", [
        ("2024-05-01T10:00:00", datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)),
        ("2024-05-01T12:00:00+02:00", datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)),
    ])
    def test_timestamps_are_read_as_utc(self, store, store_path, stamp, expected):
        store_path.write_text(json.dumps({
            "654321": {"short_url": "654321", "long_url": "https://example.com", "note": "",
                       "visit_count": 1, "last_visit": stamp}
        }))

        last_visit = store.read()["654321"].last_visit

        assert last_visit == expected
        assert last_visit.utcoffset() == timedelta(0)

    def test_naive_visit_time_is_stamped_utc(self):
        visited = UrlEntry(short_code="000001", long_url="x").visited(datetime(2024, 5, 1, 10, 0))
        assert visited.last_visit == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


class TestAtomicSave:
    """A failed save leaves the previous document in place."""

    def test_failed_replace_keeps_old_document(self, store, store_path, monkeypatch):
        original = make_entries()
        store.save(original)

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)

        with pytest.raises(StoreWriteError) as exc_info:
            store.save({})
        monkeypatch.undo()

        assert isinstance(exc_info.value.original_error, OSError)
        assert store.read() == original

    def test_failed_save_removes_temporary_file(self, store, store_path, monkeypatch):
        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        with pytest.raises(StoreWriteError):
            store.save(make_entries())
        monkeypatch.undo()

        assert list(store_path.parent.iterdir()) == []

    def test_successful_save_leaves_no_temporary_files(self, store, store_path):
        store.save(make_entries())
        store.save(make_entries())
        assert [p.name for p in store_path.parent.iterdir()] == ["urls.json"]
