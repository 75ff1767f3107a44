from __future__ import annotations

import json
from pathlib import Path

import pytest

from safedrive.exceptions import DocumentNotFoundError, StorageConflictError, StorageReadError
from safedrive.state.storage import JsonDocumentStore


def test_missing_snapshot_raises_not_found(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    with pytest.raises(DocumentNotFoundError):
        store.load_snapshot()


def test_corrupt_snapshot_raises_read_error(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    store.snapshot_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageReadError):
        store.load_snapshot()


def test_snapshot_round_trip_creates_directory(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path / "nested" / "data")
    store.save_snapshot({"bpm": 70, "version": 1})

    assert store.load_snapshot() == {"bpm": 70, "version": 1}
    assert not list(store.snapshot_path.parent.glob("*.tmp"))


def test_versioned_save_detects_concurrent_write(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    store.save_snapshot({"version": 1}, expected_version=0)
    store.save_snapshot({"version": 2}, expected_version=1)

    with pytest.raises(StorageConflictError) as excinfo:
        store.save_snapshot({"version": 2}, expected_version=1)
    assert excinfo.value.actual_version == 2


def test_missing_log_is_empty(tmp_path: Path) -> None:
    assert JsonDocumentStore(tmp_path).load_notification_log() == []


def test_non_array_log_is_empty(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    store.log_path.write_text(json.dumps({"oops": True}), encoding="utf-8")
    assert store.load_notification_log() == []


def test_corrupt_log_raises_read_error(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    store.log_path.write_text("[{", encoding="utf-8")
    with pytest.raises(StorageReadError):
        store.load_notification_log()


def test_log_is_written_as_indented_json(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path)
    store.save_notification_log([{"timestamp": "2025-01-05T10:00:00.000Z", "issues": ["Loose Grip"]}])

    text = store.log_path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert store.load_notification_log()[0]["issues"] == ["Loose Grip"]
