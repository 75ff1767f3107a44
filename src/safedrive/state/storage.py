"""JSON document persistence.

Each document is loaded fully into memory and rewritten in full. Writes
go to a temporary file in the same directory followed by an atomic
rename, so readers never observe a half-written document.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from safedrive._constants import NOTIFICATION_LOG_FILENAME, SNAPSHOT_FILENAME
from safedrive.exceptions import (
    DocumentNotFoundError,
    StorageConflictError,
    StorageReadError,
    StorageWriteError,
)

_logger = logging.getLogger(__name__)


def read_document(path: Path) -> Any:
    """Load and decode a JSON document.

    Raises
    ------
    DocumentNotFoundError
        The file does not exist.
    StorageReadError
        The file cannot be read or is not valid JSON.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DocumentNotFoundError(f"{path.name} does not exist", path=str(path)) from exc
    except OSError as exc:
        raise StorageReadError(f"Failed to read {path.name}: {exc}", path=str(path)) from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise StorageReadError(f"{path.name} is not valid JSON: {exc}", path=str(path)) from exc


def write_document(path: Path, document: Any) -> None:
    """Atomically replace *path* with the JSON encoding of *document*."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise StorageWriteError(f"Failed to prepare {path.name}: {exc}", path=str(path)) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(document, handle, indent=2, ensure_ascii=False)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError) as exc:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise StorageWriteError(f"Failed to write {path.name}: {exc}", path=str(path)) from exc


class DocumentStore(Protocol):
    """Structural persistence interface used by the prototype service.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`JsonDocumentStore`) concrete.
    """

    def load_snapshot(self) -> dict[str, Any]: ...

    def save_snapshot(self, document: dict[str, Any], *, expected_version: int | None = None) -> None: ...

    def load_notification_log(self) -> list[dict[str, Any]]: ...

    def save_notification_log(self, records: list[dict[str, Any]]) -> None: ...


class JsonDocumentStore:
    """Snapshot and notification log kept as two JSON files in one directory."""

    def __init__(
        self,
        data_dir: Path | str,
        *,
        snapshot_filename: str = SNAPSHOT_FILENAME,
        log_filename: str = NOTIFICATION_LOG_FILENAME,
    ) -> None:
        self._data_dir = Path(data_dir)
        self.snapshot_path = self._data_dir / snapshot_filename
        self.log_path = self._data_dir / log_filename

    def load_snapshot(self) -> dict[str, Any]:
        """Return the current snapshot document.

        Raises :class:`DocumentNotFoundError` before the first ingestion and
        :class:`StorageReadError` when the document is corrupt.
        """
        document = read_document(self.snapshot_path)
        if not isinstance(document, dict):
            raise StorageReadError(
                f"{self.snapshot_path.name} does not hold a JSON object",
                path=str(self.snapshot_path),
            )
        return document

    def save_snapshot(self, document: dict[str, Any], *, expected_version: int | None = None) -> None:
        """Persist the snapshot.

        When *expected_version* is given, the write only happens if the
        document currently on disk still carries that version (a missing
        document counts as version ``0``).
        """
        if expected_version is not None:
            actual = self._current_version()
            if actual != expected_version:
                raise StorageConflictError(
                    f"{self.snapshot_path.name} changed concurrently "
                    f"(expected version {expected_version}, found {actual})",
                    path=str(self.snapshot_path),
                    expected_version=expected_version,
                    actual_version=actual,
                )
        write_document(self.snapshot_path, document)
        _logger.debug("Saved %s (version %s)", self.snapshot_path.name, document.get("version"))

    def load_notification_log(self) -> list[dict[str, Any]]:
        """Return the notification log; an absent log is empty."""
        try:
            document = read_document(self.log_path)
        except DocumentNotFoundError:
            return []
        if not isinstance(document, list):
            _logger.warning("%s does not hold a JSON array; treating as empty", self.log_path.name)
            return []
        return [record for record in document if isinstance(record, dict)]

    def save_notification_log(self, records: list[dict[str, Any]]) -> None:
        write_document(self.log_path, records)
        _logger.debug("Saved %s (%d records)", self.log_path.name, len(records))

    def _current_version(self) -> int:
        try:
            current = self.load_snapshot()
        except DocumentNotFoundError:
            return 0
        except StorageReadError:
            # A corrupt document cannot be versioned; the next save repairs it.
            _logger.warning("Ignoring version of unreadable %s", self.snapshot_path.name)
            return 0
        try:
            return int(current.get("version") or 0)
        except (TypeError, ValueError, OverflowError):
            return 0
