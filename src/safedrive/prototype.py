"""Prototype ingestion and retrieval service.

Orchestrates the status evaluator, the notification synthesizer, the
snapshot merge and the document store for the two prototype endpoints.
Blocking file I/O runs in the default executor so the event loop only
yields at storage boundaries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from typing import Any, TypeVar

from pydantic import ValidationError

from safedrive._redact import redact_for_log
from safedrive.exceptions import DocumentNotFoundError, StorageReadError
from safedrive.ingestion.normalize import utcnow
from safedrive.ingestion.status import evaluate_status
from safedrive.ingestion.synthesize import synthesize
from safedrive.models.notification import NotificationRecord, RenderedNotification
from safedrive.models.readings import ReadingUpdate
from safedrive.models.snapshot import SensorSnapshot
from safedrive.state.merge import merge_snapshot
from safedrive.state.notifications import append_records, render
from safedrive.state.storage import DocumentStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _document_version(document: dict[str, Any]) -> int:
    try:
        return int(document.get("version") or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


@dataclass(slots=True)
class IngestResult:
    """Outcome of one ingestion."""

    snapshot: SensorSnapshot
    new_notifications: list[NotificationRecord] = field(default_factory=list)

    def to_response_data(self) -> dict[str, Any]:
        data = self.snapshot.to_document(include_embedded=False)
        data["notifications"] = [record.to_document() for record in self.new_notifications]
        data["newNotificationCount"] = len(self.new_notifications)
        return data


@dataclass(slots=True)
class CurrentState:
    """Snapshot plus the rendered notification list for the read path."""

    snapshot: SensorSnapshot
    notifications: list[RenderedNotification] = field(default_factory=list)

    def to_response_data(self) -> dict[str, Any]:
        data = self.snapshot.to_document(include_embedded=False)
        data["notifications"] = [notification.model_dump() for notification in self.notifications]
        return data


class PrototypeService:
    """Ingestion and retrieval over a :class:`DocumentStore`.

    A single ``asyncio.Lock`` serializes read-modify-write cycles within
    the process. Across processes the snapshot write is guarded by its
    document version; the log write that follows is not, so the two
    documents are not updated atomically together.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        display_tz: tzinfo = UTC,
        notification_log_limit: int = 0,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._display_tz = display_tz
        self._log_limit = notification_log_limit
        self._clock = clock
        self._lock = asyncio.Lock()

    async def _run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: func(*args, **kwargs))

    async def _load_previous(self) -> tuple[SensorSnapshot | None, int]:
        """Return the previous snapshot (if usable) and the version on disk."""
        try:
            document = await self._run(self._store.load_snapshot)
        except DocumentNotFoundError:
            _logger.info("No previous snapshot; starting from the new reading")
            return None, 0
        except StorageReadError as exc:
            _logger.warning("Failed to read snapshot, starting from the new reading: %s", exc)
            return None, 0
        try:
            snapshot = SensorSnapshot.model_validate(document)
        except ValidationError as exc:
            _logger.warning("Stored snapshot is malformed, starting from the new reading: %s", exc)
            return None, _document_version(document)
        return snapshot, snapshot.version

    async def _load_log(self) -> list[dict[str, Any]]:
        try:
            return await self._run(self._store.load_notification_log)
        except StorageReadError as exc:
            _logger.error("Failed to read notification log, treating as empty: %s", exc)
            return []

    async def ingest(self, update: ReadingUpdate) -> IngestResult:
        """Apply one reading update and persist the result.

        Storage read failures fall back to "no previous state". Write
        failures propagate; nothing is rolled back.
        """
        _logger.debug("Reading update: %s", redact_for_log(update.raw))
        dropped = update.dropped_fields()
        if dropped:
            _logger.debug("Ignoring unparseable fields: %s", ", ".join(dropped))

        async with self._lock:
            previous, expected_version = await self._load_previous()
            now = self._clock()

            new_records = synthesize(update, update.car_status, now)
            status = evaluate_status(
                update.grip_status,
                update.eyes_status,
                update.bpm,
                update.spo2,
                update.car_status,
            )
            snapshot = merge_snapshot(previous, update, status=status, now=now)

            embedded = previous.notifications if previous is not None else []
            if new_records or embedded:
                log = await self._load_log()
                updated_log = append_records(log, new_records, migrated=embedded, limit=self._log_limit)
            else:
                updated_log = None

            await self._run(
                self._store.save_snapshot,
                snapshot.to_document(include_embedded=False),
                expected_version=expected_version,
            )
            if updated_log is not None:
                await self._run(self._store.save_notification_log, updated_log)

        if update.is_stationary:
            _logger.info("Vehicle stationary; all alerts suppressed")
        _logger.info(
            "Prototype data updated: status=%s version=%d new_notifications=%d",
            snapshot.overall_status,
            snapshot.version,
            len(new_records),
        )
        return IngestResult(snapshot=snapshot, new_notifications=new_records)

    async def current(self) -> CurrentState:
        """Load the snapshot and render the notification list.

        Raises :class:`StorageReadError` when the snapshot cannot be read;
        there is no sensible default on the read path.
        """
        document = await self._run(self._store.load_snapshot)
        try:
            snapshot = SensorSnapshot.model_validate(document)
        except ValidationError as exc:
            raise StorageReadError(f"Stored snapshot is malformed: {exc}") from exc

        log = await self._load_log()
        notifications = render(log, snapshot.notifications, tz=self._display_tz)
        return CurrentState(snapshot=snapshot, notifications=notifications)
