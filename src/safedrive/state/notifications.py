"""Notification log reconciliation and rendering.

The log is the single source of truth for notifications. Older snapshot
documents also embed a ``notifications`` array, and some producers write
legacy ``{"message": ...}`` records or multi-issue records. Everything in
this module treats those shapes uniformly through :func:`normalize_record`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from typing import Any

from safedrive.ingestion.normalize import parse_instant
from safedrive.models.notification import NotificationRecord, RenderedNotification

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    """A stored record reduced to what reconciliation and rendering need."""

    instant: datetime | None
    raw_timestamp: str
    issues: tuple[str, ...]
    document: dict[str, Any]

    @property
    def key(self) -> tuple[Any, ...]:
        """Identity used for de-duplication: same instant and same issues."""
        when: Any = self.instant if self.instant is not None else self.raw_timestamp
        return (when, self.issues)


def normalize_record(document: dict[str, Any]) -> NormalizedRecord | None:
    """Normalize one stored record, or return ``None`` if it has no issue text.

    The issue list is ``issues`` when present, otherwise a one-element list
    built from ``message``.
    """
    issues_value = document.get("issues")
    if issues_value is None:
        issues_value = [document.get("message")]
    if not isinstance(issues_value, list):
        issues_value = [issues_value]

    issues = tuple(str(issue) for issue in issues_value if isinstance(issue, str) and issue.strip())
    if not issues or len(issues) != len(issues_value):
        return None

    raw_timestamp = document.get("timestamp")
    return NormalizedRecord(
        instant=parse_instant(raw_timestamp),
        raw_timestamp="" if raw_timestamp is None else str(raw_timestamp),
        issues=issues,
        document=document,
    )


def _normalize_all(documents: Iterable[dict[str, Any]]) -> list[NormalizedRecord]:
    normalized: list[NormalizedRecord] = []
    for document in documents:
        record = normalize_record(document)
        if record is None:
            _logger.debug("Skipping notification without issue text: %s", document)
            continue
        normalized.append(record)
    return normalized


def format_timestamp(instant: datetime, tz: tzinfo = UTC) -> str:
    """Render an instant as ``MM/DD/YY h:MM:SS AM/PM`` in *tz*."""
    local = instant.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local:%m/%d/%y} {hour}:{local:%M:%S} {meridiem}"


def _display_timestamp(record: NormalizedRecord, tz: tzinfo) -> str:
    if record.instant is None:
        return record.raw_timestamp
    try:
        return format_timestamp(record.instant, tz)
    except OverflowError:
        # Valid in UTC but not representable in the display zone.
        return record.raw_timestamp


def _sort_key(record: NormalizedRecord) -> tuple[int, float]:
    # Newest first; records with malformed timestamps go last.
    if record.instant is None:
        return (1, 0.0)
    return (0, -record.instant.timestamp())


def render(
    log: Sequence[dict[str, Any]],
    embedded: Sequence[dict[str, Any]] = (),
    *,
    tz: tzinfo = UTC,
) -> list[RenderedNotification]:
    """Build the display list from the log and any snapshot-embedded records.

    1. concatenate log and embedded records and normalize their issues
    2. keep single-issue records only; aggregate records are dropped, not split
    3. de-duplicate on (instant, issue text), first occurrence wins
    4. sort newest first
    5. format each timestamp for display
    """
    seen: set[tuple[Any, ...]] = set()
    unique: list[NormalizedRecord] = []
    for record in _normalize_all([*log, *embedded]):
        if len(record.issues) != 1:
            continue
        if record.key in seen:
            continue
        seen.add(record.key)
        unique.append(record)

    unique.sort(key=_sort_key)

    return [RenderedNotification(timestamp=_display_timestamp(record, tz), issues=[record.issues[0]]) for record in unique]


def append_records(
    log: Sequence[dict[str, Any]],
    new_records: Sequence[NotificationRecord],
    *,
    migrated: Sequence[dict[str, Any]] = (),
    limit: int = 0,
) -> list[dict[str, Any]]:
    """Return the log with *migrated* and *new_records* appended.

    *migrated* holds legacy snapshot-embedded records; those already in the
    log are skipped. When *limit* is positive only the newest *limit*
    records (by position) are kept.
    """
    updated = [dict(document) for document in log]
    known = {record.key for record in _normalize_all(updated)}

    moved = 0
    for record in _normalize_all(migrated):
        if record.key in known:
            continue
        known.add(record.key)
        updated.append(dict(record.document))
        moved += 1
    if moved:
        _logger.info("Migrated %d embedded snapshot notifications into the log", moved)

    updated.extend(record.to_document() for record in new_records)

    if limit > 0 and len(updated) > limit:
        _logger.info("Notification log over limit; dropping %d oldest records", len(updated) - limit)
        updated = updated[-limit:]
    return updated
