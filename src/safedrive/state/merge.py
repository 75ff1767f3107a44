"""Snapshot merge.

This is the only component allowed to combine a reading update with the
previous snapshot.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any

from safedrive.models.readings import OverallStatus, ReadingUpdate
from safedrive.models.snapshot import SensorSnapshot


def _merge_patch(target: dict[str, Any], patch: dict[str, Any]) -> None:
    """Apply a normalized patch.

    The pydantic boundary is responsible for pruning placeholders and
    excluding unset fields, so every key in *patch* is a provided value
    and overwrites.
    """

    if not patch:
        return
    target.update(copy.deepcopy(patch))


def merge_snapshot(
    previous: SensorSnapshot | None,
    update: ReadingUpdate,
    *,
    status: OverallStatus,
    now: datetime,
) -> SensorSnapshot:
    """Return the snapshot that results from applying *update*.

    Fields the update does not provide keep their previous value; a
    provided ``0`` reading replaces the old one. Embedded legacy
    notifications are not carried over, the log owns them from now on.
    """
    readings: dict[str, Any] = {}
    version = 0
    if previous is not None:
        readings = {key: value for key, value in previous.readings().items() if value is not None}
        version = previous.version

    _merge_patch(readings, update.provided_fields())

    return SensorSnapshot(
        **readings,
        overall_status=status,
        updated_at=now,
        version=version + 1,
    )
