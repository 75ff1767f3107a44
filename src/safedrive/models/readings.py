"""Inbound reading update model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from safedrive._constants import CAR_STATIONARY
from safedrive.ingestion.normalize import is_meaningful, lower_or_empty, prune_patch
from safedrive.models._base import Reading, SafeDriveBaseModel, Text


class OverallStatus(StrEnum):
    """Coarse safety classification of the latest reading."""

    NORMAL = "NORMAL"
    ALERT = "ALERT"


class ReadingUpdate(SafeDriveBaseModel):
    """One partial set of sensor/vehicle fields submitted by a device.

    Every field is optional. A field is *provided* when it carries a
    meaningful value; ``None`` means the device did not report it.

    Parameters
    ----------
    grip_status : str or None
        Steering-wheel grip state, ``"loose"`` is abnormal.
    eyes_status : str or None
        Eye-closure state, ``"closed"`` is abnormal.
    bpm : float or None
        Heart rate in beats per minute.
    spo2 : float or None
        Blood-oxygen saturation percentage.
    car_status : str or None
        Motion state: ``"stationary"``, ``"alert"`` or free text.
    """

    grip_status: Text = None
    eyes_status: Text = None
    bpm: Reading = None
    spo2: Reading = None
    car_status: Text = None

    @property
    def is_stationary(self) -> bool:
        return lower_or_empty(self.car_status) == CAR_STATIONARY

    def provided_fields(self) -> dict[str, Any]:
        """Snake-case patch holding only the fields this update provides."""
        return prune_patch(self.model_dump(exclude_none=True))

    def dropped_fields(self) -> list[str]:
        """Wire keys present in the raw payload that did not survive parsing."""
        provided = self.provided_fields()
        dropped: list[str] = []
        for name, field in type(self).model_fields.items():
            if name == "raw" or name in provided:
                continue
            alias = field.alias or name
            if is_meaningful(self.raw.get(alias)) or is_meaningful(self.raw.get(name)):
                dropped.append(alias)
        return dropped
