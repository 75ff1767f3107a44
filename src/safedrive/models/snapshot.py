"""Persisted sensor snapshot model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_serializer, field_validator

from safedrive.ingestion.normalize import parse_instant, to_iso
from safedrive.models._base import Reading, SafeDriveBaseModel, Text, reading_to_json
from safedrive.models.readings import OverallStatus


class SensorSnapshot(SafeDriveBaseModel):
    """Last-known readings plus the derived overall status.

    There is exactly one current snapshot document. Fields that a reading
    update does not provide keep their previous value.

    ``notifications`` only exists for documents written before the
    notification log became the single source of truth; it is read during
    retrieval and migrated into the log on the next ingestion.
    """

    grip_status: Text = None
    eyes_status: Text = None
    bpm: Reading = None
    spo2: Reading = None
    car_status: Text = None
    overall_status: OverallStatus | None = None
    notifications: list[dict[str, Any]] = Field(default_factory=list)
    updated_at: datetime | None = None
    version: int = 0

    @field_validator("overall_status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return OverallStatus(value.strip().upper())
            except ValueError:
                return None
        return value

    @field_validator("notifications", mode="before")
    @classmethod
    def _keep_dict_records(cls, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    @field_validator("updated_at", mode="before")
    @classmethod
    def _parse_updated_at(cls, value: Any) -> datetime | None:
        return parse_instant(value)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> int:
        try:
            return max(int(value), 0)
        except (TypeError, ValueError, OverflowError):
            return 0

    @field_serializer("bpm", "spo2")
    def _serialize_reading(self, value: float | None) -> int | float | None:
        return reading_to_json(value)

    @field_serializer("updated_at")
    def _serialize_updated_at(self, value: datetime | None) -> str | None:
        return to_iso(value) if value is not None else None

    def readings(self) -> dict[str, Any]:
        """Snake-case view of the reading fields only."""
        return self.model_dump(
            include={"grip_status", "eyes_status", "bpm", "spo2", "car_status"},
        )

    def to_document(self, *, include_embedded: bool = True) -> dict[str, Any]:
        """camelCase JSON document as persisted and returned over HTTP."""
        exclude = set() if include_embedded else {"notifications"}
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)
