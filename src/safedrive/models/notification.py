"""Notification record models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from safedrive.ingestion.normalize import parse_instant, to_iso


class NotificationRecord(BaseModel):
    """A timestamped alert as stored in the notification log.

    Records are immutable once created. Newly synthesized records always
    carry exactly one issue; records written by other producers may carry
    several.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    """Instant the issue was detected (UTC)."""

    issues: list[str] = Field(..., min_length=1)
    """Ordered issue descriptions."""

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> datetime:
        parsed = parse_instant(value)
        if parsed is None:
            raise ValueError(f"invalid timestamp: {value!r}")
        return parsed

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return to_iso(value)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class RenderedNotification(BaseModel):
    """Display-ready notification returned by the retrieval endpoint."""

    model_config = ConfigDict(frozen=True)

    timestamp: str
    """Localized ``MM/DD/YY h:MM:SS AM/PM`` rendering of the instant."""

    issues: list[str]
