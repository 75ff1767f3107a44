"""User account model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_serializer, field_validator

from safedrive.ingestion.normalize import parse_instant, to_iso, utcnow
from safedrive.models._base import SafeDriveBaseModel

DEFAULT_USER_TYPE = "rider"

# Public fields in the order clients expect them.
PUBLIC_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "email",
    "user_type",
    "phone",
    "profile_completed",
    "is_active",
)


class User(SafeDriveBaseModel):
    """A stored user account.

    ``password_hash`` never leaves the store; use :meth:`public_view`
    for anything returned to a client.
    """

    id: str = Field(..., alias="_id")
    name: str
    email: str
    password_hash: str
    phone: str | None = None
    user_type: str = DEFAULT_USER_TYPE
    profile_completed: bool = False
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        email = value.strip().lower()
        if not email:
            raise ValueError("email must be non-empty")
        return email

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_instants(cls, value: Any) -> Any:
        return parse_instant(value) or value

    @field_serializer("created_at", "updated_at")
    def _serialize_instants(self, value: datetime) -> str:
        return to_iso(value)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def public_view(self, *, include_active: bool = True) -> dict[str, Any]:
        fields = set(PUBLIC_FIELDS)
        if not include_active:
            fields.discard("is_active")
        dumped = self.model_dump(mode="json", by_alias=True, include=fields)
        # Preserve PUBLIC_FIELDS ordering for stable responses.
        ordered: dict[str, Any] = {}
        for name in PUBLIC_FIELDS:
            if name not in fields:
                continue
            alias = type(self).model_fields[name].alias or name
            ordered[alias] = dumped.get(alias)
        return ordered
