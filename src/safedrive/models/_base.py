"""Base model for SafeDrive wire and storage documents.

Every document model inherits from :class:`SafeDriveBaseModel` which
provides:

* ``alias_generator=to_camel`` so the camelCase keys used on the wire and
  in the JSON documents map automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips placeholder values
  (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from safedrive._constants import PLACEHOLDER_VALUES
from safedrive.ingestion.normalize import safe_float, safe_str


def _coerce_reading(value: Any) -> float | None:
    return safe_float(value)


def _coerce_text(value: Any) -> str | None:
    return safe_str(value)


Reading = Annotated[float | None, BeforeValidator(_coerce_reading)]
"""Numeric reading; unparseable values become ``None`` instead of failing."""

Text = Annotated[str | None, BeforeValidator(_coerce_text)]
"""Free-text state; stripped, placeholders become ``None``."""


def reading_to_json(value: float | None) -> int | float | None:
    """Emit integral readings as ints (``75`` rather than ``75.0``)."""
    if value is None:
        return None
    if float(value).is_integer():
        return int(value)
    return value


class SafeDriveBaseModel(BaseModel):
    """Base for SafeDrive document models.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * placeholder values (``""``, ``"--"``, NaN) → dropped so the field
      default is used instead
    * Stashes the original dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original payload dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in PLACEHOLDER_VALUES:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip placeholder values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = SafeDriveBaseModel._clean_dict(original)
        # Keep an explicitly passed raw= untouched.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
