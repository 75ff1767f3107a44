"""Normalization helpers.

Centralizes defensive parsing of reading values, placeholder handling and
timestamp conversion.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

from safedrive._constants import PLACEHOLDER_VALUES


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip() in PLACEHOLDER_VALUES:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if text in PLACEHOLDER_VALUES:
        return None
    return text


def lower_or_empty(value: str | None) -> str:
    """Lower-case *value* for case-insensitive comparisons; ``None`` -> ``""``."""
    return value.lower() if value else ""


def format_number(value: float) -> str:
    """Render a reading without a trailing ``.0`` when it is integral."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def is_meaningful(value: Any) -> bool:
    """True when *value* counts as "provided"; zero and ``False`` do."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() not in PLACEHOLDER_VALUES
    if isinstance(value, float) and math.isnan(value):
        return False
    return value not in ({}, [])


def prune_patch(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is a placeholder.

    Snapshot merging assumes incoming patches are already pruned, so a
    key present in the patch always means "provided".
    """
    return {key: value for key, value in data.items() if is_meaningful(value)}


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_iso(value: datetime) -> str:
    """Serialize an instant as ISO-8601 UTC with millisecond precision and ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_instant(value: Any) -> datetime | None:
    """Parse a stored timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (``Z`` or offset suffix), datetimes, and epoch
    numbers in seconds or milliseconds. Returns ``None`` when the value is
    missing or malformed.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            ts = float(value)
        except OverflowError:
            return None
        if ts <= 0 or math.isnan(ts):
            return None
        # Treat values above 1e11 as milliseconds.
        if ts > 1e11:
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError:
        # Offset pushes the instant outside the representable range.
        return None
