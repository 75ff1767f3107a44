"""Redaction of request bodies before they reach DEBUG logs.

Account requests carry plaintext passwords and e-mail addresses; stored
user documents carry password hashes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_REDACTED = "<redacted>"
_MAX_DEPTH = 8

# Compared after lower-casing and dropping underscores, so ``password_hash``
# and ``passwordHash`` match the same entry.
_SECRET_KEYS: frozenset[str] = frozenset({"password", "passwordhash", "newpassword", "token", "authorization", "cookie"})
_EMAIL_KEYS: frozenset[str] = frozenset({"email"})


def _normalized_key(key: Any) -> str:
    return str(key).replace("_", "").lower()


def mask_email(address: str) -> str:
    """Keep the first character of the local part and the domain."""
    local, sep, domain = address.partition("@")
    if not sep or not local:
        return _REDACTED
    return f"{local[0]}***@{domain}"


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with secrets removed and long strings cut."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            name = _normalized_key(key)
            if name in _SECRET_KEYS:
                redacted[str(key)] = _REDACTED
            elif name in _EMAIL_KEYS and isinstance(item, str):
                redacted[str(key)] = mask_email(item)
            else:
                redacted[str(key)] = redact_for_log(item, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return value
