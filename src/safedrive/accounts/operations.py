"""Multiplexed user account operations.

A single request names an ``action`` and carries its arguments; each
action returns a JSON envelope with ``success``, ``data`` and/or
``message`` and a ``type`` tag the mobile client switches on.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from pydantic import Field, field_validator

from safedrive._hashing import hash_password, verify_password
from safedrive._redact import redact_for_log
from safedrive.accounts.store import UserStore
from safedrive.exceptions import UserOperationError
from safedrive.ingestion.normalize import safe_str, utcnow
from safedrive.models._base import SafeDriveBaseModel
from safedrive.models.user import DEFAULT_USER_TYPE, User

_logger = logging.getLogger(__name__)

T = TypeVar("T")

VALID_ACTIONS: tuple[str, ...] = ("getAll", "create", "login", "getById", "update", "delete")


class OperationRequest(SafeDriveBaseModel):
    """Body of ``POST /users/operations``.

    ``page``, ``limit`` and ``search`` are accepted for compatibility with
    existing clients but listing always returns every matching user.
    """

    action: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    user_id: str | None = None
    page: int | None = None
    limit: int | None = None
    search: str | None = None
    user_type: str | None = None

    @field_validator("data", mode="before")
    @classmethod
    def _data_object(cls, value: Any) -> dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @field_validator("page", "limit", mode="before")
    @classmethod
    def _lenient_int(cls, value: Any) -> int | None:
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def text(self, key: str) -> str | None:
        return safe_str(self.data.get(key))


def _not_found() -> UserOperationError:
    return UserOperationError("User not found", status=404)


class UserOperations:
    """Dispatch account actions against a :class:`UserStore`."""

    def __init__(self, store: UserStore, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._store = store
        self._clock = clock
        self._lock = asyncio.Lock()
        self._handlers: dict[str, Callable[[OperationRequest], dict[str, Any]]] = {
            "getAll": self._get_all,
            "create": self._create,
            "login": self._login,
            "getById": self._get_by_id,
            "update": self._update,
            "delete": self._delete,
        }

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def dispatch(self, request: OperationRequest) -> dict[str, Any]:
        """Run the requested action and return its response envelope.

        Raises :class:`UserOperationError` carrying the HTTP status for
        rejected requests.
        """
        _logger.debug("User operation request: %s", redact_for_log(request.raw))
        handler = self._handlers.get(request.action or "")
        if handler is None:
            _logger.info("Invalid user action requested: %r", request.action)
            actions = ", ".join(f"'{action}'" for action in VALID_ACTIONS[:-1])
            raise UserOperationError(f"Invalid action. Use: {actions}, or '{VALID_ACTIONS[-1]}'")

        async with self._lock:
            return await self._run(handler, request)

    # ------------------------------------------------------------------
    # Actions (run in the executor, so they may block on file I/O)
    # ------------------------------------------------------------------

    def _get_all(self, request: OperationRequest) -> dict[str, Any]:
        users = self._store.all()
        if request.user_type:
            users = [user for user in users if user.user_type == request.user_type]
        users.sort(key=lambda user: user.created_at, reverse=True)
        _logger.debug("Found %d users", len(users))
        return {
            "success": True,
            "data": [user.public_view() for user in users],
            "type": "users_list",
        }

    def _create(self, request: OperationRequest) -> dict[str, Any]:
        name = request.text("name")
        email = request.text("email")
        password = request.text("password")
        if not name or not email or not password:
            raise UserOperationError("Name, email and password are required")

        if self._store.find_by_email(email) is not None:
            raise UserOperationError("User with this email already exists", status=409)

        now = self._clock()
        user = self._store.create(
            name=name,
            email=email,
            password_hash=hash_password(password),
            phone=request.text("phone"),
            user_type=request.text("userType") or DEFAULT_USER_TYPE,
            created_at=now,
            updated_at=now,
        )
        _logger.info("User created: %s", user.id)
        return {
            "success": True,
            "data": user.public_view(include_active=False),
            "message": "User created successfully",
            "type": "user_created",
        }

    def _login(self, request: OperationRequest) -> dict[str, Any]:
        email = request.text("email")
        password = request.text("password")
        if not email or not password:
            raise UserOperationError("Email and password are required")

        user = self._store.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            _logger.info("Failed login attempt")
            raise UserOperationError("Invalid email or password", status=401)
        if not user.is_active:
            raise UserOperationError("Account is deactivated", status=401)

        _logger.info("Login successful: %s", user.id)
        return {
            "success": True,
            "data": user.public_view(),
            "message": "Login successful",
            "type": "login_success",
        }

    def _require(self, request: OperationRequest) -> User:
        user = self._store.get(request.user_id) if request.user_id else None
        if user is None:
            raise _not_found()
        return user

    def _get_by_id(self, request: OperationRequest) -> dict[str, Any]:
        user = self._require(request)
        return {"success": True, "data": user.public_view(), "type": "user_details"}

    def _update(self, request: OperationRequest) -> dict[str, Any]:
        user = self._require(request)
        changes: dict[str, Any] = {}
        for key, field_name in (("name", "name"), ("phone", "phone"), ("userType", "user_type")):
            value = request.text(key)
            if value:
                changes[field_name] = value
        changes["updated_at"] = self._clock()
        updated = self._store.replace(user.model_copy(update=changes))
        _logger.info("User updated: %s", updated.id)
        return {
            "success": True,
            "data": updated.public_view(include_active=False),
            "message": "User updated successfully",
            "type": "user_updated",
        }

    def _delete(self, request: OperationRequest) -> dict[str, Any]:
        user = self._require(request)
        self._store.replace(user.model_copy(update={"is_active": False, "updated_at": self._clock()}))
        _logger.info("User deactivated: %s", user.id)
        return {"success": True, "message": "User deactivated successfully", "type": "user_deleted"}
