"""User document store."""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from safedrive._constants import USERS_FILENAME
from safedrive.exceptions import DocumentNotFoundError, StorageReadError
from safedrive.models.user import User
from safedrive.state.storage import read_document, write_document

_logger = logging.getLogger(__name__)


def new_object_id() -> str:
    """24-hex-character identifier, the shape clients already store."""
    return secrets.token_hex(12)


class UserStore:
    """All users kept as one JSON array, loaded in full on each access."""

    def __init__(self, data_dir: Path | str, *, filename: str = USERS_FILENAME) -> None:
        self.path = Path(data_dir) / filename

    def _load(self) -> list[User]:
        try:
            document = read_document(self.path)
        except DocumentNotFoundError:
            return []
        if not isinstance(document, list):
            raise StorageReadError(f"{self.path.name} does not hold a JSON array", path=str(self.path))

        users: list[User] = []
        for item in document:
            try:
                users.append(User.model_validate(item))
            except ValidationError as exc:
                _logger.warning("Skipping malformed user document: %s", exc)
        return users

    def _save(self, users: list[User]) -> None:
        write_document(self.path, [user.to_document() for user in users])

    def all(self) -> list[User]:
        return self._load()

    def get(self, user_id: str) -> User | None:
        for user in self._load():
            if user.id == user_id:
                return user
        return None

    def find_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        for user in self._load():
            if user.email == wanted:
                return user
        return None

    def insert(self, user: User) -> User:
        users = self._load()
        users.append(user)
        self._save(users)
        return user

    def replace(self, user: User) -> User:
        """Overwrite the stored user with the same id."""
        users = self._load()
        for index, existing in enumerate(users):
            if existing.id == user.id:
                users[index] = user
                break
        else:
            raise KeyError(user.id)
        self._save(users)
        return user

    def create(self, **fields: Any) -> User:
        user = User(id=new_object_id(), **fields)
        return self.insert(user)
