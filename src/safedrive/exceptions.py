"""Custom exception hierarchy for safedrive."""

from __future__ import annotations


class SafeDriveError(Exception):
    """Base exception for all safedrive errors."""


class SafeDriveConfigError(SafeDriveError):
    """Invalid or missing configuration."""


class StorageError(SafeDriveError):
    """Persistence failure on one of the JSON documents."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class StorageReadError(StorageError):
    """Document is missing, unreadable, or not valid JSON."""


class DocumentNotFoundError(StorageReadError):
    """Document has not been written yet."""


class StorageWriteError(StorageError):
    """Document could not be written to disk."""


class StorageConflictError(StorageWriteError):
    """Document version on disk does not match the expected version.

    Raised by versioned snapshot writes when another writer saved the
    document between our read and our write.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        expected_version: int | None = None,
        actual_version: int | None = None,
    ) -> None:
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(message, path=path)


class UserOperationError(SafeDriveError):
    """Account operation rejected (validation, conflict, not found, auth)."""

    def __init__(self, message: str, *, status: int = 400) -> None:
        self.status = status
        super().__init__(message)
