"""safedrive - driver-safety sensor ingestion and alert backend."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("safedrive")
except PackageNotFoundError:
    __version__ = "0+local"
from safedrive.config import ServerConfig
from safedrive.exceptions import (
    DocumentNotFoundError,
    SafeDriveConfigError,
    SafeDriveError,
    StorageConflictError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    UserOperationError,
)
from safedrive.models import (
    NotificationRecord,
    OverallStatus,
    ReadingUpdate,
    RenderedNotification,
    SensorSnapshot,
    User,
)
from safedrive.prototype import PrototypeService

__all__ = [
    "__version__",
    "DocumentNotFoundError",
    "NotificationRecord",
    "OverallStatus",
    "PrototypeService",
    "ReadingUpdate",
    "RenderedNotification",
    "SafeDriveConfigError",
    "SafeDriveError",
    "SensorSnapshot",
    "ServerConfig",
    "StorageConflictError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "User",
    "UserOperationError",
]
