"""Data models for SafeDrive documents and payloads."""

from safedrive.models._base import Reading, SafeDriveBaseModel, Text
from safedrive.models.notification import NotificationRecord, RenderedNotification
from safedrive.models.readings import OverallStatus, ReadingUpdate
from safedrive.models.snapshot import SensorSnapshot
from safedrive.models.user import User

__all__ = [
    "NotificationRecord",
    "OverallStatus",
    "Reading",
    "ReadingUpdate",
    "RenderedNotification",
    "SafeDriveBaseModel",
    "SensorSnapshot",
    "Text",
    "User",
]
