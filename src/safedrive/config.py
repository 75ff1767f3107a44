"""Server configuration for safedrive."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from safedrive._constants import DEFAULT_NOTIFICATION_LOG_LIMIT
from safedrive.exceptions import SafeDriveConfigError


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise SafeDriveConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class ServerConfig:
    """Server configuration.

    Parameters
    ----------
    data_dir : Path
        Directory holding the snapshot, notification log and user documents.
    host : str
        Interface the HTTP server binds to.
    port : int
        TCP port the HTTP server listens on.
    log_level : str
        Root logging level used by the runner.
    display_time_zone : str
        IANA time zone used when rendering notification timestamps.
    notification_log_limit : int
        Maximum number of records kept in the notification log. Oldest
        records are dropped first. ``0`` keeps everything.
    public_url : str or None
        Externally reachable URL, logged at start-up only.
    """

    data_dir: Path = Path("data")
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"
    display_time_zone: str = "UTC"
    notification_log_limit: int = DEFAULT_NOTIFICATION_LOG_LIMIT
    public_url: str | None = None

    def __post_init__(self) -> None:
        if self.notification_log_limit < 0:
            raise SafeDriveConfigError("notification_log_limit must be >= 0")
        if not 0 < self.port < 65536:
            raise SafeDriveConfigError(f"port must be between 1 and 65535, got {self.port}")
        try:
            ZoneInfo(self.display_time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise SafeDriveConfigError(f"unknown time zone {self.display_time_zone!r}") from exc

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.display_time_zone)

    @classmethod
    def from_env(cls, **overrides: Any) -> ServerConfig:
        """Create configuration from environment variables.

        Reads ``SAFEDRIVE_*`` variables plus the conventional ``PORT`` and
        ``PUBLIC_URL``. Explicit keyword arguments override environment
        values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ServerConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SAFEDRIVE_HOST": "host",
            "SAFEDRIVE_LOG_LEVEL": "log_level",
            "SAFEDRIVE_DISPLAY_TIME_ZONE": "display_time_zone",
            "PUBLIC_URL": "public_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        data_dir = env.get("SAFEDRIVE_DATA_DIR")
        if data_dir is not None:
            config_kwargs["data_dir"] = Path(data_dir)

        # SAFEDRIVE_PORT wins over the platform-provided PORT
        port_env = env.get("SAFEDRIVE_PORT") or env.get("PORT")
        if port_env is not None and "port" not in overrides:
            config_kwargs["port"] = _env_int("PORT", port_env)

        limit_env = env.get("SAFEDRIVE_NOTIFICATION_LOG_LIMIT")
        if limit_env is not None and "notification_log_limit" not in overrides:
            config_kwargs["notification_log_limit"] = _env_int("SAFEDRIVE_NOTIFICATION_LOG_LIMIT", limit_env)

        if isinstance(overrides.get("data_dir"), str):
            overrides["data_dir"] = Path(overrides["data_dir"])

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
