"""aiohttp application exposing the prototype and account endpoints."""

from safedrive.web.app import create_app

__all__ = ["create_app"]
