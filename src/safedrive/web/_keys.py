"""Typed application keys shared by the route modules."""

from __future__ import annotations

from aiohttp import web

from safedrive.accounts.operations import UserOperations
from safedrive.config import ServerConfig
from safedrive.prototype import PrototypeService

CONFIG_KEY = web.AppKey("config", ServerConfig)
PROTOTYPE_SERVICE_KEY = web.AppKey("prototype_service", PrototypeService)
USER_OPERATIONS_KEY = web.AppKey("user_operations", UserOperations)
