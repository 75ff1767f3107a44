"""Application factory, error middleware and health endpoint."""

from __future__ import annotations

import logging

from aiohttp import web
from aiohttp.typedefs import Handler

from safedrive import __version__
from safedrive._constants import SERVICE_NAME
from safedrive.accounts.operations import UserOperations
from safedrive.accounts.store import UserStore
from safedrive.config import ServerConfig
from safedrive.ingestion.normalize import to_iso, utcnow
from safedrive.prototype import PrototypeService
from safedrive.state.storage import JsonDocumentStore
from safedrive.web import accounts as _accounts_routes
from safedrive.web import prototype as _prototype_routes
from safedrive.web._json import envelope, error_response
from safedrive.web._keys import CONFIG_KEY, PROTOTYPE_SERVICE_KEY, USER_OPERATIONS_KEY

_logger = logging.getLogger(__name__)


@web.middleware
async def request_logging_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    _logger.info("%s %s", request.method, request.path_qs)
    return await handler(request)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Turn every failure into the ``{success: false, error}`` envelope."""
    try:
        return await handler(request)
    except web.HTTPNotFound:
        return error_response(f"Route {request.path_qs} not found", status=404)
    except web.HTTPException as exc:
        if exc.status < 400:
            raise
        return error_response(exc.reason, status=exc.status)
    except Exception as exc:
        _logger.exception("Unhandled error on %s %s", request.method, request.path_qs)
        return error_response(f"Server error: {exc}", status=500)


async def health(request: web.Request) -> web.Response:
    return envelope(
        {
            "success": True,
            "message": f"{SERVICE_NAME} API is running!",
            "timestamp": to_iso(utcnow()),
            "version": __version__,
        }
    )


def _add_routes(app: web.Application, table: web.RouteTableDef, prefix: str = "") -> None:
    for route in table:
        if isinstance(route, web.RouteDef):
            app.router.add_route(route.method, prefix + route.path, route.handler)


async def _log_endpoints(app: web.Application) -> None:
    config = app[CONFIG_KEY]
    _logger.info("%s %s serving data from %s", SERVICE_NAME, __version__, config.data_dir)
    if config.public_url:
        _logger.info("Public URL: %s", config.public_url)
    _logger.info("POST /api/users/operations -> all user operations")
    _logger.info("GET  /api/prototype        -> current prototype sensor data")
    _logger.info("POST /api/prototype        -> ingest a reading update")


def create_app(
    config: ServerConfig | None = None,
    *,
    service: PrototypeService | None = None,
    operations: UserOperations | None = None,
) -> web.Application:
    """Build the web application.

    *service* and *operations* default to JSON-file backed instances under
    ``config.data_dir``; tests pass their own.
    """
    config = config or ServerConfig.from_env()
    if service is None:
        service = PrototypeService(
            JsonDocumentStore(config.data_dir),
            display_tz=config.tzinfo,
            notification_log_limit=config.notification_log_limit,
        )
    if operations is None:
        operations = UserOperations(UserStore(config.data_dir))

    app = web.Application(middlewares=[request_logging_middleware, error_middleware])
    app[CONFIG_KEY] = config
    app[PROTOTYPE_SERVICE_KEY] = service
    app[USER_OPERATIONS_KEY] = operations

    app.router.add_get("/", health)
    _add_routes(app, _prototype_routes.routes, "/api")
    _add_routes(app, _prototype_routes.routes)
    _add_routes(app, _accounts_routes.routes, "/api")

    app.on_startup.append(_log_endpoints)
    return app
