"""Prototype sensor endpoints."""

from __future__ import annotations

import logging

from aiohttp import web
from pydantic import ValidationError

from safedrive.exceptions import StorageReadError
from safedrive.models.readings import ReadingUpdate
from safedrive.web._json import envelope, error_response, read_json_object
from safedrive.web._keys import PROTOTYPE_SERVICE_KEY

_logger = logging.getLogger(__name__)

routes = web.RouteTableDef()


@routes.get("/prototype")
async def get_prototype(request: web.Request) -> web.Response:
    """Current snapshot with the rendered notification list."""
    service = request.app[PROTOTYPE_SERVICE_KEY]
    try:
        state = await service.current()
    except StorageReadError as exc:
        _logger.error("Failed to read current prototype data: %s", exc)
        return error_response("Failed to read current prototype data", status=500)
    return envelope({"success": True, "data": state.to_response_data()})


@routes.post("/prototype")
async def post_prototype(request: web.Request) -> web.Response:
    """Ingest one reading update from a device."""
    body = await read_json_object(request)
    try:
        update = ReadingUpdate.model_validate(body)
    except ValidationError as exc:
        raise web.HTTPBadRequest(reason="Invalid reading update") from exc

    result = await request.app[PROTOTYPE_SERVICE_KEY].ingest(update)
    return envelope(
        {
            "success": True,
            "message": "Prototype data updated successfully",
            "data": result.to_response_data(),
        }
    )
