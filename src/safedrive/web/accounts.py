"""User account endpoint."""

from __future__ import annotations

from aiohttp import web
from pydantic import ValidationError

from safedrive.accounts.operations import OperationRequest
from safedrive.exceptions import UserOperationError
from safedrive.web._json import envelope, error_response, read_json_object
from safedrive.web._keys import USER_OPERATIONS_KEY

routes = web.RouteTableDef()


@routes.post("/users/operations")
async def user_operations(request: web.Request) -> web.Response:
    body = await read_json_object(request)
    try:
        operation = OperationRequest.model_validate(body)
    except ValidationError as exc:
        raise web.HTTPBadRequest(reason="Invalid operation request") from exc

    try:
        payload = await request.app[USER_OPERATIONS_KEY].dispatch(operation)
    except UserOperationError as exc:
        return error_response(str(exc), status=exc.status)
    return envelope(payload)
