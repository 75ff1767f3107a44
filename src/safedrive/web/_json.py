"""Request/response JSON helpers."""

from __future__ import annotations

import json
from typing import Any

from aiohttp import web


def envelope(payload: dict[str, Any], *, status: int = 200) -> web.Response:
    return web.json_response(payload, status=status)


def error_response(message: str, *, status: int) -> web.Response:
    return envelope({"success": False, "error": message}, status=status)


async def read_json_object(request: web.Request) -> dict[str, Any]:
    """Decode the request body as a JSON object.

    A missing or blank body is an empty object. Anything else that is not
    a JSON object is rejected with ``400``.
    """
    if not request.body_exists:
        return {}
    text = await request.text()
    if not text.strip():
        return {}
    try:
        body = json.loads(text)
    except json.JSONDecodeError as exc:
        raise web.HTTPBadRequest(reason="Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise web.HTTPBadRequest(reason="Request body must be a JSON object")
    return body
