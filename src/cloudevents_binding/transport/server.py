"""Starlette integration: requests in, CloudEvents out.

Example:
    async def on_event(event: CloudEvent) -> None:
        ...

    app = Starlette(routes=[Route("/events", cloudevent_endpoint(on_event), methods=["POST"])])
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..constants import CHARSET_DEFAULT, Mode, Version
from ..errors import ErrorKind, ValidationError
from ..event import CloudEvent
from ..http import HTTP
from ..message import Binding, Message

logger = logging.getLogger(__name__)

EventHandler = Callable[[CloudEvent], Awaitable[CloudEvent | None]]

# Content errors are the client's; a missing codec is an unsupported media type
_STATUS_BY_KIND = {
    ErrorKind.UNSUPPORTED_CONTENT_TYPE: 415,
}


async def message_from_request(request: Request) -> Message:
    """Read a starlette request into a Message."""
    raw = await request.body()
    return Message(
        headers=dict(request.headers.items()),
        body=raw.decode(CHARSET_DEFAULT) if raw else None,
    )


def response_from_message(message: Message, status_code: int = 200) -> Response:
    """Write a Message as a starlette response."""
    body: Any = message.body
    if isinstance(body, dict):
        return JSONResponse(body, status_code=status_code, headers=message.headers)
    return Response(content=body or "", status_code=status_code, headers=message.headers)


def cloudevent_endpoint(
    handler: EventHandler,
    version: Version | str | None = None,
    mode: Mode = Mode.BINARY,
    binding: Binding = HTTP,
) -> Callable[[Request], Awaitable[Response]]:
    """Create a starlette endpoint that receives CloudEvents.

    The handler receives each validated event. If it returns an event, that
    event is sent back in the given content mode with status 200; otherwise the
    endpoint answers 202. Invalid messages get a JSON error document.

    Args:
        handler: Coroutine called with each received event
        version: Spec version passed to the receiver
        mode: Content mode for reply events
        binding: Binding used to receive and serialize
    """

    async def endpoint(request: Request) -> Response:
        message = await message_from_request(request)
        try:
            event = binding.receive(message, version)
        except ValidationError as e:
            logger.warning(f"Rejected CloudEvent from {request.client}: {e}")
            return JSONResponse(e.to_dict(), status_code=_STATUS_BY_KIND.get(e.kind, 400))

        reply = await handler(event)
        if reply is None:
            return Response(status_code=202)
        serialize = binding.structured if mode is Mode.STRUCTURED else binding.binary
        return response_from_message(serialize(reply))

    return endpoint
