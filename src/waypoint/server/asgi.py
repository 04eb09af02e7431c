"""ASGI bridge — runs the synchronous router behind an ASGI server.

The request body is read in full, a ``Request`` is built from the
scope, and ``Router.run`` executes in an anyio worker thread so that
blocking handlers never stall the event loop.
"""

import logging
from typing import TYPE_CHECKING

import anyio

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint.http.request import Request
from waypoint.server.sender import send_response

if TYPE_CHECKING:
    from waypoint.routing.router import Router

logger = logging.getLogger("waypoint.server")


async def read_body(receive: Receive) -> bytes:
    """Consume the request body messages from *receive*."""
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        body = message.get("body", b"")
        if body:
            chunks.append(body)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def serve(router: "Router", scope: Scope, receive: Receive, send: Send) -> None:
    """Handle one ASGI connection scope."""
    if scope["type"] == "lifespan":
        await _lifespan(receive, send)
        return
    if scope["type"] != "http":
        msg = f"Unsupported ASGI scope type: {scope['type']!r}"
        raise RuntimeError(msg)

    body = await read_body(receive)
    request = Request.from_asgi(scope, body)
    response = await anyio.to_thread.run_sync(router.run, request)
    await send_response(response, send)


async def _lifespan(receive: Receive, send: Send) -> None:
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            logger.debug("lifespan startup")
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            logger.debug("lifespan shutdown")
            await send({"type": "lifespan.shutdown.complete"})
            return
