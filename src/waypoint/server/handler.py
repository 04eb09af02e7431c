"""Request lifecycle — match, middleware, handler, terminal handlers.

One synchronous pass per request::

    path, method  ->  match  ->  before middleware  ->  handler  ->  after middleware
                        |
                        +-> no match: not-found handler (404)

Any exception is re-raised in debug mode, otherwise logged and turned
into the error handler's response. HEAD requests lose their body.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

from waypoint.http.adapter import resolve_method, resolve_request_path
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.route import MiddlewareRef, RouteMatch
from waypoint.server.command import CommandRunner
from waypoint.server.errors import call_terminal_handler, error_status
from waypoint.server.negotiation import negotiate

logger = logging.getLogger("waypoint.server")

Matcher: TypeAlias = Callable[..., RouteMatch | None]


def handle_request(
    request: Request,
    *,
    match: Matcher,
    runner: CommandRunner,
    global_middleware: Sequence[MiddlewareRef],
    not_found: Callable[..., Any],
    error: Callable[..., Any],
    base_folder: str = "",
    debug: bool = False,
) -> Response:
    """Process a single request through the full pipeline."""
    method = request.method.upper()
    try:
        path = resolve_request_path(request, base_folder)
        method = resolve_method(request)
        found = match(method, path, xhr=request.is_xhr)

        if found is None:
            logger.debug("404 %s %s", method, path)
            response = call_terminal_handler(not_found, request, 404)
        else:
            logger.debug("%s %s -> %s", method, path, found.route.path)
            response = _dispatch(found, request, runner, global_middleware)

    except Exception as exc:
        if debug:
            raise
        status = error_status(exc)
        logger.exception("%d %s %s", status, request.method, request.uri)
        response = call_terminal_handler(error, request, status, exc)

    if method == "HEAD":
        response = response.without_body()
    return response


def _dispatch(
    found: RouteMatch,
    request: Request,
    runner: CommandRunner,
    global_middleware: Sequence[MiddlewareRef],
) -> Response:
    route = found.route

    halted = runner.run_before((*global_middleware, *route.before), request)
    if halted is not None:
        return halted

    response = negotiate(runner.run_route(route.callback, found.params))
    return runner.run_after(route.after, request, response)
