"""Terminal handlers — not-found and error responses.

Both are plain callables stored on the router and replaceable through
``Router.not_found()`` and ``Router.error()``. The defaults answer with
a fixed message and the matching status code.
"""

import inspect
from collections.abc import Callable
from typing import Any

from waypoint.errors import RouterError
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.server.negotiation import negotiate

NOT_FOUND_MESSAGE = "Looks like page not found or something went wrong. Please try again."
ERROR_MESSAGE = "Oops! Something went wrong. Please try again."


def error_status(exc: BaseException) -> int:
    """HTTP status for a dispatch failure: the router error's own, else 500."""
    if isinstance(exc, RouterError):
        return exc.status
    return 500


def default_not_found(request: Request) -> Response:  # noqa: ARG001
    """404 with a fixed message."""
    return Response(body=NOT_FOUND_MESSAGE, status=404)


def default_error(request: Request, exc: Exception) -> Response:  # noqa: ARG001
    """A fixed message with the status the error maps to (500 by default)."""
    return Response(body=ERROR_MESSAGE, status=error_status(exc))


def _positional_arity(handler: Callable[..., Any]) -> int:
    try:
        params = list(inspect.signature(handler).parameters.values())
    except (TypeError, ValueError):
        return 2
    if any(p.kind is p.VAR_POSITIONAL for p in params):
        return 2
    return sum(1 for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD))


def call_terminal_handler(
    handler: Callable[..., Any],
    request: Request,
    status: int,
    exc: Exception | None = None,
) -> Response:
    """Invoke a not-found or error handler with introspected arguments.

    Handlers may accept zero, one (request), or two (request, exc) args.
    *status* is applied unless the handler returned a Response with a
    status of its own (anything other than 200).
    """
    arity = _positional_arity(handler)
    if arity >= 2:
        result = handler(request, exc)
    elif arity == 1:
        result = handler(request)
    else:
        result = handler()

    response = negotiate(result)
    if response.status == 200:
        response = response.with_status(status)
    return response
