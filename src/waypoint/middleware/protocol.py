"""Before/after middleware protocols.

A before-middleware runs ahead of the handler::

    def auth(request: Request, *args: str) -> Response | None: ...

Returning ``None`` (or ``True``) lets the request through. Any other
value stops the chain: it is turned into the response and the handler
never runs.

An after-middleware runs once the handler has produced a response::

    def stamp(request: Request, response: Response, *args: str) -> Response | None: ...

Returning a ``Response`` replaces the current one; ``None`` keeps it.

No base class required. Classes are instantiated with no arguments and
called through ``__call__`` or, when they define it, ``handle``.
"""

from typing import Any, Protocol

from waypoint.http.request import Request
from waypoint.http.response import Response


class BeforeMiddleware(Protocol):
    """Protocol for middleware listed under ``before``."""

    def __call__(self, request: Request, *args: str) -> Any: ...


class AfterMiddleware(Protocol):
    """Protocol for middleware listed under ``after``."""

    def __call__(self, request: Request, response: Response, *args: str) -> Response | None: ...
