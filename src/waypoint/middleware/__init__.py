"""Middleware — named before/after units run around a route handler.

A middleware is any callable matching one of:
    def before(request: Request, *args: str) -> Response | None
    def after(request: Request, response: Response, *args: str) -> Response | None

Routes reference middleware by callable or by name; names are resolved
through aliases, groups and the configured middleware namespace.
"""

from waypoint.middleware.protocol import AfterMiddleware, BeforeMiddleware
from waypoint.middleware.resolver import MiddlewareResolver, normalize, split_arguments

__all__ = [
    "AfterMiddleware",
    "BeforeMiddleware",
    "MiddlewareResolver",
    "normalize",
    "split_arguments",
]
