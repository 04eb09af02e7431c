"""Waypoint — method and path routing for Python web applications.

Maps an HTTP method and URL path to a handler: placeholder patterns,
optional segments, groups, controller scanning, before/after
middleware and a route cache.

Basic usage::

    from waypoint import Request, Router

    router = Router()

    @router.route("GET", "/users/:id")
    def show(user_id):
        return f"user {user_id}"

    response = router.run(Request.build("GET", "/users/42"))

Routers are ASGI applications too::

    uvicorn myapp:router
"""

__version__ = "0.1.0"
__all__ = [
    "CacheError",
    "ConfigurationError",
    "Redirect",
    "Request",
    "Response",
    "RouteCache",
    "Router",
    "RouterConfig",
    "RouterError",
    "WaypointError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from waypoint.routing.router import Router

        return Router

    if name == "RouterConfig":
        from waypoint.config import RouterConfig

        return RouterConfig

    if name == "RouteCache":
        from waypoint.routing.cache import RouteCache

        return RouteCache

    if name == "Request":
        from waypoint.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from waypoint.http import response as _resp

        return getattr(_resp, name)

    if name in ("WaypointError", "RouterError", "ConfigurationError", "CacheError"):
        from waypoint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
