"""Waypoint exception hierarchy.

Shared across the route table, the cache, and the dispatcher so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


@dataclass(slots=True, eq=False)
class RouterError(WaypointError):
    """A router failure tagged with the HTTP status it maps to.

    Registration-time errors propagate to the caller. Errors raised while
    dispatching are caught by ``Router.run()`` and handed to the error
    handler together with ``status``.
    """

    message: str = ""
    status: int = 500

    def __str__(self) -> str:
        return self.message or str(self.status)


class ConfigurationError(RouterError):
    """Invalid router setup.

    Raised for unknown method tokens, redefinition of a built-in pattern,
    and controller or middleware references that cannot be resolved.
    """


class CacheError(RouterError):
    """The route cache could not be written.

    Also raised when a route holds a callable that cannot be serialized.
    """
