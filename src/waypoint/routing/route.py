"""Route and RouteMatch frozen dataclasses."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from waypoint.routing.patterns import has_placeholder

# Handler: a callable, or a "Controller@method" reference
Callback: TypeAlias = Callable[..., Any] | str

# Middleware identifier: a name/reference ("auth", "throttle:60,1") or a callable
MiddlewareRef: TypeAlias = Callable[..., Any] | str

_NON_WORD = re.compile(r"\W")


def derive_name(callback: Callback, namespace: str = "") -> str | None:
    """Derive a route name from a string callback.

    The controller namespace is removed, every non-word character becomes
    a dot and the result is lowercased::

        derive_name("Admin.UserController@show")  -> "admin.usercontroller.show"

    Callables have no derived name.
    """
    if not isinstance(callback, str):
        return None
    if namespace:
        callback = callback.replace(f"{namespace}.", "", 1)
    return _NON_WORD.sub(".", callback).lower()


@dataclass(frozen=True, slots=True)
class Route:
    """One registered method+path+handler record.

    Created during registration (or loaded from the route cache) and
    never mutated afterwards.
    """

    path: str
    method: str
    callback: Callback
    name: str | None = None
    before: tuple[MiddlewareRef, ...] = ()
    after: tuple[MiddlewareRef, ...] = ()
    groups: tuple[str, ...] = field(default=())

    @property
    def has_placeholder(self) -> bool:
        """Whether the path template contains a ``:name`` token."""
        return has_placeholder(self.path)

    @property
    def cacheable(self) -> bool:
        """Whether the record can be written to the route cache."""
        return isinstance(self.callback, str) and all(
            isinstance(mw, str) for mw in (*self.before, *self.after)
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize a cacheable record to plain JSON types."""
        return {
            "route": self.path,
            "method": self.method,
            "callback": self.callback,
            "name": self.name,
            "before": list(self.before),
            "after": list(self.after),
            "groups": list(self.groups),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Route":
        """Rebuild a record written by ``to_dict``."""
        return cls(
            path=data["route"],
            method=data["method"],
            callback=data["callback"],
            name=data.get("name"),
            before=tuple(data.get("before", ())),
            after=tuple(data.get("after", ())),
            groups=tuple(data.get("groups", ())),
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``params`` holds the route-local captured values in template order,
    URL-decoded and stripped.
    """

    route: Route
    params: tuple[str, ...] = ()
