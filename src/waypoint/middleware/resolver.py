"""Middleware resolution — identifiers to ordered invocation targets.

Routes carry middleware as identifiers. An identifier is a callable, a
class, or a string. Strings may name an alias (route middleware), a
middleware group, or a class reference, and may carry arguments after a
colon::

    resolver.set_route_middleware({"auth": AuthMiddleware})
    resolver.set_middleware_group({"web": ["session", "csrf"]})

    list(resolver.expand(["web", "throttle:60,1"]))
    # [("session", ()), ("csrf", ()), ("throttle", ("60", "1"))]

Turning a target into something executable is the command runner's job.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from waypoint.errors import ConfigurationError
from waypoint.routing.route import MiddlewareRef

# Guards against groups that (directly or indirectly) contain themselves
_MAX_DEPTH = 16


def normalize(middleware: MiddlewareRef | Iterable[MiddlewareRef] | None) -> list[MiddlewareRef]:
    """Normalize a single identifier or a collection into a list.

    ``None`` and empty input give ``[]``. Strings, classes and callables
    are wrapped; other iterables are copied in order.
    """
    if middleware is None:
        return []
    if isinstance(middleware, str):
        return [middleware] if middleware else []
    if callable(middleware):
        return [middleware]
    return list(middleware)


def split_arguments(identifier: str) -> tuple[str, tuple[str, ...]]:
    """Split ``"name:a,b"`` into ``("name", ("a", "b"))``."""
    name, _, raw = identifier.partition(":")
    args = tuple(arg.strip() for arg in raw.split(",")) if raw else ()
    return name, args


class MiddlewareResolver:
    """Registries of global middleware, aliases and groups.

    Global middleware runs before every matched route's own chain.
    Aliases map a short name to a target. Groups map a name to a list of
    identifiers, each resolved again.
    """

    __slots__ = ("_aliases", "_global", "_groups")

    def __init__(self) -> None:
        self._global: list[MiddlewareRef] = []
        self._aliases: dict[str, MiddlewareRef] = {}
        self._groups: dict[str, list[MiddlewareRef]] = {}

    def set_middleware(self, middleware: MiddlewareRef | Iterable[MiddlewareRef]) -> None:
        """Replace the global middleware list."""
        self._global = normalize(middleware)

    def set_route_middleware(self, aliases: Mapping[str, MiddlewareRef]) -> None:
        """Replace the alias table."""
        self._aliases = dict(aliases)

    def set_middleware_group(
        self, groups: Mapping[str, MiddlewareRef | Iterable[MiddlewareRef]]
    ) -> None:
        """Replace the middleware groups."""
        self._groups = {name: normalize(members) for name, members in groups.items()}

    @property
    def global_middleware(self) -> tuple[MiddlewareRef, ...]:
        return tuple(self._global)

    def get_middlewares(self) -> dict[str, Any]:
        """Snapshot of the three registries."""
        return {
            "middlewares": list(self._global),
            "route_middlewares": dict(self._aliases),
            "middleware_groups": {name: list(members) for name, members in self._groups.items()},
        }

    def expand(
        self, identifiers: Iterable[MiddlewareRef]
    ) -> Iterator[tuple[MiddlewareRef, tuple[str, ...]]]:
        """Yield ``(target, args)`` for every identifier, groups flattened in order."""
        for identifier in identifiers:
            yield from self._expand_one(identifier, (), 0)

    def _expand_one(
        self, identifier: MiddlewareRef, args: tuple[str, ...], depth: int
    ) -> Iterator[tuple[MiddlewareRef, tuple[str, ...]]]:
        if not isinstance(identifier, str):
            yield identifier, args
            return

        name, own_args = split_arguments(identifier)
        args = own_args or args

        if name in self._groups:
            if depth >= _MAX_DEPTH:
                msg = f"Middleware group {name!r} nests too deeply."
                raise ConfigurationError(msg)
            for member in self._groups[name]:
                yield from self._expand_one(member, args, depth + 1)
            return

        yield self._aliases.get(name, name), args
