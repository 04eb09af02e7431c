"""Route table — ordered route records and the group stack.

Records are kept newest-first: every registration is inserted at the head,
so a route declared later is tried before one declared earlier. Once the
table has been loaded from the route cache it is read-only and every
registration call is silently ignored.
"""

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field

from waypoint.http.adapter import normalize_path
from waypoint.loading import ActionDescriptor
from waypoint.middleware.resolver import normalize
from waypoint.routing.methods import VALID_METHODS, parse_methods
from waypoint.routing.route import Callback, MiddlewareRef, Route, derive_name

logger = logging.getLogger("waypoint.router")

# Controller parameter type -> placeholder (":any" when missing)
TYPE_PATTERNS: dict[str, str] = {
    "int": ":int",
    "float": ":float",
    "str": ":string",
    "bool": ":bool",
}

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


@dataclass(slots=True)
class _GroupFrame:
    """An active ``group()`` scope."""

    prefix: str
    before: list[MiddlewareRef] = field(default_factory=list)
    after: list[MiddlewareRef] = field(default_factory=list)


def expand_optional(path: str) -> list[str]:
    """Expand trailing-``?`` segments into one path per arity.

    ::

        expand_optional("/a/b?/c?")  -> ["/a", "/a/b", "/a/b/c"]
        expand_optional("/a/:id")    -> ["/a/:id"]

    Required segments that follow the last optional one stay part of the
    full path.
    """
    current = ""
    expanded: list[str] = []
    for segment in path.split("/"):
        if not segment:
            continue
        if len(segment) > 1 and segment.endswith("?"):
            if not expanded:
                expanded.append(current or "/")
            current = f"{current}/{segment[:-1]}"
            expanded.append(current)
        else:
            current = f"{current}/{segment}"

    if not expanded:
        return [path]
    if expanded[-1] != current:
        expanded.append(current)
    return expanded


def action_route(action: str) -> tuple[str, str]:
    """Infer ``(method, segment)`` from a controller action name.

    The first method token that prefixes the name (case-insensitively)
    becomes the HTTP method, ``ANY`` otherwise. The rest of the name is
    hyphen-cased::

        action_route("getUserProfile")  -> ("GET", "user-profile")
        action_route("post_comment")    -> ("POST", "comment")
        action_route("archive")         -> ("ANY", "archive")
    """
    method = "ANY"
    remainder = action
    for token in VALID_METHODS:
        if action.lower().startswith(token.lower()):
            method = token
            remainder = action[len(token):].removeprefix("_")
            break

    if remainder:
        remainder = remainder[0].lower() + remainder[1:]
    segment = _CAMEL_BOUNDARY.sub(r"\1-\2", remainder).replace("_", "-").lower()
    return method, segment


class RouteTable:
    """Ordered collection of route records plus the active group stack.

    Usage::

        table = RouteTable()
        with table.group("/api", before=["auth"]):
            table.register("GET", "/ping", ping)
        table.list()[0].path  # "/api/ping"
    """

    __slots__ = ("_frames", "_loaded", "_routes", "controllers_namespace")

    def __init__(self, *, controllers_namespace: str = "") -> None:
        self._routes: list[Route] = []
        self._frames: list[_GroupFrame] = []
        self._loaded = False
        self.controllers_namespace = controllers_namespace

    # -- Registration --

    @property
    def loaded(self) -> bool:
        """True once the table was replaced by ``load()`` (read-only)."""
        return self._loaded

    def register(
        self,
        methods: str | Iterable[str],
        path: str,
        callback: Callback,
        *,
        name: str | None = None,
        before: MiddlewareRef | Iterable[MiddlewareRef] | None = None,
        after: MiddlewareRef | Iterable[MiddlewareRef] | None = None,
    ) -> list[Route]:
        """Add one record per method and per optional-segment arity.

        Returns the added records in registration order. Raises
        ``ConfigurationError`` for an unknown method token.
        """
        if self._loaded:
            return []

        tokens = parse_methods(methods)
        added: list[Route] = []
        for method in tokens:
            for variant in expand_optional(path):
                added.append(
                    self._add(variant, method, callback, name=name, before=before, after=after)
                )
        return added

    @contextmanager
    def group(
        self,
        prefix: str,
        *,
        before: MiddlewareRef | Iterable[MiddlewareRef] | None = None,
        after: MiddlewareRef | Iterable[MiddlewareRef] | None = None,
    ) -> Iterator[None]:
        """Scope nested registrations under *prefix* and group middleware.

        The frame is popped when the block exits, even on error.
        """
        if self._loaded:
            yield
            return

        self._frames.append(
            _GroupFrame(prefix=normalize_path(prefix), before=normalize(before), after=normalize(after))
        )
        try:
            yield
        finally:
            self._frames.pop()

    def register_controller(
        self,
        prefix: str,
        reference: str,
        actions: Sequence[ActionDescriptor],
        *,
        main_method: str,
        has_pattern: Callable[[str], bool],
        only: Iterable[str] = (),
        exclude: Iterable[str] = (),
        before: MiddlewareRef | Iterable[MiddlewareRef] | None = None,
        after: MiddlewareRef | Iterable[MiddlewareRef] | None = None,
    ) -> list[Route]:
        """Register one route per controller action.

        *has_pattern* tells whether a placeholder such as ``:int`` is
        defined; typed parameters fall back to ``:any`` otherwise.
        """
        if self._loaded:
            return []

        only = set(only)
        exclude = set(exclude)
        added: list[Route] = []
        for action in actions:
            method, segment = action_route(action.name)
            if (only and segment not in only) or segment in exclude:
                continue

            endpoints: list[str] = []
            for param in action.params:
                pattern = TYPE_PATTERNS.get(param.type or "", ":any")
                if not has_pattern(pattern):
                    pattern = ":any"
                endpoints.append(f"{pattern}?" if param.optional else pattern)

            base = prefix if segment == main_method else f"{prefix}/{segment}"
            path = "/".join([base, *endpoints])
            added.extend(
                self.register(method, path, f"{reference}@{action.name}", before=before, after=after)
            )
        return added

    def _add(
        self,
        path: str,
        method: str,
        callback: Callback,
        *,
        name: str | None,
        before: MiddlewareRef | Iterable[MiddlewareRef] | None,
        after: MiddlewareRef | Iterable[MiddlewareRef] | None,
    ) -> Route:
        group_path = "".join(frame.prefix for frame in self._frames)
        route = Route(
            path=normalize_path(f"{group_path}/{path}"),
            method=method,
            callback=callback,
            name=name or derive_name(callback, self.controllers_namespace),
            before=(*(mw for frame in self._frames for mw in frame.before), *normalize(before)),
            after=(*(mw for frame in self._frames for mw in frame.after), *normalize(after)),
            groups=tuple(frame.prefix.strip("/") for frame in self._frames),
        )
        self._routes.insert(0, route)
        logger.debug("Registered %s %s", route.method, route.path)
        return route

    # -- Bulk load and introspection --

    def load(self, routes: Iterable[Route]) -> None:
        """Replace every record and make the table read-only."""
        self._routes = list(routes)
        self._loaded = True

    def list(self) -> tuple[Route, ...]:
        """Snapshot of all records, newest first."""
        return tuple(self._routes)

    def find(self, name: str) -> Route | None:
        """The first record (in match order) carrying *name*."""
        return next((route for route in self._routes if route.name == name), None)

    def __iter__(self) -> Iterator[Route]:
        return iter(tuple(self._routes))

    def __len__(self) -> int:
        return len(self._routes)
