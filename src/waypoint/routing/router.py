"""The router — registration API and request entry point.

Mutable during setup (routes, groups, patterns, middleware registries).
Read-only while handling requests. When a route cache file exists at
construction time the table is loaded from it and every registration
call becomes a no-op.
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeAlias

from waypoint._internal.asgi import Receive, Scope, Send
from waypoint._internal.types import ErrorHandler, NotFoundHandler
from waypoint.config import RouterConfig
from waypoint.errors import ConfigurationError
from waypoint.http.adapter import base_prefix
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.loading import ReferenceLoader, describe_actions
from waypoint.middleware.resolver import MiddlewareResolver
from waypoint.routing.cache import RouteCache
from waypoint.routing.matcher import match_route
from waypoint.routing.patterns import PatternRegistry
from waypoint.routing.route import Callback, MiddlewareRef, Route, RouteMatch
from waypoint.routing.table import RouteTable
from waypoint.server.command import CommandRunner
from waypoint.server.errors import default_error, default_not_found
from waypoint.server.handler import handle_request

logger = logging.getLogger("waypoint.router")

Middlewares: TypeAlias = MiddlewareRef | Iterable[MiddlewareRef] | None


class Router:
    """Method+path router with groups, patterns, middleware and a route cache.

    Usage::

        router = Router(RouterConfig(cache="var/routes.json"))

        router.get("/", "HomeController@main")
        router.get("/users/:id", "UserController@show", name="user.show")

        with router.group("/admin", before="auth"):
            router.controller("/reports", "admin.ReportController")

        response = router.run(request)

    Thread safety:
        Registration is single-threaded (setup code at import time).
        ``run()`` never mutates the route table or the pattern definitions.
        Compiled patterns are memoized on first use, and controller and
        middleware references are resolved once under the loader lock.
    """

    __slots__ = (
        "_cache",
        "_controllers",
        "_error_handler",
        "_middlewares",
        "_not_found_handler",
        "_patterns",
        "_resolver",
        "_runner",
        "_table",
        "base_folder",
        "config",
    )

    def __init__(self, config: RouterConfig | Mapping[str, Any] | None = None) -> None:
        if isinstance(config, Mapping):
            config = RouterConfig.from_mapping(config)
        self.config: RouterConfig = config or RouterConfig()
        self.base_folder = base_prefix(self.config.base_folder, self.config.document_root)

        self._patterns = PatternRegistry()
        self._table = RouteTable(controllers_namespace=self.config.controllers_namespace)
        self._resolver = MiddlewareResolver()
        self._controllers = ReferenceLoader(
            self.config.controllers_path, self.config.controllers_namespace, kind="controller"
        )
        self._middlewares = ReferenceLoader(
            self.config.middlewares_path, self.config.middlewares_namespace, kind="middleware"
        )
        self._runner = CommandRunner(self._controllers, self._middlewares, self._resolver)

        self._not_found_handler: NotFoundHandler = default_not_found
        self._error_handler: ErrorHandler = default_error

        self._cache: RouteCache | None = RouteCache(self.config.cache) if self.config.cache else None
        self._load_cache()

    # -- Route registration --

    def add(
        self,
        methods: str | Iterable[str],
        path: str,
        callback: Callback,
        *,
        name: str | None = None,
        before: Middlewares = None,
        after: Middlewares = None,
    ) -> "Router":
        """Register *callback* for one or more methods (``"GET|POST"`` or a list)."""
        self._table.register(methods, path, callback, name=name, before=before, after=after)
        return self

    def route(
        self,
        methods: str | Iterable[str],
        path: str,
        *,
        name: str | None = None,
        before: Middlewares = None,
        after: Middlewares = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a handler via decorator."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add(methods, path, func, name=name, before=before, after=after)
            return func

        return decorator

    def get(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("GET", path, callback, **options)

    def post(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("POST", path, callback, **options)

    def put(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("PUT", path, callback, **options)

    def delete(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("DELETE", path, callback, **options)

    def head(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("HEAD", path, callback, **options)

    def options(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("OPTIONS", path, callback, **options)

    def patch(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("PATCH", path, callback, **options)

    def any(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("ANY", path, callback, **options)

    def ajax(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("AJAX", path, callback, **options)

    def xget(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("XGET", path, callback, **options)

    def xpost(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("XPOST", path, callback, **options)

    def xput(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("XPUT", path, callback, **options)

    def xdelete(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("XDELETE", path, callback, **options)

    def xpatch(self, path: str, callback: Callback, **options: Any) -> "Router":
        return self.add("XPATCH", path, callback, **options)

    def group(
        self,
        prefix: str,
        body: Callable[["Router"], Any] | None = None,
        *,
        before: Middlewares = None,
        after: Middlewares = None,
    ) -> AbstractContextManager[None]:
        """Scope registrations under *prefix* and group-level middleware.

        With *body*, calls ``body(router)`` inside the scope::

            router.group("/api", lambda r: r.get("/ping", ping), before="auth")

        Without it, returns a context manager::

            with router.group("/api", before="auth"):
                router.get("/ping", ping)

        The group is closed when the scope exits, even on error.
        """
        scope = self._table.group(prefix, before=before, after=after)
        if body is None:
            return scope
        with scope:
            body(self)
        return nullcontext()

    def controller(
        self,
        path: str,
        controller: str | type,
        *,
        only: Iterable[str] = (),
        exclude: Iterable[str] = (),
        before: Middlewares = None,
        after: Middlewares = None,
    ) -> "Router":
        """Register every public action of a controller under *path*.

        ``only`` / ``exclude`` filter on the generated URL segment
        (``getUserProfile`` -> ``user-profile``). Raises
        ``ConfigurationError`` if a string reference cannot be resolved.
        """
        if self._table.loaded:
            return self

        if isinstance(controller, str):
            reference = controller.replace("/", ".").replace("\\", ".")
            target = self._controllers.load(reference)
        else:
            reference = f"{controller.__module__}.{controller.__qualname__}"
            target = controller

        self._table.register_controller(
            path,
            reference,
            describe_actions(target),
            main_method=self.config.main_method,
            has_pattern=self._patterns.__contains__,
            only=only,
            exclude=exclude,
            before=before,
            after=after,
        )
        return self

    def pattern(self, name: str | Mapping[str, str], fragment: str | None = None) -> None:
        """Define one custom placeholder, or several from a mapping.

        Raises ``ConfigurationError`` when redefining a built-in pattern.
        """
        if isinstance(name, Mapping):
            self._patterns.define_many(name)
            return
        if fragment is None:
            msg = "pattern() needs a regex fragment when given a single name"
            raise TypeError(msg)
        self._patterns.define(name, fragment)

    # -- Middleware registries --

    def set_middleware(self, middleware: Middlewares) -> None:
        """Global middleware, run before every matched route's own chain."""
        self._resolver.set_middleware(middleware or [])

    def set_route_middleware(self, aliases: Mapping[str, MiddlewareRef]) -> None:
        """Short names for middleware targets (``{"auth": AuthMiddleware}``)."""
        self._resolver.set_route_middleware(aliases)

    def set_middleware_group(self, groups: Mapping[str, Middlewares]) -> None:
        """Named lists of middleware (``{"web": ["session", "csrf"]}``)."""
        self._resolver.set_middleware_group({k: v or [] for k, v in groups.items()})

    def get_middlewares(self) -> dict[str, Any]:
        return self._resolver.get_middlewares()

    # -- Terminal handlers --

    def not_found(self, handler: NotFoundHandler) -> NotFoundHandler:
        """Replace the not-found handler. Usable as a decorator."""
        self._not_found_handler = handler
        return handler

    def error(self, handler: ErrorHandler) -> ErrorHandler:
        """Replace the error handler. Usable as a decorator."""
        self._error_handler = handler
        return handler

    # -- Request handling --

    def match(self, method: str, path: str, *, xhr: bool = False) -> RouteMatch | None:
        """Return the first route accepting *method* and the normalized *path*."""
        return match_route(self._table, self._patterns, method.upper(), path, xhr=xhr)

    def run(self, request: Request) -> Response:
        """Dispatch *request* and return the response to send."""
        return handle_request(
            request,
            match=self.match,
            runner=self._runner,
            global_middleware=self._resolver.global_middleware,
            not_found=self._not_found_handler,
            error=self._error_handler,
            base_folder=self.base_folder,
            debug=self.config.debug,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        from waypoint.server.asgi import serve

        await serve(self, scope, receive, send)

    # -- Cache --

    @property
    def cache_loaded(self) -> bool:
        """True when the route table came from the cache file."""
        return self._table.loaded

    def cache(self) -> bool:
        """Write the current route table to the configured cache file.

        Raises ``CacheError`` when a route holds a callable or the file
        cannot be written, ``ConfigurationError`` when no cache path is set.
        """
        if self._cache is None:
            msg = "No route cache file configured. Pass cache= to RouterConfig."
            raise ConfigurationError(msg)
        self._cache.save(self._table.list())
        return True

    def _load_cache(self) -> bool:
        if self._cache is None:
            return False
        routes = self._cache.load()
        if routes is None:
            return False
        self._table.load(routes)
        logger.info("Route table loaded from cache %s", self._cache.path)
        return True

    # -- Introspection --

    def list(self) -> tuple[Route, ...]:
        """Snapshot of every route record, in match order."""
        return self._table.list()

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._table.list()

    @property
    def patterns(self) -> PatternRegistry:
        return self._patterns

    def find(self, name: str) -> Route | None:
        """The first route (in match order) registered under *name*."""
        return self._table.find(name)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)
