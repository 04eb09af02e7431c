"""Command execution — turns route callbacks and middleware into calls.

Callables are invoked directly. String references are resolved through
the controller and middleware loaders:

- ``"UserController@show"`` instantiates ``UserController`` and calls
  its ``show`` method with the captured parameters.
- ``"Dashboard"`` (no ``@``) instantiates an invokable controller and
  calls the instance.
- Middleware classes are instantiated with no arguments; their
  ``handle`` method is used when defined, ``__call__`` otherwise.
"""

from collections.abc import Callable, Iterable
from typing import Any

from waypoint.errors import ConfigurationError
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.loading import ReferenceLoader
from waypoint.middleware.protocol import AfterMiddleware, BeforeMiddleware
from waypoint.middleware.resolver import MiddlewareResolver
from waypoint.routing.route import Callback, MiddlewareRef
from waypoint.server.negotiation import negotiate


class CommandRunner:
    """Executes handlers and before/after middleware for a matched route."""

    __slots__ = ("controllers", "middlewares", "resolver")

    def __init__(
        self,
        controllers: ReferenceLoader,
        middlewares: ReferenceLoader,
        resolver: MiddlewareResolver,
    ) -> None:
        self.controllers = controllers
        self.middlewares = middlewares
        self.resolver = resolver

    # -- Handlers --

    def run_route(self, callback: Callback, params: tuple[str, ...]) -> Any:
        """Invoke *callback* with the captured parameters, in order."""
        return self.resolve_callback(callback)(*params)

    def resolve_callback(self, callback: Callback) -> Callable[..., Any]:
        """Return the callable behind a route callback.

        Raises ``ConfigurationError`` when the controller or its method
        does not exist.
        """
        if not isinstance(callback, str):
            return callback

        reference, _, method = callback.partition("@")
        target = self.controllers.load(reference)
        controller = target() if isinstance(target, type) else target

        if not method:
            if not callable(controller):
                msg = f"{reference} class is not invokable."
                raise ConfigurationError(msg)
            return controller

        action = getattr(controller, method, None)
        if action is None or not callable(action):
            msg = f"{method} method is not found in {reference} class."
            raise ConfigurationError(msg)
        return action

    # -- Middleware --

    def run_before(self, identifiers: Iterable[MiddlewareRef], request: Request) -> Response | None:
        """Run before-middleware in order.

        Returns the short-circuit response of the first middleware that
        did not let the request through, or ``None``. A middleware returning
        ``False`` denies the request with an empty 403.
        """
        for target, args in self.resolver.expand(identifiers):
            result = self.resolve_middleware(target)(request, *args)
            if result is None or result is True:
                continue
            if result is False:
                return Response(body="", status=403)
            return negotiate(result)
        return None

    def run_after(
        self,
        identifiers: Iterable[MiddlewareRef],
        request: Request,
        response: Response,
    ) -> Response:
        """Run after-middleware in order, threading the response through."""
        for target, args in self.resolver.expand(identifiers):
            result = self.resolve_middleware(target)(request, response, *args)
            if result is not None:
                response = negotiate(result)
        return response

    def resolve_middleware(
        self, target: MiddlewareRef | type
    ) -> BeforeMiddleware | AfterMiddleware:
        """Return the callable behind a resolved middleware target."""
        if isinstance(target, str):
            target = self.middlewares.load(target)
        if isinstance(target, type):
            instance = target()
            target = getattr(instance, "handle", instance)
        if not callable(target):
            msg = f"Middleware {target!r} is not callable."
            raise ConfigurationError(msg)
        return target
