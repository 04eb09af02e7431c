"""Tests for waypoint.server.errors — default and custom terminal handlers."""

from waypoint.errors import CacheError, ConfigurationError, RouterError
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.server.errors import (
    ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    call_terminal_handler,
    default_error,
    default_not_found,
    error_status,
)

REQUEST = Request.build("GET", "/missing")


class TestDefaults:
    def test_not_found(self) -> None:
        response = default_not_found(REQUEST)
        assert response.status == 404
        assert response.text == NOT_FOUND_MESSAGE

    def test_error(self) -> None:
        response = default_error(REQUEST, RuntimeError("x"))
        assert response.status == 500
        assert response.text == ERROR_MESSAGE


class TestErrorStatus:
    def test_plain_exception_is_500(self) -> None:
        assert error_status(ValueError()) == 500

    def test_router_error_status(self) -> None:
        assert error_status(RouterError("teapot", status=418)) == 418
        assert error_status(ConfigurationError("bad")) == 500
        assert error_status(CacheError("bad", status=503)) == 503


class TestCallTerminalHandler:
    def test_zero_args(self) -> None:
        response = call_terminal_handler(lambda: "gone", REQUEST, 404)
        assert response.status == 404
        assert response.text == "gone"

    def test_request_arg(self) -> None:
        response = call_terminal_handler(lambda request: request.path, REQUEST, 404)
        assert response.text == "/missing"

    def test_request_and_exception(self) -> None:
        exc = RuntimeError("kaboom")
        response = call_terminal_handler(lambda request, error: str(error), REQUEST, 500, exc)
        assert response.status == 500
        assert response.text == "kaboom"

    def test_explicit_status_kept(self) -> None:
        response = call_terminal_handler(
            lambda: Response("maintenance", status=503), REQUEST, 500
        )
        assert response.status == 503
