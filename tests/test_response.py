"""Tests for waypoint.http.response — Response chaining and Redirect."""

from waypoint.http.response import Redirect, Response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == ""
        assert r.status == 200
        assert r.content_type == "text/html; charset=utf-8"
        assert r.headers == ()

    def test_with_status(self) -> None:
        assert Response().with_status(201).status == 201

    def test_chained_headers(self) -> None:
        r = Response().with_header("A", "1").with_headers({"B": "2"})
        assert r.headers == (("A", "1"), ("B", "2"))
        assert r.header("b") == "2"
        assert r.header("missing") is None

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("text/plain").content_type == "text/plain"

    def test_immutable_chain(self) -> None:
        original = Response("x")
        original.with_status(500)
        assert original.status == 200

    def test_without_body(self) -> None:
        r = Response("content", status=201).with_header("X", "1").without_body()
        assert r.body_bytes == b""
        assert r.status == 201
        assert r.header("X") == "1"

    def test_text_and_bytes(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()
        assert Response(b"raw").text == "raw"


class TestRedirect:
    def test_default_status(self) -> None:
        assert Redirect("/login").status == 302
