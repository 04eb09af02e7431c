"""Immutable HTTP request.

The router never reads sockets: a request arrives fully parsed. Metadata,
query string and form fields are frozen at creation.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from waypoint.http.forms import FormData, is_form_content_type, parse_form_data
from waypoint.http.headers import Headers
from waypoint.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``uri`` is the raw request target (path plus optional query string),
    the equivalent of ``REQUEST_URI``. ``script_name`` is the front
    controller location the application is mounted under, the equivalent
    of ``SCRIPT_NAME``; it is empty for applications served from the root.

    Build one directly in tests::

        Request.build("POST", "/users/1", form={"_method": "PUT"})
    """

    method: str
    uri: str
    headers: Headers = field(default_factory=Headers)
    form: FormData = field(default_factory=FormData)
    body: bytes = b""
    script_name: str = ""
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # -- Computed properties --

    @property
    def path(self) -> str:
        """The raw request path, without the query string."""
        return self.uri.split("?", 1)[0]

    @property
    def query(self) -> QueryParams:
        """Parsed query string."""
        _, _, qs = self.uri.partition("?")
        return QueryParams(qs)

    @property
    def is_xhr(self) -> bool:
        """True if the request was sent with ``X-Requested-With: XMLHttpRequest``."""
        return (self.headers.get("x-requested-with") or "").lower() == "xmlhttprequest"

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def is_method(self, method: str) -> bool:
        """Whether the declared HTTP method equals *method* (case-insensitive)."""
        return self.method.upper() == method.upper()

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        uri: str,
        *,
        headers: Mapping[str, str] | None = None,
        form: Mapping[str, str] | None = None,
        body: bytes = b"",
        script_name: str = "",
        xhr: bool = False,
    ) -> "Request":
        """Create a request from plain Python values.

        ``xhr=True`` adds the ``X-Requested-With: XMLHttpRequest`` header.
        """
        merged = dict(headers or {})
        if xhr:
            merged["X-Requested-With"] = "XMLHttpRequest"
        return cls(
            method=method.upper(),
            uri=uri,
            headers=Headers.from_mapping(merged),
            form=FormData.from_mapping(form),
            body=body,
            script_name=script_name,
        )

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], body: bytes = b"") -> "Request":
        """Create a request from an ASGI HTTP scope and its full body.

        Form-encoded bodies are parsed eagerly so ``_method`` overrides
        are visible to the router. ``root_path`` becomes ``script_name``.
        """
        headers = Headers(tuple(scope.get("headers", ())))
        root_path = scope.get("root_path", "")
        path = scope["path"]
        query_string = scope.get("query_string", b"").decode("latin-1")
        uri = f"{root_path}{path}" if root_path and not path.startswith(root_path) else path
        if query_string:
            uri = f"{uri}?{query_string}"

        content_type = headers.get("content-type")
        form = FormData()
        if body and content_type and is_form_content_type(content_type):
            form = parse_form_data(body, content_type)

        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            uri=uri,
            headers=headers,
            form=form,
            body=body,
            script_name=root_path,
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
