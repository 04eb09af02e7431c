"""Request adapter — the effective path and method the router matches on.

The path is the request URI with the front controller location, the
configured base folder and the query string removed. The method is the
declared one unless a ``_method`` form field overrides it.
"""

import posixpath
import re

from waypoint.http.request import Request

_SLASHES = re.compile(r"/{2,}")

METHOD_OVERRIDE_FIELD = "_method"


def normalize_path(path: str = "") -> str:
    """Collapse repeated slashes and trim the ends to exactly one leading slash.

    ::

        normalize_path("//users//42/")  -> "/users/42"
        normalize_path("")              -> "/"
    """
    path = _SLASHES.sub("/", path).strip("/")
    return "/" + path if path else "/"


def base_prefix(base_folder: str, document_root: str = "") -> str:
    """URL prefix for an application that is not served from the web root.

    When *base_folder* is a filesystem location under *document_root*, the
    root is removed first. Returns ``""`` for applications at ``/``.
    """
    if document_root and base_folder.startswith(document_root):
        base_folder = base_folder[len(document_root):]
    prefix = normalize_path(base_folder)
    return "" if prefix == "/" else prefix


def _strip_segment_prefix(path: str, prefix: str) -> str:
    """Remove *prefix* from *path* when it ends on a segment boundary."""
    if not prefix:
        return path
    if path == prefix or path.startswith(prefix + "/"):
        return path[len(prefix):]
    return path


def resolve_request_path(request: Request, base_folder: str = "") -> str:
    """Compute the path the route table is matched against.

    Strips, in order: the query string, the script directory, the script
    filename when it is the next segment (``/index.py/users``), and the
    base folder prefix. The remainder is normalized.
    """
    uri = request.uri.split("?", 1)[0]

    if request.script_name:
        dirname, basename = posixpath.split(request.script_name.rstrip("/"))
        dirname = "" if dirname == "/" else dirname
        uri = _strip_segment_prefix(uri, dirname)
        if basename:
            uri = _strip_segment_prefix(uri, "/" + basename)

    uri = _strip_segment_prefix(uri, base_folder)
    return normalize_path(uri)


def resolve_method(request: Request) -> str:
    """The declared HTTP method, overridden by a non-empty ``_method`` form field."""
    method = request.form.get(METHOD_OVERRIDE_FIELD) or request.method
    return method.upper()
