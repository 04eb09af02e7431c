"""HTTP method vocabulary and the method-compatibility rule.

Besides the plain HTTP verbs, a route may be declared with ``ANY``
(every method), ``AJAX`` (any XHR request) or an ``X``-prefixed verb such
as ``XPOST`` (an XHR request with that method).
"""

from collections.abc import Iterable

from waypoint.errors import ConfigurationError

# Order matters: controller action prefixes are tried in this order.
VALID_METHODS: tuple[str, ...] = (
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "HEAD",
    "OPTIONS",
    "PATCH",
    "ANY",
    "AJAX",
    "XGET",
    "XPOST",
    "XPUT",
    "XDELETE",
    "XPATCH",
)

_VALID = frozenset(VALID_METHODS)


def parse_methods(methods: str | Iterable[str]) -> list[str]:
    """Split and validate a method declaration.

    Accepts ``"GET|POST"`` or an iterable of tokens. Tokens are
    upper-cased, empty tokens dropped and duplicates removed while
    keeping declaration order.

    Raises ``ConfigurationError`` for a token outside ``VALID_METHODS``.
    """
    tokens = methods.split("|") if isinstance(methods, str) else list(methods)
    result: list[str] = []
    for token in tokens:
        token = token.strip().upper()
        if not token or token in result:
            continue
        if token not in _VALID:
            msg = f"Method is not valid. [{token}]"
            raise ConfigurationError(msg)
        result.append(token)
    return result


def check_method(declared: str, method: str, *, xhr: bool = False) -> bool:
    """Whether a route declared with *declared* accepts a request *method*.

    ::

        check_method("ANY", "DELETE")             -> True
        check_method("AJAX", "GET", xhr=True)     -> True
        check_method("XPOST", "POST", xhr=True)   -> True
        check_method("XPOST", "POST")             -> False
        check_method("GET", "GET")                -> True
    """
    if declared not in _VALID:
        return False
    if declared == "ANY" or declared == method:
        return True
    if not xhr:
        return False
    if declared == "AJAX":
        return True
    return declared.startswith("X") and declared[1:] == method
