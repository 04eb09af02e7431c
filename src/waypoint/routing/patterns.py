"""Named placeholder patterns.

A route template such as ``/users/:id/posts/:slug`` is matched by
substituting every known ``:name`` token with its regex fragment. Each
substitution becomes a named group (``p0``, ``p1``, ...) so captured
values stay positional even when a custom fragment has groups of its own.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType

from waypoint.errors import ConfigurationError

BUILTIN_PATTERNS: Mapping[str, str] = MappingProxyType(
    {
        ":all": r".*",
        ":any": r"[^/]+",
        ":id": r"\d+",
        ":int": r"\d+",
        ":number": r"[+-]?(?:[0-9]*[.])?[0-9]+",
        ":float": r"[+-]?(?:[0-9]*[.])?[0-9]+",
        ":bool": r"true|false|1|0",
        ":string": r"[\w\-_]+",
        ":slug": r"[\w\-_]+",
        ":uuid": r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
        ":date": r"[0-9]{4}-(?:0[1-9]|1[0-2])-(?:0[1-9]|[1-2][0-9]|3[0-1])",
    }
)

TOKEN = re.compile(r":[A-Za-z_][A-Za-z0-9_]*")


def has_placeholder(template: str) -> bool:
    """Whether *template* contains a ``:name`` token."""
    return ":" in template


def _token_name(name: str) -> str:
    return name if name.startswith(":") else f":{name}"


class PatternRegistry:
    """Placeholder token -> regex fragment table.

    Built-in entries are immutable; custom ones can be added or replaced
    at any time during registration. Compiled route expressions are
    memoized per template and dropped whenever the table changes.

    Usage::

        patterns = PatternRegistry()
        patterns.define(":hex", "[0-9a-f]+")
        patterns.compile("/color/:hex").match("/color/ff00aa")
    """

    __slots__ = ("_compiled", "_custom")

    def __init__(self) -> None:
        self._custom: dict[str, str] = {}
        self._compiled: dict[str, tuple[re.Pattern[str], int]] = {}

    def define(self, name: str, fragment: str) -> None:
        """Insert or replace a custom pattern.

        Raises ``ConfigurationError`` if *name* is a built-in pattern.
        """
        self.define_many({name: fragment})

    def define_many(self, patterns: Mapping[str, str]) -> None:
        """Insert or replace several custom patterns.

        Every name is checked before any is stored, so a rejected mapping
        leaves the table unchanged.
        """
        tokens = {_token_name(name): fragment for name, fragment in patterns.items()}
        for token in tokens:
            if token in BUILTIN_PATTERNS:
                msg = f"{token} pattern cannot be changed."
                raise ConfigurationError(msg)
        self._custom.update(tokens)
        self._compiled.clear()

    def get(self, name: str) -> str | None:
        """Return the fragment for *name*, or ``None`` if undefined."""
        token = _token_name(name)
        return BUILTIN_PATTERNS.get(token) or self._custom.get(token)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    @property
    def builtins(self) -> Mapping[str, str]:
        """The immutable built-in patterns."""
        return BUILTIN_PATTERNS

    @property
    def custom(self) -> Mapping[str, str]:
        """A read-only view of the custom patterns."""
        return MappingProxyType(self._custom)

    def resolve(self, template: str) -> str:
        """Turn a route template into a regex body.

        Known tokens become named groups; literal text is escaped.
        Unknown tokens are left as literal text.
        """
        return self._resolve(template)[0]

    def compile(self, template: str) -> tuple[re.Pattern[str], int]:
        """Return the anchored pattern for *template* and its group count."""
        cached = self._compiled.get(template)
        if cached is None:
            body, count = self._resolve(template)
            cached = (re.compile(rf"^{body}$"), count)
            self._compiled[template] = cached
        return cached

    def _resolve(self, template: str) -> tuple[str, int]:
        parts: list[str] = []
        count = 0
        pos = 0
        for token in TOKEN.finditer(template):
            fragment = self.get(token.group())
            if fragment is None:
                continue
            parts.append(re.escape(template[pos : token.start()]))
            parts.append(f"(?P<p{count}>{fragment})")
            count += 1
            pos = token.end()
        parts.append(re.escape(template[pos:]))
        return "".join(parts), count
