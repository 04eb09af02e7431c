"""Route cache — a JSON snapshot of the route table.

When the cache file exists at startup the router loads it and ignores
every registration call, skipping application route setup entirely.
Only string callbacks and string middleware can be cached.
"""

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from waypoint.errors import CacheError
from waypoint.routing.route import Route

logger = logging.getLogger("waypoint.cache")

CACHE_VERSION = 1


class RouteCache:
    """Reads and writes the route snapshot at *path*.

    Usage::

        cache = RouteCache("var/routes.json")
        cache.save(router.list())
        routes = cache.load()  # list[Route] | None
    """

    __slots__ = ("path",)

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, routes: Iterable[Route]) -> None:
        """Write *routes* atomically.

        Raises ``CacheError`` if a route holds a callable (a closure
        cannot be serialized) or the file cannot be written.
        """
        routes = list(routes)
        for route in routes:
            if not route.cacheable:
                msg = "Routes cannot contain a Closure/Function callback while caching."
                raise CacheError(msg)

        payload = {
            "version": CACHE_VERSION,
            "routes": [route.to_dict() for route in routes],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".routes-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(payload, fh, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as exc:
            msg = "Routes cache file could not be written."
            raise CacheError(msg) from exc

        logger.info("Cached %d routes to %s", len(routes), self.path)

    def load(self) -> list[Route] | None:
        """Read the snapshot.

        Returns ``None`` when the file is missing, unreadable or not a
        snapshot written by ``save()``.
        """
        if not self.exists:
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            if payload.get("version") != CACHE_VERSION:
                logger.warning("Ignoring route cache %s: unknown version", self.path)
                return None
            routes = [Route.from_dict(record) for record in payload["routes"]]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Ignoring unreadable route cache %s: %s", self.path, exc)
            return None

        logger.debug("Loaded %d routes from %s", len(routes), self.path)
        return routes

    def clear(self) -> None:
        """Delete the snapshot if present."""
        self.path.unlink(missing_ok=True)
