"""``waypoint cache`` — write or clear the route cache file."""

import argparse
import sys

from waypoint.cli._resolve import resolve_router
from waypoint.errors import RouterError
from waypoint.routing.cache import RouteCache


def run_cache(args: argparse.Namespace) -> None:
    """Persist the resolved router's table to its configured cache path."""
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not router.config.cache:
        print("Error: router has no cache file configured.", file=sys.stderr)
        raise SystemExit(1)

    cache = RouteCache(router.config.cache)
    if args.clear:
        cache.clear()
        print(f"Removed {cache.path}")
        return

    try:
        router.cache()
    except RouterError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    print(f"Wrote {len(router)} routes to {cache.path}")
