"""Waypoint CLI — route table inspection and cache generation.

Entry point registered as ``waypoint`` in ``pyproject.toml``::

    [project.scripts]
    waypoint = "waypoint.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``waypoint`` command."""
    parser = argparse.ArgumentParser(
        prog="waypoint",
        description="Waypoint — method and path routing for Python web applications.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- waypoint routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("router", help="Import string (e.g. myapp:router)")

    # -- waypoint cache ---------------------------------------------------
    cache_parser = subparsers.add_parser("cache", help="Write the route cache file")
    cache_parser.add_argument("router", help="Import string (e.g. myapp:router)")
    cache_parser.add_argument(
        "--clear",
        action="store_true",
        help="Remove the cache file instead of writing it",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from waypoint.cli._routes import run_routes

        run_routes(args)
    elif args.command == "cache":
        from waypoint.cli._cache import run_cache

        run_cache(args)
