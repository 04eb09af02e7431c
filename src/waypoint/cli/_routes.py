"""``waypoint routes`` — print the route table in match order."""

import argparse
import sys

from waypoint.cli._resolve import resolve_router
from waypoint.routing.route import Route


def describe_callback(route: Route) -> str:
    callback = route.callback
    if isinstance(callback, str):
        label = callback
    else:
        label = getattr(callback, "__qualname__", None) or repr(callback)
    if route.name:
        label = f"{label} ({route.name})"
    return label


def run_routes(args: argparse.Namespace) -> None:
    """Print METHOD, PATH and handler for every route, newest first."""
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = router.list()
    if not routes:
        print("No routes registered.")
        return

    rows = [(route.method, route.path, describe_callback(route)) for route in routes]

    max_method = max(6, *(len(r[0]) for r in rows))
    max_path = max(4, *(len(r[1]) for r in rows))

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, label in rows:
        print(fmt.format(method, path, label))
