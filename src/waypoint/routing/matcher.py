"""Route matching — linear, first match wins.

Records are scanned in table order (newest first). A record whose method
token does not accept the request is skipped. A placeholder-free template
must equal the path exactly; a template with placeholders is compiled
through the pattern registry and must match the whole path.
"""

from collections.abc import Iterable
from urllib.parse import unquote_plus

from waypoint.routing.methods import check_method
from waypoint.routing.patterns import PatternRegistry
from waypoint.routing.route import Route, RouteMatch


def match_route(
    routes: Iterable[Route],
    patterns: PatternRegistry,
    method: str,
    path: str,
    *,
    xhr: bool = False,
) -> RouteMatch | None:
    """Find the first record accepting *method* and *path*.

    Captured values are URL-decoded and stripped. Captures belonging to
    placeholders in enclosing group prefixes are dropped so the match only
    carries the route's own parameters.
    """
    for route in routes:
        if not check_method(route.method, method, xhr=xhr):
            continue

        if route.path == path:
            return RouteMatch(route=route)

        if not route.has_placeholder:
            continue

        regex, count = patterns.compile(route.path)
        found = regex.match(path)
        if found is None:
            continue

        leading = sum(patterns.compile(group)[1] for group in route.groups)
        values = tuple(unquote_plus(found.group(f"p{i}")).strip() for i in range(leading, count))
        return RouteMatch(route=route, params=values)

    return None
