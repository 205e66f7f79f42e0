"""Route classification for inbound dashboard requests.

Every request resolves to exactly one route. Rules are checked in order and
the first match wins; anything unmatched is the static page.
"""

from dataclasses import dataclass


API_PATH = "/api"


@dataclass(frozen=True)
class ApiProxy:
    """POST /api: forward one wallet lookup to BananoMiner."""

    kind: str = "api_proxy"


@dataclass(frozen=True)
class StaticPage:
    """Everything else: the embedded dashboard document."""

    kind: str = "static_page"


Route = ApiProxy | StaticPage

ROUTE_RULES: list[tuple[str, str, Route]] = [
    ("POST", API_PATH, ApiProxy()),
]


def match_route(method: str, path: str) -> Route:
    """Return the route for a `(method, path)` pair."""

    method = method.upper()
    for rule_method, rule_path, route in ROUTE_RULES:
        if method == rule_method and path == rule_path:
            return route
    return StaticPage()
