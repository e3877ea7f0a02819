"""
Router
Flat route table with a /<controller>/<action>/<params...> fallback
"""
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass
class Route:
    """A single route definition"""
    method: str
    pattern: str
    handler: str
    action: str = "index"
    namespace: Optional[str] = None
    regex: re.Pattern = field(init=False, repr=False)
    param_names: Tuple[str, ...] = field(init=False, default=())

    def __post_init__(self):
        self.method = self.method.upper()
        self.param_names = tuple(_PLACEHOLDER_RE.findall(self.pattern))
        parts = _PLACEHOLDER_RE.split(self.pattern)
        # split() alternates literal text and placeholder names
        regex = "".join(
            re.escape(part) if i % 2 == 0 else f"(?P<{part}>[^/]+)"
            for i, part in enumerate(parts)
        )
        self.regex = re.compile(f"^{regex}/?$")

    def matches_method(self, method: str) -> bool:
        return self.method == "*" or self.method == method.upper()


@dataclass
class RouteMatch:
    """Result of matching a request path"""
    handler: str
    action: str
    params: Tuple[str, ...] = ()
    namespace: Optional[str] = None
    route: Optional[Route] = None


class Router:
    """
    Matches request paths to (controller, action, params)

    Example:
        router = Router()
        router.add("GET", "/users/{id}", "users", "show")
        router.match("GET", "/users/42")  # RouteMatch("users", "show", ("42",))
        router.match("GET", "/about/team/7")  # RouteMatch("about", "team", ("7",))
    """

    def __init__(
        self,
        routes: Optional[Iterable[Mapping[str, Any]]] = None,
        default_handler: str = "index",
        default_action: str = "index"
    ):
        self.default_handler = default_handler
        self.default_action = default_action
        self._routes: List[Route] = []
        for route in routes or ():
            self.add(
                route.get("method", "*"),
                route["pattern"],
                route.get("controller", default_handler),
                route.get("action", default_action),
                route.get("namespace")
            )

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    def add(
        self,
        method: str,
        pattern: str,
        handler: str,
        action: str = "index",
        namespace: Optional[str] = None
    ) -> Route:
        route = Route(method, pattern, handler, action, namespace)
        self._routes.append(route)
        return route

    def match(self, method: str, path: str) -> RouteMatch:
        """Match against the table first, then fall back to path segments"""
        path = "/" + path.lstrip("/")
        for route in self._routes:
            if not route.matches_method(method):
                continue
            found = route.regex.match(path)
            if found:
                params = tuple(found.group(name) for name in route.param_names)
                return RouteMatch(route.handler, route.action, params, route.namespace, route)

        segments = [segment for segment in path.split("/") if segment]
        handler = segments[0] if segments else self.default_handler
        action = segments[1] if len(segments) > 1 else self.default_action
        return RouteMatch(handler, action, tuple(segments[2:]))
