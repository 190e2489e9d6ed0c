"""Router with exact-first, then first-registered parameterized matching.

Patterns are plain paths whose ``:name`` segments bind parameters::

    /                     exact
    /profile              exact
    /users/:id            parameterized
    /users/:id/posts/:n   parameterized
"""

from jigsaw.errors import ConfigurationError, NotFound
from jigsaw.routing.route import PathSegment, Route, RouteMatch


def split_path(path: str) -> tuple[str, ...]:
    """Split a request path into non-empty segments.

    Leading, trailing and doubled slashes are ignored, so ``/users/``
    and ``/users`` are the same path.
    """
    return tuple(part for part in path.strip("/").split("/") if part)


def normalize_path(path: str) -> str:
    return "/" + "/".join(split_path(path))


def parse_pattern(pattern: str) -> tuple[PathSegment, ...]:
    """Parse a route pattern into segments.

    Examples::

        "/users"          -> (PathSegment("users"),)
        "/users/:id"      -> (PathSegment("users"), PathSegment(":id", True, "id"))
        "/"               -> ()
    """
    segments: list[PathSegment] = []
    for part in split_path(pattern):
        if part.startswith("{") and part.endswith("}"):
            msg = (
                f"Route {pattern!r} uses {{param}} syntax. "
                f"Jigsaw expects :param segments, e.g. '/users/:id'."
            )
            raise ConfigurationError(msg)
        if part.startswith(":"):
            name = part[1:]
            if not name:
                msg = f"Route {pattern!r} has an unnamed ':' segment."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=name))
        else:
            segments.append(PathSegment(value=part))
    return tuple(segments)


class Router:
    """Pattern table with the exact-route precedence rule.

    Usage::

        router = Router()
        router.add(Route("/profile", profile, parse_pattern("/profile")))
        router.add(Route("/:id", user, parse_pattern("/:id")))
        router.match("/profile").route.pattern  # "/profile"
        router.match("/42").params              # {"id": "42"}

    Registering the same pattern again replaces its handler but keeps its
    original position in the scan order.
    """

    __slots__ = ("_exact", "_parameterized", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}
        self._exact: dict[str, Route] = {}
        self._parameterized: dict[str, Route] = {}

    def add(self, route: Route) -> None:
        """Add (or replace) a route."""
        key = normalize_path(route.pattern)
        self._routes[key] = route
        if route.is_exact:
            self._exact[key] = route
        else:
            self._parameterized[key] = route

    def get(self, pattern: str) -> Route | None:
        """Look up a route by its pattern (not by a request path)."""
        return self._routes.get(normalize_path(pattern))

    @property
    def routes(self) -> list[Route]:
        """All routes in registration order."""
        return list(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, path: str) -> RouteMatch:
        """Match a request path.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        """
        exact = self._exact.get(normalize_path(path))
        if exact is not None:
            return RouteMatch(route=exact, params={})

        parts = split_path(path)
        for route in self._parameterized.values():
            params = _match_segments(route.segments, parts)
            if params is not None:
                return RouteMatch(route=route, params=params)

        raise NotFound(f"No route matches {path!r}")


def _match_segments(
    segments: tuple[PathSegment, ...],
    parts: tuple[str, ...],
) -> dict[str, str] | None:
    if len(segments) != len(parts):
        return None
    params: dict[str, str] = {}
    for seg, part in zip(segments, parts, strict=True):
        if seg.is_param:
            params[seg.param_name or ""] = part
        elif seg.value != part:
            return None
    return params
