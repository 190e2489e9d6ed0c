"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from jigsaw._internal.types import Handler


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:  ``/users``  (is_param=False)
    Param:   ``/:id``    (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A registered pattern bound to its handler."""

    pattern: str
    handler: Handler
    segments: tuple[PathSegment, ...] = ()

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(seg.param_name for seg in self.segments if seg.param_name)

    @property
    def is_exact(self) -> bool:
        """True when the pattern has no ``:param`` segments."""
        return not any(seg.is_param for seg in self.segments)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]
