"""Jigsaw exception hierarchy.

Shared across Router, Engine, and the transport boundary so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class JigsawError(Exception):
    """Base for all jigsaw-specific errors."""


class ConfigurationError(JigsawError):
    """Raised when a route pattern or engine setting is invalid.

    Surfaces at registration time, never while serving a request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(JigsawError):
    """An error that maps directly to an HTTP status code.

    Raised by the router and the route dispatcher. ``Engine.handle``
    converts these into a ``Response`` with the matching status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MissingParameter(HTTPError):  # noqa: N818
    """500 — a route declared ``:param`` but was invoked without it.

    This is a contract violation by the caller, not a client error, so it
    maps to 500 rather than 400.
    """

    def __init__(self, param: str, pattern: str = "") -> None:
        detail = f"Missing required parameter: {param}"
        if pattern:
            detail = f"{detail} (route {pattern!r})"
        super().__init__(status=500, detail=detail)
        object.__setattr__(self, "param", param)
