"""Static file serving.

Files under a directory are served for paths below a URL prefix before
any route is consulted. Paths that do not name an existing file fall
through to the router (``lookup`` returns ``None``).
"""

import mimetypes
from pathlib import Path

from jigsaw.http.response import Response


class StaticFiles:
    """Resolve request paths to files in *directory*.

    Security: resolves symlinks and verifies the final path
    is within the configured directory to prevent path traversal.

    Usage::

        static = StaticFiles("./public", prefix="/")
        response = static.lookup("/css/site.css")  # Response or None
    """

    __slots__ = ("_cache_control", "_directory", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/",
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._cache_control = cache_control

        # Root prefix "/" normalizes to "" so every path is a candidate
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @property
    def directory(self) -> Path:
        return self._directory

    def lookup(self, path: str) -> Response | None:
        """Return a file response for *path*, or ``None`` to fall through."""
        if self._prefix:
            if not path.startswith(self._prefix + "/"):
                return None
            relative = path[len(self._prefix) :].lstrip("/")
        else:
            relative = path.lstrip("/")

        if not relative:
            # "/" belongs to the router, never to the index of the directory
            return None

        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory):
            return Response(body="Forbidden", status=403, content_type="text/plain; charset=utf-8")

        if not file_path.is_file():
            return None
        return self._serve_file(file_path)

    def _serve_file(self, file_path: Path) -> Response:
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        return Response(body=file_path.read_bytes(), content_type=content_type).with_header(
            "Cache-Control", self._cache_control
        )
