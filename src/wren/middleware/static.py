"""Static file serving stage.

Serves files from a directory for matching URL prefixes, with
automatic index file resolution. Paths with no matching file continue
down the chain, so routes registered under the same prefix still work.
"""

import mimetypes
from pathlib import Path

from wren.http.request import Request
from wren.http.response import Response


class StaticFiles:
    """Stage that serves static files from a directory.

    Security: resolves symlinks and verifies the final path
    is within the configured directory to prevent path traversal.

    Usage::

        # Serve under a prefix
        app.use(StaticFiles(directory="./static", prefix="/static"))

        # Root-level serving (public/ next to the app)
        app.use(StaticFiles(directory="./public", prefix="/"))
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control

        # Root prefix "/" normalizes to ""
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @property
    def directory(self) -> Path:
        return self._directory

    def __call__(self, request: Request) -> Response | None:
        """Serve a static file or continue."""
        if request.method not in ("GET", "HEAD"):
            return None

        path = request.path

        if self._prefix:
            if not path.startswith(self._prefix + "/") and path != self._prefix:
                return None
            relative = path[len(self._prefix) :].lstrip("/")
        else:
            relative = path.lstrip("/")

        # Resolve the file path and check for traversal
        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            return Response(body="Forbidden", status=403, content_type="text/plain; charset=utf-8")

        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                return None
            # Redirect to the trailing-slash URL so relative links resolve
            if not path.endswith("/") and relative:
                return Response(body="", status=301).with_header("Location", path + "/")
            file_path = index_path

        if not file_path.is_file():
            return None

        return self._serve_file(file_path)

    def _serve_file(self, file_path: Path) -> Response:
        """Read a file and build a response."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        return Response(body=file_path.read_bytes(), content_type=content_type).with_header(
            "Cache-Control", self._cache_control
        )
