"""Static-file endpoints.

``ServeFile`` serves one file, ``ServeDir`` serves a directory below a
wildcard route. Both are ordinary async endpoints, bound through the
builder like any handler::

    root().at("favicon.ico", lambda r: r.serve_file("static/favicon.ico"))
    root().at("img", lambda r: r.serve_dir("static/images"))

Paths are checked when the tree is built so a missing file or directory
stops startup. Reads run in a worker thread via ``anyio.to_thread``.

Security: ``ServeDir`` resolves symlinks and verifies the final path is
within the configured directory to prevent path traversal.
"""

import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path
from typing import Any

import anyio.to_thread

from thicket.http.response import Response

logger = logging.getLogger("thicket.fs")


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    """Run blocking call in anyio worker thread."""
    return anyio.to_thread.run_sync(func, *args)


def _file_response(file_path: Path, body: bytes, cache_control: str) -> Response:
    content_type, _ = mimetypes.guess_type(str(file_path))
    return (
        Response(body=body, content_type=content_type or "application/octet-stream")
        .with_header("Content-Length", str(len(body)))
        .with_header("Cache-Control", cache_control)
    )


class ServeFile:
    """Endpoint that always answers with the same file."""

    __slots__ = ("_cache_control", "_path")

    def __init__(self, path: str | Path, *, cache_control: str = "public, max-age=3600") -> None:
        resolved = Path(path).resolve()
        if not resolved.is_file():
            msg = f"Cannot serve {str(path)!r}: no such file."
            raise FileNotFoundError(msg)
        self._path = resolved
        self._cache_control = cache_control

    @property
    def path(self) -> Path:
        return self._path

    async def __call__(self, request: Any) -> Response:
        try:
            body = await _run_sync(self._path.read_bytes)
        except FileNotFoundError:
            logger.warning("Static file %s disappeared after startup", self._path)
            return Response(body="Not Found", status=404)
        return _file_response(self._path, body, self._cache_control)

    def __repr__(self) -> str:
        return f"ServeFile({str(self._path)!r})"


class ServeDir:
    """Endpoint serving files below a directory.

    The relative file path is read from ``request.path_params[param]``,
    which host frameworks fill from the wildcard segment the builder
    registers (``*path`` by default). Directories answer with their
    index file when one exists.
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_param")

    def __init__(
        self,
        directory: str | Path,
        *,
        param: str = "path",
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        resolved = Path(directory).resolve()
        if not resolved.exists():
            msg = f"Cannot serve {str(directory)!r}: no such directory."
            raise FileNotFoundError(msg)
        if not resolved.is_dir():
            msg = f"Cannot serve {str(directory)!r}: not a directory."
            raise NotADirectoryError(msg)
        self._directory = resolved
        self._param = param
        self._index = index
        self._cache_control = cache_control

    @property
    def directory(self) -> Path:
        return self._directory

    def resolve(self, relative: str) -> Path | None:
        """Map a request-relative path to a file, or ``None`` if outside the directory.

        Raises ``ValueError`` for paths the OS cannot represent (NUL bytes).
        """
        file_path = (self._directory / relative.lstrip("/")).resolve()
        if not file_path.is_relative_to(self._directory):
            return None
        if file_path.is_dir():
            file_path = file_path / self._index
        return file_path

    async def __call__(self, request: Any) -> Response:
        params = getattr(request, "path_params", None) or {}
        relative = str(params.get(self._param, ""))

        try:
            file_path = self.resolve(relative)
        except ValueError:
            # Embedded NUL bytes cannot name a file
            return Response(body="Not Found", status=404)
        if file_path is None:
            logger.warning("Refused path outside %s: %r", self._directory, relative)
            return Response(body="Forbidden", status=403)

        try:
            body = await _run_sync(file_path.read_bytes)
        except (FileNotFoundError, IsADirectoryError, ValueError):
            return Response(body="Not Found", status=404)
        return _file_response(file_path, body, self._cache_control)

    def __repr__(self) -> str:
        return f"ServeDir({str(self._directory)!r})"
