"""Serving a directory over HTTP, with file pages and a static file tree."""

from __future__ import annotations

import logging
import mimetypes
import os
from dataclasses import dataclass
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import unquote, urlsplit

log = logging.getLogger(__name__)

HOST = "127.0.0.1"
DEFAULT_PORT = 8331
STATIC_PREFIX = "/tower"

_TEXT = "text/plain; charset=utf-8"
_HTML = "text/html; charset=utf-8"


@dataclass(frozen=True)
class _Response:
    status: HTTPStatus
    content_type: str
    body: bytes


def _inside(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root.resolve())
    except OSError:
        return False


def render_path(root: str | os.PathLike, path: str) -> _Response:
    """Build the response for ``path`` under ``root``.

    A file is returned as UTF-8 text, a directory as HTML links to its files.
    """
    root_dir = Path(root)
    target = root_dir / path
    log.info("Reading file %s", target)
    if not target.exists() or not _inside(root_dir, target):
        return _Response(
            HTTPStatus.NOT_FOUND, _TEXT, f"File {target} not fount".encode("utf-8")
        )

    if target.is_dir():
        try:
            entries = sorted(target.iterdir())
        except OSError as exc:
            log.warning("Error reading directory: %r", exc)
            return _Response(
                HTTPStatus.INTERNAL_SERVER_ERROR, _TEXT, b"Failed to read directory"
            )
        links = "".join(
            f'<a href="http://{HOST}:{DEFAULT_PORT}/src/{entry.name}">{entry.name}</a><br>'
            for entry in entries
            if entry.is_file()
        )
        return _Response(HTTPStatus.OK, _HTML, links.encode("utf-8"))

    try:
        content = target.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("Error reading file: %r", exc)
        return _Response(HTTPStatus.INTERNAL_SERVER_ERROR, _TEXT, str(exc).encode("utf-8"))
    body = content.encode("utf-8")
    log.info("Read %d bytes", len(body))
    return _Response(HTTPStatus.OK, _TEXT, body)


def _serve_static(root: Path, relative: str) -> _Response:
    target = root / relative.lstrip("/")
    if not _inside(root, target):
        return _Response(HTTPStatus.NOT_FOUND, _TEXT, b"")
    if target.is_dir():
        target = target / "index.html"
    if not target.is_file():
        return _Response(HTTPStatus.NOT_FOUND, _TEXT, b"")
    try:
        body = target.read_bytes()
    except OSError as exc:
        return _Response(HTTPStatus.INTERNAL_SERVER_ERROR, _TEXT, str(exc).encode("utf-8"))
    content_type = mimetypes.guess_type(target.name)[0] or "application/octet-stream"
    return _Response(HTTPStatus.OK, content_type, body)


class _DirectoryServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, root: Path, port: int) -> None:
        self.root = root
        super().__init__((HOST, port), _Handler)


class _Handler(BaseHTTPRequestHandler):
    server: _DirectoryServer

    def do_GET(self) -> None:
        url_path = unquote(urlsplit(self.path).path)
        root = self.server.root
        if url_path == STATIC_PREFIX or url_path.startswith(STATIC_PREFIX + "/"):
            response = _serve_static(root, url_path[len(STATIC_PREFIX) :])
        elif url_path == "/":
            response = _Response(HTTPStatus.NOT_FOUND, _TEXT, b"")
        else:
            response = render_path(root, url_path[1:])
        self.send_response(response.status)
        self.send_header("Content-Type", response.content_type)
        self.send_header("Content-Length", str(len(response.body)))
        self.end_headers()
        self.wfile.write(response.body)

    def log_message(self, format: str, *args) -> None:
        log.info("%s - %s", self.address_string(), format % args)


def _build_server(path: str | os.PathLike, port: int) -> _DirectoryServer:
    return _DirectoryServer(Path(path), port)


def serve_directory(path: str | os.PathLike = ".", port: int = DEFAULT_PORT) -> None:
    """Serve ``path`` on 127.0.0.1:``port`` until interrupted."""
    with _build_server(path, port) as server:
        log.info("Serving %s on %s:%s", path, HOST, server.server_address[1])
        server.serve_forever()