"""
Static file responses.

Resolves a request path against the served root and renders the HTTP
response bytes, appending the live reload script to HTML bodies.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import os

from reloadserve.http.mime import HTML, get_mime_type

logger = logging.getLogger(__name__)


# Request path of the live reload event stream. Long and odd on purpose so
# it never shadows a real site file.
SUBSCRIBE_PATH = (
    "__reloadserve__/live-reload-event-stream-"
    "reserved-path-please-do-not-name-your-files-like-this"
)

RELOAD_SCRIPT = f"""
<script>
  (() => {{
    const events = new EventSource("/{SUBSCRIBE_PATH}");
    events.onmessage = (event) => {{
      if (event.data === "update") {{
        location.reload();
      }}
    }};
  }})();
</script>
""".encode("utf-8")

INDEX_FILE = "index.html"


@dataclass
class Response:
    """A complete, non-streaming HTTP response."""
    status: str
    body: bytes
    content_type: Optional[str] = None

    @property
    def snippet(self) -> bytes:
        """Reload script appended to the body, empty for non-HTML."""
        return RELOAD_SCRIPT if self.content_type == HTML else b""

    def head(self) -> bytes:
        """Status line and headers, terminated by the blank line."""
        length = len(self.body) + len(self.snippet)
        lines = [
            f"HTTP/1.1 {self.status}",
            f"Content-Length: {length}",
            "Cache-Control: no-cache",
        ]
        if self.content_type:
            lines.append(f"Content-Type: {self.content_type}")
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


def is_within_root(root: Path, candidate: Path) -> bool:
    """
    Lexical containment check: ".." segments may not climb above root.

    Symlinks are not followed, so links inside the tree pointing elsewhere
    are still served.
    """
    base = os.path.abspath(root)
    target = os.path.abspath(candidate)
    return target == base or target.startswith(base.rstrip(os.sep) + os.sep)


def _read_file(root: Path, candidate: Path) -> Optional[bytes]:
    """Read a file below root, or None when missing, unreadable or outside root."""
    if not is_within_root(root, candidate):
        logger.debug(f"Refusing path outside root: {candidate}")
        return None
    try:
        return candidate.read_bytes()
    except (OSError, ValueError):
        return None


def resolve(root: Path, request_path: str) -> Optional[Response]:
    """
    Resolve a request path to a file response.

    Tries root/path, then root/path/index.html. Returns None when neither
    exists so the caller can check the reserved paths before falling back
    to a 404.
    """
    target = root / request_path
    content = _read_file(root, target)
    if content is not None:
        # A single-file root requested as "/" has no extension in the path
        name = request_path or target.name
        return Response("200 OK", content, get_mime_type(name))

    content = _read_file(root, target / INDEX_FILE)
    if content is not None:
        return Response("200 OK", content, HTML)

    return None


def not_found(request_path: str) -> Response:
    """Generated 404 page naming the requested path."""
    body = f"<!DOCTYPE html><h1>404: Not found</h1><p>page {request_path} not found</p>"
    return Response("404 NOT FOUND", body.encode("utf-8"), HTML)
