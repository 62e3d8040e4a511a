"""
Per-connection request handling.

A connection either receives one response and is closed, or is handed to
the subscriber registry to stay open for reload notifications.
"""

from enum import Enum
from pathlib import Path
import logging
import socket

from reloadserve.http.request import parse_request_path
from reloadserve.http.responder import SUBSCRIBE_PATH, not_found, resolve
from reloadserve.reload.registry import SubscriberRegistry

logger = logging.getLogger(__name__)


MAX_REQUEST_LINE = 65536

EVENT_STREAM_HEAD = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: text/event-stream\r\n"
    b"Cache-Control: no-cache\r\n"
    b"\r\n"
)
INITIAL_FRAME = b"data: initial\n\n"


class RequestLineTooLong(ValueError):
    """The request line exceeds MAX_REQUEST_LINE bytes."""


class ConnectionOutcome(str, Enum):
    """What became of a handled connection."""
    CLOSED = "closed"
    SUBSCRIBED = "subscribed"


def read_request_line(conn: socket.socket) -> str:
    """
    Read the first request line. Headers and body are never read.

    Raises RequestLineTooLong rather than parsing a truncated path.
    """
    with conn.makefile("rb") as reader:
        raw = reader.readline(MAX_REQUEST_LINE + 1)
    if len(raw) > MAX_REQUEST_LINE:
        raise RequestLineTooLong(f"Request line longer than {MAX_REQUEST_LINE} bytes")
    return raw.decode("utf-8").rstrip("\r\n")


def subscribe(conn: socket.socket, registry: SubscriberRegistry) -> None:
    """Open the event stream on conn and hand it over to the registry."""
    try:
        conn.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    except OSError:
        # Not a TCP socket
        pass
    conn.settimeout(None)

    conn.sendall(EVENT_STREAM_HEAD)
    conn.sendall(INITIAL_FRAME)
    registry.add(conn)


def handle_connection(
    conn: socket.socket,
    root: Path,
    registry: SubscriberRegistry,
) -> ConnectionOutcome:
    """
    Serve a single request on conn.

    Returns SUBSCRIBED when the connection now belongs to the registry, in
    which case the caller must leave it open. Any error reading the request
    or writing the response propagates to the caller.
    """
    request_path = parse_request_path(read_request_line(conn))
    logger.debug(f"Request for '{request_path}'")

    response = resolve(root, request_path)
    if response is None:
        if request_path == SUBSCRIBE_PATH:
            subscribe(conn, registry)
            logger.debug("Reload subscriber connected")
            return ConnectionOutcome.SUBSCRIBED
        response = not_found(request_path)

    conn.sendall(response.head())
    conn.sendall(response.body)
    conn.sendall(response.snippet)
    return ConnectionOutcome.CLOSED
