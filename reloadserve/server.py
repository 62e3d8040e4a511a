"""
Server loop.

Owns the listening socket, the subscriber registry and the change watcher,
and runs one thread per accepted connection.
"""

from pathlib import Path
from typing import Optional, Tuple
import logging
import socket
import threading

from reloadserve.config import Settings, get_settings
from reloadserve.http.handler import ConnectionOutcome, handle_connection
from reloadserve.reload.registry import SubscriberRegistry
from reloadserve.reload.watcher import ChangeWatcher

logger = logging.getLogger(__name__)


def parse_address(address: str) -> Tuple[str, int]:
    """
    Split "host:port" into its parts. IPv6 hosts may be bracketed.

    Raises ValueError for a malformed address.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"Invalid address '{address}', expected host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    port_number = int(port)
    if port_number > 65535:
        raise ValueError(f"Invalid port in address '{address}'")
    return host, port_number


class DevServer:
    """
    Accept loop for the development server.

    Each connection is handled on its own thread. Connections that subscribe
    to live reload are left open; all others are closed once answered.
    """

    def __init__(
        self,
        root: Path,
        registry: SubscriberRegistry,
        settings: Optional[Settings] = None,
    ):
        self.root = root
        self.registry = registry
        self._settings = settings or get_settings()
        self._listener: Optional[socket.socket] = None
        self._stop_event = threading.Event()

    @property
    def server_address(self) -> Tuple[str, int]:
        """Bound (host, port). Only valid after bind()."""
        if self._listener is None:
            raise RuntimeError("Server not bound")
        return self._listener.getsockname()[:2]

    def bind(self, address: str) -> None:
        """
        Bind the listening socket.

        Raises OSError if the address is in use or not permitted, and
        ValueError if it is malformed.
        """
        host, port = parse_address(address)
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        self._listener = socket.create_server((host, port), family=family)
        # Periodic wake-ups so shutdown() is noticed
        self._listener.settimeout(0.5)

    def serve_forever(self) -> None:
        """Accept connections until shutdown() is called."""
        listener = self._listener
        if listener is None:
            raise RuntimeError("Server not bound")

        while not self._stop_event.is_set():
            try:
                conn, peer = listener.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._stop_event.is_set():
                    break
                logger.error(f"Error accepting connection: {e}")
                continue

            thread = threading.Thread(
                target=self._serve_connection,
                args=(conn, peer),
                name=f"conn-{peer[1]}",
                daemon=True,
            )
            thread.start()

    def _serve_connection(self, conn: socket.socket, peer) -> None:
        """Handle one connection, closing it unless it became a subscriber."""
        outcome = ConnectionOutcome.CLOSED
        try:
            conn.settimeout(self._settings.request_timeout)
            outcome = handle_connection(conn, self.root, self.registry)
        except Exception:
            logger.exception(f"Error while responding to {peer[0]}:{peer[1]}")
        finally:
            if outcome != ConnectionOutcome.SUBSCRIBED:
                _close_connection(conn)

    def shutdown(self) -> None:
        """Stop the accept loop and close the listening socket."""
        self._stop_event.set()
        listener, self._listener = self._listener, None
        if listener is not None:
            listener.close()


def _close_connection(conn: socket.socket) -> None:
    try:
        conn.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Peer already gone
        pass
    conn.close()


def serve(root: Path, address: Optional[str] = None, settings: Optional[Settings] = None) -> None:
    """
    Serve root with live reload until interrupted.

    Startup errors (bad address, bind failure, watcher failure) propagate
    to the caller.
    """
    settings = settings or get_settings()
    address = address or settings.address

    registry = SubscriberRegistry(write_timeout=settings.broadcast_timeout_ms / 1000)
    watcher = ChangeWatcher(root, registry, debounce=settings.debounce_ms / 1000)
    server = DevServer(root, registry, settings)

    watcher.start()
    try:
        server.bind(address)
        logger.info(f"Listening on http://{address}")
        server.serve_forever()
    finally:
        server.shutdown()
        watcher.stop()
        closed = registry.close_all()
        logger.info(f"Server stopped, closed {closed} subscriber(s)")
