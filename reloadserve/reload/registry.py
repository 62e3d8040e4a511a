"""
Registry of open live reload event streams.
"""

from typing import List, Optional
import logging
import socket
import threading

logger = logging.getLogger(__name__)


class SubscriberRegistry:
    """
    Lock-guarded collection of subscriber connections.

    Shared by the connection handlers, which add subscribers, and the
    change watcher, which broadcasts to them. Every access holds the same
    lock, so a broadcast always iterates a stable membership.
    """

    def __init__(self, write_timeout: Optional[float] = 1.0):
        self._write_timeout = write_timeout
        self._subscribers: List[socket.socket] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def add(self, conn: socket.socket) -> None:
        """Register an open event stream connection."""
        with self._lock:
            self._subscribers.append(conn)

    def _send(self, conn: socket.socket, frame: bytes) -> bool:
        """Write frame to conn, returning False if the subscriber is gone."""
        try:
            conn.settimeout(self._write_timeout)
            conn.sendall(frame)
            return True
        except Exception as e:
            # Includes timeouts: a stalled subscriber counts as disconnected
            logger.debug(f"Dropping subscriber: {e!r}")
            return False

    def broadcast(self, frame: bytes) -> int:
        """
        Send frame to every subscriber.

        Subscribers whose write fails or times out are closed and removed
        before the lock is released. Returns the number still registered.
        """
        with self._lock:
            alive = []
            for conn in self._subscribers:
                if self._send(conn, frame):
                    alive.append(conn)
                else:
                    _close_quietly(conn)
            self._subscribers = alive
            return len(alive)

    def close_all(self) -> int:
        """Close and forget every subscriber. Returns how many were closed."""
        with self._lock:
            subscribers, self._subscribers = self._subscribers, []
        for conn in subscribers:
            _close_quietly(conn)
        return len(subscribers)


def _close_quietly(conn: socket.socket) -> None:
    try:
        conn.close()
    except Exception as e:
        logger.debug(f"Error closing subscriber: {e!r}")
