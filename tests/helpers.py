"""Socket helpers for connection-level tests."""

import socket
import time


def read_all(sock: socket.socket) -> bytes:
    """Read until the peer closes the connection."""
    chunks = []
    while True:
        data = sock.recv(65536)
        if not data:
            break
        chunks.append(data)
    return b"".join(chunks)


def read_until(sock: socket.socket, marker: bytes, timeout: float = 5.0) -> bytes:
    """Read until marker has been received or the peer closes."""
    sock.settimeout(timeout)
    data = b""
    while marker not in data:
        chunk = sock.recv(65536)
        if not chunk:
            break
        data += chunk
    return data


def split_response(raw: bytes):
    """Split a raw response into (status line, headers dict, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


def wait_for(predicate, timeout: float = 5.0) -> bool:
    """Poll predicate until it holds or timeout passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def fetch(address, path: str, method: str = "GET"):
    """Issue one request and return (status line, headers, body)."""
    with socket.create_connection(address, timeout=5) as sock:
        sock.sendall(f"{method} /{path} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode("utf-8"))
        return split_response(read_all(sock))
