"""Shared fixtures."""

import threading

import pytest

from reloadserve.config import Settings
from reloadserve.reload.registry import SubscriberRegistry
from reloadserve.server import DevServer


@pytest.fixture
def site(tmp_path):
    """A small site tree."""
    (tmp_path / "index.html").write_text("<h1>home</h1>")
    (tmp_path / "style.css").write_text("body { color: red; }")
    (tmp_path / "data.bin").write_bytes(bytes(range(256)))
    (tmp_path / "README").write_text("no extension")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "index.html").write_text("<h1>docs</h1>")
    (tmp_path / "empty").mkdir()
    return tmp_path


@pytest.fixture
def registry():
    registry = SubscriberRegistry(write_timeout=1.0)
    yield registry
    registry.close_all()


@pytest.fixture
def running_server(site, registry):
    """A DevServer on an ephemeral port serving the site fixture."""
    server = DevServer(site, registry, Settings(request_timeout=5))
    server.bind("127.0.0.1:0")
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    thread.join(timeout=5)
