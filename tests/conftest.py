"""Shared fixtures: a mock WDA server on an ephemeral port."""

from __future__ import annotations

import threading

import pytest

from iphone_wda.core import WDAClient
from iphone_wda.mock import MockWDAServer


@pytest.fixture
def mock_wda():
    server = MockWDAServer(("127.0.0.1", 0))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


@pytest.fixture
def wda(mock_wda):
    client = WDAClient(url=mock_wda.url, timeout=5)
    yield client
    client.close()


@pytest.fixture
def session(wda, mock_wda):
    return wda.session(mock_wda.session_id)


@pytest.fixture
def spath(mock_wda):
    """Build a session-relative path as seen by the mock server."""
    def _spath(suffix: str = "") -> str:
        return f"/session/{mock_wda.session_id}{suffix}"
    return _spath
