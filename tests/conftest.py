"""Pytest fixtures for testing.

All tests are network-isolated - socket connections are blocked by default.
"""

from __future__ import annotations

import socket
from pathlib import Path

import pytest

from fred_api.data import ResponseCache
from fred_api.models import RequestSpec

OBSERVATIONS_XML = b"""<?xml version="1.0" encoding="utf-8" ?>
<observations realtime_start="2025-10-04" realtime_end="2025-10-04" observation_start="1600-01-01" observation_end="9999-12-31" units="lin" output_type="1" file_type="xml" order_by="observation_date" sort_order="asc" count="4" offset="0" limit="100000">
  <observation realtime_start="2025-10-04" realtime_end="2025-10-04" date="1971-04-01" value="0.850603488248666"/>
  <observation realtime_start="2025-10-04" realtime_end="2025-10-04" date="1971-07-01" value="3.43557210303712"/>
  <observation realtime_start="2025-10-04" realtime_end="2025-10-04" date="1971-10-01" value="."/>
  <observation realtime_start="2025-10-04" realtime_end="2025-10-04" date="1972-01-01" value="0.988357368475625"/>
</observations>

"""

ERROR_XML = b"""<?xml version="1.0" encoding="utf-8" ?>
<error code="400" message="Bad Request.  The series does not exist."/>
"""

API_KEY = "abcdefghijklmnopqrstuvwxyz123456"


def _blocked_socket_connect(self, *args, **kwargs):
    """Raise an error if any test tries to make a real network connection."""
    raise RuntimeError(
        "Tests must not make network connections! "
        "Use RecordingTransport instead. "
        f"Attempted connection to: {args}"
    )


@pytest.fixture(autouse=True)
def block_network_access(monkeypatch):
    """Block all network access in tests."""
    monkeypatch.setattr(socket.socket, "connect", _blocked_socket_connect)
    yield


@pytest.fixture
def cache(tmp_path: Path) -> ResponseCache:
    return ResponseCache(tmp_path / "cache")


@pytest.fixture
def spec() -> RequestSpec:
    return RequestSpec.new("series/observations?series_id=GNPCA&", API_KEY)
