"""Integration test fixtures — a live Elasticsearch node.

Expects a node at localhost:9200, e.g.:
    docker run -p 9200:9200 -e discovery.type=single-node -e xpack.security.enabled=false elasticsearch:8.13.0
"""

from __future__ import annotations

import time

import httpx
import pytest


def _wait_for_service(url: str, timeout: float = 30.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


@pytest.fixture(scope="session")
def elasticsearch_ready():
    """Ensure Elasticsearch is running."""
    host = "http://localhost:9200"
    if not _wait_for_service(host):
        pytest.skip("Elasticsearch not available at localhost:9200")
    return host
