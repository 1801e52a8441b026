"""Pytest fixtures for server module testing."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from server.main import app


@pytest.fixture(autouse=True)
def server_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate the server from any .env file and real NMEA hardware."""
    monkeypatch.setenv("SAILSTREAM_ENV_FILE", "")
    monkeypatch.setenv("SAILSTREAM_NMEA_AUTO_CONNECT", "false")
    monkeypatch.setenv("SAILSTREAM_NMEA_HOST", "127.0.0.1")
    monkeypatch.delenv("SAILSTREAM_CACHE_PATH", raising=False)


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
