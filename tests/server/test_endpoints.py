"""Tests for the HTTP control and query endpoints."""

import socket

import pytest
from fastapi.testclient import TestClient

from server.cache import JsonFileSnapshotCache
from server.main import app
from tests.server.helpers import GGA, NMEASource, make_snapshot, wait_for


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestStatus:
    def test_initial_status(self, client: TestClient) -> None:
        response = client.get("/status")
        assert response.status_code == 200
        assert response.json() == {
            "state": "disconnected",
            "connected": False,
            "reconnect_attempts": 0,
            "last_error": None,
            "last_update_time": None,
        }


class TestSnapshot:
    def test_no_snapshot_is_404(self, client: TestClient) -> None:
        assert client.get("/snapshot").status_code == 404

    def test_cached_snapshot_is_stale(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        cache_path = tmp_path / "snapshot.json"
        JsonFileSnapshotCache(cache_path).store(make_snapshot())
        monkeypatch.setenv("SAILSTREAM_CACHE_PATH", str(cache_path))
        with TestClient(app) as client:
            data = client.get("/snapshot").json()
        assert data["stale"] is True
        assert data["lat"] == 45.0

    def test_live_snapshot(self, client: TestClient) -> None:
        with NMEASource(f"{GGA}\r\n".encode()) as source:
            response = client.post("/connect", json={"port": source.port})
            assert response.json()["state"] == "connected"
            wait_for(lambda: client.get("/snapshot").status_code == 200)
            data = client.get("/snapshot").json()
            client.post("/disconnect")
        assert data["stale"] is False
        assert data["lat"] == pytest.approx(48.1173)
        assert data["readings"]["position_fix"]["num_satellites"] == 8
        assert client.get("/status").json()["last_update_time"] is not None


class TestConnectControl:
    def test_connect_and_disconnect(self, client: TestClient) -> None:
        with NMEASource(b"") as source:
            connected = client.post(
                "/connect", json={"host": "127.0.0.1", "port": source.port, "transport": "tcp"}
            ).json()
            disconnected = client.post("/disconnect").json()
        assert connected["state"] == "connected"
        assert connected["connected"] is True
        assert disconnected["state"] == "disconnected"

    def test_invalid_port_rejected(self, client: TestClient) -> None:
        assert client.post("/connect", json={"port": 70000}).status_code == 422

    def test_invalid_transport_rejected(self, client: TestClient) -> None:
        assert client.post("/connect", json={"transport": "serial"}).status_code == 422

    def test_refused_connection_and_clear_error(self, client: TestClient) -> None:
        status = client.post(
            "/connect", json={"port": _closed_port(), "auto_reconnect": False}
        ).json()
        assert status["state"] == "error"
        assert status["last_error"]["kind"] == "connection"

        cleared = client.delete("/error").json()
        assert cleared["last_error"] is None
