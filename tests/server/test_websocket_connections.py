"""Tests for websocket concurrency and connection lifecycle."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from sailstream.stream.broadcaster import enqueue_message
from server.main import _send_messages_until_disconnect
from tests.server.helpers import make_snapshot


def test_multiple_clients(client: TestClient) -> None:
    pipeline = client.app.state.pipeline
    with (
        client.websocket_connect("/ws") as socket_one,
        client.websocket_connect("/ws") as socket_two,
    ):
        assert socket_one.receive_json()["type"] == "state"
        assert socket_two.receive_json()["type"] == "state"
        client.portal.call(pipeline.snapshots.publish, make_snapshot())
        assert socket_one.receive_json()["type"] == "snapshot"
        assert socket_two.receive_json()["type"] == "snapshot"


def test_initial_state_message(client: TestClient) -> None:
    with client.websocket_connect("/ws") as websocket:
        data = websocket.receive_json()
    assert data == {
        "type": "state",
        "state": "disconnected",
        "connected": False,
        "reconnect_attempts": 0,
    }


def test_drop_oldest_overflow() -> None:
    message_queue: asyncio.Queue[str] = asyncio.Queue(maxsize=2)
    enqueue_message(message_queue, "message_one")
    enqueue_message(message_queue, "message_two")
    enqueue_message(message_queue, "message_three")
    assert message_queue.qsize() == 2
    assert message_queue.get_nowait() == "message_two"
    assert message_queue.get_nowait() == "message_three"


def test_timeout_disconnect(monkeypatch: pytest.MonkeyPatch, client: TestClient) -> None:
    monkeypatch.setattr("server.main._TIMEOUT_SECONDS", 0.05)
    with (
        pytest.raises(WebSocketDisconnect) as exc_info,
        client.websocket_connect("/ws") as websocket,
    ):
        websocket.receive_json()
        websocket.receive_json()
    assert exc_info.value.code == 1001


def test_client_disconnect_silent() -> None:
    class MockWebSocket:
        async def send_text(self, _text: str) -> None:
            raise WebSocketDisconnect(code=1000)

    async def _run() -> None:
        message_queue = MagicMock(spec=asyncio.Queue)
        message_queue.get = AsyncMock(return_value="message")
        websocket = MockWebSocket()
        await _send_messages_until_disconnect(message_queue, websocket)  # type: ignore[arg-type]

    asyncio.run(_run())
