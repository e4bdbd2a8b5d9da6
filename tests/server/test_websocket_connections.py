"""Tests for websocket concurrency and connection lifecycle."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from ntrip.client import ClientEvent
from server.broadcaster import (
    _enqueue_message,
    add_subscriber,
    broadcast_message,
    remove_subscriber,
)
from server.main import _send_messages_until_disconnect, app
from tests.server.conftest import ControlledNtripClient


def test_multiple_clients(ntrip_controller: ControlledNtripClient) -> None:
    with (
        TestClient(app) as client,
        client.websocket_connect("/ws") as socket_one,
        client.websocket_connect("/ws") as socket_two,
    ):
        assert client.portal is not None
        client.portal.call(ntrip_controller.emit, ClientEvent.DATA, b"\xd3\x00\x13rtcm")
        assert socket_one.receive_bytes() == b"\xd3\x00\x13rtcm"
        assert socket_two.receive_bytes() == b"\xd3\x00\x13rtcm"


def test_drop_oldest_overflow() -> None:
    message_queue: asyncio.Queue[bytes] = asyncio.Queue(maxsize=2)
    _enqueue_message(message_queue, b"message_one")
    _enqueue_message(message_queue, b"message_two")
    _enqueue_message(message_queue, b"message_three")
    assert message_queue.qsize() == 2
    assert message_queue.get_nowait() == b"message_two"
    assert message_queue.get_nowait() == b"message_three"


def test_broadcast_reaches_every_subscriber() -> None:
    first: asyncio.Queue[bytes] = asyncio.Queue(maxsize=2)
    second: asyncio.Queue[bytes] = asyncio.Queue(maxsize=2)
    add_subscriber(first)
    add_subscriber(second)
    try:
        broadcast_message(b"chunk")
    finally:
        remove_subscriber(first)
        remove_subscriber(second)
    assert first.get_nowait() == b"chunk"
    assert second.get_nowait() == b"chunk"


def test_timeout_disconnect(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("server.main._TIMEOUT_SECONDS", 0.05)
    with (
        TestClient(app) as client,
        pytest.raises(WebSocketDisconnect) as exc_info,
        client.websocket_connect("/ws") as websocket,
    ):
        websocket.receive_bytes()
    assert exc_info.value.code == 1001


def test_client_disconnect_silent() -> None:
    class MockWebSocket:
        async def send_bytes(self, _data: bytes) -> None:
            raise WebSocketDisconnect(code=1000)

    async def _run() -> None:
        message_queue = MagicMock(spec=asyncio.Queue)
        message_queue.get = AsyncMock(return_value=b"message")
        websocket = MockWebSocket()
        await _send_messages_until_disconnect(message_queue, websocket)  # type: ignore[arg-type]

    asyncio.run(_run())


def test_ntrip_client_lifecycle(ntrip_controller: ControlledNtripClient) -> None:
    with TestClient(app):
        assert ntrip_controller.is_ready
        assert not ntrip_controller.closed
    assert ntrip_controller.closed


def test_client_errors_are_logged(
    ntrip_controller: ControlledNtripClient, caplog: pytest.LogCaptureFixture
) -> None:
    with TestClient(app):
        ntrip_controller.emit(ClientEvent.ERROR, OSError("connection refused"))
    assert "connection refused" in caplog.text
