"""FastAPI server relaying an NTRIP correction stream over WebSockets.

Start with::

    NTRIP_HOST=rtk2go.com NTRIP_MOUNTPOINT=ACACU NTRIP_USERNAME=me@example.com \\
        uvicorn server.main:app --host 0.0.0.0 --port 8000

The server keeps one connection to the caster (configured through the
``NTRIP_*`` environment variables read by ``ClientConfig.from_env``) and
fans the correction bytes out to every client connected to
``ws://<host>:8000/ws`` as binary messages. Receivers on the local network
can then be fed corrections without each holding a caster login.

``GET /status`` reports the caster connection state; ``PUT /position``
updates the ECEF position reported to VRS casters.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ConfigDict

from ntrip.client import ClientConfig, ClientEvent, NtripClient
from server.broadcaster import add_subscriber, broadcast_message, remove_subscriber
from server.formatters import format_status

logger = logging.getLogger(__name__)

_QUEUE_MAX_SIZE = 64
_TIMEOUT_SECONDS = 5.0


class PositionUpdate(BaseModel):
    """Receiver position in ECEF metres."""

    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float
    z: float


def _log_client_error(error: BaseException) -> None:
    logger.warning("NTRIP connection error: %s", error)


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    client = NtripClient(ClientConfig.from_env())
    client.subscribe(ClientEvent.DATA, broadcast_message)
    client.subscribe(ClientEvent.ERROR, _log_client_error)
    application.state.ntrip_client = client
    client.run()
    yield
    client.close()


app = FastAPI(lifespan=_lifespan)


def _client(request: Request) -> NtripClient:
    return request.app.state.ntrip_client


async def _send_messages_until_disconnect(
    queue: asyncio.Queue[bytes],
    websocket: WebSocket,
) -> None:
    try:
        while True:
            message = await asyncio.wait_for(queue.get(), timeout=_TIMEOUT_SECONDS)
            await websocket.send_bytes(message)
    except TimeoutError:
        await websocket.close(code=1001)
    except WebSocketDisconnect:
        pass


@app.get("/status")
async def status(request: Request) -> dict[str, Any]:
    """Return the caster connection state and the reported position."""
    return format_status(_client(request))


@app.put("/position")
async def update_position(update: PositionUpdate, request: Request) -> dict[str, Any]:
    """Replace the position sent to the caster in GGA reports."""
    client = _client(request)
    client.set_position((update.x, update.y, update.z))
    return format_status(client)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Stream correction data to a connected WebSocket client.

    Each client gets its own bounded queue (max ``_QUEUE_MAX_SIZE`` chunks).
    The oldest chunk is dropped when the queue is full so a slow client
    cannot stall the others. The connection closes with code 1001 (and the
    client should reconnect) if no data arrives within
    ``_TIMEOUT_SECONDS``.

    Args:
        websocket: The incoming WebSocket connection.
    """
    queue: asyncio.Queue[bytes] = asyncio.Queue(maxsize=_QUEUE_MAX_SIZE)
    add_subscriber(queue)
    try:
        await websocket.accept()
        await _send_messages_until_disconnect(queue, websocket)
    finally:
        remove_subscriber(queue)
