"""FastAPI bridge exposing the NMEA pipeline over HTTP and WebSocket.

Start with::

    sailstream-server

or ``uvicorn server.main:app --host 0.0.0.0 --port 8000``. The NMEA source
and other options come from ``SAILSTREAM_*`` environment variables (see
``server.settings``).

WebSocket clients connect to ``ws://<host>:8000/ws`` and receive a stream of
JSON messages: ``type="snapshot"`` at most five times a second while data
flows, ``type="state"`` on every connection state change and
``type="error"`` for each recovered failure.
"""

import asyncio
import dataclasses
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from sailstream.errors import PipelineError
from sailstream.stream import AggregatedSnapshot, ConnectionState, NMEAPipeline, TransportType
from sailstream.stream.broadcaster import enqueue_message
from server.cache import JsonFileSnapshotCache
from server.formatters import (
    error_to_dict,
    format_error_message,
    format_snapshot_message,
    format_state_message,
    snapshot_to_dict,
)
from server.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_QUEUE_MAX_SIZE = 10
_TIMEOUT_SECONDS = 5.0
_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_subscribers: list[asyncio.Queue[str]] = []


class ConnectRequest(BaseModel):
    """Optional overrides of the configured NMEA source."""

    host: str | None = None
    port: int | None = Field(default=None, ge=1, le=65535)
    transport: TransportType | None = None
    auto_reconnect: bool | None = None


def _broadcast(message: str) -> None:
    for queue in list(_subscribers):
        enqueue_message(queue, message)


def _subscribe_to_pipeline(pipeline: NMEAPipeline) -> None:
    def on_snapshot(snapshot: AggregatedSnapshot) -> None:
        _broadcast(format_snapshot_message(snapshot))

    def on_error(error: PipelineError) -> None:
        _broadcast(format_error_message(error))

    def on_state(state: ConnectionState) -> None:
        _broadcast(format_state_message(state, pipeline.reconnect_attempts))

    pipeline.snapshots.add_subscriber(on_snapshot)
    pipeline.errors.add_subscriber(on_error)
    pipeline.states.add_subscriber(on_state)


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format=_LOG_FORMAT)

    cache = JsonFileSnapshotCache(settings.cache_path) if settings.cache_path else None
    pipeline = NMEAPipeline(cache=cache)
    _subscribe_to_pipeline(pipeline)

    application.state.settings = settings
    application.state.cache = cache
    application.state.pipeline = pipeline

    async with pipeline:
        if settings.nmea_auto_connect:
            await pipeline.connect(settings.connection_config())
        yield

    if cache is not None and cache.flush():
        logger.info("Wrote pending snapshot to %s", cache.path)


app = FastAPI(title="SailStream", lifespan=_lifespan)


def _get_pipeline(request: Request) -> NMEAPipeline:
    return request.app.state.pipeline


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _status(pipeline: NMEAPipeline) -> dict[str, Any]:
    last_error = pipeline.last_error
    last_update_time = pipeline.last_update_time
    return {
        "state": pipeline.state.value,
        "connected": pipeline.state.is_connected,
        "reconnect_attempts": pipeline.reconnect_attempts,
        "last_error": error_to_dict(last_error) if last_error else None,
        "last_update_time": last_update_time.isoformat() if last_update_time else None,
    }


@app.get("/status")
async def get_status(pipeline: NMEAPipeline = Depends(_get_pipeline)) -> dict[str, Any]:
    return _status(pipeline)


@app.get("/snapshot")
async def get_snapshot(request: Request) -> dict[str, Any]:
    """Return the live snapshot, else the cached one flagged as stale."""
    pipeline: NMEAPipeline = request.app.state.pipeline
    if pipeline.snapshot is not None:
        return {**snapshot_to_dict(pipeline.snapshot), "stale": False}

    cache: JsonFileSnapshotCache | None = request.app.state.cache
    cached = cache.load() if cache is not None else None
    if cached is None:
        raise HTTPException(status_code=404, detail="No snapshot available")
    return {**cached, "stale": True}


@app.post("/connect")
async def connect(
    body: ConnectRequest | None = None,
    pipeline: NMEAPipeline = Depends(_get_pipeline),
    settings: Settings = Depends(_get_settings),
) -> dict[str, Any]:
    """Connect to the configured source, optionally overriding parts of it."""
    config = settings.connection_config()
    if body is not None:
        try:
            config = dataclasses.replace(config, **body.model_dump(exclude_none=True))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
    logger.info("Connect requested to %s:%d over %s", config.host, config.port, config.transport.value)
    await pipeline.connect(config)
    return _status(pipeline)


@app.post("/disconnect")
async def disconnect(pipeline: NMEAPipeline = Depends(_get_pipeline)) -> dict[str, Any]:
    await pipeline.disconnect()
    return _status(pipeline)


@app.delete("/error")
async def clear_error(pipeline: NMEAPipeline = Depends(_get_pipeline)) -> dict[str, Any]:
    pipeline.clear_error()
    return _status(pipeline)


async def _send_messages_until_disconnect(
    queue: asyncio.Queue[str],
    websocket: WebSocket,
) -> None:
    try:
        while True:
            message = await asyncio.wait_for(queue.get(), timeout=_TIMEOUT_SECONDS)
            await websocket.send_text(message)
    except TimeoutError:
        await websocket.close(code=1001)
    except WebSocketDisconnect:
        pass


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Stream snapshot, state and error JSON messages to a WebSocket client.

    Each client gets its own bounded queue (max ``_QUEUE_MAX_SIZE`` messages).
    The oldest message is dropped when the queue is full so slow clients do
    not stall the pipeline. The connection closes with code 1001, and the
    client should reconnect, if no message arrives within
    ``_TIMEOUT_SECONDS``.

    Args:
        websocket: The incoming WebSocket connection.
    """
    await websocket.accept()
    pipeline: NMEAPipeline = websocket.app.state.pipeline
    queue: asyncio.Queue[str] = asyncio.Queue(maxsize=_QUEUE_MAX_SIZE)
    enqueue_message(queue, format_state_message(pipeline.state, pipeline.reconnect_attempts))
    _subscribers.append(queue)
    try:
        await _send_messages_until_disconnect(queue, websocket)
    finally:
        _subscribers.remove(queue)


def run() -> None:
    """Entry point of the ``sailstream-server`` script."""
    settings = get_settings()
    uvicorn.run(app, host=settings.http_host, port=settings.http_port)
