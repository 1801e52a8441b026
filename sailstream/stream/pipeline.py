"""Public facade: one NMEA source in, snapshots, errors and states out.

``NMEAPipeline`` wires the connection manager, framer, parser and aggregator
together on a dedicated worker thread running its own asyncio event loop, so
socket reads and parsing never compete with the consumer's loop (typically a
web server). Results cross back to the consumer loop exclusively through
``loop.call_soon_threadsafe``; every attribute visible on the facade is only
ever written on the consumer loop.

Usage::

    async with NMEAPipeline() as pipeline:
        pipeline.snapshots.add_subscriber(print)
        await pipeline.connect(
            ConnectionConfig(TransportType.TCP, "192.168.4.1", 10110)
        )
        ...
"""

import asyncio
import logging
import threading
from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Any, Protocol, TypeVar

from sailstream.errors import BufferOverflowError, NMEAError, PipelineError
from sailstream.nmea import parse_sentence
from sailstream.stream.aggregator import (
    DEFAULT_BATCH_INTERVAL,
    AggregatedSnapshot,
    BatchingAggregator,
)
from sailstream.stream.broadcaster import Broadcaster
from sailstream.stream.connection import ConnectionManager
from sailstream.stream.framer import DEFAULT_MAX_BUFFER_SIZE, StreamFramer
from sailstream.stream.types import ConnectionConfig, ConnectionState

__all__ = ["NMEAPipeline", "SnapshotCache"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotCache(Protocol):
    """Persistence hook offered every published snapshot."""

    def store(self, snapshot: AggregatedSnapshot) -> None: ...


class NMEAPipeline:
    """Ingest one NMEA source and publish aggregated snapshots.

    Subscribe through the three channels, whose callbacks run on the loop
    that called ``start()``:

    * ``snapshots``: each new ``AggregatedSnapshot``
    * ``errors``: a ``PipelineError`` per recovered failure
    * ``states``: each ``ConnectionState`` transition

    Connection and data errors are published, never raised.

    Args:
        cache: Optional store offered every new snapshot. Failures are logged.
        batch_interval: Snapshot window in seconds.
        max_buffer_size: Framer cap for unterminated input.
    """

    def __init__(
        self,
        cache: SnapshotCache | None = None,
        batch_interval: float = DEFAULT_BATCH_INTERVAL,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
    ) -> None:
        if batch_interval <= 0:
            raise ValueError("batch_interval must be positive")
        self._cache = cache
        self._batch_interval = batch_interval
        self._framer = StreamFramer(max_buffer_size)

        self.snapshots: Broadcaster[AggregatedSnapshot] = Broadcaster("snapshots")
        self.errors: Broadcaster[PipelineError] = Broadcaster("errors")
        self.states: Broadcaster[ConnectionState] = Broadcaster("states")

        self._snapshot: AggregatedSnapshot | None = None
        self._state = ConnectionState.DISCONNECTED
        self._last_error: PipelineError | None = None
        self._last_update_time: datetime | None = None
        self._reconnect_attempts = 0

        self._consumer_loop: asyncio.AbstractEventLoop | None = None
        self._worker_loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._manager: ConnectionManager | None = None
        self._aggregator: BatchingAggregator | None = None
        self._disposed = False

    @property
    def started(self) -> bool:
        return self._thread is not None

    @property
    def snapshot(self) -> AggregatedSnapshot | None:
        """Most recent snapshot, or None before the first one."""
        return self._snapshot

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def last_error(self) -> PipelineError | None:
        """Most recent error until replaced or cleared."""
        return self._last_error

    @property
    def last_update_time(self) -> datetime | None:
        """Timestamp of the most recent snapshot."""
        return self._last_update_time

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    def clear_error(self) -> None:
        self._last_error = None

    async def start(self) -> None:
        """Spawn the worker thread and its components.

        Raises:
            RuntimeError: If the pipeline was already disposed.
        """
        if self._disposed:
            raise RuntimeError("pipeline has been disposed")
        if self._thread is not None:
            return

        self._consumer_loop = asyncio.get_running_loop()
        self._worker_loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run_worker, name="nmea-pipeline", daemon=True
        )
        self._thread.start()
        await self._call_in_worker(self._setup())
        logger.debug("Pipeline worker started")

    async def connect(self, config: ConnectionConfig) -> None:
        """Connect to the source described by ``config``.

        Returns after the first attempt has completed; its outcome is
        reported on the ``states`` and ``errors`` channels.

        Raises:
            TypeError: If ``config`` is not a ``ConnectionConfig``.
            RuntimeError: If the pipeline is not started.
        """
        if not isinstance(config, ConnectionConfig):
            raise TypeError(
                f"connect() expects a ConnectionConfig, got {type(config).__name__}"
            )
        manager = self._require_started()
        await self._call_in_worker(manager.connect(config))

    async def disconnect(self) -> None:
        """Close the connection and cancel any pending reconnect."""
        if self._manager is None:
            return
        await self._call_in_worker(self._manager.disconnect())

    async def dispose(self) -> None:
        """Disconnect, stop the worker thread and release every resource.

        Safe to call more than once.
        """
        if self._disposed:
            return
        self._disposed = True
        if self._thread is None or self._worker_loop is None:
            return

        await self._call_in_worker(self._teardown())
        self._worker_loop.call_soon_threadsafe(self._worker_loop.stop)
        await asyncio.to_thread(self._thread.join)
        self._thread = None
        self._worker_loop = None
        self._manager = None
        self._aggregator = None
        logger.debug("Pipeline worker stopped")

    async def __aenter__(self) -> "NMEAPipeline":
        await self.start()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.dispose()

    def _require_started(self) -> ConnectionManager:
        if self._disposed or self._manager is None:
            raise RuntimeError("pipeline is not started")
        return self._manager

    async def _call_in_worker(self, coroutine: Coroutine[Any, Any, T]) -> T:
        assert self._worker_loop is not None
        future = asyncio.run_coroutine_threadsafe(coroutine, self._worker_loop)
        return await asyncio.wrap_future(future)

    def _run_worker(self) -> None:
        loop = self._worker_loop
        assert loop is not None
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True)
                )
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

    # Worker loop side.

    async def _setup(self) -> None:
        self._manager = ConnectionManager(
            on_data=self._handle_chunk,
            on_state=self._handle_state,
            on_error=self._handle_error,
        )
        self._aggregator = BatchingAggregator(self._handle_snapshot, self._batch_interval)
        self._aggregator.start()

    async def _teardown(self) -> None:
        assert self._manager is not None and self._aggregator is not None
        await self._manager.disconnect()
        await self._aggregator.stop()

    def _handle_chunk(self, chunk: bytes) -> None:
        assert self._aggregator is not None
        try:
            sentences = self._framer.feed(chunk)
        except BufferOverflowError as exc:
            self._handle_error(exc)
            sentences = exc.sentences

        for sentence in sentences:
            try:
                reading = parse_sentence(sentence)
            except NMEAError as exc:
                logger.warning("Dropped sentence %r: %s", sentence, exc.message)
                self._handle_error(exc)
                continue
            if reading is not None:
                self._aggregator.add(reading)

    def _handle_state(self, state: ConnectionState) -> None:
        assert self._manager is not None
        if state is ConnectionState.CONNECTED:
            self._framer.reset()
        self._post(self._deliver_state, state, self._manager.reconnect_attempts)

    def _handle_error(self, error: NMEAError) -> None:
        self._post(self._deliver_error, PipelineError.from_exception(error))

    def _handle_snapshot(self, snapshot: AggregatedSnapshot) -> None:
        self._post(self._deliver_snapshot, snapshot)

    def _post(self, callback: Callable[..., None], *args: Any) -> None:
        assert self._consumer_loop is not None
        try:
            self._consumer_loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            logger.debug("Consumer loop closed, dropping %s", callback.__name__)

    # Consumer loop side.

    def _deliver_snapshot(self, snapshot: AggregatedSnapshot) -> None:
        self._snapshot = snapshot
        self._last_update_time = snapshot.timestamp
        if self._cache is not None:
            try:
                self._cache.store(snapshot)
            except Exception:
                logger.exception("Snapshot cache write failed")
        self.snapshots.publish(snapshot)

    def _deliver_error(self, error: PipelineError) -> None:
        self._last_error = error
        self.errors.publish(error)

    def _deliver_state(self, state: ConnectionState, reconnect_attempts: int) -> None:
        self._state = state
        self._reconnect_attempts = reconnect_attempts
        self.states.publish(state)
