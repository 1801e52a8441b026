"""Transport lifecycle: connect, read, detect loss and reconnect with backoff.

``ConnectionManager`` owns at most one transport at a time, either a TCP
client stream or a bound UDP datagram endpoint, and runs entirely on the
asyncio loop it is used from. It reports through three callbacks:

* ``on_data(chunk)`` for every received byte chunk, in arrival order
* ``on_state(state)`` whenever the ``ConnectionState`` changes
* ``on_error(error)`` for connect failures, timeouts and connection loss

Failures never raise out of ``connect()``. With ``auto_reconnect`` set, a
failed attempt or an unexpected loss schedules a retry after
``min(base * 2**n, max)`` seconds, ``n`` being the number of consecutive
failures, which resets to zero once a connection succeeds.
"""

import asyncio
import logging
from collections.abc import Callable

from sailstream.errors import ConnectionFailedError, ConnectTimeoutError, NMEAError
from sailstream.stream.types import ConnectionConfig, ConnectionState, TransportType

__all__ = ["ConnectionManager", "backoff_delay"]

logger = logging.getLogger(__name__)

_READ_SIZE = 4096
# Keeps 2**n finite for long outages; the delay is capped far below anyway.
_MAX_BACKOFF_EXPONENT = 16


def backoff_delay(attempt: int, base: float, cap: float) -> float:
    """Delay before retry number ``attempt`` (zero based).

    >>> [backoff_delay(n, 5.0, 30.0) for n in range(5)]
    [5.0, 10.0, 20.0, 30.0, 30.0]
    """
    return min(base * 2 ** min(attempt, _MAX_BACKOFF_EXPONENT), cap)


class _DatagramProtocol(asyncio.DatagramProtocol):
    def __init__(
        self,
        on_data: Callable[[bytes], None],
        on_lost: Callable[[asyncio.BaseTransport, Exception | None], None],
    ) -> None:
        self._on_data = on_data
        self._on_lost = on_lost
        self._transport: asyncio.BaseTransport | None = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._transport = transport

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        self._on_data(data)

    def error_received(self, exc: Exception) -> None:
        logger.warning("UDP socket error: %s", exc)

    def connection_lost(self, exc: Exception | None) -> None:
        if self._transport is not None:
            self._on_lost(self._transport, exc)


class ConnectionManager:
    """Single-transport connection state machine with automatic reconnect.

    Args:
        on_data: Receives each raw byte chunk.
        on_state: Receives every state transition. Optional.
        on_error: Receives connection and timeout errors. Optional.
    """

    def __init__(
        self,
        on_data: Callable[[bytes], None],
        on_state: Callable[[ConnectionState], None] | None = None,
        on_error: Callable[[NMEAError], None] | None = None,
    ) -> None:
        self._on_data = on_data
        self._on_state = on_state
        self._on_error = on_error

        self._state = ConnectionState.DISCONNECTED
        self._config: ConnectionConfig | None = None
        self._attempts = 0
        self._next_delay: float | None = None
        self._closing = False

        self._connect_task: asyncio.Task[None] | None = None
        self._read_task: asyncio.Task[None] | None = None
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._udp_transport: asyncio.BaseTransport | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def config(self) -> ConnectionConfig | None:
        """Configuration of the current or most recent connection."""
        return self._config

    @property
    def reconnect_attempts(self) -> int:
        """Consecutive failed attempts since the last successful connect."""
        return self._attempts

    @property
    def next_reconnect_delay(self) -> float | None:
        """Delay of the pending retry in seconds, or None if none is scheduled."""
        return self._next_delay

    async def connect(self, config: ConnectionConfig) -> None:
        """Open the transport described by ``config``.

        Returns once the first attempt has either succeeded or failed.
        Calling it while connected, or while an attempt is already in flight,
        logs a warning and does nothing. A pending reconnect timer is
        cancelled and replaced by an immediate attempt.
        """
        if self._state is ConnectionState.CONNECTED or self._attempt_in_flight():
            logger.warning("Connect ignored, connection is %s", self._state.value)
            return

        self._cancel_reconnect()
        self._config = config
        self._closing = False
        self._attempts = 0
        self._set_state(ConnectionState.CONNECTING)
        # asyncio.wait does not raise when disconnect() cancels the attempt.
        await asyncio.wait([self._start_attempt()])

    async def disconnect(self) -> None:
        """Close the transport and stop reconnecting. Safe to call repeatedly."""
        self._closing = True
        self._cancel_reconnect()

        pending = [
            task
            for task in (self._connect_task, self._read_task)
            if task is not None and not task.done()
        ]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)
        self._connect_task = None
        self._read_task = None

        self._close_transport()
        self._attempts = 0
        self._next_delay = None
        if self._state is not ConnectionState.DISCONNECTED:
            logger.info("Disconnected")
        self._set_state(ConnectionState.DISCONNECTED)

    def _attempt_in_flight(self) -> bool:
        return self._connect_task is not None and not self._connect_task.done()

    def _start_attempt(self) -> "asyncio.Task[None]":
        assert self._config is not None
        self._connect_task = asyncio.ensure_future(self._open(self._config))
        return self._connect_task

    async def _open(self, config: ConnectionConfig) -> None:
        address = f"{config.host}:{config.port}"
        try:
            if config.transport is TransportType.TCP:
                reader, writer = await asyncio.wait_for(
                    asyncio.open_connection(config.host, config.port),
                    timeout=config.connect_timeout,
                )
            else:
                loop = asyncio.get_running_loop()
                transport, _ = await asyncio.wait_for(
                    loop.create_datagram_endpoint(
                        lambda: _DatagramProtocol(self._on_data, self._datagram_lost),
                        local_addr=(config.host, config.port),
                    ),
                    timeout=config.connect_timeout,
                )
        # TimeoutError is an OSError subclass, so it must be caught first.
        except TimeoutError:
            self._attempt_failed(
                ConnectTimeoutError(config.host, config.port, config.connect_timeout)
            )
            return
        # Name resolution of an unencodable host raises UnicodeError (a ValueError).
        except (OSError, ValueError) as exc:
            self._attempt_failed(
                ConnectionFailedError(f"Connection to {address} failed: {exc}")
            )
            return

        if config.transport is TransportType.TCP:
            self._writer = writer
            self._read_task = asyncio.ensure_future(self._read_loop(reader))
        else:
            self._udp_transport = transport

        self._attempts = 0
        self._next_delay = None
        logger.info("Connected to %s over %s", address, config.transport.value.upper())
        self._set_state(ConnectionState.CONNECTED)

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        try:
            while True:
                chunk = await reader.read(_READ_SIZE)
                if not chunk:
                    raise EOFError("closed by peer")
                self._on_data(chunk)
        except (EOFError, OSError) as exc:
            self._read_task = None
            self._connection_lost(str(exc) or type(exc).__name__)

    def _datagram_lost(
        self, transport: asyncio.BaseTransport, exc: Exception | None
    ) -> None:
        if transport is not self._udp_transport:
            return
        self._udp_transport = None
        self._connection_lost(str(exc) if exc else "socket closed")

    def _attempt_failed(self, error: NMEAError) -> None:
        logger.warning("%s", error.message)
        self._emit_error(error)
        self._set_state(ConnectionState.ERROR)
        assert self._config is not None
        if self._config.auto_reconnect and not self._closing:
            self._schedule_reconnect()

    def _connection_lost(self, reason: str) -> None:
        if self._closing:
            return
        self._close_transport()
        assert self._config is not None
        error = ConnectionFailedError(
            f"Connection to {self._config.host}:{self._config.port} lost: {reason}"
        )
        logger.warning("%s", error.message)
        self._emit_error(error)
        if self._config.auto_reconnect:
            self._schedule_reconnect()
        else:
            self._set_state(ConnectionState.ERROR)

    def _schedule_reconnect(self) -> None:
        assert self._config is not None
        delay = backoff_delay(
            self._attempts,
            self._config.reconnect_base_delay,
            self._config.reconnect_max_delay,
        )
        self._attempts += 1
        self._next_delay = delay
        loop = asyncio.get_running_loop()
        self._reconnect_handle = loop.call_later(delay, self._reconnect)
        logger.info(
            "Reconnecting to %s:%d in %.1fs (attempt %d)",
            self._config.host,
            self._config.port,
            delay,
            self._attempts,
        )
        self._set_state(ConnectionState.RECONNECTING)

    def _reconnect(self) -> None:
        self._reconnect_handle = None
        self._next_delay = None
        if not self._closing:
            self._start_attempt()

    def _cancel_reconnect(self) -> None:
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None
        self._next_delay = None

    def _close_transport(self) -> None:
        writer, self._writer = self._writer, None
        if writer is not None:
            writer.close()
        transport, self._udp_transport = self._udp_transport, None
        if transport is not None:
            transport.close()

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        self._state = state
        if self._on_state is not None:
            self._on_state(state)

    def _emit_error(self, error: NMEAError) -> None:
        if self._on_error is not None:
            self._on_error(error)
