"""Helper factories and recorders for stream tests."""

import asyncio
import socket
from collections.abc import Callable

from sailstream.errors import NMEAError
from sailstream.stream import ConnectionConfig, ConnectionManager, ConnectionState, TransportType

GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"
RMC = "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"


def make_config(**overrides: object) -> ConnectionConfig:
    values: dict[str, object] = {
        "transport": TransportType.TCP,
        "host": "192.168.4.1",
        "port": 10110,
        "connect_timeout": 1.0,
        "reconnect_base_delay": 0.01,
        "reconnect_max_delay": 0.04,
    }
    values.update(overrides)
    return ConnectionConfig(**values)  # type: ignore[arg-type]


def free_udp_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class Recorder:
    """Collects ConnectionManager callbacks. Create inside a running loop."""

    def __init__(self) -> None:
        self.chunks: list[bytes] = []
        self.states: list[ConnectionState] = []
        self.errors: list[NMEAError] = []
        self.delays: list[float | None] = []
        self.manager: ConnectionManager | None = None
        self._changed = asyncio.Event()

    def attach(self) -> ConnectionManager:
        self.manager = ConnectionManager(self.on_data, self.on_state, self.on_error)
        return self.manager

    def on_data(self, chunk: bytes) -> None:
        self.chunks.append(chunk)
        self._changed.set()

    def on_state(self, state: ConnectionState) -> None:
        self.states.append(state)
        if state is ConnectionState.RECONNECTING and self.manager is not None:
            self.delays.append(self.manager.next_reconnect_delay)
        self._changed.set()

    def on_error(self, error: NMEAError) -> None:
        self.errors.append(error)
        self._changed.set()

    async def wait_until(self, predicate: Callable[[], bool], timeout: float = 5.0) -> None:
        async def _wait() -> None:
            while not predicate():
                self._changed.clear()
                await self._changed.wait()

        await asyncio.wait_for(_wait(), timeout)
