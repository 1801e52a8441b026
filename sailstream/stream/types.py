"""Connection configuration and lifecycle state."""

import enum
from dataclasses import dataclass

__all__ = ["ConnectionConfig", "ConnectionState", "TransportType"]

_MIN_PORT = 1
_MAX_PORT = 65535


class TransportType(enum.Enum):
    TCP = "tcp"
    UDP = "udp"


class ConnectionState(enum.Enum):
    """Lifecycle of the transport managed by the pipeline.

    The reason for ``ERROR`` is published on the error channel, not carried
    by the state itself.
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    ERROR = "error"

    @property
    def is_connected(self) -> bool:
        return self is ConnectionState.CONNECTED

    @property
    def is_active(self) -> bool:
        """True while a connection exists or is being established."""
        return self in (
            ConnectionState.CONNECTING,
            ConnectionState.CONNECTED,
            ConnectionState.RECONNECTING,
        )


@dataclass(frozen=True)
class ConnectionConfig:
    """Parameters of one NMEA source.

    For TCP, ``host``/``port`` name the remote multiplexer. For UDP they name
    the local address the socket binds to (``0.0.0.0`` for all interfaces).

    Attributes:
        transport: TCP client or UDP listener.
        host: Hostname or IP address.
        port: Port number in [1, 65535].
        connect_timeout: Upper bound in seconds for one connect attempt.
        reconnect_base_delay: Delay in seconds before the first retry.
        reconnect_max_delay: Cap in seconds for the doubling retry delay.
        auto_reconnect: Retry after failures and unexpected disconnects.

    Raises:
        ValueError: If any field is out of range.
    """

    transport: TransportType
    host: str
    port: int
    connect_timeout: float = 15.0
    reconnect_base_delay: float = 5.0
    reconnect_max_delay: float = 30.0
    auto_reconnect: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.transport, TransportType):
            raise ValueError(f"transport must be a TransportType, got {self.transport!r}")
        if not self.host:
            raise ValueError("host must not be empty")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"port must be an integer, got {self.port!r}")
        if not _MIN_PORT <= self.port <= _MAX_PORT:
            raise ValueError(f"port must be in [{_MIN_PORT}, {_MAX_PORT}], got {self.port}")
        if self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be positive")
        if self.reconnect_base_delay <= 0:
            raise ValueError("reconnect_base_delay must be positive")
        if self.reconnect_max_delay < self.reconnect_base_delay:
            raise ValueError("reconnect_max_delay must not be below reconnect_base_delay")
