"""Server configuration from environment variables.

Variables may also come from a ``.env`` file (``SAILSTREAM_ENV_FILE``,
default ``.env`` in the working directory). Real environment variables take
precedence over the file.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from sailstream.stream import ConnectionConfig, TransportType

__all__ = ["Settings", "get_settings"]

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    nmea_host: str
    nmea_port: int
    nmea_transport: TransportType
    nmea_auto_reconnect: bool
    nmea_auto_connect: bool

    cache_path: Path | None
    log_level: str

    http_host: str
    http_port: int

    def connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            transport=self.nmea_transport,
            host=self.nmea_host,
            port=self.nmea_port,
            auto_reconnect=self.nmea_auto_reconnect,
        )


def get_settings() -> Settings:
    """Read the settings, loading the ``.env`` file first if present.

    Raises:
        ValueError: If a numeric variable or the transport name is malformed.
    """
    env_file = os.getenv("SAILSTREAM_ENV_FILE", ".env")
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    # 10110 is the IANA port for NMEA 0183 over TCP/UDP.
    nmea_host = os.getenv("SAILSTREAM_NMEA_HOST", "192.168.4.1")
    nmea_port = int(os.getenv("SAILSTREAM_NMEA_PORT", "10110"))
    nmea_transport = TransportType(os.getenv("SAILSTREAM_NMEA_TRANSPORT", "tcp").lower())

    cache_path = os.getenv("SAILSTREAM_CACHE_PATH", "")

    return Settings(
        nmea_host=nmea_host,
        nmea_port=nmea_port,
        nmea_transport=nmea_transport,
        nmea_auto_reconnect=_env_flag("SAILSTREAM_NMEA_AUTO_RECONNECT", True),
        nmea_auto_connect=_env_flag("SAILSTREAM_NMEA_AUTO_CONNECT", False),
        cache_path=Path(cache_path) if cache_path else None,
        log_level=os.getenv("SAILSTREAM_LOG_LEVEL", "INFO").upper(),
        http_host=os.getenv("SAILSTREAM_HTTP_HOST", "0.0.0.0"),
        http_port=int(os.getenv("SAILSTREAM_HTTP_PORT", "8000")),
    )
