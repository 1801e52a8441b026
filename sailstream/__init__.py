"""SailStream: NMEA 0183 ingestion for marine instrument feeds."""

from sailstream.errors import NMEAError, PipelineError, PipelineErrorKind
from sailstream.nmea import parse_sentence, validate_checksum
from sailstream.stream import (
    AggregatedSnapshot,
    ConnectionConfig,
    ConnectionState,
    NMEAPipeline,
    TransportType,
)

__all__ = [
    "AggregatedSnapshot",
    "ConnectionConfig",
    "ConnectionState",
    "NMEAError",
    "NMEAPipeline",
    "PipelineError",
    "PipelineErrorKind",
    "TransportType",
    "parse_sentence",
    "validate_checksum",
]
