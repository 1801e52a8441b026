"""Transport, framing, aggregation and the pipeline facade."""

from sailstream.stream.aggregator import AggregatedSnapshot, BatchingAggregator
from sailstream.stream.broadcaster import Broadcaster
from sailstream.stream.connection import ConnectionManager, backoff_delay
from sailstream.stream.framer import StreamFramer
from sailstream.stream.pipeline import NMEAPipeline, SnapshotCache
from sailstream.stream.types import ConnectionConfig, ConnectionState, TransportType

__all__ = [
    "AggregatedSnapshot",
    "BatchingAggregator",
    "Broadcaster",
    "ConnectionConfig",
    "ConnectionManager",
    "ConnectionState",
    "NMEAPipeline",
    "SnapshotCache",
    "StreamFramer",
    "TransportType",
    "backoff_delay",
]
