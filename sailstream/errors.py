"""Error taxonomy for the NMEA ingestion pipeline.

Every failure the pipeline can recover from is an ``NMEAError`` subclass
carrying a ``kind``. Parsers and the framer raise them; the pipeline catches
them, converts them to ``PipelineError`` records and publishes those on its
error channel instead of propagating them to the caller.

Unrecognized sentence types are deliberately absent: they are skipped, not
reported.
"""

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime

__all__ = [
    "BufferOverflowError",
    "ChecksumMismatchError",
    "ConnectTimeoutError",
    "ConnectionFailedError",
    "NMEAError",
    "PipelineError",
    "PipelineErrorKind",
    "SentenceParseError",
]


class PipelineErrorKind(enum.Enum):
    """Category of a recoverable pipeline failure."""

    CONNECTION = "connection"
    TIMEOUT = "timeout"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    PARSE_FAILURE = "parse_failure"
    BUFFER_OVERFLOW = "buffer_overflow"


class NMEAError(Exception):
    """Base class for recoverable ingestion failures.

    Attributes:
        kind: Category reported on the pipeline error channel.
        sentence: The offending sentence, when the failure concerns one.
    """

    kind: PipelineErrorKind = PipelineErrorKind.CONNECTION

    def __init__(self, message: str, sentence: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.sentence = sentence


class ConnectionFailedError(NMEAError):
    """The transport could not be opened or was lost."""

    kind = PipelineErrorKind.CONNECTION


class ConnectTimeoutError(NMEAError):
    """A connect attempt did not complete within the configured bound."""

    kind = PipelineErrorKind.TIMEOUT

    def __init__(self, host: str, port: int, timeout: float) -> None:
        super().__init__(f"Connection to {host}:{port} timed out after {timeout:g}s")
        self.host = host
        self.port = port
        self.timeout = timeout


class ChecksumMismatchError(NMEAError):
    """A well-framed sentence failed its XOR integrity check."""

    kind = PipelineErrorKind.CHECKSUM_MISMATCH

    def __init__(self, sentence: str) -> None:
        super().__init__("Checksum validation failed", sentence)


class SentenceParseError(NMEAError):
    """A sentence of a recognized type carried malformed field data."""

    kind = PipelineErrorKind.PARSE_FAILURE

    def __init__(self, sentence: str, reason: str) -> None:
        super().__init__(f"Parse error: {reason}", sentence)
        self.reason = reason


class BufferOverflowError(NMEAError):
    """The framer buffer grew past its cap without a line terminator."""

    kind = PipelineErrorKind.BUFFER_OVERFLOW

    def __init__(self, discarded_bytes: int, sentences: list[str] | None = None) -> None:
        super().__init__(
            f"Buffer overflow: discarded {discarded_bytes} bytes "
            "without a line terminator"
        )
        self.discarded_bytes = discarded_bytes
        # Lines completed by the same chunk before the oversized tail.
        self.sentences = sentences or []


@dataclass(frozen=True)
class PipelineError:
    """An error record as published to pipeline subscribers.

    Attributes:
        kind: Failure category.
        message: Human readable description, suitable for display.
        sentence: The offending sentence, or None for transport failures.
        timestamp: UTC time at which the error was recorded.
    """

    kind: PipelineErrorKind
    message: str
    sentence: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_exception(cls, error: NMEAError) -> "PipelineError":
        return cls(kind=error.kind, message=error.message, sentence=error.sentence)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"
