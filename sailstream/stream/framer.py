"""Line framing for raw transport bytes.

TCP delivers an unbounded byte stream and UDP delivers datagrams that may
hold several sentences or a fragment of one. ``StreamFramer`` turns either
into complete sentence lines, independent of where chunk boundaries fall.

CR and LF are both treated as terminators and empty segments are dropped, so
CRLF, bare LF and bare CR all frame identically, including a CRLF pair split
across two reads.
"""

import logging
import re

from sailstream.errors import BufferOverflowError

__all__ = ["DEFAULT_MAX_BUFFER_SIZE", "StreamFramer"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_BUFFER_SIZE = 10 * 1024

_TERMINATOR = re.compile(rb"[\r\n]")


class StreamFramer:
    """Accumulate byte chunks and emit complete, terminator-delimited lines.

    Usage::

        framer = StreamFramer()
        for chunk in chunks:
            for sentence in framer.feed(chunk):
                handle(sentence)

    Args:
        max_buffer_size: Largest unterminated tail kept between reads. A
            legal NMEA sentence is at most 82 characters; the cap is far
            above that and only trips on streams that never terminate.
    """

    def __init__(self, max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE) -> None:
        if max_buffer_size <= 0:
            raise ValueError("max_buffer_size must be positive")
        self._max_buffer_size = max_buffer_size
        self._buffer = bytearray()

    @property
    def buffered(self) -> int:
        """Number of bytes waiting for a terminator."""
        return len(self._buffer)

    def reset(self) -> None:
        """Drop any partial line, e.g. after the transport reconnects."""
        self._buffer.clear()

    def feed(self, data: bytes) -> list[str]:
        """Append a chunk and return the sentences it completed, in order.

        Lines are decoded as ASCII; undecodable bytes are replaced so that the
        checksum check downstream rejects the sentence.

        Raises:
            BufferOverflowError: If the unterminated tail left after this
                chunk exceeds ``max_buffer_size``. The tail is discarded
                first, so the framer keeps working on subsequent data, and
                the sentences this chunk did complete ride on the error.
        """
        self._buffer += data
        segments = _TERMINATOR.split(self._buffer)
        self._buffer = bytearray(segments.pop())

        sentences = []
        for segment in segments:
            line = segment.decode("ascii", errors="replace").strip()
            if line:
                sentences.append(line)

        if len(self._buffer) > self._max_buffer_size:
            discarded = len(self._buffer)
            self._buffer.clear()
            logger.warning("Discarded %d unterminated bytes", discarded)
            raise BufferOverflowError(discarded, sentences)

        return sentences
