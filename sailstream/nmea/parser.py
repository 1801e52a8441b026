"""Sentence classification and dispatch.

``parse_sentence`` is the single entry point used by the pipeline. It performs:
1. Whitespace stripping (handles \\r\\n line endings)
2. Start delimiter check ('$' or '!')
3. Checksum validation, before any field splitting
4. Dispatch by the three-letter sentence type, for any two-letter talker
5. Conversion of decoder failures into ``SentenceParseError``

The parser keeps no state between calls, so it is safe to call from several
threads at once.
"""

import logging
from collections.abc import Callable

from sailstream.errors import ChecksumMismatchError, SentenceParseError
from sailstream.nmea.checksum import START_DELIMITERS, validate_checksum
from sailstream.nmea.dpt import parse_dpt
from sailstream.nmea.gga import parse_gga
from sailstream.nmea.hdg import parse_hdg
from sailstream.nmea.mtw import parse_mtw
from sailstream.nmea.mwv import parse_mwv
from sailstream.nmea.rmc import parse_rmc
from sailstream.nmea.types import ParsedReading
from sailstream.nmea.vtg import parse_vtg

__all__ = ["SENTENCE_DECODERS", "parse_sentence", "split_fields"]

logger = logging.getLogger(__name__)

# Sentence type -> decoder. The talker prefix (GP, GN, II, WI, SD, HC, ...)
# identifies the sending device and does not change the field layout.
SENTENCE_DECODERS: dict[str, Callable[[list[str]], ParsedReading]] = {
    "GGA": parse_gga,
    "RMC": parse_rmc,
    "VTG": parse_vtg,
    "MWV": parse_mwv,
    "DPT": parse_dpt,
    "HDG": parse_hdg,
    "MTW": parse_mtw,
}

_IDENTIFIER_LENGTH = 5


def split_fields(sentence: str) -> list[str]:
    """Split a checksum-validated sentence into its comma-separated fields.

    Example:
        Input: "$GPVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B"
        Output: ["GPVTG", "054.7", "T", "034.4", "M", "005.5", "N", "010.2", "K", "A"]
    """
    return sentence[1 : sentence.index("*")].split(",")


def _sentence_type(identifier: str) -> str | None:
    """Return the sentence type of a standard identifier, None otherwise.

    Proprietary sentences start with 'P' followed by a manufacturer code and
    have no fixed layout, so they never map to a decoder.
    """
    if len(identifier) != _IDENTIFIER_LENGTH or identifier.startswith("P"):
        return None
    return identifier[2:]


def parse_sentence(sentence: str) -> ParsedReading | None:
    """Decode one raw NMEA sentence.

    Args:
        sentence: One complete sentence, with or without trailing CR/LF

    Returns:
        The decoded reading, or None if the sentence type is not supported.
        Unsupported types are not an error: a feed from a multiplexer carries
        many sentences (GSV, XDR, AIVDM, proprietary) this pipeline ignores.

    Raises:
        SentenceParseError: If the line does not start with '$' or '!', or a
            supported sentence carries malformed or missing field data
        ChecksumMismatchError: If the checksum is missing or wrong

    Example:
        >>> reading = parse_sentence("$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A")
        >>> reading.speed_over_ground_knots
        22.4
    """
    sentence = sentence.strip()

    if not sentence.startswith(START_DELIMITERS):
        raise SentenceParseError(sentence, "missing '$' or '!' start delimiter")

    if not validate_checksum(sentence):
        raise ChecksumMismatchError(sentence)

    fields = split_fields(sentence)
    sentence_type = _sentence_type(fields[0])
    decoder = SENTENCE_DECODERS.get(sentence_type) if sentence_type else None
    if decoder is None:
        logger.debug("Skipping unsupported sentence %s", fields[0])
        return None

    try:
        return decoder(fields)
    except (ValueError, IndexError) as exc:
        raise SentenceParseError(sentence, f"{fields[0]}: {exc}") from exc
