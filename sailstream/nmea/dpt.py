"""DPT sentence decoder.

DPT Sentence Format:
    $SDDPT,2.8,-0.7,100*hh
           |   |    |
           |   |    +-- Maximum range scale in use (NMEA 3.0, optional)
           |   +-- Transducer offset (+ to waterline, - to keel)
           +-- Depth below transducer (meters)
"""

from sailstream.nmea.fields import (
    parse_float_field,
    parse_non_negative_field,
    require,
)
from sailstream.nmea.types import DepthReading

_MINIMUM_FIELD_COUNT = 3


def parse_dpt(fields: list[str]) -> DepthReading:
    """Construct a DepthReading from the fields of a DPT sentence.

    An empty depth field means the sounder lost the bottom; that is reported
    as a parse failure rather than a depth of zero.

    Raises:
        ValueError: If depth is missing, negative or malformed
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise ValueError(
            f"DPT needs {_MINIMUM_FIELD_COUNT} fields, got {len(fields)}"
        )

    max_range = fields[3] if len(fields) > 3 else ""

    return DepthReading(
        depth_meters=require(parse_non_negative_field(fields[1], "depth"), "depth"),
        offset_meters=parse_float_field(fields[2]),
        max_range_meters=parse_non_negative_field(max_range, "range"),
    )
