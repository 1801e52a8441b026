"""HDG sentence decoder.

HDG Sentence Format:
    $HCHDG,098.3,0.0,E,12.6,W*hh
           |     |   | |    |
           |     |   | +----+-- Magnetic variation + E/W
           |     +---+-- Deviation + E/W
           +-- Magnetic sensor heading (degrees)
"""

from sailstream.nmea.fields import parse_angle_field, parse_signed_field, require
from sailstream.nmea.types import HeadingReading

_MINIMUM_FIELD_COUNT = 6


def parse_hdg(fields: list[str]) -> HeadingReading:
    """Construct a HeadingReading from the fields of an HDG sentence.

    Raises:
        ValueError: If the heading is missing or any field is malformed
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise ValueError(
            f"HDG needs {_MINIMUM_FIELD_COUNT} fields, got {len(fields)}"
        )

    return HeadingReading(
        heading_degrees=require(parse_angle_field(fields[1]), "heading"),
        deviation_degrees=parse_signed_field(fields[2], fields[3], "deviation"),
        variation_degrees=parse_signed_field(fields[4], fields[5], "variation"),
    )
