"""RMC sentence decoder.

RMC Sentence Format:
    $GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A
           |      | |        | |         | |     |     |      |     |
           |      | |        | |         | |     |     |      +-----+-- Magnetic variation + E/W
           |      | |        | |         | |     |     +-- Date (DDMMYY)
           |      | |        | |         | |     +-- Course over ground (true)
           |      | |        | |         | +-- Speed over ground (knots)
           |      | |        | +---------+-- Longitude + E/W
           |      | +--------+-- Latitude + N/S
           |      +-- Status (A=active, V=void)
           +-- UTC time (HHMMSS.ss)

NMEA 2.3 receivers append an FAA mode indicator after the variation; it is
not needed here and is ignored.
"""

from sailstream.nmea.fields import (
    combine_date_time,
    convert_to_decimal_degrees,
    parse_angle_field,
    parse_date_field,
    parse_non_negative_field,
    parse_signed_field,
    parse_utc_time_field,
)
from sailstream.nmea.types import MinimumNavigation

# Identifier plus ten data fields up to the date; variation may be missing
_MINIMUM_FIELD_COUNT = 10


def parse_rmc(fields: list[str]) -> MinimumNavigation:
    """Construct a MinimumNavigation from the fields of an RMC sentence.

    Raises:
        ValueError: If the sentence is truncated or any field is malformed
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise ValueError(
            f"RMC needs {_MINIMUM_FIELD_COUNT} fields, got {len(fields)}"
        )

    status = fields[2]
    if status not in ("A", "V"):
        raise ValueError(f"invalid RMC status {status!r}")

    variation_value = fields[10] if len(fields) > 10 else ""
    variation_direction = fields[11] if len(fields) > 11 else ""

    return MinimumNavigation(
        utc_datetime=combine_date_time(
            parse_date_field(fields[9]), parse_utc_time_field(fields[1])
        ),
        valid=status == "A",
        latitude_degrees=convert_to_decimal_degrees(fields[3], fields[4]),
        longitude_degrees=convert_to_decimal_degrees(fields[5], fields[6]),
        speed_over_ground_knots=parse_non_negative_field(fields[7], "speed"),
        course_over_ground_degrees=parse_angle_field(fields[8]),
        magnetic_variation_degrees=parse_signed_field(
            variation_value, variation_direction, "variation"
        ),
    )
