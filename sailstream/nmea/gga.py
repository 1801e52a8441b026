"""GGA sentence decoder.

GGA (Global Positioning System Fix Data) provides position fix information
including coordinates, altitude, fix quality, and satellite/accuracy metrics.

GGA Sentence Format:
    $GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47
           |      |        | |         | | |  |   |     | |     |
           |      |        | |         | | |  |   |     | |     +-- DGPS info (optional)
           |      |        | |         | | |  |   |     | +-- Geoid height (M=meters)
           |      |        | |         | | |  |   +-----+-- Altitude above MSL
           |      |        | |         | | |  +-- HDOP (horizontal dilution)
           |      |        | |         | | +-- Number of satellites
           |      |        | |         | +-- Fix quality (0-6)
           |      |        | +---------+-- Longitude + E/W
           |      +--------+-- Latitude + N/S
           +-- UTC time (HHMMSS.ss)
"""

from sailstream.nmea.fields import (
    convert_to_decimal_degrees,
    parse_float_field,
    parse_count_field,
    parse_non_negative_field,
    parse_utc_time_field,
)
from sailstream.nmea.types import PositionFix

# GGA sentences have 14 standard fields (indices 0-13)
# Some receivers add extra fields for DGPS station info
_MINIMUM_FIELD_COUNT = 14


def parse_gga(fields: list[str]) -> PositionFix:
    """Construct a PositionFix from the fields of a GGA sentence.

    Maps NMEA field indices to PositionFix attributes:
        fields[1]  -> utc_time (HHMMSS.ss format)
        fields[2]  -> latitude (DDMM.MMMM format)
        fields[3]  -> latitude direction (N/S)
        fields[4]  -> longitude (DDDMM.MMMM format)
        fields[5]  -> longitude direction (E/W)
        fields[6]  -> fix_quality (0-6)
        fields[7]  -> num_satellites
        fields[8]  -> HDOP (horizontal dilution of precision)
        fields[9]  -> altitude above MSL (meters)
        fields[11] -> geoid height (meters)

    Note: fix_quality defaults to 0 (invalid) if the field is empty,
    since 0 already means "no fix" semantically.

    Args:
        fields: Comma-split payload, identifier first, checksum removed

    Returns:
        PositionFix with parsed values; valid=True only if fix_quality > 0

    Raises:
        ValueError: If the sentence is truncated or any field is malformed
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise ValueError(
            f"GGA needs {_MINIMUM_FIELD_COUNT} fields, got {len(fields)}"
        )

    fix_quality = parse_count_field(fields[6], "fix quality") or 0

    return PositionFix(
        utc_time=parse_utc_time_field(fields[1]),
        latitude_degrees=convert_to_decimal_degrees(fields[2], fields[3]),
        longitude_degrees=convert_to_decimal_degrees(fields[4], fields[5]),
        fix_quality=fix_quality,
        num_satellites=parse_count_field(fields[7], "satellite count"),
        horizontal_dilution_of_precision=parse_non_negative_field(fields[8], "HDOP"),
        altitude_meters=parse_float_field(fields[9]),
        geoid_height_meters=parse_float_field(fields[11]),
        # Navigation validity: only valid if we have a fix
        valid=fix_quality > 0,
    )
