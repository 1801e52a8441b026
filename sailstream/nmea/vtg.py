"""VTG sentence decoder.

VTG (Track Made Good and Ground Speed) provides velocity information: ground
speed and track relative to true and magnetic north.

VTG Sentence Format:
    $GPVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B
           |     | |     | |     | |     | |
           |     | |     | |     | |     | +-- Mode indicator (A/D/E/N)
           |     | |     | |     | +-----+-- Speed in km/h
           |     | |     | +-----+-- Speed in knots
           |     | +-----+-- Track (magnetic north, degrees)
           +-----+-- Track (true north, degrees)

Note: When stationary, the track angle may be empty (no heading when not moving).
"""

from sailstream.nmea.fields import (
    parse_angle_field,
    parse_non_negative_field,
    parse_string_field,
)
from sailstream.nmea.types import TrackAndSpeed

# VTG has 9 fields in basic format, 10 with FAA mode indicator
_MINIMUM_FIELD_COUNT = 9

# Conversion factors
# 1 km/h = 1000m / 3600s = 1/3.6 m/s
# 1 knot = 1852m / 3600s
_KILOMETERS_PER_HOUR_TO_METERS_PER_SECOND = 3.6
_KNOTS_TO_METERS_PER_SECOND = 1852.0 / 3600.0


def _extract_mode(fields: list[str]) -> str | None:
    """Extract the FAA mode indicator, added at index 9 in NMEA 2.3."""
    if len(fields) <= 9:
        return None
    return parse_string_field(fields[9])


def _compute_speed_meters_per_second(
    speed_kilometers_per_hour: float | None,
    speed_knots: float | None,
) -> float | None:
    """Derive speed in m/s, preferring the km/h field over knots.

    Example:
        >>> _compute_speed_meters_per_second(36.0, None)
        10.0  # 36 km/h = 10 m/s
    """
    if speed_kilometers_per_hour is not None:
        return speed_kilometers_per_hour / _KILOMETERS_PER_HOUR_TO_METERS_PER_SECOND
    if speed_knots is not None:
        return speed_knots * _KNOTS_TO_METERS_PER_SECOND
    return None


def parse_vtg(fields: list[str]) -> TrackAndSpeed:
    """Construct a TrackAndSpeed from the fields of a VTG sentence.

    Maps NMEA field indices to TrackAndSpeed attributes:
        fields[1] -> track_true_degrees
        fields[3] -> track_magnetic_degrees
        fields[5] -> speed_knots
        fields[7] -> speed_kilometers_per_hour
        (computed) -> speed_meters_per_second
        fields[9] -> mode (FAA mode indicator, if present)

    Raises:
        ValueError: If the sentence is truncated or any field is malformed
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise ValueError(
            f"VTG needs {_MINIMUM_FIELD_COUNT} fields, got {len(fields)}"
        )

    speed_knots = parse_non_negative_field(fields[5], "speed")
    speed_kilometers_per_hour = parse_non_negative_field(fields[7], "speed")
    mode = _extract_mode(fields)

    return TrackAndSpeed(
        track_true_degrees=parse_angle_field(fields[1]),
        track_magnetic_degrees=parse_angle_field(fields[3]),
        speed_knots=speed_knots,
        speed_kilometers_per_hour=speed_kilometers_per_hour,
        speed_meters_per_second=_compute_speed_meters_per_second(
            speed_kilometers_per_hour, speed_knots
        ),
        mode=mode,
        valid=mode != "N",
    )
