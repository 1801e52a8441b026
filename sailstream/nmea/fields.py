"""NMEA field parsing utilities.

This module provides utilities for parsing individual fields from NMEA sentences.
NMEA fields are comma-separated and may be empty (consecutive commas indicate
missing data). These utilities return None for empty fields, allowing callers
to distinguish "no data" from "zero value", and raise ValueError for fields
that hold text which is not a valid value. A malformed field must reject the
whole sentence: defaulting it to zero would make a broken depth sounder look
like a boat sitting on the bottom.
"""

import math
from datetime import UTC, date, datetime, time

_HEMISPHERE_SIGNS = {"N": 1.0, "S": -1.0, "E": 1.0, "W": -1.0}
_LATITUDE_HEMISPHERES = ("N", "S")

# NMEA carries two-digit years; 70-99 map to the 1900s, the rest to the 2000s.
_CENTURY_PIVOT = 70


def parse_float_field(value: str) -> float | None:
    """Parse a string field to float, returning None if empty.

    NMEA fields may be empty (indicated by consecutive commas like ",,").
    This function treats empty strings as "no data" rather than an error.

    Args:
        value: String value from an NMEA field

    Returns:
        Parsed float value, or None if the field is empty

    Raises:
        ValueError: If the field is not a finite decimal number

    Example:
        >>> parse_float_field("545.4")
        545.4
        >>> parse_float_field("")  # empty field
        None
    """
    if not value:
        return None
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number {value!r}")
    return number


def parse_int_field(value: str) -> int | None:
    """Parse a string field to int, returning None if empty.

    Similar to parse_float_field but for integer values like satellite count
    or fix quality indicators.

    Raises:
        ValueError: If the field is not an integer
    """
    if not value:
        return None
    return int(value)


def parse_count_field(value: str, name: str) -> int | None:
    """Parse an integer field such as a satellite count that cannot be negative.

    Raises:
        ValueError: If the field is not an integer or is negative
    """
    number = parse_int_field(value)
    if number is not None and number < 0:
        raise ValueError(f"negative {name} {value!r}")
    return number


def parse_string_field(value: str) -> str | None:
    """Parse a string field, returning None if empty."""
    if not value:
        return None
    return value


def require(value: float | None, name: str) -> float:
    """Return a mandatory value, raising ValueError if the field was empty."""
    if value is None:
        raise ValueError(f"missing {name}")
    return value


def parse_non_negative_field(value: str, name: str) -> float | None:
    """Parse a speed, depth or range field that cannot be negative.

    Raises:
        ValueError: If the field is malformed or negative
    """
    number = parse_float_field(value)
    if number is not None and number < 0:
        raise ValueError(f"negative {name} {value!r}")
    return number


def normalize_angle(degrees: float) -> float:
    """Wrap an angle into the half-open range [0, 360).

    Example:
        >>> normalize_angle(360.0)
        0.0
        >>> normalize_angle(-90.0)
        270.0
    """
    wrapped = degrees % 360.0
    # Tiny negative inputs round up to exactly 360.0
    if wrapped >= 360.0:
        return 0.0
    return wrapped


def parse_angle_field(value: str) -> float | None:
    """Parse an angle field and normalize it into [0, 360)."""
    number = parse_float_field(value)
    if number is None:
        return None
    return normalize_angle(number)


def parse_signed_field(value: str, direction: str, name: str) -> float | None:
    """Parse a magnitude with an E/W direction letter into a signed value.

    Used for magnetic variation and deviation, where East is positive and
    West negative.

    Raises:
        ValueError: If the magnitude is malformed or the direction is not E/W
    """
    magnitude = parse_float_field(value)
    if magnitude is None:
        return None
    if direction == "E":
        return magnitude
    if direction == "W":
        return -magnitude
    raise ValueError(f"invalid {name} direction {direction!r}")


def convert_to_decimal_degrees(
    value: str,
    direction: str,
) -> float | None:
    """Convert NMEA coordinate (DDDMM.MMMM) to decimal degrees.

    NMEA uses degrees-minutes format with a hemisphere indicator.
    This function converts to decimal degrees with sign convention:
    - North/East = positive
    - South/West = negative

    The conversion formula is:
        decimal_degrees = floor(value / 100) + (value mod 100) / 60

    Args:
        value: Coordinate in DDDMM.MMMM format (e.g., "4807.038")
        direction: Hemisphere indicator ("N", "S", "E", or "W")

    Returns:
        Decimal degrees (positive for N/E, negative for S/W),
        or None if the coordinate field is empty

    Raises:
        ValueError: If the value is malformed, the hemisphere letter is
            missing or unknown, or the result is out of range

    Example:
        >>> convert_to_decimal_degrees("4807.038", "N")
        48.1173  # 48° + 7.038'/60
        >>> convert_to_decimal_degrees("01131.000", "W")
        -11.5166667  # negative for West
    """
    raw = parse_float_field(value)
    if raw is None:
        return None
    if direction not in _HEMISPHERE_SIGNS:
        raise ValueError(f"invalid hemisphere {direction!r}")
    if raw < 0:
        raise ValueError(f"negative coordinate {value!r}")

    degrees = math.floor(raw / 100.0)
    minutes = raw - degrees * 100.0
    if minutes >= 60.0:
        raise ValueError(f"minutes out of range in {value!r}")

    decimal_degrees = degrees + minutes / 60.0
    limit = 90.0 if direction in _LATITUDE_HEMISPHERES else 180.0
    if decimal_degrees > limit:
        raise ValueError(f"coordinate {value!r} out of range")

    return _HEMISPHERE_SIGNS[direction] * decimal_degrees


def parse_utc_time_field(value: str) -> time | None:
    """Parse an HHMMSS(.ss) field into a timezone-aware UTC time.

    Raises:
        ValueError: If the field is shorter than six characters or any
            component is out of range

    Example:
        >>> parse_utc_time_field("123519.50")
        datetime.time(12, 35, 19, 500000, tzinfo=datetime.timezone.utc)
    """
    if not value:
        return None
    if len(value) < 6:
        raise ValueError(f"truncated time {value!r}")

    hour = int(value[0:2])
    minute = int(value[2:4])
    seconds = float(value[4:])
    whole_seconds = int(seconds)
    microseconds = round((seconds - whole_seconds) * 1_000_000)
    return time(hour, minute, whole_seconds, min(microseconds, 999_999), tzinfo=UTC)


def parse_date_field(value: str) -> date | None:
    """Parse a DDMMYY field into a date.

    Raises:
        ValueError: If the field is not six digits or is not a calendar date
    """
    if not value:
        return None
    if len(value) != 6 or not value.isdigit():
        raise ValueError(f"malformed date {value!r}")

    day = int(value[0:2])
    month = int(value[2:4])
    two_digit_year = int(value[4:6])
    century = 1900 if two_digit_year >= _CENTURY_PIVOT else 2000
    return date(century + two_digit_year, month, day)


def combine_date_time(day: date | None, moment: time | None) -> datetime | None:
    """Join a date and a UTC time into one datetime, None if either is missing."""
    if day is None or moment is None:
        return None
    return datetime.combine(day, moment)
