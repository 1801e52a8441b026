"""NMEA 0183 parser for position, navigation and instrument sentences."""

from sailstream.nmea.checksum import compute_checksum, validate_checksum
from sailstream.nmea.fields import convert_to_decimal_degrees, normalize_angle
from sailstream.nmea.parser import parse_sentence
from sailstream.nmea.types import (
    DepthReading,
    HeadingReading,
    MinimumNavigation,
    ParsedReading,
    PositionFix,
    TrackAndSpeed,
    WaterTemperature,
    WindReading,
    WindReference,
)

__all__ = [
    "DepthReading",
    "HeadingReading",
    "MinimumNavigation",
    "ParsedReading",
    "PositionFix",
    "TrackAndSpeed",
    "WaterTemperature",
    "WindReading",
    "WindReference",
    "compute_checksum",
    "convert_to_decimal_degrees",
    "normalize_angle",
    "parse_sentence",
    "validate_checksum",
]
