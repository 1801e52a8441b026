"""MWV sentence decoder.

MWV Sentence Format:
    $IIMWV,045.0,R,12.5,N,A*hh
           |     | |    | |
           |     | |    | +-- Status (A=valid, V=invalid)
           |     | |    +-- Speed units (N=knots, K=km/h, M=m/s)
           |     | +-- Wind speed
           |     +-- Reference (R=relative/apparent, T=true)
           +-- Wind angle (degrees)

Wind instruments are configured per boat; the same masthead unit may report
in knots on one installation and m/s on another. Speeds are always converted
to knots so the aggregated snapshot has one unit.
"""

from sailstream.nmea.fields import (
    parse_angle_field,
    parse_non_negative_field,
    require,
)
from sailstream.nmea.types import WindReading, WindReference

_MINIMUM_FIELD_COUNT = 6

_TO_KNOTS = {
    "N": 1.0,
    "K": 1000.0 / 1852.0,
    "M": 3600.0 / 1852.0,
    # Some instruments leave the unit empty; NMEA's default is knots
    "": 1.0,
}


def parse_mwv(fields: list[str]) -> WindReading:
    """Construct a WindReading from the fields of an MWV sentence.

    Raises:
        ValueError: If angle or speed are missing or malformed, or the
            reference or unit letters are unknown
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise ValueError(
            f"MWV needs {_MINIMUM_FIELD_COUNT} fields, got {len(fields)}"
        )

    angle = require(parse_angle_field(fields[1]), "wind angle")
    reference = WindReference(fields[2])
    speed = require(parse_non_negative_field(fields[3], "wind speed"), "wind speed")

    unit = fields[4]
    if unit not in _TO_KNOTS:
        raise ValueError(f"unknown wind speed unit {unit!r}")

    return WindReading(
        angle_degrees=angle,
        reference=reference,
        speed_knots=speed * _TO_KNOTS[unit],
        valid=fields[5].startswith("A"),
    )
