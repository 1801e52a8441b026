"""MTW sentence decoder.

MTW Sentence Format:
    $YXMTW,17.9,C*hh
           |    |
           |    +-- Units (C=Celsius)
           +-- Water temperature
"""

from sailstream.nmea.fields import parse_float_field, require
from sailstream.nmea.types import WaterTemperature

_MINIMUM_FIELD_COUNT = 2


def parse_mtw(fields: list[str]) -> WaterTemperature:
    """Construct a WaterTemperature from the fields of an MTW sentence.

    Raises:
        ValueError: If the temperature is missing or malformed, or the unit
            is not Celsius
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        raise ValueError(
            f"MTW needs {_MINIMUM_FIELD_COUNT} fields, got {len(fields)}"
        )

    unit = fields[2] if len(fields) > 2 else ""
    if unit not in ("C", ""):
        raise ValueError(f"unsupported temperature unit {unit!r}")

    return WaterTemperature(
        temperature_celsius=require(parse_float_field(fields[1]), "temperature"),
    )
