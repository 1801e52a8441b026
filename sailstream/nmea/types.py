"""NMEA data types for parsed sentences.

This module defines one frozen dataclass per supported sentence type. Together
they form ``ParsedReading``, the union produced by ``parse_sentence``.

Design Decisions:
    1. Optional fields (float | None): NMEA fields may be empty, indicated by
       consecutive commas. Using None distinguishes "no data received" from
       "measured zero" - critical for depth and speed, where 0.0 is a real
       reading.

    2. Separate valid flag: The valid field indicates navigation validity,
       NOT parse validity. A successfully parsed sentence may still be
       navigationally invalid (e.g., no GPS fix). Malformed sentences never
       produce a reading at all; the parser raises instead.

    3. Angles are normalized to [0, 360) and speeds/depths are non-negative
       by construction; the decoders enforce both before building a reading.

    4. Readings are frozen: the aggregator hands the same instances to every
       subscriber, so nobody may mutate them in place.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, time

from sailstream.nmea.fields import normalize_angle

_KNOTS_TO_METERS_PER_SECOND = 1852.0 / 3600.0


@dataclass(frozen=True)
class PositionFix:
    """Parsed GGA (Global Positioning System Fix Data) sentence.

    Attributes:
        utc_time: UTC time of the fix. None if field was empty.

        latitude_degrees: Latitude in decimal degrees, positive=North.
            Range: -90.0 to +90.0. None if no fix or field empty.

        longitude_degrees: Longitude in decimal degrees, positive=East.
            Range: -180.0 to +180.0. None if no fix or field empty.

        fix_quality: GPS fix quality indicator (always present, defaults to 0):
            0 = Invalid (no fix)
            1 = GPS fix (SPS - Standard Positioning Service)
            2 = DGPS fix (Differential GPS)
            4 = RTK Fixed
            5 = RTK Float
            6 = Dead reckoning mode

        num_satellites: Number of satellites used in the fix solution.
            None if field was empty.

        horizontal_dilution_of_precision: HDOP value indicating position
            accuracy. Lower is better. None if field was empty.

        altitude_meters: Altitude above mean sea level (MSL) in meters.
            None if no fix or field empty.

        geoid_height_meters: Height of geoid (MSL) above WGS84 ellipsoid.
            None if field was empty.

        valid: Navigation validity flag. True only if fix_quality > 0.

    Example:
        >>> fix = parse_sentence("$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47")
        >>> fix.latitude_degrees
        48.1173
        >>> fix.valid
        True
    """

    utc_time: time | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    fix_quality: int
    num_satellites: int | None
    horizontal_dilution_of_precision: float | None
    altitude_meters: float | None
    geoid_height_meters: float | None
    valid: bool


@dataclass(frozen=True)
class MinimumNavigation:
    """Parsed RMC (Recommended Minimum Navigation Information) sentence.

    RMC is the sentence most chartplotters and instrument multiplexers send
    when nothing else is configured: position, speed and course in one line.

    Attributes:
        utc_datetime: UTC date and time of the fix. None if either the time
            or the date field was empty.

        valid: Status flag. True for 'A' (active), False for 'V' (void).

        latitude_degrees: Latitude in decimal degrees, positive=North.

        longitude_degrees: Longitude in decimal degrees, positive=East.

        speed_over_ground_knots: Speed over ground in knots, non-negative.

        course_over_ground_degrees: Course over ground relative to true
            north, normalized to [0, 360).

        magnetic_variation_degrees: Magnetic variation, East positive and
            West negative. None if the receiver does not report it.
    """

    utc_datetime: datetime | None
    valid: bool
    latitude_degrees: float | None
    longitude_degrees: float | None
    speed_over_ground_knots: float | None
    course_over_ground_degrees: float | None
    magnetic_variation_degrees: float | None


@dataclass(frozen=True)
class TrackAndSpeed:
    """Parsed VTG (Track Made Good and Ground Speed) sentence.

    Attributes:
        track_true_degrees: Track relative to true north, in [0, 360).
            None when stationary (GNSS cannot determine heading without
            movement).

        track_magnetic_degrees: Track relative to magnetic north, in
            [0, 360). None if the receiver does not report it.

        speed_knots: Ground speed in knots.

        speed_kilometers_per_hour: Ground speed in km/h.

        speed_meters_per_second: Ground speed in m/s, derived from km/h, or
            from knots when the km/h field is empty.

        mode: FAA mode indicator (NMEA 2.3+):
            'A' = Autonomous, 'D' = Differential, 'E' = Estimated,
            'N' = Not valid. None on older receivers.

        valid: False only when the mode indicator is 'N'. Receivers older
            than NMEA 2.3 omit the mode entirely; their data is trusted.
    """

    track_true_degrees: float | None
    track_magnetic_degrees: float | None
    speed_knots: float | None
    speed_kilometers_per_hour: float | None
    speed_meters_per_second: float | None
    mode: str | None
    valid: bool


class WindReference(enum.Enum):
    """Reference frame of an MWV wind angle."""

    RELATIVE = "R"
    TRUE = "T"


@dataclass(frozen=True)
class WindReading:
    """Parsed MWV (Wind Speed and Angle) sentence.

    Attributes:
        angle_degrees: Wind angle in [0, 360). Measured from the bow when
            ``reference`` is RELATIVE, from true north when TRUE.
        reference: Whether the angle is apparent (relative) or true wind.
        speed_knots: Wind speed in knots, converted from km/h or m/s when
            the instrument reports those units.
        valid: Status flag, True for 'A'.
    """

    angle_degrees: float
    reference: WindReference
    speed_knots: float
    valid: bool

    @property
    def is_relative(self) -> bool:
        return self.reference is WindReference.RELATIVE

    @property
    def speed_meters_per_second(self) -> float:
        return self.speed_knots * _KNOTS_TO_METERS_PER_SECOND


@dataclass(frozen=True)
class DepthReading:
    """Parsed DPT (Depth of Water) sentence.

    Attributes:
        depth_meters: Water depth below the transducer.
        offset_meters: Transducer offset. Positive is the distance from the
            transducer to the waterline, negative the distance to the keel.
            None if not reported.
        max_range_meters: Maximum range scale in use (NMEA 3.0+). None if
            not reported.
    """

    depth_meters: float
    offset_meters: float | None
    max_range_meters: float | None

    @property
    def depth_below_reference_meters(self) -> float:
        """Depth below the waterline (positive offset) or keel (negative)."""
        return self.depth_meters + (self.offset_meters or 0.0)


@dataclass(frozen=True)
class HeadingReading:
    """Parsed HDG (Heading, Deviation & Variation) sentence.

    Attributes:
        heading_degrees: Magnetic sensor heading in [0, 360).
        deviation_degrees: Compass deviation, East positive. None if unknown.
        variation_degrees: Magnetic variation, East positive. None if unknown.
    """

    heading_degrees: float
    deviation_degrees: float | None
    variation_degrees: float | None

    @property
    def magnetic_heading_degrees(self) -> float:
        """Sensor heading corrected for deviation (unknown deviation is 0)."""
        return normalize_angle(self.heading_degrees + (self.deviation_degrees or 0.0))

    @property
    def true_heading_degrees(self) -> float | None:
        """Heading relative to true north, None while variation is unknown."""
        if self.variation_degrees is None:
            return None
        return normalize_angle(self.magnetic_heading_degrees + self.variation_degrees)


@dataclass(frozen=True)
class WaterTemperature:
    """Parsed MTW (Mean Temperature of Water) sentence."""

    temperature_celsius: float


ParsedReading = (
    PositionFix
    | MinimumNavigation
    | TrackAndSpeed
    | WindReading
    | DepthReading
    | HeadingReading
    | WaterTemperature
)
