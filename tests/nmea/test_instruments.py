"""Tests for wind, depth, heading and water temperature sentences."""

import pytest

from sailstream.errors import SentenceParseError
from sailstream.nmea import (
    DepthReading,
    HeadingReading,
    WaterTemperature,
    WindReading,
    WindReference,
    parse_sentence,
)
from sailstream.nmea.hdg import parse_hdg
from sailstream.nmea.mwv import parse_mwv


class TestParseMWV:
    """Tests for MWV wind sentences."""

    def test_apparent_wind_in_knots(self):
        result = parse_sentence("$IIMWV,045.0,R,12.5,N,A*0A")
        assert isinstance(result, WindReading)
        assert result.angle_degrees == pytest.approx(45.0)
        assert result.reference is WindReference.RELATIVE
        assert result.is_relative
        assert result.speed_knots == pytest.approx(12.5)
        assert result.valid is True

    def test_true_wind_in_meters_per_second_converted(self):
        result = parse_sentence("$WIMWV,270.0,T,10.0,M,A*12")
        assert result.reference is WindReference.TRUE
        assert result.speed_knots == pytest.approx(10.0 * 3600.0 / 1852.0)
        assert result.speed_meters_per_second == pytest.approx(10.0)

    def test_kilometers_per_hour_converted(self):
        fields = ["IIMWV", "090.0", "R", "18.52", "K", "A"]
        assert parse_mwv(fields).speed_knots == pytest.approx(10.0)

    def test_void_status(self):
        assert parse_sentence("$IIMWV,045.0,R,12.5,N,V*1D").valid is False

    def test_unknown_reference_rejected(self):
        with pytest.raises(SentenceParseError, match="MWV"):
            parse_sentence("$IIMWV,045.0,X,12.5,N,A*00")

    def test_angle_normalized(self):
        fields = ["IIMWV", "360.0", "R", "5.0", "N", "A"]
        assert parse_mwv(fields).angle_degrees == 0.0

    def test_missing_speed_rejected(self):
        with pytest.raises(ValueError, match="missing wind speed"):
            parse_mwv(["IIMWV", "045.0", "R", "", "N", "A"])


class TestParseDPT:
    """Tests for DPT depth sentences."""

    def test_depth_with_offset_and_range(self):
        result = parse_sentence("$SDDPT,2.8,-0.7,100*6A")
        assert isinstance(result, DepthReading)
        assert result.depth_meters == pytest.approx(2.8)
        assert result.offset_meters == pytest.approx(-0.7)
        assert result.max_range_meters == pytest.approx(100.0)
        assert result.depth_below_reference_meters == pytest.approx(2.1)

    def test_missing_depth_rejected(self):
        with pytest.raises(SentenceParseError, match="missing depth"):
            parse_sentence("$SDDPT,,0.5,*50")

    def test_negative_depth_rejected(self):
        with pytest.raises(SentenceParseError, match="negative depth"):
            parse_sentence("$SDDPT,-2.8,0.5,*59")


class TestParseHDG:
    """Tests for HDG heading sentences."""

    def test_heading_with_variation(self):
        result = parse_sentence("$HCHDG,098.3,0.0,E,12.6,W*67")
        assert isinstance(result, HeadingReading)
        assert result.heading_degrees == pytest.approx(98.3)
        assert result.deviation_degrees == pytest.approx(0.0)
        assert result.variation_degrees == pytest.approx(-12.6)
        assert result.magnetic_heading_degrees == pytest.approx(98.3)
        assert result.true_heading_degrees == pytest.approx(85.7)

    def test_unknown_variation(self):
        result = parse_hdg(["HCHDG", "350.0", "", "", "", ""])
        assert result.variation_degrees is None
        assert result.true_heading_degrees is None

    def test_true_heading_wraps(self):
        result = parse_hdg(["HCHDG", "355.0", "2.0", "E", "5.0", "E"])
        assert result.true_heading_degrees == pytest.approx(2.0)


class TestParseMTW:
    """Tests for MTW water temperature sentences."""

    def test_celsius(self):
        result = parse_sentence("$YXMTW,17.9,C*1D")
        assert isinstance(result, WaterTemperature)
        assert result.temperature_celsius == pytest.approx(17.9)

    def test_fahrenheit_rejected(self):
        with pytest.raises(SentenceParseError, match="unit"):
            parse_sentence("$YXMTW,62.6,F*15")
