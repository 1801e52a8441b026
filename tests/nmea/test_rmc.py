"""Tests for RMC sentence parsing."""

from datetime import UTC, datetime

import pytest

from sailstream.nmea import MinimumNavigation, parse_sentence
from sailstream.nmea.rmc import parse_rmc

RMC_VALID = "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"


class TestParseRMC:
    """Tests for RMC decoding."""

    def test_reference_sentence(self):
        result = parse_sentence(RMC_VALID)
        assert isinstance(result, MinimumNavigation)
        assert result.valid is True
        assert result.utc_datetime == datetime(1994, 3, 23, 12, 35, 19, tzinfo=UTC)
        assert result.latitude_degrees == pytest.approx(48.1173, abs=1e-6)
        assert result.longitude_degrees == pytest.approx(11.516667, abs=1e-6)
        assert result.speed_over_ground_knots == pytest.approx(22.4)
        assert result.course_over_ground_degrees == pytest.approx(84.4)
        assert result.magnetic_variation_degrees == pytest.approx(-3.1)

    def test_void_status_with_empty_fields(self):
        result = parse_sentence("$GPRMC,123519,V,,,,,,,230394,,*33")
        assert result.valid is False
        assert result.latitude_degrees is None
        assert result.longitude_degrees is None
        assert result.speed_over_ground_knots is None
        assert result.course_over_ground_degrees is None
        assert result.magnetic_variation_degrees is None
        assert result.utc_datetime == datetime(1994, 3, 23, 12, 35, 19, tzinfo=UTC)

    def test_nmea23_mode_indicator_ignored(self):
        result = parse_sentence(
            "$GNRMC,083559.00,A,4717.11437,N,00833.91522,E,0.004,77.52,091202,,,A*49"
        )
        assert result.utc_datetime == datetime(2002, 12, 9, 8, 35, 59, tzinfo=UTC)
        assert result.latitude_degrees == pytest.approx(47.2852395, abs=1e-6)
        assert result.longitude_degrees == pytest.approx(8.5652537, abs=1e-6)
        assert result.magnetic_variation_degrees is None

    def test_missing_date_gives_no_datetime(self):
        fields = ["GPRMC", "123519", "A", "", "", "", "", "", "", ""]
        assert parse_rmc(fields).utc_datetime is None

    def test_unknown_status_rejected(self):
        fields = ["GPRMC", "123519", "X", "", "", "", "", "", "", "230394"]
        with pytest.raises(ValueError, match="status"):
            parse_rmc(fields)

    def test_negative_speed_rejected(self):
        fields = ["GPRMC", "123519", "A", "", "", "", "", "-1.0", "", "230394"]
        with pytest.raises(ValueError, match="negative speed"):
            parse_rmc(fields)

    def test_too_few_fields(self):
        with pytest.raises(ValueError, match="RMC needs 10 fields"):
            parse_rmc(["GPRMC", "123519", "A"])
