"""Tests for JSON message formatting."""

import json
from datetime import UTC, datetime

from sailstream.errors import PipelineError, PipelineErrorKind
from sailstream.nmea import WindReading, WindReference, parse_sentence
from sailstream.stream import AggregatedSnapshot, ConnectionState
from server.formatters import (
    format_error_message,
    format_snapshot_message,
    format_state_message,
    snapshot_to_dict,
)
from tests.server.helpers import GGA, make_snapshot


class TestFormatSnapshot:
    def test_summary_fields(self):
        data = json.loads(format_snapshot_message(make_snapshot()))
        assert data["type"] == "snapshot"
        assert data["timestamp"] == "2026-05-01T12:00:00+00:00"
        assert data["lat"] == 45.0
        assert data["lon"] == 9.0
        assert data["speed_over_ground_knots"] == 4.5
        assert data["course_over_ground_degrees"] == 12.3
        assert data["depth_meters"] is None

    def test_times_and_enums_serialized(self):
        wind = WindReading(angle_degrees=45.0, reference=WindReference.TRUE, speed_knots=12.0, valid=True)
        snapshot = AggregatedSnapshot(position_fix=parse_sentence(GGA), wind=wind)
        data = snapshot_to_dict(snapshot)
        assert data["readings"]["position_fix"]["utc_time"] == "12:35:19+00:00"
        assert data["readings"]["wind"]["reference"] == "T"
        assert data["wind_speed_knots"] == 12.0

    def test_empty_snapshot(self):
        data = snapshot_to_dict(AggregatedSnapshot())
        assert data["lat"] is None and data["lon"] is None
        assert set(data["readings"]) == {
            "position_fix",
            "minimum_navigation",
            "track_and_speed",
            "wind",
            "depth",
            "heading",
            "water_temperature",
        }


class TestFormatErrorAndState:
    def test_error_message(self):
        error = PipelineError(
            kind=PipelineErrorKind.BUFFER_OVERFLOW,
            message="Buffer overflow",
            timestamp=datetime(2026, 5, 1, 12, 0, tzinfo=UTC),
        )
        assert json.loads(format_error_message(error)) == {
            "type": "error",
            "kind": "buffer_overflow",
            "message": "Buffer overflow",
            "sentence": None,
            "timestamp": "2026-05-01T12:00:00+00:00",
        }

    def test_state_message(self):
        data = json.loads(format_state_message(ConnectionState.CONNECTED, 0))
        assert data == {
            "type": "state",
            "state": "connected",
            "connected": True,
            "reconnect_attempts": 0,
        }
