"""JSON formatting utilities for pipeline output."""

import dataclasses
import enum
import json
from datetime import datetime, time
from typing import Any

from sailstream.errors import PipelineError
from sailstream.stream import AggregatedSnapshot, ConnectionState

__all__ = [
    "error_to_dict",
    "format_error_message",
    "format_snapshot_message",
    "format_state_message",
    "snapshot_to_dict",
]


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, time)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, default=_json_default)


def snapshot_to_dict(snapshot: AggregatedSnapshot) -> dict[str, Any]:
    """Summary values first, then every raw reading slot (null when unseen)."""
    position = snapshot.position
    readings = dataclasses.asdict(snapshot)
    readings.pop("timestamp")
    return json.loads(_to_json({
        "timestamp": snapshot.timestamp,
        "lat": position[0] if position is not None else None,
        "lon": position[1] if position is not None else None,
        "speed_over_ground_knots": snapshot.speed_over_ground_knots,
        "course_over_ground_degrees": snapshot.course_over_ground_degrees,
        "heading_degrees": snapshot.heading_degrees,
        "depth_meters": snapshot.depth_meters,
        "wind_speed_knots": snapshot.wind_speed_knots,
        "wind_angle_degrees": snapshot.wind_angle_degrees,
        "water_temperature_celsius": snapshot.water_temperature_celsius,
        "readings": readings,
    }))


def error_to_dict(error: PipelineError) -> dict[str, Any]:
    return {
        "kind": error.kind.value,
        "message": error.message,
        "sentence": error.sentence,
        "timestamp": error.timestamp.isoformat(),
    }


def format_snapshot_message(snapshot: AggregatedSnapshot) -> str:
    """Serialize a snapshot into a JSON string for WebSocket transmission."""
    return _to_json({"type": "snapshot", **snapshot_to_dict(snapshot)})


def format_error_message(error: PipelineError) -> str:
    return _to_json({"type": "error", **error_to_dict(error)})


def format_state_message(state: ConnectionState, reconnect_attempts: int = 0) -> str:
    return _to_json({
        "type": "state",
        "state": state.value,
        "connected": state.is_connected,
        "reconnect_attempts": reconnect_attempts,
    })
