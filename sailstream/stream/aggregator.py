"""Latest-value aggregation and periodic snapshot publication.

Instruments emit sentences at very different rates (GNSS at 1 to 10 Hz,
wind at up to 20 Hz). ``BatchingAggregator`` keeps the most recent reading of
each kind and publishes an immutable ``AggregatedSnapshot`` at most once per
interval, and only when something changed, so downstream consumers see a
bounded update rate regardless of the input rate.

Slots carry forward across windows: a snapshot always holds the last known
reading of every kind seen so far.
"""

import asyncio
import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from sailstream.nmea.types import (
    DepthReading,
    HeadingReading,
    MinimumNavigation,
    ParsedReading,
    PositionFix,
    TrackAndSpeed,
    WaterTemperature,
    WindReading,
)

__all__ = ["DEFAULT_BATCH_INTERVAL", "AggregatedSnapshot", "BatchingAggregator"]

logger = logging.getLogger(__name__)

DEFAULT_BATCH_INTERVAL = 0.2

_SLOT_BY_TYPE: dict[type, str] = {
    PositionFix: "position_fix",
    MinimumNavigation: "minimum_navigation",
    TrackAndSpeed: "track_and_speed",
    WindReading: "wind",
    DepthReading: "depth",
    HeadingReading: "heading",
    WaterTemperature: "water_temperature",
}


@dataclass(frozen=True)
class AggregatedSnapshot:
    """Most recent reading of every kind, as of ``timestamp``.

    The derived properties pick the best available source when more than one
    sentence type carries the same quantity.
    """

    position_fix: PositionFix | None = None
    minimum_navigation: MinimumNavigation | None = None
    track_and_speed: TrackAndSpeed | None = None
    wind: WindReading | None = None
    depth: DepthReading | None = None
    heading: HeadingReading | None = None
    water_temperature: WaterTemperature | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def position(self) -> tuple[float, float] | None:
        """(latitude, longitude) in decimal degrees; RMC first, then GGA."""
        for source in (self.minimum_navigation, self.position_fix):
            if (
                source is not None
                and source.latitude_degrees is not None
                and source.longitude_degrees is not None
            ):
                return source.latitude_degrees, source.longitude_degrees
        return None

    @property
    def speed_over_ground_knots(self) -> float | None:
        if self.track_and_speed is not None and self.track_and_speed.speed_knots is not None:
            return self.track_and_speed.speed_knots
        if self.minimum_navigation is not None:
            return self.minimum_navigation.speed_over_ground_knots
        return None

    @property
    def course_over_ground_degrees(self) -> float | None:
        if (
            self.track_and_speed is not None
            and self.track_and_speed.track_true_degrees is not None
        ):
            return self.track_and_speed.track_true_degrees
        if self.minimum_navigation is not None:
            return self.minimum_navigation.course_over_ground_degrees
        return None

    @property
    def depth_meters(self) -> float | None:
        return self.depth.depth_meters if self.depth is not None else None

    @property
    def wind_speed_knots(self) -> float | None:
        return self.wind.speed_knots if self.wind is not None else None

    @property
    def wind_angle_degrees(self) -> float | None:
        return self.wind.angle_degrees if self.wind is not None else None

    @property
    def heading_degrees(self) -> float | None:
        """True heading when variation is known, magnetic heading otherwise."""
        if self.heading is None:
            return None
        true_heading = self.heading.true_heading_degrees
        if true_heading is not None:
            return true_heading
        return self.heading.magnetic_heading_degrees

    @property
    def water_temperature_celsius(self) -> float | None:
        if self.water_temperature is None:
            return None
        return self.water_temperature.temperature_celsius


class BatchingAggregator:
    """Merge readings into slots and publish a snapshot per changed window.

    ``add`` and ``flush`` are plain methods and may be driven manually;
    ``start`` runs ``flush`` every ``interval`` seconds as an asyncio task on
    the running loop.

    Args:
        publish: Called with each new snapshot.
        interval: Window length in seconds.
    """

    def __init__(
        self,
        publish: Callable[[AggregatedSnapshot], None],
        interval: float = DEFAULT_BATCH_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._publish = publish
        self._interval = interval
        self._snapshot: AggregatedSnapshot | None = None
        self._slots: dict[str, ParsedReading] = {}
        self._dirty = False
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def snapshot(self) -> AggregatedSnapshot | None:
        """The last published snapshot, or None before the first one."""
        return self._snapshot

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def add(self, reading: ParsedReading) -> None:
        """Replace the slot of ``reading``'s kind with it."""
        slot = _SLOT_BY_TYPE.get(type(reading))
        if slot is None:
            raise TypeError(f"unsupported reading type {type(reading).__name__}")
        self._slots[slot] = reading
        self._dirty = True

    def flush(self) -> AggregatedSnapshot | None:
        """Publish a snapshot if any slot changed since the last one.

        Returns:
            The published snapshot, or None if nothing changed.
        """
        if not self._dirty:
            return None
        base = self._snapshot if self._snapshot is not None else AggregatedSnapshot()
        snapshot = dataclasses.replace(base, timestamp=datetime.now(UTC), **self._slots)
        self._slots.clear()
        self._dirty = False
        self._snapshot = snapshot
        self._publish(snapshot)
        return snapshot

    def start(self) -> None:
        """Begin periodic flushing on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Cancel periodic flushing. Pending readings stay buffered."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.wait([task])

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.flush()
            except Exception:
                logger.exception("Snapshot publication failed")
