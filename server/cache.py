"""Last-snapshot persistence for cold starts.

The server shows the previous session's readings, flagged as stale, until
the first live snapshot arrives.
"""

import json
import logging
import os
import time
from pathlib import Path
from typing import Any

from sailstream.stream import AggregatedSnapshot
from server.formatters import snapshot_to_dict

__all__ = ["JsonFileSnapshotCache"]

logger = logging.getLogger(__name__)


class JsonFileSnapshotCache:
    """Store the latest snapshot as a JSON file.

    Writes are throttled to one per ``min_interval`` seconds and go through a
    temporary file followed by ``os.replace``, so readers never observe a
    partially written file. A snapshot skipped by the throttle is held as
    pending and written by the next ``store`` past the interval or by
    ``flush``.
    """

    def __init__(self, path: Path, min_interval: float = 5.0) -> None:
        self.path = Path(path)
        self._min_interval = min_interval
        self._last_write: float | None = None
        self._pending: AggregatedSnapshot | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def store(self, snapshot: AggregatedSnapshot) -> bool:
        """Persist ``snapshot`` unless a write happened within the interval.

        Returns:
            True if the file was written.
        """
        now = time.monotonic()
        if self._last_write is not None and now - self._last_write < self._min_interval:
            self._pending = snapshot
            return False
        self._write(snapshot, now)
        return True

    def flush(self) -> bool:
        """Write the snapshot held back by the throttle, if any."""
        if self._pending is None:
            return False
        self._write(self._pending, time.monotonic())
        return True

    def _write(self, snapshot: AggregatedSnapshot, now: float) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temporary = self.path.with_name(self.path.name + ".tmp")
        temporary.write_text(json.dumps(snapshot_to_dict(snapshot)), encoding="utf-8")
        os.replace(temporary, self.path)
        self._last_write = now
        self._pending = None

    def load(self) -> dict[str, Any] | None:
        """Return the stored snapshot, or None if absent or unreadable."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt snapshot cache %s", self.path)
            return None
        return data if isinstance(data, dict) else None
