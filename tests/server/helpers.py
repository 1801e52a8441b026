"""Helper factories for server tests."""

import socket
import threading
import time
from collections.abc import Callable
from datetime import UTC, datetime

from sailstream.nmea import PositionFix, TrackAndSpeed
from sailstream.stream import AggregatedSnapshot

GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"


def make_position_fix() -> PositionFix:
    return PositionFix(
        utc_time=None,
        latitude_degrees=45.0,
        longitude_degrees=9.0,
        fix_quality=1,
        num_satellites=8,
        horizontal_dilution_of_precision=1.0,
        altitude_meters=100.0,
        geoid_height_meters=50.0,
        valid=True,
    )


def make_snapshot(has_vtg: bool = True, vtg_valid: bool = True) -> AggregatedSnapshot:
    track_and_speed = None
    if has_vtg:
        track_and_speed = TrackAndSpeed(
            track_true_degrees=12.3,
            track_magnetic_degrees=None,
            speed_knots=4.5,
            speed_kilometers_per_hour=8.3,
            speed_meters_per_second=2.3,
            mode="A" if vtg_valid else "N",
            valid=vtg_valid,
        )
    return AggregatedSnapshot(
        position_fix=make_position_fix(),
        track_and_speed=track_and_speed,
        timestamp=datetime(2026, 5, 1, 12, 0, tzinfo=UTC),
    )


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise TimeoutError("condition not met in time")
        time.sleep(0.02)


class NMEASource:
    """Local TCP multiplexer stand-in that sends fixed lines to each client."""

    def __init__(self, payload: bytes) -> None:
        self._payload = payload
        self._server = socket.create_server(("127.0.0.1", 0))
        self._server.settimeout(0.1)
        self._stop = threading.Event()
        self._clients: list[socket.socket] = []
        self._thread = threading.Thread(target=self._serve, daemon=True)

    @property
    def port(self) -> int:
        return self._server.getsockname()[1]

    def __enter__(self) -> "NMEASource":
        self._thread.start()
        return self

    def __exit__(self, *_: object) -> None:
        self._stop.set()
        self._thread.join()
        for client in self._clients:
            client.close()
        self._server.close()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                client, _ = self._server.accept()
            except TimeoutError:
                continue
            self._clients.append(client)
            client.sendall(self._payload)
