"""Tests for GPS <-> local plane conversions and unit helpers."""

import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from searchpath.services.conversions import (
    EARTH_RADIUS,
    gps_to_plane,
    init_anchor,
    plane_to_gps,
    to_degrees,
    to_feet,
    to_meters,
    to_radians,
)
from searchpath.services.geometry import Point

ANCHOR_LON = -117.931480
ANCHOR_LAT = 34.082729


def test_anchor_maps_to_origin() -> None:
    frame = init_anchor(ANCHOR_LON, ANCHOR_LAT)
    origin = gps_to_plane(frame, ANCHOR_LON, ANCHOR_LAT)
    assert origin.x == pytest.approx(0.0, abs=1e-6)
    assert origin.y == pytest.approx(0.0, abs=1e-6)


def test_plane_axes_point_east_and_north() -> None:
    frame = init_anchor(ANCHOR_LON, ANCHOR_LAT)
    step = 0.001
    metres_per_step = EARTH_RADIUS * math.radians(step)

    north = gps_to_plane(frame, ANCHOR_LON, ANCHOR_LAT + step)
    assert north.x == pytest.approx(0.0, abs=1e-6)
    assert north.y == pytest.approx(metres_per_step, rel=1e-6)

    east = frame.to_plane(ANCHOR_LON + step, ANCHOR_LAT)
    assert east.x == pytest.approx(metres_per_step * math.cos(math.radians(ANCHOR_LAT)), rel=1e-6)
    assert east.y == pytest.approx(0.0, abs=1e-2)


def test_round_trip_through_plane() -> None:
    frame = init_anchor(ANCHOR_LON, ANCHOR_LAT)
    for lon, lat in [
        (ANCHOR_LON, ANCHOR_LAT),
        (ANCHOR_LON + 0.004, ANCHOR_LAT + 0.003),
        (ANCHOR_LON - 0.01, ANCHOR_LAT - 0.002),
    ]:
        back_lon, back_lat = plane_to_gps(frame, gps_to_plane(frame, lon, lat))
        assert back_lon == pytest.approx(lon, abs=1e-8)
        assert back_lat == pytest.approx(lat, abs=1e-8)


def test_plane_point_maps_to_expected_offset() -> None:
    frame = init_anchor(ANCHOR_LON, ANCHOR_LAT)
    lon, lat = frame.to_gps(Point(0.0, 1000.0))
    assert lon == pytest.approx(ANCHOR_LON, abs=1e-9)
    assert lat - ANCHOR_LAT == pytest.approx(math.degrees(1000.0 / EARTH_RADIUS), rel=1e-4)


def test_unit_helpers() -> None:
    assert to_radians(180.0) == pytest.approx(math.pi)
    assert to_degrees(math.pi / 2) == pytest.approx(90.0)
    assert to_meters(150.0) == pytest.approx(45.72)
    assert to_feet(1.0) == pytest.approx(3.28084)
