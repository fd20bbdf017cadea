"""Tests for assembling a GPS mission around a planned search."""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from searchpath.services.config import PlannerConfig
from searchpath.services.conversions import init_anchor
from searchpath.services.errors import DegeneratePolygonError
from searchpath.services.geometry import Point
from searchpath.services.mission_io import MissionRecord
from searchpath.services.mission_planner import build_search_mission

ANCHOR = init_anchor(-117.931480, 34.082729)


def _records(points, altitude=None):
    records = []
    for i, (x, y) in enumerate(points, start=1):
        lon, lat = ANCHOR.to_gps(Point(x, y))
        records.append(MissionRecord(i, lat, lon, altitude))
    return records


SEARCH = _records([(0, 0), (400, 0), (400, 400), (0, 400)])
BOUNDARY = _records([(-300, -300), (700, -300), (700, 700), (-300, 700)])
MISSION = [
    MissionRecord(7, *reversed(ANCHOR.to_gps(Point(-250, -250))), 120.0),
    MissionRecord(9, *reversed(ANCHOR.to_gps(Point(-100, -100))), 135.0),
]


def test_mission_keeps_existing_points_and_renumbers() -> None:
    result = build_search_mission(SEARCH, BOUNDARY, MISSION)
    records = result.records
    assert [r.ordinal for r in records] == list(range(1, len(records) + 1))
    assert [r.altitude for r in records[:2]] == [120.0, 135.0]
    assert records[0].latitude == MISSION[0].latitude
    assert records[1].longitude == MISSION[1].longitude
    assert all(r.altitude == 150.0 for r in records[2:])
    assert len(records) == 2 + len(result.plan.waypoints)


def test_mission_waypoints_fall_inside_search_area() -> None:
    result = build_search_mission(SEARCH, BOUNDARY, MISSION)
    # Convex area, start inside the boundary: no transit legs needed.
    assert result.plan.route == []
    assert result.plan.metadata["withinBoundary"] is True
    lats = [r.latitude for r in SEARCH]
    lons = [r.longitude for r in SEARCH]
    for record in result.records[2:]:
        assert min(lats) < record.latitude < max(lats)
        assert min(lons) < record.longitude < max(lons)


def test_mission_frame_is_anchored_at_first_search_vertex() -> None:
    result = build_search_mission(SEARCH, BOUNDARY, MISSION)
    assert result.frame.latitude == SEARCH[0].latitude
    assert result.frame.longitude == SEARCH[0].longitude
    origin = result.frame.to_plane(SEARCH[0].longitude, SEARCH[0].latitude)
    assert (origin.x, origin.y) == pytest.approx((0.0, 0.0), abs=1e-6)


def test_mission_without_existing_points_has_no_route() -> None:
    config = PlannerConfig(altitude_ft=300.0)
    result = build_search_mission(SEARCH, BOUNDARY, [], config=config)
    assert result.plan.route == []
    assert result.records
    assert result.records[0].ordinal == 1
    assert {r.altitude for r in result.records} == {300.0}


def test_mission_naive_mode() -> None:
    result = build_search_mission(SEARCH, [], MISSION, mode="naive")
    assert result.plan.mode == "naive"
    assert "withinBoundary" not in result.plan.metadata
    assert len(result.records) == 2 + len(result.plan.coverage)


def test_mission_requires_search_area() -> None:
    with pytest.raises(DegeneratePolygonError):
        build_search_mission([], BOUNDARY, MISSION)
