"""
End-to-end tests for search planning.

The L-shaped area decomposes into two rectangular-ish halves whose
sweeps can be worked out by hand; with a 4 m turn radius each half gets
four passes and the two halves join at a distance of 8 m.
"""

import itertools
import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from searchpath.services.config import PlannerConfig
from searchpath.services.decomposition import decompose, merge_subregions
from searchpath.services.errors import (
    DegeneratePolygonError,
    PlanningError,
    SubregionLimitError,
)
from searchpath.services.geometry import Point, Polygon, distance, is_convex
from searchpath.services.path_validation import point_in_polygon
from searchpath.services.search_planner import (
    SearchPlan,
    naive_path,
    plan_search,
    resolve_mode,
    search_path,
)
from searchpath.services.subregion_graph import StartState
from searchpath.services.traversal import traverse

L_SHAPE = Polygon(((0, 0), (60, 0), (60, 20), (20, 20), (20, 60), (0, 60)))
ARROW = Polygon(((0, 0), (400, 0), (400, 300), (200, 100), (0, 100)))
SMALL = PlannerConfig(turn_radius=4.0)

L_WAYPOINTS = [
    (6, 2), (56, 2), (56, 6), (10, 6), (14, 10), (56, 10), (56, 14), (18, 14),
    (18, 22), (18, 56), (14, 56), (14, 18), (10, 14), (10, 56), (6, 56), (6, 10),
]


def _flat(points):
    return [c for p in points for c in (p.x, p.y)]


def test_search_path_l_shape() -> None:
    waypoints = search_path(L_SHAPE, SMALL)
    assert _flat(waypoints) == pytest.approx(
        [c for xy in L_WAYPOINTS for c in xy], abs=1e-6
    )


def test_search_path_jump_between_subregions_is_minimal() -> None:
    waypoints = search_path(L_SHAPE, SMALL)
    jump = distance(waypoints[7], waypoints[8])
    assert jump == pytest.approx(8.0)

    pieces = merge_subregions(decompose(L_SHAPE))
    paths = [traverse(piece, 4.0, 4.0, 4.0) for piece in pieces]
    alternatives = []
    for first, second in itertools.permutations(range(len(paths)), 2):
        for leave, enter in itertools.product(StartState, StartState):
            alternatives.append(
                distance(leave.exit(paths[first]), enter.entry(paths[second]))
            )
    assert jump <= min(alternatives) + 1e-9


def test_search_path_convex_input_is_swept_directly() -> None:
    rect = Polygon(((0, 0), (100, 0), (100, 40), (0, 40)))
    config = PlannerConfig(turn_radius=10.0)
    waypoints = search_path(rect, config)
    assert _flat(waypoints) == pytest.approx(
        [10, 5, 90, 5, 90, 15, 10, 15, 10, 25, 90, 25], abs=1e-6
    )


def test_search_path_arrow_stays_inside() -> None:
    pieces = merge_subregions(decompose(ARROW))
    assert len(pieces) == 2
    assert all(is_convex(piece) for piece in pieces)
    waypoints = search_path(ARROW)
    assert waypoints
    assert len(waypoints) % 2 == 0
    for point in waypoints:
        assert point_in_polygon(point, ARROW)


def test_search_path_arrow_jump_is_minimal() -> None:
    # The triangle gets a single pass and the quadrilateral two.
    config = PlannerConfig(turn_radius=30.0, correction=120.0)
    plan = plan_search(ARROW.vertices, config=config)
    assert plan.metadata["subregions"] == 2
    paths = [
        traverse(piece, config.offset, config.inset, config.turn_radius)
        for piece in plan.subregions
    ]
    assert sorted(len(path) for path in paths) == [1, 2]
    assert len(plan.coverage) == 6

    leave = 2 * len(paths[plan.order[0]])
    jump = distance(plan.coverage[leave - 1], plan.coverage[leave])
    assert jump == pytest.approx(math.hypot(135.0, 112.5))

    alternatives = []
    for first, second in itertools.permutations(range(len(paths)), 2):
        for out_state, in_state in itertools.product(StartState, StartState):
            alternatives.append(
                distance(out_state.exit(paths[first]), in_state.entry(paths[second]))
            )
    assert jump <= min(alternatives) + 1e-9


def test_naive_path_flattens_passes() -> None:
    square = Polygon(((0, 0), (100, 0), (100, 100), (0, 100)))
    config = PlannerConfig(turn_radius=5.0, sweep_offset=30.0)
    waypoints = naive_path(square, config)
    assert len(waypoints) == 12
    assert (waypoints[0].x, waypoints[0].y) == pytest.approx((5.0, 15.0))
    assert (waypoints[1].x, waypoints[1].y) == pytest.approx((95.0, 15.0))
    assert (waypoints[2].x, waypoints[2].y) == pytest.approx((95.0, 30.0))


def test_plan_search_normalises_clockwise_input() -> None:
    clockwise = list(reversed(L_SHAPE.vertices))
    plan = plan_search(clockwise, config=SMALL)
    assert isinstance(plan, SearchPlan)
    assert plan.mode == "decomp"
    assert plan.route == []
    assert _flat(plan.coverage) == pytest.approx(
        _flat(search_path(L_SHAPE, SMALL)), abs=1e-6
    )
    assert plan.metadata["subregions"] == 2
    assert plan.metadata["coverageWaypoints"] == 16


def test_plan_search_routes_from_start_inside_boundary() -> None:
    boundary = [(-50, -50), (150, -50), (150, 150), (-50, 150)]
    plan = plan_search(L_SHAPE.vertices, boundary=boundary, start=(100, 100), config=SMALL)
    # The direct leg to the first coverage waypoint stays inside.
    assert plan.route == []
    assert plan.waypoints == plan.coverage
    assert plan.metadata["withinBoundary"] is True
    assert plan.metadata["boundaryViolations"] == 0
    assert plan.metadata["minClearance"] > 0


def test_plan_search_naive_mode() -> None:
    plan = plan_search(L_SHAPE.vertices, mode="naive", config=SMALL)
    assert plan.mode == "naive"
    assert plan.subregions == [L_SHAPE]
    assert plan.coverage
    # Horizontal passes only.
    for a, b in zip(plan.coverage[::2], plan.coverage[1::2]):
        assert a.y == pytest.approx(b.y)


def test_plan_search_rejects_bad_input() -> None:
    with pytest.raises(DegeneratePolygonError):
        plan_search([(0, 0), (1, 1)])
    with pytest.raises(DegeneratePolygonError):
        plan_search([(0, 0), (20, 0), (0, 10), (10, 10)])
    with pytest.raises(ValueError):
        plan_search(L_SHAPE.vertices, mode="spiral")
    # Far narrower than the default sweep spacing.
    with pytest.raises(PlanningError):
        plan_search([(0, 0), (10, 0), (0, 10)])
    with pytest.raises(SubregionLimitError):
        plan_search(L_SHAPE.vertices, config=PlannerConfig(turn_radius=4.0, max_subregions=1))


def test_resolve_mode() -> None:
    assert resolve_mode("NAIVE") == "naive"
    assert resolve_mode(" decomp ") == "decomp"
    assert resolve_mode("") == "decomp"
    with pytest.raises(ValueError, match="naive, decomp"):
        resolve_mode("zigzag")


def test_plan_search_accepts_closed_rings() -> None:
    closed = list(L_SHAPE.vertices) + [L_SHAPE.vertices[0]]
    boundary = [(-50, -50), (150, -50), (150, 150), (-50, 150), (-50, -50)]
    plan = plan_search(closed, boundary=boundary, start=(100, 100), config=SMALL)
    assert _flat(plan.coverage) == pytest.approx(_flat(search_path(L_SHAPE, SMALL)), abs=1e-6)
    assert plan.metadata["withinBoundary"] is True
