"""
High level search-path planning.

This module ties the geometry services together into the two planning
modes exposed to users:

``decomp``
    The search area is decomposed into convex subregions, adjacent
    subregions are merged where the union stays convex, each subregion
    is swept along its narrowest direction and the sweeps are chained in
    the cheapest visiting order.

``naive``
    The whole search area is swept with horizontal passes.

``plan_search`` validates the input polygons, runs the selected mode,
routes from an optional start point to the first coverage waypoint
without leaving the boundary and collects metadata describing the
result.  Stage timings are logged under the ``[SearchPath]`` prefix.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import PlannerConfig
from .decomposition import decompose, merge_subregions
from .errors import PlanningError
from .geometry import Point, PointLike, Polygon, as_point, distance, is_convex, validate_ring
from .path_validation import validate_route
from .router import path_to
from .subregion_graph import (
    SubregionNode,
    compute_graph,
    compute_states,
    min_traversal,
    ordered_waypoints,
)
from .traversal import flatten, naive_traverse, traverse

logger = logging.getLogger(__name__)

NAIVE_MODE = "naive"
DECOMPOSITION_MODE = "decomp"
MODES: Tuple[str, ...] = (NAIVE_MODE, DECOMPOSITION_MODE)


@dataclass
class SearchPlan:
    """Result of a planning request.

    Attributes:
        mode: Planning mode that produced the plan.
        route: Transit waypoints from the start point to the first
            coverage waypoint (empty without a start point or boundary).
        coverage: Coverage waypoints in flight order.
        subregions: Polygons that were swept, in decomposition order.
        order: Visiting order over ``subregions``.
        metadata: Summary values for API responses and logs.
    """

    mode: str
    route: List[Point]
    coverage: List[Point]
    subregions: List[Polygon] = field(default_factory=list)
    order: List[int] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def waypoints(self) -> List[Point]:
        return self.route + self.coverage


def resolve_mode(mode: str) -> str:
    """Normalise a mode name; unknown names raise ``ValueError``."""
    normalised = (mode or DECOMPOSITION_MODE).strip().lower()
    if normalised not in MODES:
        raise ValueError(f"Unknown mode '{mode}'; available modes: {', '.join(MODES)}")
    return normalised


def _decomposition_coverage(
    polygon: Polygon, config: PlannerConfig
) -> Tuple[List[Point], List[Polygon], List[int]]:
    if is_convex(polygon):
        passes = traverse(polygon, config.offset, config.inset, config.turn_radius)
        return flatten(passes), [polygon], [0]

    pieces = merge_subregions(decompose(polygon))
    nodes = [
        SubregionNode(
            polygon=piece,
            path=tuple(traverse(piece, config.offset, config.inset, config.turn_radius)),
        )
        for piece in pieces
    ]
    graph = compute_graph(nodes)
    order = min_traversal(graph, config.max_subregions)
    states = compute_states(order, graph)
    if config.debug:
        for index in order:
            state = states.get(index)
            logger.debug(
                "subregion %d: %d vertices, %d passes, state=%s",
                index,
                len(pieces[index]),
                len(nodes[index].path),
                state.value if state else "skipped",
            )
    return ordered_waypoints(graph, order, states), pieces, order


def search_path(polygon: Polygon, config: Optional[PlannerConfig] = None) -> List[Point]:
    """Coverage waypoints for ``polygon`` using convex decomposition."""
    config = config or PlannerConfig()
    waypoints, _, _ = _decomposition_coverage(polygon, config)
    return waypoints


def naive_path(polygon: Polygon, config: Optional[PlannerConfig] = None) -> List[Point]:
    """Coverage waypoints for ``polygon`` using horizontal passes."""
    config = config or PlannerConfig()
    return flatten(naive_traverse(polygon, config.offset, config.inset))


def _path_length(points: Sequence[Point]) -> float:
    return sum(distance(a, b) for a, b in zip(points, points[1:]))


def plan_search(
    search_area: Iterable[PointLike],
    boundary: Optional[Iterable[PointLike]] = None,
    start: Optional[PointLike] = None,
    mode: str = DECOMPOSITION_MODE,
    config: Optional[PlannerConfig] = None,
) -> SearchPlan:
    """Plan a complete search: coverage plus transit from ``start``.

    Both rings are normalised to counter-clockwise order.  Nothing is
    returned unless the whole plan succeeds.

    Raises:
        DegeneratePolygonError: a ring is unusable.
        SubregionLimitError: the decomposition is too large to order.
        RouteLimitError: the transit route could not be resolved.
        PlanningError: the search area yields no coverage waypoints.
        ValueError: ``mode`` is not one of :data:`MODES`.
    """
    prefix = "[SearchPath]"
    config = config or PlannerConfig()
    mode = resolve_mode(mode)
    t_start = time.perf_counter()

    area = validate_ring(search_area, "search area")
    fence = validate_ring(boundary, "boundary") if boundary is not None else None
    origin = as_point(start) if start is not None else None
    t_validated = time.perf_counter()
    logger.info(
        "%s mode=%s areaVertices=%d boundaryVertices=%s radius=%.3f offset=%.3f correction=%.3f",
        prefix,
        mode,
        len(area),
        len(fence) if fence is not None else None,
        config.turn_radius,
        config.offset,
        config.inset,
    )

    if mode == NAIVE_MODE:
        coverage = naive_path(area, config)
        subregions, order = [area], [0]
    else:
        coverage, subregions, order = _decomposition_coverage(area, config)
    t_coverage = time.perf_counter()
    if not coverage:
        raise PlanningError(
            "Search area produced no coverage waypoints; it may be narrower than the sweep spacing"
        )

    route: List[Point] = []
    if origin is not None and fence is not None:
        route = path_to(origin, coverage[0], fence, config.turn_radius, config.max_route_segments)
    t_route = time.perf_counter()

    metadata: Dict[str, Any] = {
        "mode": mode,
        "subregions": len(subregions),
        "order": list(order),
        "coverageWaypoints": len(coverage),
        "routeWaypoints": len(route),
        "coverageLength": _path_length(coverage),
        "turnRadius": config.turn_radius,
        "sweepOffset": config.offset,
        "correction": config.inset,
    }
    if fence is not None:
        flown = ([origin] if origin is not None else []) + route + coverage
        valid, min_clearance, violations = validate_route(flown, fence)
        metadata["withinBoundary"] = valid
        metadata["minClearance"] = min_clearance
        metadata["boundaryViolations"] = len(violations)
        if not valid:
            logger.warning(
                "%s plan leaves the boundary at %d places (first: %s)",
                prefix,
                len(violations),
                violations[0],
            )

    t_end = time.perf_counter()
    logger.info(
        "%s timings_ms validate=%.2f coverage=%.2f route=%.2f total=%.2f waypoints=%d",
        prefix,
        (t_validated - t_start) * 1000.0,
        (t_coverage - t_validated) * 1000.0,
        (t_route - t_coverage) * 1000.0,
        (t_end - t_start) * 1000.0,
        len(route) + len(coverage),
    )
    return SearchPlan(
        mode=mode,
        route=route,
        coverage=coverage,
        subregions=subregions,
        order=list(order),
        metadata=metadata,
    )


__all__ = [
    "NAIVE_MODE",
    "DECOMPOSITION_MODE",
    "MODES",
    "SearchPlan",
    "resolve_mode",
    "search_path",
    "naive_path",
    "plan_search",
]
