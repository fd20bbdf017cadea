"""
Boundary-avoiding transit route between two points.

``path_to`` connects the last mission waypoint with the first coverage
waypoint.  Wherever the straight leg crosses the boundary polygon, the
crossing point is pushed ``radius`` metres inward (perpendicular to the
crossed edge) and inserted as an intermediate waypoint.  The new legs
are examined the same way until none of them crosses the boundary.

The refinement runs on an explicit stack and is bounded by a segment
budget, raising :class:`RouteLimitError` instead of looping forever on
boundaries it cannot unfold.
"""

from __future__ import annotations

import logging
import math
import time
from typing import List, Tuple

from .config import DEFAULT_MAX_ROUTE_SEGMENTS
from .errors import RouteLimitError
from .geometry import Point, Polygon, Segment, distance, intersection

logger = logging.getLogger(__name__)


def _inset_crossings(leg: Segment, boundary: Polygon, radius: float) -> List[Point]:
    """Boundary crossings of ``leg`` moved inward, ordered from ``leg.v1``."""
    crossings: List[Tuple[float, Point]] = []
    for edge in boundary.edges():
        hit = intersection(leg, edge)
        if hit is None:
            continue
        inward = edge.theta + math.pi / 2
        moved = Point(hit.x + radius * math.cos(inward), hit.y + radius * math.sin(inward))
        crossings.append((distance(leg.v1, hit), moved))
    crossings.sort(key=lambda item: item[0])
    return [moved for _, moved in crossings]


def path_to(
    start: Point,
    end: Point,
    boundary: Polygon,
    radius: float,
    max_segments: int = DEFAULT_MAX_ROUTE_SEGMENTS,
) -> List[Point]:
    """Intermediate waypoints from ``start`` to ``end`` inside ``boundary``.

    Args:
        start: Where the aircraft is (typically the last mission point).
        end: Where it has to get to (the first coverage waypoint).
        boundary: CCW polygon the route must stay within.
        radius: Inward offset applied to every crossing.
        max_segments: Number of legs that may be examined.

    Returns:
        The waypoints strictly between ``start`` and ``end``; empty when
        the direct leg does not cross the boundary.

    Raises:
        RouteLimitError: the legs still cross the boundary after
            ``max_segments`` examinations.
    """
    prefix = "[Router]"
    t0 = time.perf_counter()
    route: List[Point] = [start]
    pending: List[Tuple[Point, Point]] = [(start, end)]
    examined = 0
    while pending:
        if examined >= max_segments:
            raise RouteLimitError(
                f"Route from {start.as_tuple()} to {end.as_tuple()} still crosses the "
                f"boundary after examining {examined} legs"
            )
        a, b = pending.pop()
        examined += 1
        inserted = _inset_crossings(Segment(a, b), boundary, radius)
        if not inserted:
            route.append(b)
            continue
        chain = [a] + inserted + [b]
        # Push in reverse so the legs are emitted front to back.
        for leg_start, leg_end in reversed(list(zip(chain, chain[1:]))):
            pending.append((leg_start, leg_end))
    waypoints = route[1:-1]
    logger.info(
        "%s %d waypoints after examining %d legs in %.3f ms",
        prefix,
        len(waypoints),
        examined,
        (time.perf_counter() - t0) * 1000.0,
    )
    return waypoints


__all__ = ["path_to"]
