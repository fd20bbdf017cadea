"""
Back-and-forth coverage passes over a single polygon.

Two sweep strategies are provided:

``traverse``
    Sweeps a convex polygon with lines parallel to the edge of its
    width span, so the number of passes is minimal.  Pass endpoints are
    pulled back from the boundary by a turn-radius correction and the
    final pass is dropped when the aircraft could not turn without
    leaving the polygon.

``naive_traverse``
    Sweeps any polygon with horizontal lines, using only its leftmost
    and rightmost crossings on each line.  Used when decomposition is
    not wanted.

Both return passes as :class:`Segment` objects whose direction
alternates from one pass to the next.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Tuple

from .geometry import INF, Point, Polygon, Segment, distance, get_width, intersection

logger = logging.getLogger(__name__)

# Crossings closer than this are the same point reached from two edges.
_SAME_POINT = 1e-9


def _extend(edge: Segment) -> Segment:
    """Extend ``edge`` by ``INF`` at both ends, keeping its direction."""
    if edge.is_vertical:
        return Segment(Point(edge.v1.x, -INF), Point(edge.v2.x, INF))
    m = edge.slope
    if edge.v1.x < edge.v2.x:
        return Segment(
            Point(edge.v1.x - INF, edge.v1.y - INF * m),
            Point(edge.v2.x + INF, edge.v2.y + INF * m),
        )
    return Segment(
        Point(edge.v1.x + INF, edge.v1.y + INF * m),
        Point(edge.v2.x - INF, edge.v2.y - INF * m),
    )


def _shift(line: Segment, delta: Point) -> Segment:
    return Segment(line.v1 + delta, line.v2 + delta)


def _first_two_crossings(
    polygon: Polygon, line: Segment
) -> Tuple[Optional[Point], Optional[Point]]:
    """First crossing in edge order and the next distinct one on a later edge.

    A line through a vertex hits both edges meeting there at the same
    point; that repeat is not a second crossing.
    """
    first: Optional[Point] = None
    for edge in polygon.edges():
        hit = intersection(edge, line)
        if hit is None:
            continue
        if first is None:
            first = hit
            continue
        if distance(first, hit) <= _SAME_POINT:
            continue
        return first, hit
    return first, None


def _inset_pass(
    first: Point, second: Point, direction: Point, correction: float
) -> Optional[Segment]:
    """Order two crossings along ``direction`` and pull them toward each other.

    Returns ``None`` when the correction makes the pass collapse or flip.
    """
    if (second - first).dot(direction) < 0:
        first, second = second, first
    dx = abs(correction * direction.x)
    dy = abs(correction * direction.y)
    if second.x > first.x:
        start_x, end_x = first.x + dx, second.x - dx
    else:
        start_x, end_x = first.x - dx, second.x + dx
    if second.y > first.y:
        start_y, end_y = first.y + dy, second.y - dy
    else:
        start_y, end_y = first.y - dy, second.y + dy
    start = Point(start_x, start_y)
    end = Point(end_x, end_y)
    if (end - start).dot(second - first) <= 0:
        return None
    return Segment(start, end)


def traverse(
    polygon: Polygon, offset: float, correction: float, radius: float
) -> List[Segment]:
    """Cover a convex polygon with alternating sweep passes.

    The sweep starts on the edge of the polygon's width span and moves
    toward the span's far vertex: first by ``offset / 2``, then by
    ``offset`` per pass.  Each pass joins the first two boundary
    crossings of the sweep line, inset by ``correction``; passes that
    the inset turns inside out are skipped.  The sweep stops at the
    first position with no crossing.  Finally, if a probe of length
    ``radius`` from either end of the last pass, pointing in the sweep
    direction, crosses the boundary, that pass is dropped.

    Args:
        polygon: Convex CCW polygon.
        offset: Spacing between passes.
        correction: Inset applied to both pass endpoints.
        radius: Turn radius used for the trailing clearance probe.

    Returns:
        The passes in flight order; even passes keep the sweep line's
        direction and odd passes are reversed.
    """
    width = get_width(polygon)
    step = Point(math.cos(width.theta), math.sin(width.theta))
    line = _shift(_extend(width.segment), step * (offset / 2.0))
    direction = line.v2 - line.v1
    direction = direction * (1.0 / direction.magnitude())

    edges = polygon.edges()
    segments: List[Segment] = []
    pass_index = 0
    while True:
        first, second = _first_two_crossings(polygon, line)
        if first is None:
            break
        if second is not None:
            sweep = _inset_pass(first, second, direction, correction)
            if sweep is not None:
                segments.append(sweep if pass_index % 2 == 0 else sweep.reversed())
        line = _shift(line, step * offset)
        pass_index += 1

    if segments:
        last = segments[-1]
        for endpoint in (last.v1, last.v2):
            probe = Segment(endpoint, endpoint + step * radius)
            if any(intersection(probe, edge) is not None for edge in edges):
                segments.pop()
                break

    logger.debug(
        "traverse: %d passes over %d sweep positions (width %.3f)",
        len(segments),
        pass_index,
        width.length,
    )
    return segments


def naive_traverse(polygon: Polygon, offset: float, correction: float) -> List[Segment]:
    """Cover ``polygon`` with horizontal passes ``offset / 2`` apart.

    Each pass runs between the leftmost and rightmost boundary
    crossings of its line, each pulled inward by ``correction`` along x.
    Passes that the inset turns inside out are skipped and the sweep ends at
    the first line that misses the polygon.  No clearance check is made.
    """
    half = offset / 2.0
    y = polygon.min_y() + half
    edges = polygon.edges()
    segments: List[Segment] = []
    pass_index = 0
    while True:
        line = Segment(Point(-INF, y), Point(INF, y))
        hits = []
        for edge in edges:
            hit = intersection(edge, line)
            if hit is not None:
                hits.append(hit)
        if not hits:
            break
        if len(hits) >= 2:
            hits.sort(key=lambda p: p.x)
            start = Point(hits[0].x + correction, hits[0].y)
            end = Point(hits[-1].x - correction, hits[-1].y)
            if start.x <= end.x:
                sweep = Segment(start, end)
                segments.append(sweep if pass_index % 2 == 0 else sweep.reversed())
        y += half
        pass_index += 1
    logger.debug("naive_traverse: %d passes over %d sweep positions", len(segments), pass_index)
    return segments


def flatten(segments: Iterable[Segment]) -> List[Point]:
    """Waypoints ``v1, v2`` of each pass in order."""
    points: List[Point] = []
    for segment in segments:
        points.append(segment.v1)
        points.append(segment.v2)
    return points


__all__ = ["traverse", "naive_traverse", "flatten"]
