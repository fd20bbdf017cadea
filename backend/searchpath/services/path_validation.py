"""
Route validation utilities.

Provides a containment check that validates a waypoint sequence
against the boundary polygon the aircraft must stay within.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from .geometry import Point, Polygon, Segment, intersection


def _distance_to_edge(p: Point, edge: Segment) -> float:
    """Distance from ``p`` to the closed segment ``edge``."""
    d = edge.v2 - edge.v1
    length_sq = d.dot(d)
    if length_sq == 0.0:
        return (p - edge.v1).magnitude()
    t = max(0.0, min(1.0, (p - edge.v1).dot(d) / length_sq))
    return (p - (edge.v1 + d * t)).magnitude()


def point_in_polygon(p: Point, polygon: Polygon) -> bool:
    """Even-odd ray casting test; points on the boundary may go either way."""
    inside = False
    n = len(polygon)
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        if (a.y > p.y) != (b.y > p.y):
            x_cross = a.x + (p.y - a.y) * (b.x - a.x) / (b.y - a.y)
            if p.x < x_cross:
                inside = not inside
    return inside


def validate_route(
    points: Sequence[Point], boundary: Polygon
) -> Tuple[bool, float, List[dict]]:
    """Validate that a waypoint sequence stays inside ``boundary``.

    The clearance of a waypoint is its distance to the nearest boundary
    edge.  A waypoint outside the boundary, or a leg between consecutive
    waypoints that crosses a boundary edge, is a violation.

    Returns:
        A tuple ``(valid, min_clearance, violations)`` where:

        * ``valid`` is True if there are no violations.
        * ``min_clearance`` is the minimum clearance across all waypoints
          (0.0 for an empty sequence).
        * ``violations`` is a list of dictionaries describing each
          offending waypoint or leg.
    """
    edges = boundary.edges()
    min_clearance = math.inf
    violations: List[dict] = []

    for idx, p in enumerate(points):
        clearance = min(_distance_to_edge(p, edge) for edge in edges)
        min_clearance = min(min_clearance, clearance)
        if not point_in_polygon(p, boundary):
            violations.append(
                {
                    "index": idx,
                    "kind": "outside",
                    "point": {"x": p.x, "y": p.y},
                    "clearance": clearance,
                }
            )

    for idx, (a, b) in enumerate(zip(points, points[1:])):
        leg = Segment(a, b)
        for edge_index, edge in enumerate(edges):
            hit = intersection(leg, edge)
            if hit is not None:
                violations.append(
                    {
                        "index": idx,
                        "kind": "crossing",
                        "edge": edge_index,
                        "point": {"x": hit.x, "y": hit.y},
                    }
                )

    if min_clearance == math.inf:
        min_clearance = 0.0
    return len(violations) == 0, min_clearance, violations


__all__ = ["point_in_polygon", "validate_route"]
