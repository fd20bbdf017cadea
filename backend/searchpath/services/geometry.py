"""
Planar geometry primitives for the search-path planner.

All coordinates are metres in a local tangent plane.  The module
provides small immutable value types (:class:`Point`, :class:`Segment`,
:class:`Span` and :class:`Polygon`) together with the handful of
predicates the planner is built from:

* ``distance`` / ``point_segment_distance`` – point distances, the
  latter measured to the segment's infinite line.
* ``cross`` – z component of the 2D cross product.
* ``is_concave`` – reflex vertex test for CCW polygons.
* ``intersection`` – segment/segment intersection point or ``None``.
* ``get_width`` – the polygon's narrowest extent as a vertex/edge span.
* ``signed_area``, ``is_clockwise``, ``orient_ccw`` and
  ``polygon_self_intersects`` – ring orientation and validity checks.

Polygons are expected in counter-clockwise order; ``orient_ccw``
normalises input rings before they reach the planner.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .errors import DegeneratePolygonError, IndexOutOfRangeError

# Tolerance for parallel/collinear tests.
EPSILON: float = sys.float_info.epsilon
# Effective infinity: sweep lines are extended this far and non-adjacent
# subregions are penalised by this amount.
INF: float = 1_000_000.0


@dataclass(frozen=True)
class Point:
    """A point (or vector) in the plane."""

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scale: float) -> "Point":
        return Point(self.x * scale, self.y * scale)

    __rmul__ = __mul__

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


PointLike = Union[Point, Sequence[float]]


def as_point(value: PointLike) -> Point:
    """Coerce an ``(x, y)`` pair or a :class:`Point` into a :class:`Point`."""
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(float(x), float(y))


@dataclass(frozen=True, eq=False)
class Segment:
    """A directed line segment from ``v1`` to ``v2``.

    Equality ignores direction: ``Segment(a, b) == Segment(b, a)``.
    """

    v1: Point
    v2: Point

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return (self.v1 == other.v1 and self.v2 == other.v2) or (
            self.v1 == other.v2 and self.v2 == other.v1
        )

    def __hash__(self) -> int:
        return hash(frozenset((self.v1, self.v2)))

    @property
    def is_vertical(self) -> bool:
        return self.v1.x == self.v2.x

    @property
    def slope(self) -> float:
        if self.is_vertical:
            return math.inf
        return (self.v2.y - self.v1.y) / (self.v2.x - self.v1.x)

    @property
    def line(self) -> Tuple[float, float, float]:
        """Coefficients ``(a, b, c)`` of ``a*x + b*y + c = 0``."""
        if self.is_vertical:
            return (1.0, 0.0, -self.v1.x)
        m = self.slope
        return (-m, 1.0, m * self.v1.x - self.v1.y)

    @property
    def length(self) -> float:
        return distance(self.v1, self.v2)

    @property
    def theta(self) -> float:
        """Direction angle from ``v1`` to ``v2`` in ``[-pi, pi]``."""
        if self.is_vertical:
            return math.pi / 2 if self.v1.y < self.v2.y else -math.pi / 2
        if self.v1.y == self.v2.y:
            return 0.0 if self.v1.x < self.v2.x else math.pi
        return math.atan2(self.v2.y - self.v1.y, self.v2.x - self.v1.x)

    def reversed(self) -> "Segment":
        return Segment(self.v2, self.v1)


@dataclass(frozen=True)
class Span:
    """A vertex paired with an edge; measures how far the vertex reaches."""

    vertex: Point
    segment: Segment

    @property
    def length(self) -> float:
        return point_segment_distance(self.vertex, self.segment)

    @property
    def theta(self) -> float:
        """Direction perpendicular to the edge, pointing into a CCW polygon."""
        return self.segment.theta + math.pi / 2


@dataclass(frozen=True)
class Polygon:
    """An immutable simple polygon with counter-clockwise vertices."""

    vertices: Tuple[Point, ...]

    def __post_init__(self) -> None:
        vertices = tuple(as_point(v) for v in self.vertices)
        if len(vertices) < 3:
            raise DegeneratePolygonError(
                f"A polygon needs at least 3 vertices, got {len(vertices)}"
            )
        object.__setattr__(self, "vertices", vertices)

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self):
        return iter(self.vertices)

    def __getitem__(self, index: int) -> Point:
        return self.vertices[index]

    @property
    def size(self) -> int:
        return len(self.vertices)

    def edge(self, i: int) -> Segment:
        """Edge from vertex ``i`` to vertex ``i + 1`` (wrapping)."""
        n = len(self.vertices)
        if not 0 <= i < n:
            raise IndexOutOfRangeError(f"Edge index {i} outside polygon of {n} vertices")
        return Segment(self.vertices[i], self.vertices[(i + 1) % n])

    def edges(self) -> List[Segment]:
        return [self.edge(i) for i in range(len(self.vertices))]

    def center(self) -> Point:
        """Midpoint of the axis-aligned bounding box."""
        xs = [v.x for v in self.vertices]
        ys = [v.y for v in self.vertices]
        return Point((min(xs) + max(xs)) / 2.0, (min(ys) + max(ys)) / 2.0)

    def adjacent(self, other: "Polygon") -> Optional[Tuple[int, int]]:
        """Return ``(i, j)`` where ``self.edge(i) == other.edge(j)``, else ``None``.

        The first matching pair in index order wins.
        """
        other_edges = other.edges()
        for i, edge in enumerate(self.edges()):
            for j, other_edge in enumerate(other_edges):
                if edge == other_edge:
                    return (i, j)
        return None

    def min_y(self) -> float:
        return min(v.y for v in self.vertices)


def distance(p: Point, q: Point) -> float:
    return math.hypot(q.x - p.x, q.y - p.y)


def point_segment_distance(p: Point, segment: Segment) -> float:
    """Distance from ``p`` to the infinite line through ``segment``."""
    if segment.is_vertical:
        return abs(segment.v1.x - p.x)
    a, b, c = segment.line
    return abs(a * p.x + b * p.y + c) / math.sqrt(a * a + b * b)


def cross(u: Point, v: Point) -> float:
    return u.x * v.y - u.y * v.x


def is_concave(polygon: Polygon, i: int) -> bool:
    """Return True if vertex ``i`` of the CCW ``polygon`` is reflex."""
    n = len(polygon)
    if not 0 <= i < n:
        raise IndexOutOfRangeError(f"Vertex index {i} outside polygon of {n} vertices")
    vertex = polygon[i]
    ba = polygon[(i - 1) % n] - vertex
    bc = polygon[(i + 1) % n] - vertex
    return cross(ba, bc) > 0


def concave_indices(polygon: Polygon) -> List[int]:
    return [i for i in range(len(polygon)) if is_concave(polygon, i)]


def is_convex(polygon: Polygon) -> bool:
    return not concave_indices(polygon)


def intersection(s1: Segment, s2: Segment) -> Optional[Point]:
    """Intersection point of two closed segments.

    Parallel and collinear segments never intersect, even when they
    overlap; callers treat them as a non-event.
    """
    r = s1.v2 - s1.v1
    s = s2.v2 - s2.v1
    rxs = cross(r, s)
    if abs(rxs) < EPSILON:
        return None
    qp = s2.v1 - s1.v1
    t = cross(qp, s) / rxs
    u = cross(qp, r) / rxs
    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return s1.v1 + r * t
    return None


def get_width(polygon: Polygon) -> Span:
    """Return the span with the smallest extent across the polygon.

    For every edge the farthest vertex (other than the edge's own end
    points) is found; the shortest of these spans is the polygon's
    width.  Ties keep the earliest candidate.
    """
    n = len(polygon)
    best: Optional[Span] = None
    best_length = math.inf
    for i in range(n):
        edge = polygon.edge(i)
        far_vertex = polygon[(i + 2) % n]
        far_distance = -1.0
        for j in range(2, n):
            candidate = polygon[(i + j) % n]
            d = point_segment_distance(candidate, edge)
            if d > far_distance:
                far_distance = d
                far_vertex = candidate
        if far_distance < best_length:
            best_length = far_distance
            best = Span(far_vertex, edge)
    assert best is not None
    return best


def signed_area(points: Sequence[Point]) -> float:
    """Shoelace area, positive for counter-clockwise rings."""
    n = len(points)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        p0 = points[i]
        p1 = points[(i + 1) % n]
        area += p0.x * p1.y - p1.x * p0.y
    return 0.5 * area


def is_clockwise(points: Sequence[Point]) -> bool:
    return signed_area(points) < 0.0


def orient_ccw(points: Iterable[PointLike]) -> List[Point]:
    """Return the ring in counter-clockwise order, reversing if needed."""
    ring = [as_point(p) for p in points]
    if is_clockwise(ring):
        ring.reverse()
    return ring


def _orientation(p: Point, q: Point, r: Point) -> int:
    """0 if collinear, 1 if clockwise, 2 if counter-clockwise."""
    val = (q.y - p.y) * (r.x - q.x) - (q.x - p.x) * (r.y - q.y)
    if abs(val) < 1e-12:
        return 0
    return 1 if val > 0 else 2


def _on_segment(p: Point, q: Point, r: Point) -> bool:
    """Return True if collinear point q lies within the bounds of pr."""
    return (min(p.x, r.x) - 1e-12 <= q.x <= max(p.x, r.x) + 1e-12) and (
        min(p.y, r.y) - 1e-12 <= q.y <= max(p.y, r.y) + 1e-12
    )


def segments_touch(p1: Point, q1: Point, p2: Point, q2: Point) -> bool:
    """Return True if closed segments p1q1 and p2q2 share any point.

    Unlike :func:`intersection` this also reports collinear overlap.
    """
    o1 = _orientation(p1, q1, p2)
    o2 = _orientation(p1, q1, q2)
    o3 = _orientation(p2, q2, p1)
    o4 = _orientation(p2, q2, q1)
    if o1 != o2 and o3 != o4:
        return True
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, q2, q1):
        return True
    if o3 == 0 and _on_segment(p2, p1, q2):
        return True
    if o4 == 0 and _on_segment(p2, q1, q2):
        return True
    return False


def polygon_self_intersects(points: Sequence[Point]) -> bool:
    """Return True if any two non-neighbouring edges of the ring touch."""
    n = len(points)
    if n < 4:
        return False
    for i1 in range(n):
        p1 = points[i1]
        q1 = points[(i1 + 1) % n]
        for i2 in range(i1 + 1, n):
            if (i1 + 1) % n == i2 or i1 == (i2 + 1) % n:
                continue
            if segments_touch(p1, q1, points[i2], points[(i2 + 1) % n]):
                return True
    return False


def validate_ring(points: Iterable[PointLike], name: str = "polygon") -> Polygon:
    """Orient ``points`` counter-clockwise and reject unusable rings.

    A closed ring, whose last vertex repeats the first, is accepted and
    the repeated vertex dropped.

    Raises:
        DegeneratePolygonError: fewer than three vertices, zero area or
            crossing edges.
    """
    ring = [as_point(p) for p in points]
    if len(ring) > 1 and ring[-1] == ring[0]:
        ring.pop()
    ring = orient_ccw(ring)
    if len(ring) < 3:
        raise DegeneratePolygonError(f"{name} needs at least 3 vertices, got {len(ring)}")
    if abs(signed_area(ring)) <= EPSILON:
        raise DegeneratePolygonError(f"{name} has zero area")
    if polygon_self_intersects(ring):
        raise DegeneratePolygonError(f"{name} is self-intersecting")
    return Polygon(tuple(ring))


__all__ = [
    "EPSILON",
    "INF",
    "Point",
    "PointLike",
    "Segment",
    "Span",
    "Polygon",
    "as_point",
    "distance",
    "point_segment_distance",
    "cross",
    "is_concave",
    "concave_indices",
    "is_convex",
    "intersection",
    "get_width",
    "signed_area",
    "is_clockwise",
    "orient_ccw",
    "segments_touch",
    "polygon_self_intersects",
    "validate_ring",
]
