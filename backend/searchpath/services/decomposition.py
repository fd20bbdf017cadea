"""
Convex decomposition of search areas.

A non-convex search area is cut along diagonals from its reflex
vertices until every piece is convex, then neighbouring pieces whose
union is still convex are merged back together.  Convex pieces can be
swept with straight back-and-forth passes.

Functions:

* ``split`` – cut a polygon along the diagonal between two vertices.
* ``decompose`` – recursive decomposition into convex pieces.
* ``merge_polygons`` – join two polygons along a shared edge.
* ``merge_subregions`` – merge pass over a decomposition.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .errors import IndexOutOfRangeError, InvalidSplitError
from .geometry import (
    Polygon,
    Segment,
    concave_indices,
    get_width,
    is_convex,
    segments_touch,
)

logger = logging.getLogger(__name__)


def split(polygon: Polygon, i: int, j: int) -> Tuple[Polygon, Polygon]:
    """Split ``polygon`` along the diagonal between vertices ``i`` and ``j``.

    The order of ``i`` and ``j`` does not matter.  With ``i < j`` the
    first piece holds vertices ``i..j`` and the second holds ``j..n-1``
    followed by ``0..i``; both keep the input's winding.

    Raises:
        IndexOutOfRangeError: an index does not address a vertex.
        InvalidSplitError: the indices are equal or neighbours.
    """
    n = len(polygon)
    for index in (i, j):
        if not 0 <= index < n:
            raise IndexOutOfRangeError(f"Vertex index {index} outside polygon of {n} vertices")
    if i > j:
        i, j = j, i
    if j - i < 2 or (i == 0 and j == n - 1):
        raise InvalidSplitError(f"Vertices {i} and {j} do not form a diagonal")
    vertices = polygon.vertices
    first = Polygon(vertices[i : j + 1])
    second = Polygon(vertices[j:] + vertices[: i + 1])
    return first, second


def _diagonal_is_valid(polygon: Polygon, c: int, j: int) -> bool:
    """Return True if the diagonal from reflex vertex ``c`` to ``j`` stays inside."""
    n = len(polygon)
    prev = (c - 1) % n
    origin = polygon[c]
    target = polygon[j]

    split_theta = Segment(origin, target).theta
    forward = polygon.edge(c).theta
    backward = Segment(origin, polygon[prev]).theta
    # The interior at c is swept counter-clockwise from the outgoing edge
    # to the reversed incoming edge; it wraps past pi when forward > backward.
    if forward > backward:
        inside = split_theta > forward or split_theta < backward
    else:
        inside = forward < split_theta < backward
    if not inside:
        return False

    incident = {prev, c, (j - 1) % n, j}
    for k in range(n):
        if k in incident:
            continue
        edge = polygon.edge(k)
        if segments_touch(origin, target, edge.v1, edge.v2):
            return False
    return True


def _best_split(
    polygon: Polygon, concave: Sequence[int], accept_convex: bool
) -> Optional[Tuple[Polygon, Polygon]]:
    n = len(polygon)
    concave_set = set(concave)
    best: Optional[Tuple[Polygon, Polygon]] = None
    best_width = math.inf
    for c in concave:
        for j in range(n):
            if j == c or j == (c + 1) % n or j == (c - 1) % n:
                continue
            if not accept_convex and j not in concave_set:
                continue
            if not _diagonal_is_valid(polygon, c, j):
                continue
            first, second = split(polygon, c, j)
            width = get_width(first).length + get_width(second).length
            # Strictly smaller: the first minimum in enumeration order wins.
            if width < best_width:
                best_width = width
                best = (first, second)
    return best


def _decompose_into(polygon: Polygon, out: List[Polygon]) -> None:
    concave = concave_indices(polygon)
    if not concave:
        out.append(polygon)
        return
    # A lone reflex vertex has no reflex partner, so convex targets are
    # allowed straight away.
    best = _best_split(polygon, concave, accept_convex=len(concave) == 1)
    if best is None and len(concave) > 1:
        best = _best_split(polygon, concave, accept_convex=True)
    if best is None:
        logger.warning(
            "No valid diagonal found for polygon with %d vertices and reflex vertices %s; "
            "keeping it whole",
            len(polygon),
            concave,
        )
        out.append(polygon)
        return
    first, second = best
    _decompose_into(first, out)
    _decompose_into(second, out)


def decompose(polygon: Polygon) -> List[Polygon]:
    """Decompose a simple CCW polygon into convex pieces.

    Each reflex vertex is paired with another vertex (a reflex one when
    possible) and the diagonal minimising the summed widths of the two
    halves is cut.  Both halves are decomposed recursively and their
    pieces appended in order.  A convex input is returned unchanged as
    the only piece.
    """
    pieces: List[Polygon] = []
    _decompose_into(polygon, pieces)
    logger.debug("Decomposed %d-vertex polygon into %d pieces", len(polygon), len(pieces))
    return pieces


def merge_polygons(a: Polygon, b: Polygon, i: int, j: int) -> Polygon:
    """Join ``a`` and ``b`` along ``a.edge(i) == b.edge(j)``.

    The result walks ``a`` starting after the shared edge and continues
    through ``b``'s remaining vertices, dropping the shared edge.
    """
    n = len(a)
    m = len(b)
    vertices = [a[(i + 1 + z) % n] for z in range(n)]
    vertices.extend(b[(j + 1 + z) % m] for z in range(1, m - 1))
    return Polygon(tuple(vertices))


def merge_subregions(polygons: Sequence[Polygon]) -> List[Polygon]:
    """Merge adjacent pieces whose union is convex until none remain.

    The merged piece takes the place of the first of the pair and the
    second is removed; all other pieces keep their relative order.
    """
    regions = list(polygons)
    merged = True
    while merged:
        merged = False
        for ia in range(len(regions)):
            for ib in range(len(regions)):
                if ia == ib:
                    continue
                shared = regions[ia].adjacent(regions[ib])
                if shared is None:
                    continue
                candidate = merge_polygons(regions[ia], regions[ib], shared[0], shared[1])
                if is_convex(candidate):
                    regions[ia] = candidate
                    del regions[ib]
                    merged = True
                    break
            if merged:
                break
    return regions


__all__ = ["split", "decompose", "merge_polygons", "merge_subregions"]
