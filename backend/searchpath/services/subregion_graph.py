"""
Ordering and orienting the subregions of a decomposed search area.

After decomposition each convex subregion carries its own sweep path.
This module decides in which order the subregions are flown and from
which corner each path is entered:

* ``compute_graph`` builds a weighted graph over the subregions.  The
  weight between two subregions is the distance between their centres,
  plus a large penalty when they do not share an edge.
* ``min_traversal`` enumerates every visiting order and keeps the
  cheapest.
* ``compute_states`` picks a :class:`StartState` for each subregion so
  that consecutive paths join up closely.
* ``ordered_waypoints`` reads every path in its chosen orientation.
"""

from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from .config import DEFAULT_MAX_SUBREGIONS
from .errors import SubregionLimitError
from .geometry import INF, Point, Polygon, Segment, distance

logger = logging.getLogger(__name__)

# Weight added between subregions that do not share an edge.
LARGE_PENALTY: float = INF


class StartState(Enum):
    """Where a subregion's sweep path is entered and in which direction it is read."""

    START_AT_V1 = "startAtV1"
    START_AT_V2 = "startAtV2"
    END_AT_V1 = "endAtV1"
    END_AT_V2 = "endAtV2"

    def entry(self, path: Sequence[Segment]) -> Point:
        return _ENTRY[self](path)

    def exit(self, path: Sequence[Segment]) -> Point:
        return _EXIT[self](path)

    def read(self, path: Sequence[Segment]) -> List[Point]:
        """Waypoints of ``path`` flown in this orientation."""
        reverse_order, swap = _READING[self]
        segments = reversed(path) if reverse_order else path
        points: List[Point] = []
        for segment in segments:
            if swap:
                points.extend((segment.v2, segment.v1))
            else:
                points.extend((segment.v1, segment.v2))
        return points


_ENTRY: Dict[StartState, Callable[[Sequence[Segment]], Point]] = {
    StartState.START_AT_V1: lambda path: path[0].v1,
    StartState.START_AT_V2: lambda path: path[0].v2,
    StartState.END_AT_V1: lambda path: path[-1].v1,
    StartState.END_AT_V2: lambda path: path[-1].v2,
}

_EXIT: Dict[StartState, Callable[[Sequence[Segment]], Point]] = {
    StartState.START_AT_V1: lambda path: path[-1].v2,
    StartState.START_AT_V2: lambda path: path[-1].v1,
    StartState.END_AT_V1: lambda path: path[0].v2,
    StartState.END_AT_V2: lambda path: path[0].v1,
}

# (read segments back to front, read each segment v2 -> v1)
_READING: Dict[StartState, Tuple[bool, bool]] = {
    StartState.START_AT_V1: (False, False),
    StartState.START_AT_V2: (False, True),
    StartState.END_AT_V1: (True, False),
    StartState.END_AT_V2: (True, True),
}

# Candidate order matters: on equal distances the earlier state is kept.
_CANDIDATES = (
    StartState.START_AT_V1,
    StartState.START_AT_V2,
    StartState.END_AT_V1,
    StartState.END_AT_V2,
)


@dataclass(frozen=True)
class SubregionNode:
    """A convex subregion together with its sweep path."""

    polygon: Polygon
    path: Tuple[Segment, ...]


@dataclass(frozen=True, eq=False)
class WeightedGraph:
    """Subregion graph; ``weights[i, j]`` is the cost of flying from i to j."""

    nodes: Tuple[SubregionNode, ...]
    adjacency: np.ndarray
    weights: np.ndarray

    @property
    def size(self) -> int:
        return len(self.nodes)


def compute_graph(nodes: Sequence[SubregionNode]) -> WeightedGraph:
    """Build the weighted subregion graph.

    Subregions sharing an edge are adjacent and weighted by the distance
    between their bounding-box centres; all other pairs get the same
    distance plus ``LARGE_PENALTY``.  The diagonal is zero.
    """
    owned = tuple(nodes)
    n = len(owned)
    centers = np.array(
        [node.polygon.center().as_tuple() for node in owned], dtype=float
    ).reshape(n, 2)
    diff = centers[:, np.newaxis, :] - centers[np.newaxis, :, :]
    dist = np.hypot(diff[..., 0], diff[..., 1])

    adjacency = np.zeros((n, n), dtype=bool)
    for i in range(n):
        for j in range(i + 1, n):
            if owned[i].polygon.adjacent(owned[j].polygon) is not None:
                adjacency[i, j] = True
                adjacency[j, i] = True

    weights = np.where(adjacency, dist, LARGE_PENALTY + dist)
    np.fill_diagonal(weights, 0.0)
    return WeightedGraph(nodes=owned, adjacency=adjacency, weights=weights)


def traversal_length(graph: WeightedGraph, order: Sequence[int]) -> float:
    """Sum of edge weights along ``order``."""
    total = 0.0
    for a, b in zip(order, order[1:]):
        total += float(graph.weights[a, b])
    return total


def min_traversal(graph: WeightedGraph, max_nodes: int = DEFAULT_MAX_SUBREGIONS) -> List[int]:
    """Return the visiting order with the smallest ``traversal_length``.

    Orders are enumerated lexicographically and only a strictly shorter
    order replaces the current best, so the first minimum wins.

    Raises:
        SubregionLimitError: the graph has more than ``max_nodes`` nodes.
    """
    n = graph.size
    if n > max_nodes:
        raise SubregionLimitError(
            f"{n} subregions exceed the limit of {max_nodes} for exhaustive ordering"
        )
    if n == 0:
        return []
    best: Tuple[int, ...] = tuple(range(n))
    best_length = math.inf
    for order in itertools.permutations(range(n)):
        length = traversal_length(graph, order)
        if length < best_length:
            best_length = length
            best = order
    logger.debug("min_traversal: order=%s length=%.3f", best, best_length)
    return list(best)


def _closest_state(
    path: Sequence[Segment],
    target: Point,
    vertex_of: Callable[[StartState, Sequence[Segment]], Point],
) -> StartState:
    best = _CANDIDATES[0]
    best_distance = math.inf
    for state in _CANDIDATES:
        d = distance(vertex_of(state, path), target)
        if d < best_distance:
            best_distance = d
            best = state
    return best


def compute_states(order: Sequence[int], graph: WeightedGraph) -> Dict[int, StartState]:
    """Choose the start state of every subregion along ``order``.

    The first subregion leaves from the path end closest to the next
    subregion's centre.  Every later subregion is entered at the path
    end closest to where the previous one was left.  Subregions whose
    sweep produced no passes are skipped and get no state.
    """
    active = [index for index in order if graph.nodes[index].path]
    states: Dict[int, StartState] = {}
    if not active:
        return states

    first = active[0]
    first_path = graph.nodes[first].path
    if len(active) == 1:
        states[first] = StartState.START_AT_V1
        return states
    target = graph.nodes[active[1]].polygon.center()
    states[first] = _closest_state(first_path, target, StartState.exit)
    joint = states[first].exit(first_path)

    for index in active[1:]:
        path = graph.nodes[index].path
        state = _closest_state(path, joint, StartState.entry)
        states[index] = state
        joint = state.exit(path)
    return states


def ordered_waypoints(
    graph: WeightedGraph, order: Sequence[int], states: Dict[int, StartState]
) -> List[Point]:
    """Concatenate the oriented paths of every subregion that has a state."""
    points: List[Point] = []
    for index in order:
        state = states.get(index)
        if state is None:
            continue
        points.extend(state.read(graph.nodes[index].path))
    return points


__all__ = [
    "LARGE_PENALTY",
    "StartState",
    "SubregionNode",
    "WeightedGraph",
    "compute_graph",
    "traversal_length",
    "min_traversal",
    "compute_states",
    "ordered_waypoints",
]
