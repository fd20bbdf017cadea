"""
Exceptions raised by the search-path planning services.

Every failure that stops a plan derives from :class:`PlanningError` so
the API layer can turn it into a single HTTP error response and the CLI
can report it with a non-zero exit code.  Geometric degeneracies that
the algorithms tolerate (parallel lines, sweeps that find nothing) are
not errors and are reported with ``None`` or empty lists instead.
"""

from __future__ import annotations


class PlanningError(Exception):
    """Base class for failures that abort a planning request."""


class DegeneratePolygonError(PlanningError, ValueError):
    """Polygon has fewer than three vertices, no area or crossing edges."""


class IndexOutOfRangeError(PlanningError, IndexError):
    """A vertex index does not address a vertex of the polygon."""


class InvalidSplitError(PlanningError, ValueError):
    """Split indices are equal or neighbours on the ring."""


class SubregionLimitError(PlanningError):
    """Too many subregions to enumerate every visiting order."""


class RouteLimitError(PlanningError):
    """The boundary-avoiding router did not settle within its budget."""


class MissionFormatError(PlanningError, ValueError):
    """A mission record stream could not be parsed."""


__all__ = [
    "PlanningError",
    "DegeneratePolygonError",
    "IndexOutOfRangeError",
    "InvalidSplitError",
    "SubregionLimitError",
    "RouteLimitError",
    "MissionFormatError",
]
