"""
Conversions between GPS coordinates and the planner's local plane.

The Earth is modelled as a sphere of radius ``EARTH_RADIUS``.  A
:class:`PlaneFrame` is a tangent plane anchored at a reference GPS
position: its x axis points east and its y axis points north, both in
metres.  The frame is an explicit value passed to every conversion, so
several frames can coexist.

Unit helpers for angles and altitudes are provided as well.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .geometry import Point

# Spherical Earth radius in metres (WGS-84 equatorial radius).
EARTH_RADIUS: float = 6378137.0

_FEET_PER_METRE: float = 3.28084
_METRES_PER_FOOT: float = 0.3048


def to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0


def to_degrees(radians: float) -> float:
    return radians * 180.0 / math.pi


def to_meters(feet: float) -> float:
    return feet * _METRES_PER_FOOT


def to_feet(meters: float) -> float:
    return meters * _FEET_PER_METRE


def _ecef(longitude: float, latitude: float) -> np.ndarray:
    """Earth-centred coordinates of a point given in radians."""
    return EARTH_RADIUS * np.array(
        [
            math.cos(latitude) * math.cos(longitude),
            math.cos(latitude) * math.sin(longitude),
            math.sin(latitude),
        ]
    )


@dataclass(frozen=True, eq=False)
class PlaneFrame:
    """Tangent plane at an anchor point.

    Attributes:
        longitude: Anchor longitude in degrees.
        latitude: Anchor latitude in degrees.
        origin: Anchor position in Earth-centred coordinates (metres).
        basis: 3x3 matrix whose rows are the east, north and up unit
            vectors at the anchor.
    """

    longitude: float
    latitude: float
    origin: np.ndarray
    basis: np.ndarray

    def to_plane(self, longitude: float, latitude: float) -> Point:
        return gps_to_plane(self, longitude, latitude)

    def to_gps(self, point: Point) -> Tuple[float, float]:
        return plane_to_gps(self, point)


def init_anchor(longitude: float, latitude: float) -> PlaneFrame:
    """Create the tangent-plane frame anchored at a GPS position in degrees."""
    lon = to_radians(longitude)
    lat = to_radians(latitude)
    east = np.array([-math.sin(lon), math.cos(lon), 0.0])
    north = np.array(
        [-math.sin(lat) * math.cos(lon), -math.sin(lat) * math.sin(lon), math.cos(lat)]
    )
    up = np.array([math.cos(lat) * math.cos(lon), math.cos(lat) * math.sin(lon), math.sin(lat)])
    return PlaneFrame(
        longitude=float(longitude),
        latitude=float(latitude),
        origin=_ecef(lon, lat),
        basis=np.vstack([east, north, up]),
    )


def gps_to_plane(frame: PlaneFrame, longitude: float, latitude: float) -> Point:
    """Project a GPS position (degrees) onto the frame's plane."""
    local = frame.basis @ (_ecef(to_radians(longitude), to_radians(latitude)) - frame.origin)
    return Point(float(local[0]), float(local[1]))


def plane_to_gps(frame: PlaneFrame, point: Point) -> Tuple[float, float]:
    """Map a plane point back to ``(longitude, latitude)`` in degrees.

    The point is lifted off the tangent plane radially onto the sphere.
    """
    ecef = frame.origin + frame.basis.T @ np.array([point.x, point.y, 0.0])
    x, y, z = (float(c) for c in ecef)
    longitude = math.atan2(y, x)
    latitude = math.atan2(z, math.hypot(x, y))
    return to_degrees(longitude), to_degrees(latitude)


__all__ = [
    "EARTH_RADIUS",
    "PlaneFrame",
    "init_anchor",
    "gps_to_plane",
    "plane_to_gps",
    "to_radians",
    "to_degrees",
    "to_meters",
    "to_feet",
]
