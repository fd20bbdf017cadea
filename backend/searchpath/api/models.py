"""
Pydantic data models for the search-path planner API.

These models define the shapes of requests and responses used by the
backend.  Field names follow the camelCase convention of the web
client; conversion to the planner's own types happens in the routes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


PlanningMode = Literal["naive", "decomp"]


class PlanePoint(BaseModel):
    """Point in the local plane, in metres."""

    x: float
    y: float


class GeoPoint(BaseModel):
    """GPS position in decimal degrees."""

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")


class MissionWaypoint(BaseModel):
    """Numbered mission waypoint; altitude in feet."""

    index: int = Field(..., description="Ordinal of the waypoint within the mission")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    altitude: float | None = Field(default=None, description="Altitude in feet")


class PlannerTuning(BaseModel):
    """Optional per-request overrides of the planner configuration.

    Omitted values fall back to the server configuration (defaults or
    ``SEARCHPATH_*`` environment variables).
    """

    turnRadius: float | None = Field(
        default=None, gt=0.0, description="Turn radius of the aircraft in metres"
    )
    sweepOffset: float | None = Field(
        default=None,
        gt=0.0,
        description="Spacing between neighbouring sweep passes in metres (defaults to the turn radius)",
    )
    correction: float | None = Field(
        default=None,
        ge=0.0,
        description="Distance pass endpoints are pulled back from the boundary (defaults to the turn radius)",
    )


class SearchPathRequest(PlannerTuning):
    """Request body for planning a search over GPS polygons."""

    searchArea: List[GeoPoint] = Field(
        ..., description="Vertices of the area to search; the first vertex anchors the local plane"
    )
    boundary: List[GeoPoint] = Field(
        default_factory=list, description="Vertices of the polygon the aircraft must stay within"
    )
    mission: List[MissionWaypoint] = Field(
        default_factory=list,
        description="Existing mission waypoints; the last one is where the transit route starts",
    )
    mode: PlanningMode = Field(default="decomp", description="Planning mode ('naive' or 'decomp')")
    altitudeFt: float | None = Field(
        default=None, gt=0.0, description="Altitude assigned to generated waypoints, in feet"
    )


class SearchPathResponse(BaseModel):
    """Response returned after a GPS search plan is created."""

    planId: str = Field(..., description="Unique identifier for the generated plan")
    waypoints: List[MissionWaypoint] = Field(
        ..., description="Mission waypoints followed by the route and coverage waypoints"
    )
    metadata: Dict[str, Any] = Field(
        ..., description="Additional metadata such as mode, subregion count and path length"
    )


class PlanarSearchRequest(PlannerTuning):
    """Request body for planning a search over planar polygons."""

    searchArea: List[PlanePoint] = Field(..., description="Vertices of the area to search")
    boundary: List[PlanePoint] | None = Field(
        default=None, description="Vertices of the polygon the aircraft must stay within"
    )
    start: PlanePoint | None = Field(
        default=None, description="Position the transit route starts from"
    )
    mode: PlanningMode = Field(default="decomp", description="Planning mode ('naive' or 'decomp')")


class PlanarSearchResponse(BaseModel):
    """Response returned after a planar search plan is created."""

    planId: str = Field(..., description="Unique identifier for the generated plan")
    route: List[PlanePoint] = Field(
        ..., description="Transit waypoints from the start point to the first coverage waypoint"
    )
    coverage: List[PlanePoint] = Field(..., description="Coverage waypoints in flight order")
    subregions: List[List[PlanePoint]] = Field(
        ..., description="Polygons that were swept, in decomposition order"
    )
    metadata: Dict[str, Any] = Field(
        ..., description="Additional metadata such as mode, visiting order and path length"
    )


class PlanValidateRequest(BaseModel):
    """Request body for validating user-edited waypoints against a plan's boundary."""

    points: List[PlanePoint] = Field(..., description="Waypoints to validate, in flight order")


class PlanValidateResponse(BaseModel):
    """Response returned after validating waypoints."""

    valid: bool = Field(..., description="Whether every waypoint and leg stays inside the boundary")
    minClearance: float = Field(
        ..., description="Minimum distance between a waypoint and the boundary"
    )
    violations: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Waypoints outside the boundary and legs crossing it",
    )
