"""
Routes for search-plan creation, validation and export.

Plans are computed synchronously and kept in an in-memory registry so
they can be exported afterwards, either as CSV or in the flat mission
record format understood by the ground station.
"""

from __future__ import annotations

import csv
import io
import logging
import uuid
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Response

from .models import (
    MissionWaypoint,
    PlanarSearchRequest,
    PlanarSearchResponse,
    PlanePoint,
    PlanValidateRequest,
    PlanValidateResponse,
    PlannerTuning,
    SearchPathRequest,
    SearchPathResponse,
)
from ..services.config import PlannerConfig
from ..services.errors import PlanningError
from ..services.geometry import Point, validate_ring
from ..services.mission_io import MissionRecord, format_records, records_to_csv
from ..services.mission_planner import build_search_mission
from ..services.path_validation import validate_route
from ..services.search_planner import plan_search

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory registry of plans keyed by planId.  Each entry records the
# plan kind ("gps" or "planar"), the plan itself and whatever is needed
# to export or validate it later.
plan_registry: Dict[str, Dict[str, Any]] = {}


def _config_for(body: PlannerTuning, **extra: Any) -> PlannerConfig:
    """Server configuration with the request's tuning values applied."""
    try:
        return PlannerConfig.from_env().with_overrides(
            turn_radius=body.turnRadius,
            sweep_offset=body.sweepOffset,
            correction=body.correction,
            **extra,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _plane_points(points) -> list[PlanePoint]:
    return [PlanePoint(x=p.x, y=p.y) for p in points]


def _get_plan(plan_id: str) -> Dict[str, Any]:
    entry = plan_registry.get(plan_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Plan not found")
    return entry


@router.post("/search-paths", response_model=SearchPathResponse, status_code=201)
async def create_search_path(body: SearchPathRequest) -> SearchPathResponse:
    """Plan a search over GPS polygons and append it to the given mission.

    The first search-area vertex anchors the local plane.  The returned
    waypoints repeat the mission points and continue with the transit
    route and the coverage waypoints at the configured altitude.
    """
    config = _config_for(body, altitude_ft=body.altitudeFt)
    search = [
        MissionRecord(ordinal=i + 1, latitude=p.latitude, longitude=p.longitude)
        for i, p in enumerate(body.searchArea)
    ]
    boundary = [
        MissionRecord(ordinal=i + 1, latitude=p.latitude, longitude=p.longitude)
        for i, p in enumerate(body.boundary)
    ]
    mission = [
        MissionRecord(
            ordinal=w.index, latitude=w.latitude, longitude=w.longitude, altitude=w.altitude
        )
        for w in body.mission
    ]
    try:
        result = build_search_mission(search, boundary, mission, mode=body.mode, config=config)
    except PlanningError as exc:
        logger.info("[create_search_path] rejected: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    plan_id = uuid.uuid4().hex
    metadata = dict(result.plan.metadata)
    metadata["anchor"] = {"latitude": result.frame.latitude, "longitude": result.frame.longitude}
    metadata["altitudeFt"] = config.altitude_ft
    plan_registry[plan_id] = {
        "kind": "gps",
        "records": result.records,
        "plan": result.plan,
        "metadata": metadata,
    }
    return SearchPathResponse(
        planId=plan_id,
        waypoints=[
            MissionWaypoint(
                index=r.ordinal, latitude=r.latitude, longitude=r.longitude, altitude=r.altitude
            )
            for r in result.records
        ],
        metadata=metadata,
    )


@router.post("/search-paths/planar", response_model=PlanarSearchResponse, status_code=201)
async def create_planar_search_path(body: PlanarSearchRequest) -> PlanarSearchResponse:
    """Plan a search over polygons given directly in plane coordinates."""
    config = _config_for(body)
    search_area = [Point(p.x, p.y) for p in body.searchArea]
    boundary = [Point(p.x, p.y) for p in body.boundary] if body.boundary is not None else None
    start = Point(body.start.x, body.start.y) if body.start is not None else None
    try:
        plan = plan_search(search_area, boundary=boundary, start=start, mode=body.mode, config=config)
        fence = validate_ring(boundary, "boundary") if boundary is not None else None
    except PlanningError as exc:
        logger.info("[create_planar_search_path] rejected: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    plan_id = uuid.uuid4().hex
    plan_registry[plan_id] = {
        "kind": "planar",
        "plan": plan,
        "boundary": fence,
        "metadata": plan.metadata,
    }
    return PlanarSearchResponse(
        planId=plan_id,
        route=_plane_points(plan.route),
        coverage=_plane_points(plan.coverage),
        subregions=[_plane_points(polygon) for polygon in plan.subregions],
        metadata=plan.metadata,
    )


@router.post("/search-paths/{plan_id}/validate", response_model=PlanValidateResponse)
async def validate_search_path(plan_id: str, body: PlanValidateRequest) -> PlanValidateResponse:
    """Check user-edited waypoints against the boundary of a planar plan."""
    entry = _get_plan(plan_id)
    fence = entry.get("boundary")
    if fence is None:
        raise HTTPException(status_code=400, detail="Plan has no planar boundary to validate against")
    valid, min_clearance, violations = validate_route(
        [Point(p.x, p.y) for p in body.points], fence
    )
    return PlanValidateResponse(valid=valid, minClearance=min_clearance, violations=violations)


@router.get("/search-paths/{plan_id}/export")
async def export_search_path(plan_id: str) -> Response:
    """Export the stored plan as CSV.

    GPS plans export ``index,latitude,longitude,altitude`` rows; planar
    plans export ``index,x,y`` rows for the route followed by coverage.
    """
    entry = _get_plan(plan_id)
    if entry["kind"] == "gps":
        return Response(content=records_to_csv(entry["records"]), media_type="text/csv")
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["index", "x", "y"])
    for index, p in enumerate(entry["plan"].waypoints, start=1):
        writer.writerow([index, p.x, p.y])
    return Response(content=output.getvalue(), media_type="text/csv")


@router.get("/search-paths/{plan_id}/mission")
async def export_mission(plan_id: str) -> Response:
    """Export a GPS plan in the flat comma-separated mission format."""
    entry = _get_plan(plan_id)
    if entry["kind"] != "gps":
        raise HTTPException(status_code=400, detail="Only GPS plans can be exported as missions")
    return Response(content=format_records(entry["records"]), media_type="text/plain")
