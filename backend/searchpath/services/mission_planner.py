"""
GPS mission assembly.

``build_search_mission`` turns ground-station records into a complete
mission: the existing mission points are kept, followed by the transit
route from the last of them into the search area and the coverage
waypoints.  The first search-area vertex anchors the local plane in
which all planning happens.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import PlannerConfig
from .conversions import PlaneFrame, init_anchor
from .errors import DegeneratePolygonError
from .mission_io import MissionRecord
from .search_planner import DECOMPOSITION_MODE, SearchPlan, plan_search

logger = logging.getLogger(__name__)


@dataclass
class MissionResult:
    """Output records plus the plan and frame they were derived from."""

    records: List[MissionRecord]
    plan: SearchPlan
    frame: PlaneFrame


def build_search_mission(
    search_area: Sequence[MissionRecord],
    boundary: Sequence[MissionRecord],
    mission: Sequence[MissionRecord],
    mode: str = DECOMPOSITION_MODE,
    config: Optional[PlannerConfig] = None,
) -> MissionResult:
    """Plan a search and append it to an existing mission.

    Output records are numbered from 1.  Mission records keep their own
    altitude; route and coverage waypoints are flown at
    ``config.altitude_ft``.  Without mission records there is no start
    point and therefore no transit route.

    Raises:
        DegeneratePolygonError: the search area or boundary is unusable.
        PlanningError: any other planning failure (see
            :func:`plan_search`).
    """
    prefix = "[Mission]"
    config = config or PlannerConfig()
    if not search_area:
        raise DegeneratePolygonError("search area has no vertices")
    t0 = time.perf_counter()

    anchor = search_area[0]
    frame = init_anchor(anchor.longitude, anchor.latitude)
    area = [frame.to_plane(r.longitude, r.latitude) for r in search_area]
    fence = [frame.to_plane(r.longitude, r.latitude) for r in boundary] if boundary else None
    start = frame.to_plane(mission[-1].longitude, mission[-1].latitude) if mission else None

    plan = plan_search(area, boundary=fence, start=start, mode=mode, config=config)

    records: List[MissionRecord] = []
    for record in mission:
        records.append(
            MissionRecord(
                ordinal=len(records) + 1,
                latitude=record.latitude,
                longitude=record.longitude,
                altitude=record.altitude,
            )
        )
    for point in plan.waypoints:
        longitude, latitude = frame.to_gps(point)
        records.append(
            MissionRecord(
                ordinal=len(records) + 1,
                latitude=latitude,
                longitude=longitude,
                altitude=config.altitude_ft,
            )
        )
    logger.info(
        "%s anchor=(%.7f, %.7f) missionPoints=%d route=%d coverage=%d in %.3f ms",
        prefix,
        anchor.latitude,
        anchor.longitude,
        len(mission),
        len(plan.route),
        len(plan.coverage),
        (time.perf_counter() - t0) * 1000.0,
    )
    return MissionResult(records=records, plan=plan, frame=frame)


__all__ = ["MissionResult", "build_search_mission"]
