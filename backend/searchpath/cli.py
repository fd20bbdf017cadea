"""
Command line driver for search-path generation.

Reads the search area, boundary and mission files, plans the search and
writes the extended mission::

    searchpath-plan            # decomposition (default)
    searchpath-plan decomp
    searchpath-plan naive --search grid.txt --out mission_out.txt

File locations default to the ``SEARCHPATH_*_FILE`` environment
variables and then to the ground station's file names in the current
directory.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .services.config import PlannerConfig, debug_enabled
from .services.errors import PlanningError
from .services.mission_io import MISSION_FIELDS, VERTEX_FIELDS, load_records, write_records
from .services.mission_planner import build_search_mission
from .services.search_planner import DECOMPOSITION_MODE, MODES, resolve_mode

logger = logging.getLogger(__name__)

DEFAULT_MISSION_FILE = "MissionPointsParsed.txt"
DEFAULT_SEARCH_FILE = "SearchGridParsed.txt"
DEFAULT_BOUNDARY_FILE = "BoundaryPoints.txt"
DEFAULT_OUT_FILE = "MissionPointsWithSearch.txt"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a search path and append it to a mission")
    parser.add_argument(
        "mode",
        nargs="?",
        default=DECOMPOSITION_MODE,
        help=f"Path generation mode: {', '.join(MODES)} (default: {DECOMPOSITION_MODE})",
    )
    parser.add_argument(
        "--mission",
        default=os.getenv("SEARCHPATH_MISSION_FILE", DEFAULT_MISSION_FILE),
        help="Mission points file (ordinal, lat, lon, alt records)",
    )
    parser.add_argument(
        "--search",
        default=os.getenv("SEARCHPATH_SEARCH_FILE", DEFAULT_SEARCH_FILE),
        help="Search area file (ordinal, lat, lon records)",
    )
    parser.add_argument(
        "--boundary",
        default=os.getenv("SEARCHPATH_BOUNDARY_FILE", DEFAULT_BOUNDARY_FILE),
        help="Boundary file (ordinal, lat, lon records)",
    )
    parser.add_argument(
        "--out",
        default=os.getenv("SEARCHPATH_OUT_FILE", DEFAULT_OUT_FILE),
        help="Output file for the extended mission",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose or debug_enabled() else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        mode = resolve_mode(args.mode)
    except ValueError:
        print("Error: Invalid argument passed", file=sys.stderr)
        print(f"Available options: {', '.join(MODES)}", file=sys.stderr)
        return 1

    try:
        config = PlannerConfig.from_env()
        mission = load_records(args.mission, MISSION_FIELDS)
        search = load_records(args.search, VERTEX_FIELDS)
        boundary = load_records(args.boundary, VERTEX_FIELDS)
        result = build_search_mission(search, boundary, mission, mode=mode, config=config)
        write_records(args.out, result.records)
    except (OSError, PlanningError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info("Wrote %d waypoints to %s", len(result.records), args.out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
