"""
Reading and writing mission record streams.

Ground-station files hold flat, comma-separated streams of numbers.
Search-area and boundary files carry three values per vertex
(``ordinal, latitude, longitude``); mission files carry four
(``ordinal, latitude, longitude, altitude``).  Line breaks and other
whitespace between values are ignored.

The output stream written by :func:`format_records` uses the four-value
layout with seven decimals for coordinates and an integer altitude.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .errors import MissionFormatError

logger = logging.getLogger(__name__)

VERTEX_FIELDS = 3
MISSION_FIELDS = 4

_SEPARATOR = re.compile(r"[,\s]+")


@dataclass(frozen=True)
class MissionRecord:
    """One record of a mission stream; ``altitude`` is in feet when present."""

    ordinal: int
    latitude: float
    longitude: float
    altitude: Optional[float] = None


def parse_records(text: str, fields: int) -> List[MissionRecord]:
    """Parse a comma-separated stream into records of ``fields`` values.

    Raises:
        MissionFormatError: a value is not numeric or the value count is
            not a multiple of ``fields``.
    """
    if fields not in (VERTEX_FIELDS, MISSION_FIELDS):
        raise ValueError(f"fields must be {VERTEX_FIELDS} or {MISSION_FIELDS}, got {fields}")
    tokens = [token for token in _SEPARATOR.split(text.strip()) if token]
    try:
        values = [float(token) for token in tokens]
    except ValueError as exc:
        raise MissionFormatError(f"Non-numeric value in mission stream: {exc}") from exc
    if len(values) % fields:
        raise MissionFormatError(
            f"Expected groups of {fields} values, got {len(values)} values"
        )
    records: List[MissionRecord] = []
    for start in range(0, len(values), fields):
        group = values[start : start + fields]
        records.append(
            MissionRecord(
                ordinal=int(group[0]),
                latitude=group[1],
                longitude=group[2],
                altitude=group[3] if fields == MISSION_FIELDS else None,
            )
        )
    return records


def load_records(path: Union[str, Path], fields: int) -> List[MissionRecord]:
    """Read and parse a record file."""
    text = Path(path).read_text()
    records = parse_records(text, fields)
    logger.debug("Loaded %d records from %s", len(records), path)
    return records


def format_records(records: Iterable[MissionRecord]) -> str:
    """Serialise records as one comma-separated line.

    Records without an altitude are written with altitude ``0``.
    """
    parts: List[str] = []
    for record in records:
        altitude = record.altitude if record.altitude is not None else 0.0
        parts.extend(
            (
                str(record.ordinal),
                f"{record.latitude:.7f}",
                f"{record.longitude:.7f}",
                str(int(altitude)),
            )
        )
    return ",".join(parts)


def write_records(path: Union[str, Path], records: Iterable[MissionRecord]) -> None:
    Path(path).write_text(format_records(records))


def records_to_csv(records: Iterable[MissionRecord]) -> str:
    """Tabular CSV export with a header row."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["index", "latitude", "longitude", "altitude"])
    for record in records:
        writer.writerow(
            [
                record.ordinal,
                f"{record.latitude:.7f}",
                f"{record.longitude:.7f}",
                "" if record.altitude is None else record.altitude,
            ]
        )
    return output.getvalue()


__all__ = [
    "VERTEX_FIELDS",
    "MISSION_FIELDS",
    "MissionRecord",
    "parse_records",
    "load_records",
    "format_records",
    "write_records",
    "records_to_csv",
]
