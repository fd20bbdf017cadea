import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from searchpath.cli import main
from searchpath.services.conversions import init_anchor
from searchpath.services.geometry import Point
from searchpath.services.mission_io import MISSION_FIELDS, load_records

ANCHOR = init_anchor(-117.931480, 34.082729)


def _vertex_stream(points) -> str:
    values = []
    for i, (x, y) in enumerate(points, start=1):
        lon, lat = ANCHOR.to_gps(Point(x, y))
        values.append(f"{i},{lat:.9f},{lon:.9f}")
    return ",\n".join(values)


@pytest.fixture
def mission_files(tmp_path: Path) -> dict:
    lon, lat = ANCHOR.to_gps(Point(-100, -100))
    files = {
        "mission": tmp_path / "MissionPointsParsed.txt",
        "search": tmp_path / "SearchGridParsed.txt",
        "boundary": tmp_path / "BoundaryPoints.txt",
        "out": tmp_path / "MissionPointsWithSearch.txt",
    }
    files["mission"].write_text(f"1,{lat:.9f},{lon:.9f},200\n")
    files["search"].write_text(_vertex_stream([(0, 0), (400, 0), (400, 400), (0, 400)]))
    files["boundary"].write_text(
        _vertex_stream([(-300, -300), (700, -300), (700, 700), (-300, 700)])
    )
    return files


def _args(files: dict, *extra: str) -> list:
    return [
        *extra,
        "--mission", str(files["mission"]),
        "--search", str(files["search"]),
        "--boundary", str(files["boundary"]),
        "--out", str(files["out"]),
    ]


@pytest.mark.parametrize("mode", ["decomp", "naive"])
def test_cli_writes_extended_mission(mission_files: dict, mode: str) -> None:
    assert main(_args(mission_files, mode)) == 0
    records = load_records(mission_files["out"], MISSION_FIELDS)
    assert len(records) > 1
    assert [r.ordinal for r in records] == list(range(1, len(records) + 1))
    assert records[0].altitude == 200.0
    assert all(r.altitude == 150.0 for r in records[1:])


def test_cli_defaults_to_decomposition(mission_files: dict) -> None:
    assert main(_args(mission_files)) == 0
    assert mission_files["out"].exists()


def test_cli_rejects_unknown_mode(mission_files: dict, capsys) -> None:
    assert main(_args(mission_files, "spiral")) == 1
    err = capsys.readouterr().err
    assert "Error: Invalid argument passed" in err
    assert "Available options: naive, decomp" in err
    assert not mission_files["out"].exists()


def test_cli_reports_missing_file(mission_files: dict, capsys) -> None:
    mission_files["search"].unlink()
    assert main(_args(mission_files)) == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_reports_malformed_file(mission_files: dict, capsys) -> None:
    mission_files["boundary"].write_text("1,34.0,-117.9,2")
    assert main(_args(mission_files)) == 1
    assert "Error:" in capsys.readouterr().err
