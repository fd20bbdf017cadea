import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from searchpath.services.config import PlannerConfig, debug_enabled

ENV_VARS = [
    "SEARCHPATH_TURN_RADIUS",
    "SEARCHPATH_SWEEP_OFFSET",
    "SEARCHPATH_CORRECTION",
    "SEARCHPATH_ALTITUDE_FT",
    "SEARCHPATH_MAX_SUBREGIONS",
    "SEARCHPATH_MAX_ROUTE_SEGMENTS",
    "SEARCHPATH_DEBUG",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults() -> None:
    config = PlannerConfig()
    assert config.turn_radius == 36.6
    assert config.offset == 36.6
    assert config.inset == 36.6
    assert config.altitude_ft == 150.0
    assert config.max_subregions == 8
    assert config.max_route_segments == 512


def test_offset_and_inset_can_differ_from_radius() -> None:
    config = PlannerConfig(turn_radius=20.0, sweep_offset=50.0, correction=0.0)
    assert config.offset == 50.0
    assert config.inset == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"turn_radius": 0.0},
        {"turn_radius": -5.0},
        {"sweep_offset": 0.0},
        {"correction": -1.0},
        {"max_subregions": 0},
        {"max_route_segments": 0},
    ],
)
def test_invalid_values_are_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        PlannerConfig(**kwargs)


def test_with_overrides_ignores_none() -> None:
    base = PlannerConfig()
    assert base.with_overrides(turn_radius=None) is base
    changed = base.with_overrides(turn_radius=12.0, correction=None)
    assert changed.turn_radius == 12.0
    assert changed.correction is None
    assert base.turn_radius == 36.6


def test_from_env(clean_env) -> None:
    clean_env.setenv("SEARCHPATH_TURN_RADIUS", "25")
    clean_env.setenv("SEARCHPATH_SWEEP_OFFSET", "40.5")
    clean_env.setenv("SEARCHPATH_MAX_SUBREGIONS", "6")
    clean_env.setenv("SEARCHPATH_DEBUG", "true")
    config = PlannerConfig.from_env()
    assert config.turn_radius == 25.0
    assert config.offset == 40.5
    assert config.inset == 25.0
    assert config.max_subregions == 6
    assert config.debug is True


def test_from_env_defaults_and_errors(clean_env) -> None:
    assert PlannerConfig.from_env() == PlannerConfig()
    assert not debug_enabled()
    clean_env.setenv("SEARCHPATH_TURN_RADIUS", "wide")
    with pytest.raises(ValueError, match="SEARCHPATH_TURN_RADIUS"):
        PlannerConfig.from_env()
