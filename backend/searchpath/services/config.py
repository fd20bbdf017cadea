"""
Planner configuration.

``PlannerConfig`` gathers the tunable constants of the planner.  The
defaults describe a fixed-wing aircraft flying at 150 ft with a turn
radius of 36.6 m, sweeping passes one turn radius apart.  Values can be
overridden through ``SEARCHPATH_*`` environment variables (see
:meth:`PlannerConfig.from_env`) or per request through
:meth:`PlannerConfig.with_overrides`.
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

logger = logging.getLogger(__name__)

# Turn radius of the aircraft in metres.
DEFAULT_TURN_RADIUS: float = 36.6
# Cruise altitude for generated waypoints, in feet.
DEFAULT_ALTITUDE_FT: float = 150.0
# Visiting orders are enumerated exhaustively, so keep n! small.
DEFAULT_MAX_SUBREGIONS: int = 8
DEFAULT_MAX_ROUTE_SEGMENTS: int = 512


@dataclass(frozen=True)
class PlannerConfig:
    """Tunable parameters of the planner.

    Attributes:
        turn_radius: Turn radius of the vehicle in metres.  Also the
            clearance probe length and the router's inset distance.
        sweep_offset: Spacing between neighbouring sweep passes.
            ``None`` means "same as ``turn_radius``".
        correction: Distance each pass endpoint is pulled back from the
            boundary along the sweep line.  ``None`` means "same as
            ``turn_radius``".
        altitude_ft: Altitude assigned to generated waypoints.
        max_subregions: Largest subregion count for which every visiting
            order is enumerated.
        max_route_segments: Number of segments the router may examine
            before giving up.
    """

    turn_radius: float = DEFAULT_TURN_RADIUS
    sweep_offset: Optional[float] = None
    correction: Optional[float] = None
    altitude_ft: float = DEFAULT_ALTITUDE_FT
    max_subregions: int = DEFAULT_MAX_SUBREGIONS
    max_route_segments: int = DEFAULT_MAX_ROUTE_SEGMENTS
    debug: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if self.turn_radius <= 0:
            raise ValueError(f"turn_radius must be positive, got {self.turn_radius}")
        if self.sweep_offset is not None and self.sweep_offset <= 0:
            raise ValueError(f"sweep_offset must be positive, got {self.sweep_offset}")
        if self.correction is not None and self.correction < 0:
            raise ValueError(f"correction must not be negative, got {self.correction}")
        if self.max_subregions < 1:
            raise ValueError("max_subregions must be at least 1")
        if self.max_route_segments < 1:
            raise ValueError("max_route_segments must be at least 1")

    @property
    def offset(self) -> float:
        """Effective spacing between sweep passes."""
        return self.turn_radius if self.sweep_offset is None else self.sweep_offset

    @property
    def inset(self) -> float:
        """Effective endpoint correction along the sweep line."""
        return self.turn_radius if self.correction is None else self.correction

    def with_overrides(self, **overrides: Optional[float]) -> "PlannerConfig":
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        return replace(self, **values)

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        """Build a configuration from ``SEARCHPATH_*`` environment variables.

        Unset variables keep their defaults.  A value that cannot be
        parsed raises ``ValueError`` naming the variable.
        """
        config = cls(
            turn_radius=_env_float("SEARCHPATH_TURN_RADIUS", DEFAULT_TURN_RADIUS),
            sweep_offset=_env_float("SEARCHPATH_SWEEP_OFFSET", None),
            correction=_env_float("SEARCHPATH_CORRECTION", None),
            altitude_ft=_env_float("SEARCHPATH_ALTITUDE_FT", DEFAULT_ALTITUDE_FT),
            max_subregions=int(_env_float("SEARCHPATH_MAX_SUBREGIONS", DEFAULT_MAX_SUBREGIONS)),
            max_route_segments=int(
                _env_float("SEARCHPATH_MAX_ROUTE_SEGMENTS", DEFAULT_MAX_ROUTE_SEGMENTS)
            ),
            debug=debug_enabled(),
        )
        if config.debug:
            logger.debug("PlannerConfig loaded from environment: %s", config)
        return config


def debug_enabled() -> bool:
    """Return True when ``SEARCHPATH_DEBUG`` is set to a truthy value."""
    return os.getenv("SEARCHPATH_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be numeric, got {raw!r}") from exc


__all__ = [
    "PlannerConfig",
    "DEFAULT_TURN_RADIUS",
    "DEFAULT_ALTITUDE_FT",
    "DEFAULT_MAX_SUBREGIONS",
    "DEFAULT_MAX_ROUTE_SEGMENTS",
    "debug_enabled",
]
