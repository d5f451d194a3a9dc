"""Full sky evaluation pipeline.

time parameters -> orbital positions -> dome projections -> atmosphere
spots -> alignment. Every step is a pure function, so identical inputs
always give identical snapshots.
"""

from dataclasses import dataclass
from typing import Any, Optional

from domesky.config import Config, get_config
from domesky.dynamics.orbit import CelestialPosition, position_of_moon, position_of_sun
from domesky.dynamics.time_parameters import TimeParameters
from domesky.eclipse import AlignmentResult, classify_alignment, classify_shadow_alignment
from domesky.projection import (
    AtmosphereSpot,
    ProjectionPoint,
    project_to_atmosphere,
    project_to_dome,
    shadow_position,
)


@dataclass(frozen=True)
class BodyState:
    """Everything computed for one celestial body."""
    position: CelestialPosition
    dome_projection: ProjectionPoint
    atmosphere_spot: AtmosphereSpot

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "position": self.position.to_dict(),
            "domeProjection": self.dome_projection.to_dict(),
            "atmosphereSpot": self.atmosphere_spot.to_dict(),
        }


@dataclass(frozen=True)
class ShadowModelState:
    """Result of the alternate rock-shadow model."""
    shadow: ProjectionPoint
    alignment: AlignmentResult

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "shadow": self.shadow.to_dict(),
            "alignment": self.alignment.to_dict(),
        }


@dataclass(frozen=True)
class SkyState:
    """Snapshot of the sky at one moment."""
    time: TimeParameters
    sun: BodyState
    moon: BodyState
    alignment: AlignmentResult
    shadow_model: Optional[ShadowModelState] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict for the renderer."""
        data = {
            "time": self.time.to_dict(),
            "sun": self.sun.to_dict(),
            "moon": self.moon.to_dict(),
            "alignment": self.alignment.to_dict(),
        }
        if self.shadow_model is not None:
            data["shadowModel"] = self.shadow_model.to_dict()
        return data


def _body_state(position: CelestialPosition, config: Config) -> BodyState:
    projection = project_to_dome(position, config)
    return BodyState(
        position=position,
        dome_projection=projection,
        atmosphere_spot=project_to_atmosphere(projection, config),
    )


def compute_sky_state(
    params: TimeParameters,
    config: Optional[Config] = None,
    include_shadow_model: bool = False,
) -> SkyState:
    """Evaluate the whole pipeline for one moment.

    Args:
        params: Time parameters, already in their canonical domains
        config: Configuration (uses global config if None)
        include_shadow_model: Also evaluate the rock-shadow model

    Returns:
        SkyState snapshot
    """
    if config is None:
        config = get_config()

    sun_pos = position_of_sun(params.day_of_year, params.hour_of_day, config)
    moon_pos = position_of_moon(
        params.day_of_year, params.hour_of_day, params.moon_phase_day, config
    )

    sun = _body_state(sun_pos, config)
    moon = _body_state(moon_pos, config)

    alignment = classify_alignment(
        sun.position, moon.position, sun.atmosphere_spot, moon.atmosphere_spot, config
    )

    shadow_model = None
    if include_shadow_model:
        shadow = shadow_position(sun_pos, config)
        shadow_model = ShadowModelState(
            shadow=shadow,
            alignment=classify_shadow_alignment(sun_pos, moon_pos, shadow, config),
        )

    return SkyState(
        time=params,
        sun=sun,
        moon=moon,
        alignment=alignment,
        shadow_model=shadow_model,
    )
