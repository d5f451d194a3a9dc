"""Projection of celestial bodies onto the dome.

The dome is a hemisphere centred on the world's origin, so a ray cast from
the origin through a body always meets it at exactly dome_radius along the
unit direction. Only the upper hemisphere exists; directions below the
horizon are clamped onto the rim (z = 0).
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from domesky.config import Config, get_config
from domesky.dynamics.orbit import CelestialPosition


# Shorter vectors are treated as zero length
_MIN_DIRECTION_NORM = 1e-9


class DegenerateGeometryError(ValueError):
    """Ray has no defined direction (e.g. body sits at the origin)."""


@dataclass(frozen=True)
class ProjectionPoint:
    """Point on the dome surface (or a dome-level plane for the shadow variant)."""
    x: float
    y: float
    z: float

    def as_array(self) -> NDArray[np.float64]:
        """Position vector [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {"x": self.x, "y": self.y, "z": self.z}


def project_to_dome(
    position: Union[CelestialPosition, NDArray[np.float64]],
    config: Optional[Config] = None,
) -> ProjectionPoint:
    """Intersect the ray origin -> position with the dome.

    Args:
        position: Body position (CelestialPosition or [x, y, z] array)
        config: Configuration (uses global config if None)

    Returns:
        ProjectionPoint with |p| == dome_radius and z >= 0

    Raises:
        DegenerateGeometryError: If position is at the origin, or points
            straight down so no horizon point exists
    """
    if config is None:
        config = get_config()
    dome_radius = config.world.dome_radius

    if isinstance(position, CelestialPosition):
        vec = position.as_array()
    else:
        vec = np.asarray(position, dtype=np.float64)

    norm = float(np.linalg.norm(vec))
    if norm < _MIN_DIRECTION_NORM:
        raise DegenerateGeometryError("Cannot project a position at the world origin")

    direction = vec / norm

    if direction[2] < 0:
        # Below the horizon: keep the azimuth, drop onto the rim
        horizontal = direction[:2]
        horizontal_norm = float(np.linalg.norm(horizontal))
        if horizontal_norm < _MIN_DIRECTION_NORM:
            raise DegenerateGeometryError("Direction points straight down, no horizon point")
        direction = np.array([*(horizontal / horizontal_norm), 0.0])

    point = direction * dome_radius

    return ProjectionPoint(
        x=float(point[0]),
        y=float(point[1]),
        z=float(point[2]),
    )
