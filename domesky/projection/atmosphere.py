"""Light spots on the atmosphere shell.

A body's light spot falls straight down from its dome projection onto the
atmosphere shell. This is a vertical drop, not a reflection.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from domesky.config import Config, get_config
from domesky.projection.dome import ProjectionPoint


@dataclass(frozen=True)
class AtmosphereSpot:
    """Light spot position on the atmosphere shell."""
    x: float
    y: float
    z: float

    def horizontal_distance(self, other: "AtmosphereSpot") -> float:
        """Planar distance to another spot (ignores z)."""
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {"x": self.x, "y": self.y, "z": self.z}


def project_to_atmosphere(
    dome_projection: ProjectionPoint,
    config: Optional[Config] = None,
) -> AtmosphereSpot:
    """Drop a dome point vertically onto the atmosphere shell.

    Args:
        dome_projection: Point on the dome
        config: Configuration (uses global config if None)

    Returns:
        AtmosphereSpot with the same (x, y) and z = atmosphere_height
    """
    if config is None:
        config = get_config()

    return AtmosphereSpot(
        x=dome_projection.x,
        y=dome_projection.y,
        z=float(config.world.atmosphere_height),
    )
