"""Shadow of the central magnetic rock (alternate eclipse model).

In this model the sun casts a shadow past the top of the magnetic rock at
the world's centre, and the shadow lands on the dome ceiling plane. It is an
alternative to the dome-projection model and is kept separate from it.
"""

from typing import Optional

import numpy as np

from domesky.config import Config, get_config
from domesky.dynamics.orbit import CelestialPosition
from domesky.projection.dome import DegenerateGeometryError, ProjectionPoint


_MIN_NORM = 1e-9


def shadow_position(
    sun_pos: CelestialPosition,
    config: Optional[Config] = None,
) -> ProjectionPoint:
    """Intersect the sun/rock-top line with the plane z = dome_height.

    Args:
        sun_pos: Sun position
        config: Configuration (uses global config if None)

    Returns:
        ProjectionPoint on the dome ceiling plane

    Raises:
        DegenerateGeometryError: If the sun sits on the rock top or the line
            runs parallel to the ceiling plane
    """
    if config is None:
        config = get_config()
    world = config.world

    rock_top = np.array([0.0, 0.0, world.magnetic_rock_height])
    direction = rock_top - sun_pos.as_array()

    length = float(np.linalg.norm(direction))
    if length < _MIN_NORM:
        raise DegenerateGeometryError("Sun coincides with the magnetic rock top")
    unit = direction / length

    if abs(unit[2]) < _MIN_NORM:
        raise DegenerateGeometryError("Shadow ray is parallel to the dome ceiling")

    t = (world.dome_height - world.magnetic_rock_height) / unit[2]

    return ProjectionPoint(
        x=float(unit[0] * t),
        y=float(unit[1] * t),
        z=float(world.dome_height),
    )
