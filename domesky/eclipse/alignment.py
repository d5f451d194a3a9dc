"""Sun/moon alignment and eclipse classification.

Classification is stateless and recomputed on every call:

1. Azimuth of each body around the central axis (atan2, degrees).
2. Difference moon - sun normalized into (-180, 180].
3. Outside the near-opposition window -> NONE.
4. Inside it, the planar distance between the two light spots decides:
   d < full_factor * spot_size        -> FULL_ECLIPSE
   d < partial_factor * spot_size     -> PARTIAL_ECLIPSE
   otherwise                          -> OPPOSITION

The thresholds are empirical visualization tuning and live in
AlignmentConfig.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import numpy as np

from domesky.config import AlignmentConfig, Config, get_config
from domesky.dynamics.orbit import CelestialPosition
from domesky.projection.atmosphere import AtmosphereSpot
from domesky.projection.dome import ProjectionPoint


class AlignmentStatus(str, Enum):
    """Alignment of the sun and moon."""

    NONE = "none"
    OPPOSITION = "opposition"
    PARTIAL_ECLIPSE = "partial_eclipse"
    FULL_ECLIPSE = "full_eclipse"


# User-facing labels and info-panel styles per status
STATUS_LABELS: dict[AlignmentStatus, dict[str, Any]] = {
    AlignmentStatus.NONE: {
        "label": "",
        "style": None,
    },
    AlignmentStatus.FULL_ECLIPSE: {
        "label": "Full lunar eclipse!",
        "style": {"className": "eclipse-warning", "background": "#ffebee", "color": "#c62828"},
    },
    AlignmentStatus.PARTIAL_ECLIPSE: {
        "label": "Partial eclipse",
        "style": {"className": "eclipse-warning", "background": "#fff3e0", "color": "#e65100"},
    },
    AlignmentStatus.OPPOSITION: {
        "label": "Opposition (eclipse possible)",
        "style": {"className": "eclipse-warning", "background": "#e3f2fd", "color": "#1565c0"},
    },
}


@dataclass(frozen=True)
class AlignmentResult:
    """Result of an alignment classification."""

    angle_diff_deg: float  # moon - sun azimuth, in (-180, 180]
    status: AlignmentStatus
    spot_distance: Optional[float] = None  # Only measured near opposition

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        # Ties round up (-2.5 -> -2), not to even
        return {
            "angleDiff": math.floor(self.angle_diff_deg + 0.5),
            "angleDiffRaw": self.angle_diff_deg,
            "status": self.status.value,
            "spotDistance": self.spot_distance,
            **status_label(self.status),
        }


def status_label(status: AlignmentStatus) -> dict[str, Any]:
    """Get the display label and style for a status."""
    return dict(STATUS_LABELS[status])


def azimuth_deg(x: float, y: float) -> float:
    """Azimuth around the central axis in degrees, in [-180, 180]."""
    return float(np.degrees(np.arctan2(y, x)))


def angle_difference(sun_angle_deg: float, moon_angle_deg: float) -> float:
    """Moon minus sun azimuth, normalized once into (-180, 180].

    Args:
        sun_angle_deg: Sun azimuth in [-180, 180]
        moon_angle_deg: Moon azimuth in [-180, 180]

    Returns:
        Angular difference in degrees
    """
    diff = moon_angle_deg - sun_angle_deg
    if diff > 180.0:
        diff -= 360.0
    elif diff <= -180.0:
        diff += 360.0
    return diff


def is_near_opposition(angle_diff_deg: float, alignment: AlignmentConfig) -> bool:
    """Check if the bodies are roughly opposite each other."""
    magnitude = abs(angle_diff_deg)
    return alignment.opposition_min_deg < magnitude < alignment.opposition_max_deg


def _classify_distance(distance: float, full_limit: float, partial_limit: float) -> AlignmentStatus:
    if distance < full_limit:
        return AlignmentStatus.FULL_ECLIPSE
    if distance < partial_limit:
        return AlignmentStatus.PARTIAL_ECLIPSE
    return AlignmentStatus.OPPOSITION


def classify_alignment(
    sun_pos: CelestialPosition,
    moon_pos: CelestialPosition,
    sun_spot: AtmosphereSpot,
    moon_spot: AtmosphereSpot,
    config: Optional[Config] = None,
) -> AlignmentResult:
    """Classify sun/moon alignment from positions and light spots.

    Args:
        sun_pos: Sun position
        moon_pos: Moon position
        sun_spot: Sun light spot on the atmosphere
        moon_spot: Moon light spot on the atmosphere
        config: Configuration (uses global config if None)

    Returns:
        AlignmentResult with normalized angle difference and status
    """
    if config is None:
        config = get_config()
    alignment = config.alignment
    spot_size = config.world.light_spot_size

    diff = angle_difference(
        azimuth_deg(sun_pos.x, sun_pos.y),
        azimuth_deg(moon_pos.x, moon_pos.y),
    )

    if not is_near_opposition(diff, alignment):
        return AlignmentResult(angle_diff_deg=diff, status=AlignmentStatus.NONE)

    distance = sun_spot.horizontal_distance(moon_spot)
    status = _classify_distance(
        distance,
        full_limit=spot_size * alignment.full_eclipse_factor,
        partial_limit=spot_size * alignment.partial_eclipse_factor,
    )
    return AlignmentResult(angle_diff_deg=diff, status=status, spot_distance=distance)


def classify_shadow_alignment(
    sun_pos: CelestialPosition,
    moon_pos: CelestialPosition,
    shadow: ProjectionPoint,
    config: Optional[Config] = None,
) -> AlignmentResult:
    """Classify alignment with the rock-shadow model.

    Same opposition window as classify_alignment, but the moon itself is
    compared with the rock's shadow on the dome ceiling, against the umbra.

    Args:
        sun_pos: Sun position
        moon_pos: Moon position
        shadow: Shadow point from projection.shadow.shadow_position()
        config: Configuration (uses global config if None)

    Returns:
        AlignmentResult
    """
    if config is None:
        config = get_config()
    alignment = config.alignment

    diff = angle_difference(
        azimuth_deg(sun_pos.x, sun_pos.y),
        azimuth_deg(moon_pos.x, moon_pos.y),
    )

    if not is_near_opposition(diff, alignment):
        return AlignmentResult(angle_diff_deg=diff, status=AlignmentStatus.NONE)

    umbra_radius = alignment.umbra_diameter / 2.0
    distance = float(np.hypot(moon_pos.x - shadow.x, moon_pos.y - shadow.y))
    status = _classify_distance(
        distance,
        full_limit=umbra_radius,
        partial_limit=umbra_radius * alignment.shadow_partial_factor,
    )
    return AlignmentResult(angle_diff_deg=diff, status=status, spot_distance=distance)
