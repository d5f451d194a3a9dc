"""Orbital positions of the sun and moon.

Both bodies circle the world's central axis at a constant height. The sun's
orbital radius breathes over the year (smallest at the solstice day), the
moon's over the lunar cycle. The daily rotation angle sweeps 360 deg per day.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from domesky.config import Config, get_config


@dataclass(frozen=True)
class CelestialPosition:
    """Position of a celestial body at a given moment."""
    x: float  # Horizontal offset [km]
    y: float  # Horizontal offset [km]
    z: float  # Orbit height above the disc [km]
    radius: float  # Current orbital radius [km]

    def as_array(self) -> NDArray[np.float64]:
        """Position vector [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {"x": self.x, "y": self.y, "z": self.z, "radius": self.radius}


def _daily_angle_deg(hour_of_day: float, hours_per_day: float) -> float:
    return hour_of_day * 360.0 / hours_per_day


def position_of_sun(
    day_of_year: int,
    hour_of_day: float,
    config: Optional[Config] = None,
) -> CelestialPosition:
    """Calculate sun position.

    Args:
        day_of_year: Day number (1..365)
        hour_of_day: Hour of day [0, 24)
        config: Configuration (uses global config if None)

    Returns:
        CelestialPosition with radius in [sun.min_radius, sun.max_radius]
    """
    if config is None:
        config = get_config()
    orbit = config.sun
    cal = config.calendar

    year_angle = np.radians((day_of_year - cal.solstice_day) * 360.0 / cal.days_per_year)

    # Oscillates between min (at the solstice) and max (half a year later)
    radius = orbit.min_radius + (orbit.max_radius - orbit.min_radius) * (
        1.0 - np.cos(year_angle)
    ) / 2.0

    daily_angle = np.radians(_daily_angle_deg(hour_of_day, cal.hours_per_day))

    return CelestialPosition(
        x=float(radius * np.cos(daily_angle)),
        y=float(radius * np.sin(daily_angle)),
        z=float(orbit.orbit_height),
        radius=float(radius),
    )


def position_of_moon(
    day_of_year: int,
    hour_of_day: float,
    moon_phase_day: float,
    config: Optional[Config] = None,
) -> CelestialPosition:
    """Calculate moon position.

    The monthly angle both modulates the orbital radius and shifts the moon
    ahead of the sun's daily rotation. day_of_year does not influence the
    moon; it is accepted so both calculators share a call shape.

    Args:
        day_of_year: Day number (1..365), unused
        hour_of_day: Hour of day [0, 24)
        moon_phase_day: Day in the lunar cycle [0, 29.5)
        config: Configuration (uses global config if None)

    Returns:
        CelestialPosition with radius in [moon.min_radius, moon.max_radius]
    """
    if config is None:
        config = get_config()
    orbit = config.moon
    cal = config.calendar

    # Angle follows the synodic month even if the phase input wraps elsewhere
    monthly_angle_deg = moon_phase_day * 360.0 / cal.synodic_month_days
    monthly_angle = np.radians(monthly_angle_deg)

    mid = (orbit.min_radius + orbit.max_radius) / 2.0
    radius = mid + (orbit.max_radius - orbit.min_radius) * np.sin(monthly_angle) / 2.0

    daily_offset = np.radians(
        _daily_angle_deg(hour_of_day, cal.hours_per_day) + monthly_angle_deg
    )

    return CelestialPosition(
        x=float(radius * np.cos(daily_offset)),
        y=float(radius * np.sin(daily_offset)),
        z=float(orbit.orbit_height),
        radius=float(radius),
    )
