"""Synthetic calendar time parameters.

The calculators never validate their time inputs. Callers wrap raw slider or
animation values into the canonical domains with normalize_time_parameters()
before evaluating the sky.

Canonical domains:
- day_of_year: 1..days_per_year (wraps days_per_year + 1 -> 1)
- hour_of_day: [0, hours_per_day)
- moon_phase_day: [0, moon_cycle_days)
"""

import math
from dataclasses import dataclass
from typing import Optional

from domesky.config import Config, get_config


@dataclass(frozen=True)
class TimeParameters:
    """Moment in the synthetic calendar."""
    day_of_year: int
    hour_of_day: float
    moon_phase_day: float

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "dayOfYear": self.day_of_year,
            "hourOfDay": self.hour_of_day,
            "moonPhaseDay": self.moon_phase_day,
        }


def _require_finite(name: str, value: float) -> float:
    """Convert to float, rejecting inf and NaN."""
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


def _wrap_real(value: float, period: float) -> float:
    """Wrap a real value into [0, period)."""
    wrapped = float(value) % period
    # Tiny negative inputs round up to exactly `period`
    if wrapped >= period:
        wrapped = 0.0
    return wrapped


def wrap_day_of_year(day_of_year: int, days_per_year: int = 365) -> int:
    """Wrap a day number into 1..days_per_year."""
    return (int(day_of_year) - 1) % days_per_year + 1


def normalize_time_parameters(
    day_of_year: int,
    hour_of_day: float,
    moon_phase_day: float,
    config: Optional[Config] = None,
) -> TimeParameters:
    """Wrap raw time inputs into their canonical domains.

    Args:
        day_of_year: Day number (any integer)
        hour_of_day: Hour of day (any real, fractional minutes kept)
        moon_phase_day: Day within the lunar cycle (any real)
        config: Configuration (uses global config if None)

    Returns:
        TimeParameters inside the canonical domains

    Raises:
        ValueError: If any input is infinite or NaN
    """
    if config is None:
        config = get_config()
    cal = config.calendar

    if not isinstance(day_of_year, int):
        day_of_year = _require_finite("day_of_year", day_of_year)
    hour_of_day = _require_finite("hour_of_day", hour_of_day)
    moon_phase_day = _require_finite("moon_phase_day", moon_phase_day)

    return TimeParameters(
        day_of_year=wrap_day_of_year(day_of_year, cal.days_per_year),
        hour_of_day=_wrap_real(hour_of_day, cal.hours_per_day),
        moon_phase_day=_wrap_real(moon_phase_day, cal.moon_cycle_days),
    )


def advance_time(
    params: TimeParameters,
    hours: Optional[float] = None,
    config: Optional[Config] = None,
) -> TimeParameters:
    """Advance the clock the way the animation loop does.

    The hour grows by `hours` (one animation step by default). Each time it
    passes the end of the day it restarts at 0 and the day counter moves on,
    wrapping after the last day of the year. The moon phase is left alone.

    Args:
        params: Current time
        hours: Hours to advance (defaults to calendar.animation_hour_step)
        config: Configuration (uses global config if None)

    Returns:
        New TimeParameters

    Raises:
        ValueError: If hours is negative, infinite or NaN
    """
    if config is None:
        config = get_config()
    cal = config.calendar

    if hours is None:
        hours = cal.animation_hour_step
    hours = _require_finite("hours", hours)
    if hours < 0:
        raise ValueError("hours must be non-negative")

    days, hour = divmod(params.hour_of_day + hours, cal.hours_per_day)
    day = params.day_of_year + int(days)

    return TimeParameters(
        day_of_year=wrap_day_of_year(day, cal.days_per_year),
        hour_of_day=hour,
        moon_phase_day=params.moon_phase_day,
    )
