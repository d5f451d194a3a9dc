"""Sky engine for the dome sky simulator.

Holds the current calendar time and animation state on behalf of the
renderer and caches the last evaluated sky. All geometry is delegated to the
pure pipeline in domesky.simulation.sky.
"""

import logging
import math
import time
from enum import Enum, auto
from typing import Optional

from domesky.config import Config, get_config
from domesky.dynamics.time_parameters import (
    TimeParameters,
    advance_time,
    normalize_time_parameters,
)
from domesky.simulation.sky import SkyState, compute_sky_state


logger = logging.getLogger(__name__)

# Initial time shown when the page opens (summer solstice, noon, full moon)
DEFAULT_DAY_OF_YEAR = 172
DEFAULT_HOUR_OF_DAY = 12.0
DEFAULT_MOON_PHASE_DAY = 15.0

# Ticks applied at most in one tick() call after a stall
MAX_CATCH_UP_STEPS = 10


def _check_time_warp(time_warp: float) -> float:
    time_warp = float(time_warp)
    if not math.isfinite(time_warp) or time_warp <= 0:
        raise ValueError("time_warp must be a positive finite number")
    return time_warp


class EngineState(Enum):
    """Animation state enumeration."""
    STOPPED = auto()
    RUNNING = auto()
    PAUSED = auto()


class SkyEngine:
    """Main sky engine.

    Attributes:
        time: Current time parameters
        state: Current animation state
        steps: Number of animation ticks applied since the last reset
    """

    def __init__(
        self,
        time_warp: Optional[float] = None,
        config: Optional[Config] = None,
        include_shadow_model: bool = False,
    ):
        """Initialize sky engine.

        Args:
            time_warp: Animation speed multiplier (overrides config)
            config: Configuration object (uses global config if None)
            include_shadow_model: Also evaluate the rock-shadow model
        """
        if config is None:
            config = get_config()

        self._config = config
        self._time_warp = _check_time_warp(
            time_warp if time_warp is not None else config.server.time_warp
        )
        self._include_shadow_model = include_shadow_model

        self.state = EngineState.STOPPED
        self.steps = 0
        self.time = self._initial_time()

        self._cached_sky: Optional[SkyState] = None
        self._last_tick: Optional[float] = None

    def _initial_time(self) -> TimeParameters:
        return normalize_time_parameters(
            DEFAULT_DAY_OF_YEAR,
            DEFAULT_HOUR_OF_DAY,
            DEFAULT_MOON_PHASE_DAY,
            self._config,
        )

    @property
    def config(self) -> Config:
        """Get engine configuration."""
        return self._config

    @property
    def time_warp(self) -> float:
        """Get current time warp factor."""
        return self._time_warp

    def set_time_warp(self, time_warp: float) -> None:
        """Set time warp factor.

        Args:
            time_warp: Speed multiplier (must be positive and finite)

        Raises:
            ValueError: If time_warp is not positive or not finite
        """
        self._time_warp = _check_time_warp(time_warp)

    def start(self) -> None:
        """Start or resume animation."""
        if self.state != EngineState.RUNNING:
            self._last_tick = None
        self.state = EngineState.RUNNING
        logger.debug("Sky animation started")

    def pause(self) -> None:
        """Pause animation."""
        if self.state == EngineState.RUNNING:
            self.state = EngineState.PAUSED

    def stop(self) -> None:
        """Stop animation."""
        self.state = EngineState.STOPPED
        self._last_tick = None

    def reset(self) -> None:
        """Reset time to the initial moment and stop."""
        self.state = EngineState.STOPPED
        self.steps = 0
        self.time = self._initial_time()
        self._cached_sky = None
        self._last_tick = None

    def set_time(
        self,
        day_of_year: Optional[int] = None,
        hour_of_day: Optional[float] = None,
        moon_phase_day: Optional[float] = None,
    ) -> TimeParameters:
        """Set any of the time parameters (slider input).

        Values are wrapped into their canonical domains.

        Returns:
            The new time parameters
        """
        self.time = normalize_time_parameters(
            day_of_year if day_of_year is not None else self.time.day_of_year,
            hour_of_day if hour_of_day is not None else self.time.hour_of_day,
            moon_phase_day if moon_phase_day is not None else self.time.moon_phase_day,
            self._config,
        )
        self._cached_sky = None
        return self.time

    def step(self) -> None:
        """Advance animation by one tick.

        Only advances if the animation is running.
        """
        if self.state != EngineState.RUNNING:
            return

        hours = self._config.calendar.animation_hour_step * self._time_warp
        self.time = advance_time(self.time, hours, self._config)
        self.steps += 1
        self._cached_sky = None

    def tick(self, now: Optional[float] = None) -> int:
        """Apply the animation ticks due at wall-clock time `now`.

        Ticks happen at server.telemetry_rate no matter how many callers
        poll the engine. The first call after start steps at once. After a
        stall at most MAX_CATCH_UP_STEPS ticks are applied and the rest are
        dropped.

        Args:
            now: Monotonic time [s] (uses time.monotonic() if None)

        Returns:
            Number of ticks applied
        """
        if self.state != EngineState.RUNNING:
            self._last_tick = None
            return 0

        if now is None:
            now = time.monotonic()

        if self._last_tick is None:
            self._last_tick = now
            self.step()
            return 1

        interval = 1.0 / self._config.server.telemetry_rate
        due = int((now - self._last_tick) // interval)
        if due <= 0:
            return 0
        if due > MAX_CATCH_UP_STEPS:
            due = MAX_CATCH_UP_STEPS
            self._last_tick = now
        else:
            self._last_tick += due * interval

        for _ in range(due):
            self.step()
        return due

    def get_sky(self) -> SkyState:
        """Get the sky at the current time (cached until time changes)."""
        if self._cached_sky is None:
            self._cached_sky = compute_sky_state(
                self.time,
                self._config,
                include_shadow_model=self._include_shadow_model,
            )
        return self._cached_sky

    def get_telemetry(self) -> dict:
        """Get JSON-serializable snapshot for the renderer and info panel."""
        return {
            "state": self.state.name,
            "timeWarp": self._time_warp,
            "steps": self.steps,
            **self.get_sky().to_dict(),
        }
