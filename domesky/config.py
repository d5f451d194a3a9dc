"""World and simulation configuration.

All world constants are defined here and can be overridden via config file.
Config objects are frozen; a reload replaces the global instance, it never
edits one in place. Components that must stay consistent (SkyEngine) keep
the instance they were built with.
"""

from dataclasses import dataclass, field, fields, is_dataclass, replace
from pathlib import Path
import json
import logging
import math
from typing import Any, Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorldGeometryConfig:
    """Fixed geometry of the disc world and its dome [km]."""
    earth_radius: float = 20000.0  # Disc radius
    dome_radius: float = 20000.0  # Bounding hemisphere radius (centred on origin)
    dome_height: float = 4000.0  # Dome ceiling used by the shadow variant
    atmosphere_height: float = 50.0  # Shell that light spots are dropped onto
    light_spot_size: float = 800.0  # Diameter of a light spot
    magnetic_rock_height: float = 60.0  # Central rock (shadow variant only)
    magnetic_rock_diameter: float = 180.0
    sun_diameter: float = 37.0
    moon_diameter: float = 36.0


@dataclass(frozen=True)
class BodyOrbitConfig:
    """Orbit of a celestial body (circle around the central axis)."""
    orbit_height: float = 3500.0  # Constant height above the disc [km]
    min_radius: float = 5000.0  # Orbital radius range [km]
    max_radius: float = 14000.0


def _default_moon_orbit() -> BodyOrbitConfig:
    return BodyOrbitConfig(orbit_height=3000.0, min_radius=8000.0, max_radius=12000.0)


@dataclass(frozen=True)
class CalendarConfig:
    """Synthetic calendar and time-domain boundaries."""
    days_per_year: int = 365
    hours_per_day: float = 24.0
    # Upper wrap boundary of the moon phase. Earlier variants used 30 (integer
    # slider); the orbital formula itself uses 29.5.
    moon_cycle_days: float = 29.5
    synodic_month_days: float = 29.5  # Period of the moon's monthly angle
    solstice_day: int = 355  # Day with the smallest sun orbit
    animation_hour_step: float = 0.1  # Hours advanced per animation tick


@dataclass(frozen=True)
class AlignmentConfig:
    """Eclipse classification thresholds (empirical visualization tuning)."""
    opposition_min_deg: float = 170.0  # |angle diff| must be strictly inside
    opposition_max_deg: float = 190.0  # (min, max) to count as opposition
    full_eclipse_factor: float = 0.5  # d < factor * light_spot_size
    partial_eclipse_factor: float = 1.0  # d < factor * light_spot_size

    # Shadow-through-rock variant
    umbra_diameter: float = 144.0
    shadow_partial_factor: float = 1.5


@dataclass(frozen=True)
class ServerConfig:
    """Host service parameters."""
    telemetry_rate: float = 10.0  # WebSocket push rate [Hz]
    time_warp: float = 1.0  # Default animation speed multiplier


@dataclass(frozen=True)
class Config:
    """Root configuration."""
    world: WorldGeometryConfig = field(default_factory=WorldGeometryConfig)
    sun: BodyOrbitConfig = field(default_factory=BodyOrbitConfig)
    moon: BodyOrbitConfig = field(default_factory=_default_moon_orbit)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    alignment: AlignmentConfig = field(default_factory=AlignmentConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def _apply_overrides(section: Any, values: dict) -> Any:
    """Return a copy of a config section with known keys from a JSON dict."""
    changes = {}
    for f in fields(section):
        if f.name not in values:
            continue
        current = getattr(section, f.name)
        if is_dataclass(current):
            changes[f.name] = _apply_overrides(current, values[f.name])
        else:
            changes[f.name] = type(current)(values[f.name])
    return replace(section, **changes)


def validate_config(config: Config) -> None:
    """Check invariants the geometry engine relies on.

    Raises:
        ValueError: If an orbit range or world dimension is invalid
    """
    for name in ("sun", "moon"):
        orbit: BodyOrbitConfig = getattr(config, name)
        if orbit.min_radius <= 0:
            raise ValueError(f"{name}.min_radius must be positive")
        if orbit.max_radius < orbit.min_radius:
            raise ValueError(f"{name}.max_radius must be >= {name}.min_radius")

    if config.world.dome_radius <= 0:
        raise ValueError("world.dome_radius must be positive")
    if config.world.light_spot_size <= 0:
        raise ValueError("world.light_spot_size must be positive")
    if config.calendar.days_per_year < 1:
        raise ValueError("calendar.days_per_year must be >= 1")
    cal = config.calendar
    if min(cal.hours_per_day, cal.moon_cycle_days, cal.synodic_month_days) <= 0:
        raise ValueError("calendar periods must be positive")

    align = config.alignment
    if align.opposition_max_deg <= align.opposition_min_deg:
        raise ValueError("alignment.opposition_max_deg must exceed opposition_min_deg")
    if align.partial_eclipse_factor < align.full_eclipse_factor:
        raise ValueError("alignment.partial_eclipse_factor must be >= full_eclipse_factor")

    server = config.server
    for name in ("telemetry_rate", "time_warp"):
        value = getattr(server, name)
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"server.{name} must be a positive finite number")


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from JSON file or return defaults.

    Args:
        path: Path to config JSON file. If None, returns defaults.

    Returns:
        Configuration object

    Raises:
        ValueError: If the loaded values violate geometry invariants
    """
    if path is None or not path.exists():
        return Config()

    with open(path) as f:
        data = json.load(f)

    config = _apply_overrides(Config(), data)
    validate_config(config)

    logger.info("Loaded configuration from %s", path)
    return config


# Default config file path
CONFIG_FILE = Path(__file__).parent.parent / "config.json"

# Global state
_config: Optional[Config] = None
_config_mtime: float = 0.0
_on_config_change_callbacks: list = []


def get_config() -> Config:
    """Get global configuration instance.

    Auto-loads from config.json if it exists.
    """
    global _config, _config_mtime

    if _config is None:
        _config, _config_mtime = _load_config_with_mtime()

    return _config


def set_config(config: Config) -> None:
    """Set global configuration instance."""
    global _config
    validate_config(config)
    _config = config


def reload_config() -> Config:
    """Force reload configuration from file."""
    global _config, _config_mtime
    _config, _config_mtime = _load_config_with_mtime()
    return _config


def check_config_changed() -> bool:
    """Check if config file has changed since last load.

    Returns:
        True if config file was modified and config was reloaded
    """
    global _config_mtime

    if not CONFIG_FILE.exists():
        return False

    current_mtime = CONFIG_FILE.stat().st_mtime
    if current_mtime > _config_mtime:
        reload_config()
        logger.info("Configuration file changed, reloaded")
        for callback in _on_config_change_callbacks:
            callback()
        return True

    return False


def on_config_change(callback) -> None:
    """Register a callback to be called when config changes."""
    _on_config_change_callbacks.append(callback)


def _load_config_with_mtime() -> tuple[Config, float]:
    """Load config and return with file mtime."""
    if CONFIG_FILE.exists():
        mtime = CONFIG_FILE.stat().st_mtime
        config = load_config(CONFIG_FILE)
        return config, mtime
    else:
        return Config(), 0.0
