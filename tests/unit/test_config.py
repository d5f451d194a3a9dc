"""Tests for configuration loading."""

import json
from dataclasses import FrozenInstanceError, replace

import pytest

from domesky.config import (
    AlignmentConfig,
    Config,
    ServerConfig,
    WorldGeometryConfig,
    get_config,
    load_config,
    set_config,
    validate_config,
)


class TestLoadConfig:
    """Tests for load_config."""

    def test_none_returns_defaults(self):
        assert load_config(None) == Config()

    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.json") == Config()

    def test_defaults_match_world(self):
        config = Config()
        assert config.world.dome_radius == 20000.0
        assert config.world.light_spot_size == 800.0
        assert config.sun.orbit_height == 3500.0
        assert config.moon.orbit_height == 3000.0
        assert (config.sun.min_radius, config.sun.max_radius) == (5000.0, 14000.0)
        assert (config.moon.min_radius, config.moon.max_radius) == (8000.0, 12000.0)
        assert config.calendar.moon_cycle_days == 29.5

    def test_partial_override(self, tmp_path):
        """Only the given keys change, the rest keep their defaults."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "sun": {"min_radius": 6000},
            "calendar": {"moon_cycle_days": 30},
            "alignment": {"opposition_min_deg": 160},
        }))

        config = load_config(path)

        assert config.sun.min_radius == 6000.0
        assert type(config.sun.min_radius) is float
        assert config.sun.max_radius == 14000.0
        assert config.calendar.moon_cycle_days == 30.0
        assert config.alignment.opposition_min_deg == 160.0
        assert config.moon.min_radius == 8000.0

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"spacecraft": {"mass": 10}, "world": {"colour": "blue"}}))
        assert load_config(path) == Config()

    def test_invalid_orbit_raises(self, tmp_path):
        """Zero minimum radius would allow a body at the origin."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"moon": {"min_radius": 0}}))
        with pytest.raises(ValueError):
            load_config(path)

    def test_inverted_range_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"sun": {"min_radius": 9000, "max_radius": 8000}}))
        with pytest.raises(ValueError):
            load_config(path)


class TestValidateConfig:
    """Tests for validate_config."""

    def test_defaults_valid(self):
        validate_config(Config())

    def test_inverted_window_raises(self):
        config = Config(alignment=AlignmentConfig(opposition_max_deg=160.0))
        with pytest.raises(ValueError):
            validate_config(config)

    def test_inverted_eclipse_bands_raise(self):
        config = Config(alignment=AlignmentConfig(partial_eclipse_factor=0.25))
        with pytest.raises(ValueError):
            validate_config(config)

    @pytest.mark.parametrize("server", [
        ServerConfig(telemetry_rate=0.0),
        ServerConfig(time_warp=float("inf")),
        ServerConfig(time_warp=float("nan")),
    ])
    def test_invalid_server_settings_raise(self, server):
        with pytest.raises(ValueError):
            validate_config(Config(server=server))


class TestGlobalConfig:
    """Tests for the global config instance."""

    def test_set_and_get(self):
        previous = get_config()
        custom = Config(world=WorldGeometryConfig(light_spot_size=500.0))
        try:
            set_config(custom)
            assert get_config().world.light_spot_size == 500.0
        finally:
            set_config(previous)

    def test_set_invalid_raises(self):
        custom = replace(Config(), world=WorldGeometryConfig(dome_radius=-1.0))
        with pytest.raises(ValueError):
            set_config(custom)


class TestConfigImmutability:
    """Config objects are frozen once built."""

    def test_section_field_assignment_raises(self):
        config = Config()
        with pytest.raises(FrozenInstanceError):
            config.world.dome_radius = 1.0

    def test_root_field_assignment_raises(self):
        config = Config()
        with pytest.raises(FrozenInstanceError):
            config.sun = config.moon

    def test_loading_overrides_leaves_defaults_untouched(self, tmp_path):
        """Overrides build new sections instead of editing shared ones."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"world": {"light_spot_size": 400}}))

        loaded = load_config(path)

        assert loaded.world.light_spot_size == 400.0
        assert Config().world.light_spot_size == 800.0
