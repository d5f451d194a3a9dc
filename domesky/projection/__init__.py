"""Dome and atmosphere projection module."""

from domesky.projection.dome import DegenerateGeometryError, ProjectionPoint, project_to_dome
from domesky.projection.atmosphere import AtmosphereSpot, project_to_atmosphere
from domesky.projection.shadow import shadow_position

__all__ = [
    "DegenerateGeometryError",
    "ProjectionPoint",
    "project_to_dome",
    "AtmosphereSpot",
    "project_to_atmosphere",
    "shadow_position",
]
