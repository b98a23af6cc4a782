"""Celestial bodies.

This sub-module provides :class:`CelestialObject`, the mass carrier used
as the parent (and optionally the orbiter) of a Keplerian orbit.
"""

from .celestial_object import CelestialObject

__all__ = [
    "CelestialObject",
]
