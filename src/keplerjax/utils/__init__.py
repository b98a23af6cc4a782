"""Shared utility functions for keplerjax.

Provides angle conversion and planar rotation helpers.
"""

from keplerjax.utils._angle import from_radians, rotate_2d, to_radians

__all__ = [
    "from_radians",
    "rotate_2d",
    "to_radians",
]
