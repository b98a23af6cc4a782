"""Massive bodies that anchor or follow Keplerian orbits.

Provides the ``CelestialObject`` class, which stores a body's
gravitational parameter ``mu = m * G`` and answers simple two-body
velocity questions (escape velocity, altitude change).

The mass is never stored: ``get_mass`` derives it from the gravitational
parameter.  No domain checks are performed, so zero or negative radii
propagate as IEEE-754 ``inf``/``nan`` rather than raising.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from keplerjax.config import get_dtype
from keplerjax.constants import G


class CelestialObject:
    """A body characterised by its gravitational parameter.

    This class is registered as a JAX pytree with the gravitational
    parameter as the sole leaf and no auxiliary data, so instances can be
    passed through ``jax.jit`` and ``jax.vmap``.

    Args:
        mass (float): Mass of the body. Units: *kg*

    Examples:
        ```python
        from keplerjax.bodies import CelestialObject
        sun = CelestialObject(1.989e30)
        v_esc = sun.escape_velocity(6.957e8)
        ```
    """

    __slots__ = ('_gm',)

    def __init__(self, mass: ArrayLike = 0.0) -> None:
        self.set_mass(mass)

    @classmethod
    def from_gravitational_parameter(cls, gm: ArrayLike) -> CelestialObject:
        """Create directly from a gravitational parameter.

        Args:
            gm (ArrayLike): Gravitational parameter. Units: *m^3/s^2*

        Returns:
            CelestialObject: New instance.
        """
        return cls._from_internal(jnp.asarray(gm, dtype=get_dtype()))

    @classmethod
    def _from_internal(cls, gm) -> CelestialObject:
        """Create from a raw gravitational parameter without dtype coercion.

        Used by pytree unflatten.
        """
        obj = object.__new__(cls)
        obj._gm = gm
        return obj

    @property
    def gravitational_parameter(self) -> Array:
        """Gravitational parameter ``mu = m * G``. Units: *m^3/s^2*"""
        return self._gm

    def set_mass(self, mass: ArrayLike) -> CelestialObject:
        """Set the mass of the body, recomputing its gravitational parameter.

        Args:
            mass (ArrayLike): Mass of the body. Units: *kg*

        Returns:
            CelestialObject: ``self``, for chaining.
        """
        self._gm = jnp.asarray(mass, dtype=get_dtype()) * G
        return self

    def get_mass(self) -> Array:
        """Return the mass of the body. Units: *kg*"""
        return self._gm / G

    def escape_velocity(self, radius: ArrayLike) -> Array:
        """Compute the escape velocity at a distance from the body's centre.

        A zero radius yields ``inf``.

        Args:
            radius (ArrayLike): Distance from the centre of the body. Units: *m*

        Returns:
            Escape velocity ``sqrt(2 mu / r)``. Units: *m/s*
        """
        radius = jnp.asarray(radius, dtype=get_dtype())
        return jnp.sqrt(2.0 * self._gm / radius)

    def altitude_delta_velocity(self, r_from: ArrayLike, r_to: ArrayLike) -> Array:
        """Compute the minimum velocity change to move between two radii.

        The result is signed: positive when raising the altitude
        (``r_from <= r_to``), negative when lowering it.

        Args:
            r_from (ArrayLike): Starting distance from the centre. Units: *m*
            r_to (ArrayLike): Target distance from the centre. Units: *m*

        Returns:
            Signed velocity change. Units: *m/s*

        Examples:
            ```python
            from keplerjax.bodies import CelestialObject
            earth = CelestialObject(5.972e24)
            dv_up = earth.altitude_delta_velocity(6.7e6, 4.2e7)   # > 0
            dv_down = earth.altitude_delta_velocity(4.2e7, 6.7e6) # < 0
            ```
        """
        r_from = jnp.asarray(r_from, dtype=get_dtype())
        r_to = jnp.asarray(r_to, dtype=get_dtype())
        dv = jnp.sqrt(2.0 * self._gm * jnp.abs(1.0 / r_from - 1.0 / r_to))
        return jnp.where(r_from <= r_to, dv, -dv)

    def __repr__(self) -> str:
        return f"CelestialObject(mass={float(self.get_mass())})"


# Register as JAX pytree
jax.tree_util.register_pytree_node(
    CelestialObject,
    lambda body: ((body._gm,), None),
    lambda _, children: CelestialObject._from_internal(children[0]),
)
