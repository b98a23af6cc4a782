"""Planar Keplerian orbit descriptor.

Provides the ``KeplerianOrbit`` class, which holds the shape and
orientation of a two-dimensional conic orbit (semi-major axis,
eccentricity, argument of periapsis, winding direction) and derives its
geometry: semi-minor axis, focal distance, directrix, semi-latus rectum,
apsides, period and specific energy.

The orbit carries no position.  Positions are expressed by the anomaly
types in :mod:`keplerjax.orbits.anomaly`, which take an orbit as context.
Points produced by the anomalies live in the orbit plane with periapsis
along +x; :meth:`KeplerianOrbit.rotate_point` is the single place where
winding direction and argument of periapsis are applied.

Parabolic and hyperbolic shapes (``e >= 1``) are only partially handled
(semi-latus rectum, energy, true-anomaly radius).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from keplerjax.config import get_dtype
from keplerjax.utils import rotate_2d

if TYPE_CHECKING:
    from keplerjax.bodies import CelestialObject
    from keplerjax.orbits.anomaly import MeanAnomaly


class KeplerianOrbit:
    """Shape and orientation of a planar Keplerian orbit.

    The semi-major axis and eccentricity are stored as absolute values;
    their signs carry no geometric meaning.  Instances are immutable.

    This class is registered as a JAX pytree.  The semi-major axis,
    eccentricity and argument of periapsis are leaves; the winding
    direction is static auxiliary data.

    Args:
        semimajor_axis (float): Half the distance between apoapsis and periapsis.
        eccentricity (float): Shape of the conic. ``0`` circle, ``(0, 1)``
            ellipse, ``1`` parabola, ``> 1`` hyperbola.
        argument_of_periapsis (float): Orientation of periapsis in the
            plane. Units: *rad*
        clockwise (bool): If ``True`` the body travels clockwise in the
            parent frame.

    Examples:
        ```python
        from keplerjax.orbits import KeplerianOrbit
        orbit = KeplerianOrbit(2.0, 0.5)
        rp, ra = orbit.periapsis(), orbit.apoapsis()  # 1.0, 3.0
        ```
    """

    __slots__ = ('_a', '_e', '_argp', '_clockwise')

    def __init__(
        self,
        semimajor_axis: ArrayLike,
        eccentricity: ArrayLike = 0.0,
        argument_of_periapsis: ArrayLike = 0.0,
        clockwise: bool = False,
    ) -> None:
        _float = get_dtype()
        self._a = jnp.abs(jnp.asarray(semimajor_axis, dtype=_float))
        self._e = jnp.abs(jnp.asarray(eccentricity, dtype=_float))
        self._argp = jnp.asarray(argument_of_periapsis, dtype=_float)
        self._clockwise = bool(clockwise)

    @classmethod
    def _from_internal(cls, a, e, argp, clockwise: bool) -> KeplerianOrbit:
        """Create from raw leaves without coercion.

        Used by pytree unflatten.
        """
        obj = object.__new__(cls)
        obj._a = a
        obj._e = e
        obj._argp = argp
        obj._clockwise = clockwise
        return obj

    @classmethod
    def from_apsides(
        cls,
        periapsis: ArrayLike,
        apoapsis: ArrayLike,
        argument_of_periapsis: ArrayLike = 0.0,
        clockwise: bool = False,
    ) -> KeplerianOrbit:
        """Create an elliptic orbit from its periapsis and apoapsis distances.

        Args:
            periapsis (ArrayLike): Nearest distance to the focus.
            apoapsis (ArrayLike): Farthest distance from the focus.
            argument_of_periapsis (ArrayLike): Orientation of periapsis. Units: *rad*
            clockwise (bool): Winding direction.

        Returns:
            KeplerianOrbit: Orbit with ``a = (rp + ra) / 2`` and
            ``e = (ra - rp) / (ra + rp)``.
        """
        rp = jnp.asarray(periapsis, dtype=get_dtype())
        ra = jnp.asarray(apoapsis, dtype=get_dtype())
        return cls(0.5 * (rp + ra), (ra - rp) / (ra + rp), argument_of_periapsis, clockwise)

    # Properties

    @property
    def semimajor_axis(self) -> Array:
        """Semi-major axis ``a``."""
        return self._a

    @property
    def eccentricity(self) -> Array:
        """Eccentricity ``e``. Dimensionless."""
        return self._e

    @property
    def argument_of_periapsis(self) -> Array:
        """Argument of periapsis ``omega``. Units: *rad*"""
        return self._argp

    def is_clockwise(self) -> bool:
        """Return whether the orbit winds clockwise in the parent frame."""
        return self._clockwise

    # Geometry

    def semiminor_axis(self) -> Array:
        """Semi-minor axis ``b = a * sqrt(1 - e^2)``."""
        return self._a * jnp.sqrt(1.0 - self._e * self._e)

    def focal_point(self) -> Array:
        """Distance from the centre of the conic to its focus, ``e * a``."""
        return self._e * self._a

    def directrix(self) -> Array:
        """Distance from the centre to the directrix, ``a^2 / f``.

        Infinite for a circular orbit.
        """
        return self._a * self._a / self.focal_point()

    def semi_latus_rectum(self) -> Array:
        """Semi-latus rectum ``a * (1 - e^2)``, or ``2a`` for a parabola."""
        return jnp.where(self._e == 1.0, 2.0 * self._a, self._a * (1.0 - self._e * self._e))

    def periapsis(self) -> Array:
        """Nearest distance between the orbiting body and the focus, ``a * (1 - e)``."""
        return (1.0 - self._e) * self._a

    def apoapsis(self) -> Array:
        """Farthest distance between the orbiting body and the focus, ``a * (1 + e)``."""
        return (1.0 + self._e) * self._a

    # Dynamics

    def energy(self, parent: CelestialObject, orbiter_gm: ArrayLike) -> Array:
        """Compute the orbital energy of a body on this orbit.

        Returns zero for a parabolic orbit (``e == 1``), otherwise
        ``-(mu_parent * mu_orbiter) / (2a)``.

        Args:
            parent (CelestialObject): Body at the focus.
            orbiter_gm (ArrayLike): Gravitational parameter of the orbiting body.

        Returns:
            Orbital energy.
        """
        orbiter_gm = jnp.asarray(orbiter_gm, dtype=get_dtype())
        bound = -(parent.gravitational_parameter * orbiter_gm) / (2.0 * self._a)
        return jnp.where(self._e == 1.0, 0.0, bound)

    def orbital_period(self, parent: CelestialObject) -> Array:
        """Compute the orbital period ``2 pi sqrt(a^3 / mu)``.

        Args:
            parent (CelestialObject): Body at the focus.

        Returns:
            Orbital period. Units: *s*
        """
        return 2.0 * jnp.pi * jnp.sqrt(self._a**3 / parent.gravitational_parameter)

    def mean_motion(self, parent: CelestialObject) -> Array:
        """Compute the mean motion ``sqrt(mu / a^3)``.

        Args:
            parent (CelestialObject): Body at the focus.

        Returns:
            Mean motion. Units: *rad/s*
        """
        return jnp.sqrt(parent.gravitational_parameter / self._a**3)

    def mean_anomaly_at(self, time: ArrayLike, parent: CelestialObject, epoch_anomaly: ArrayLike = 0.0) -> MeanAnomaly:
        """Return the mean anomaly reached after ``time`` seconds.

        Args:
            time (ArrayLike): Time since epoch. Units: *s*
            parent (CelestialObject): Body at the focus.
            epoch_anomaly (ArrayLike): Mean anomaly at epoch. Units: *rad*

        Returns:
            MeanAnomaly: ``M0 + n * t`` (not wrapped).
        """
        from keplerjax.orbits.anomaly import MeanAnomaly

        time = jnp.asarray(time, dtype=get_dtype())
        return MeanAnomaly(epoch_anomaly + self.mean_motion(parent) * time)

    # Frames

    def rotate_point(self, point: ArrayLike) -> Array:
        """Map an orbit-plane point into the parent frame.

        The orbit plane has periapsis along +x and counterclockwise motion.
        The y coordinate is negated for clockwise orbits, then the point is
        rotated by ``-argument_of_periapsis``.

        Args:
            point (ArrayLike): Orbit-plane point ``[x, y]``.

        Returns:
            Parent-frame point ``[x, y]``.
        """
        point = jnp.asarray(point, dtype=get_dtype())
        if self._clockwise:
            point = point * jnp.array([1.0, -1.0], dtype=point.dtype)
        return rotate_2d(point, -self._argp)

    # String representations

    def __str__(self) -> str:
        return (
            f"KeplerianOrbit(a={float(self._a):.6f}, "
            f"e={float(self._e):.6f}, "
            f"argp={float(self._argp):.6f}, "
            f"clockwise={self._clockwise})"
        )

    def __repr__(self) -> str:
        return (
            f"KeplerianOrbit(a={float(self._a)}, "
            f"e={float(self._e)}, "
            f"argp={float(self._argp)}, "
            f"clockwise={self._clockwise})"
        )


# Register as JAX pytree
jax.tree_util.register_pytree_node(
    KeplerianOrbit,
    lambda o: ((o._a, o._e, o._argp), o._clockwise),
    lambda clockwise, children: KeplerianOrbit._from_internal(*children, clockwise),
)
