"""Anomaly representations of a position along a Keplerian orbit.

Provides ``TrueAnomaly``, ``EccentricAnomaly`` and ``MeanAnomaly``, three
parametrizations of the same physical position.  Each wraps a single
angle in radians (unbounded, never wrapped) and needs a
:class:`~keplerjax.orbits.KeplerianOrbit` as context to compute a radius,
a Cartesian point, or to convert to another representation.

All three share the :class:`Anomaly` interface:

- ``position_in_orbit_plane(orbit)`` (alias ``point``): periapsis along +x,
  counterclockwise, no orientation applied.
- ``position_in_parent_frame(orbit)`` (alias ``point_2d``): the orbit-plane
  point routed through :meth:`KeplerianOrbit.rotate_point`.
- ``to_true``, ``to_eccentric``, ``to_mean`` (aliases ``true_anomaly``,
  ``eccentric_anomaly``, ``mean_anomaly``).

Instances are immutable and registered as JAX pytrees with the angle as
the sole leaf.  Converting from mean to eccentric anomaly runs the
Newton-Raphson solver in :mod:`keplerjax.orbits.kepler`; every other
conversion is closed form.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from keplerjax.config import get_angle_tolerance, get_dtype
from keplerjax.orbits.kepler import KeplerSolution, anomaly_eccentric_to_mean, solve_kepler_equation
from keplerjax.utils import from_radians, to_radians

if TYPE_CHECKING:
    from keplerjax.orbits.keplerian_orbit import KeplerianOrbit


class Anomaly:
    """Common interface of the three anomaly representations.

    Abstract: construct one of the subclasses instead.

    Args:
        angle (float): Anomaly angle. Units: *rad* (or *deg*)
        use_degrees (bool): If ``True``, ``angle`` is given in degrees.
    """

    __slots__ = ('_angle',)

    def __init__(self, angle: ArrayLike = 0.0, use_degrees: bool = False) -> None:
        if type(self) is Anomaly:
            raise TypeError("Anomaly cannot be instantiated directly; use TrueAnomaly, EccentricAnomaly or MeanAnomaly")
        angle = jnp.asarray(angle, dtype=get_dtype())
        self._angle = to_radians(angle, use_degrees)

    @classmethod
    def _from_internal(cls, angle):
        """Create from a raw angle in radians without coercion.

        Used by pytree unflatten and conversion outputs.
        """
        obj = object.__new__(cls)
        obj._angle = angle
        return obj

    @classmethod
    def from_degrees(cls, angle: ArrayLike):
        """Create from an angle in degrees."""
        return cls(angle, use_degrees=True)

    @property
    def angle(self) -> Array:
        """Anomaly angle. Units: *rad*"""
        return self._angle

    def set_degrees(self, angle: ArrayLike):
        """Return a new anomaly of the same type with the angle given in degrees.

        Args:
            angle (ArrayLike): Angle. Units: *deg*

        Returns:
            Anomaly: New instance; ``self`` is left unchanged.
        """
        return type(self).from_degrees(angle)

    def get_degrees(self) -> Array:
        """Return the angle in degrees."""
        return from_radians(self._angle, True)

    # Representation-specific operations

    def radius(self, orbit: KeplerianOrbit) -> Array:
        """Distance from the orbit's focus to the body at this anomaly."""
        raise NotImplementedError

    def position_in_orbit_plane(self, orbit: KeplerianOrbit) -> Array:
        """Cartesian point ``[x, y]`` in the orbit plane, periapsis along +x."""
        raise NotImplementedError

    def to_true(self, orbit: KeplerianOrbit) -> TrueAnomaly:
        """Equivalent true anomaly on *orbit*."""
        raise NotImplementedError

    def to_eccentric(self, orbit: KeplerianOrbit) -> EccentricAnomaly:
        """Equivalent eccentric anomaly on *orbit*."""
        raise NotImplementedError

    def to_mean(self, orbit: KeplerianOrbit) -> MeanAnomaly:
        """Equivalent mean anomaly on *orbit*."""
        raise NotImplementedError

    # Shared operations

    def position_in_parent_frame(self, orbit: KeplerianOrbit) -> Array:
        """Cartesian point ``[x, y]`` in the parent frame.

        Applies the orbit's winding direction and argument of periapsis to
        :meth:`position_in_orbit_plane`.
        """
        return orbit.rotate_point(self.position_in_orbit_plane(orbit))

    def point(self, orbit: KeplerianOrbit) -> Array:
        """Alias of :meth:`position_in_orbit_plane`."""
        return self.position_in_orbit_plane(orbit)

    def point_2d(self, orbit: KeplerianOrbit) -> Array:
        """Alias of :meth:`position_in_parent_frame`."""
        return self.position_in_parent_frame(orbit)

    def true_anomaly(self, orbit: KeplerianOrbit) -> TrueAnomaly:
        """Alias of :meth:`to_true`."""
        return self.to_true(orbit)

    def eccentric_anomaly(self, orbit: KeplerianOrbit) -> EccentricAnomaly:
        """Alias of :meth:`to_eccentric`."""
        return self.to_eccentric(orbit)

    def mean_anomaly(self, orbit: KeplerianOrbit) -> MeanAnomaly:
        """Alias of :meth:`to_mean`."""
        return self.to_mean(orbit)

    # Comparison

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return jnp.all(jnp.abs(self._angle - other._angle) < get_angle_tolerance())

    def __ne__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return not self.__eq__(other)

    __hash__ = None

    # String representations

    def __str__(self) -> str:
        return f"{type(self).__name__}({float(self.get_degrees()):.6f} deg)"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(angle={float(self._angle)})"


class TrueAnomaly(Anomaly):
    """Angle of the body measured from periapsis, as seen from the focus.

    Examples:
        ```python
        from keplerjax.orbits import KeplerianOrbit, TrueAnomaly
        orbit = KeplerianOrbit(1.0, 0.5)
        r = TrueAnomaly(0.0).radius(orbit)  # periapsis, 0.5
        ```
    """

    __slots__ = ()

    def radius(self, orbit: KeplerianOrbit) -> Array:
        """Compute the focal distance ``l / (1 + e cos(theta))``.

        The sign is flipped on the hyperbolic branch (``e > 1``).

        Args:
            orbit (KeplerianOrbit): The orbit in question.

        Returns:
            Distance from the focus.
        """
        e = orbit.eccentricity
        r = orbit.semi_latus_rectum() / (1.0 + e * jnp.cos(self._angle))
        return jnp.where(e > 1.0, -r, r)

    def position_in_orbit_plane(self, orbit: KeplerianOrbit) -> Array:
        """Compute ``r * [cos(theta), sin(theta)]`` in the orbit plane.

        Args:
            orbit (KeplerianOrbit): The orbit in question.

        Returns:
            Orbit-plane point ``[x, y]``.
        """
        r = self.radius(orbit)
        return jnp.array([r * jnp.cos(self._angle), r * jnp.sin(self._angle)])

    def to_true(self, orbit: KeplerianOrbit) -> TrueAnomaly:
        return TrueAnomaly._from_internal(self._angle)

    def to_eccentric(self, orbit: KeplerianOrbit) -> EccentricAnomaly:
        """Convert to eccentric anomaly.

        Projects the orbit-plane point onto the auxiliary circle:
        ``E = atan2(y / b, (x + f) / a)``.

        Args:
            orbit (KeplerianOrbit): The orbit in question.

        Returns:
            EccentricAnomaly: Equivalent eccentric anomaly.
        """
        x, y = self.position_in_orbit_plane(orbit)
        E = jnp.arctan2(
            y / orbit.semiminor_axis(),
            (x + orbit.focal_point()) / orbit.semimajor_axis,
        )
        return EccentricAnomaly._from_internal(E)

    def to_mean(self, orbit: KeplerianOrbit) -> MeanAnomaly:
        """Convert to mean anomaly via the eccentric anomaly."""
        return self.to_eccentric(orbit).to_mean(orbit)


class EccentricAnomaly(Anomaly):
    """Auxiliary angle parametrizing the position on the ellipse's circumscribed circle.

    Examples:
        ```python
        from keplerjax.orbits import EccentricAnomaly, KeplerianOrbit
        orbit = KeplerianOrbit(2.0, 0.5)
        xy = EccentricAnomaly.from_degrees(90.0).point_2d(orbit)  # [-1, sqrt(3)]
        ```
    """

    __slots__ = ()

    def radius(self, orbit: KeplerianOrbit) -> Array:
        """Euclidean norm of :meth:`position_in_orbit_plane`."""
        return jnp.linalg.norm(self.position_in_orbit_plane(orbit))

    def position_in_orbit_plane(self, orbit: KeplerianOrbit) -> Array:
        """Compute ``[a cos(E) - f, b sin(E)]`` in the orbit plane.

        Args:
            orbit (KeplerianOrbit): The orbit in question.

        Returns:
            Orbit-plane point ``[x, y]``.
        """
        return jnp.array([
            orbit.semimajor_axis * jnp.cos(self._angle) - orbit.focal_point(),
            orbit.semiminor_axis() * jnp.sin(self._angle),
        ])

    def to_true(self, orbit: KeplerianOrbit) -> TrueAnomaly:
        """Convert to true anomaly, the polar angle of the orbit-plane point."""
        x, y = self.position_in_orbit_plane(orbit)
        return TrueAnomaly._from_internal(jnp.arctan2(y, x))

    def to_eccentric(self, orbit: KeplerianOrbit) -> EccentricAnomaly:
        return EccentricAnomaly._from_internal(self._angle)

    def to_mean(self, orbit: KeplerianOrbit) -> MeanAnomaly:
        """Convert to mean anomaly with Kepler's equation ``M = E - e sin(E)``."""
        return MeanAnomaly._from_internal(anomaly_eccentric_to_mean(self._angle, orbit.eccentricity))


class MeanAnomaly(Anomaly):
    """Fictitious angle that advances at a constant rate with time.

    Radius, points and the true anomaly are all derived through the
    eccentric anomaly, which requires solving Kepler's equation.

    Examples:
        ```python
        from keplerjax.orbits import KeplerianOrbit, MeanAnomaly
        orbit = KeplerianOrbit(1.0, 0.3)
        xy = MeanAnomaly(1.0).point_2d(orbit)
        ```
    """

    __slots__ = ()

    def solve(self, orbit: KeplerianOrbit) -> KeplerSolution:
        """Solve Kepler's equation for this mean anomaly.

        Args:
            orbit (KeplerianOrbit): The orbit in question.

        Returns:
            KeplerSolution: Eccentric anomaly with iteration diagnostics.
        """
        return solve_kepler_equation(self._angle, orbit.eccentricity)

    def radius(self, orbit: KeplerianOrbit) -> Array:
        return self.to_eccentric(orbit).radius(orbit)

    def position_in_orbit_plane(self, orbit: KeplerianOrbit) -> Array:
        return self.to_eccentric(orbit).position_in_orbit_plane(orbit)

    def to_true(self, orbit: KeplerianOrbit) -> TrueAnomaly:
        return self.to_eccentric(orbit).to_true(orbit)

    def to_eccentric(self, orbit: KeplerianOrbit) -> EccentricAnomaly:
        """Convert to eccentric anomaly by solving Kepler's equation.

        Never raises: if the solver hits its iteration cap, the last
        estimate is used.

        Args:
            orbit (KeplerianOrbit): The orbit in question.

        Returns:
            EccentricAnomaly: Equivalent eccentric anomaly.
        """
        return EccentricAnomaly._from_internal(self.solve(orbit).eccentric_anomaly)

    def to_mean(self, orbit: KeplerianOrbit) -> MeanAnomaly:
        return MeanAnomaly._from_internal(self._angle)


# Register as JAX pytrees
for _cls in (TrueAnomaly, EccentricAnomaly, MeanAnomaly):
    jax.tree_util.register_pytree_node(
        _cls,
        lambda anm: ((anm._angle,), None),
        lambda _, children, _cls=_cls: _cls._from_internal(children[0]),
    )
del _cls
