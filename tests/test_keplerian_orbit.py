import math

import jax
import jax.numpy as jnp
import pytest

from keplerjax.bodies import CelestialObject
from keplerjax.orbits import KeplerianOrbit, MeanAnomaly

_TOL = 1e-12
_ECCENTRICITIES = [i / 20.0 for i in range(20)]


# ──────────────────────────────────────────────
# Construction
# ──────────────────────────────────────────────

class TestConstruction:
    def test_defaults(self):
        orbit = KeplerianOrbit(3.0)
        assert orbit.semimajor_axis == 3.0
        assert orbit.eccentricity == 0.0
        assert orbit.argument_of_periapsis == 0.0
        assert not orbit.is_clockwise()

    def test_signs_are_discarded(self):
        orbit = KeplerianOrbit(-2.0, -0.5)
        assert orbit.semimajor_axis == 2.0
        assert orbit.eccentricity == 0.5

    def test_argument_of_periapsis_keeps_sign(self):
        assert KeplerianOrbit(1.0, 0.1, -0.3).argument_of_periapsis == -0.3

    def test_clockwise_flag(self):
        assert KeplerianOrbit(1.0, clockwise=True).is_clockwise()

    def test_from_apsides(self):
        orbit = KeplerianOrbit.from_apsides(1.0, 3.0)
        assert jnp.abs(orbit.semimajor_axis - 2.0) < _TOL
        assert jnp.abs(orbit.eccentricity - 0.5) < _TOL

    def test_from_apsides_roundtrip(self):
        orbit = KeplerianOrbit.from_apsides(0.7, 5.3, 1.2, clockwise=True)
        assert jnp.abs(orbit.periapsis() - 0.7) < _TOL
        assert jnp.abs(orbit.apoapsis() - 5.3) < _TOL
        assert orbit.is_clockwise()


# ──────────────────────────────────────────────
# Geometry
# ──────────────────────────────────────────────

class TestGeometry:
    def test_semiminor_axis(self):
        assert jnp.abs(KeplerianOrbit(2.0, 0.5).semiminor_axis() - math.sqrt(3.0)) < _TOL

    def test_semiminor_axis_circle(self):
        assert KeplerianOrbit(2.0).semiminor_axis() == 2.0

    def test_focal_point(self):
        assert jnp.abs(KeplerianOrbit(2.0, 0.5).focal_point() - 1.0) < _TOL

    def test_directrix(self):
        assert jnp.abs(KeplerianOrbit(2.0, 0.5).directrix() - 4.0) < _TOL

    def test_directrix_circle_is_infinite(self):
        assert jnp.isinf(KeplerianOrbit(2.0).directrix())

    def test_semi_latus_rectum(self):
        assert jnp.abs(KeplerianOrbit(2.0, 0.5).semi_latus_rectum() - 1.5) < _TOL

    def test_semi_latus_rectum_parabola(self):
        assert KeplerianOrbit(2.0, 1.0).semi_latus_rectum() == 4.0

    def test_apsides(self):
        orbit = KeplerianOrbit(2.0, 0.5)
        assert jnp.abs(orbit.periapsis() - 1.0) < _TOL
        assert jnp.abs(orbit.apoapsis() - 3.0) < _TOL

    @pytest.mark.parametrize("e", _ECCENTRICITIES)
    def test_invariants(self, e):
        orbit = KeplerianOrbit(1.0, e)
        assert orbit.periapsis() <= orbit.apoapsis()
        assert orbit.semiminor_axis() <= orbit.semimajor_axis


# ──────────────────────────────────────────────
# Dynamics
# ──────────────────────────────────────────────

class TestDynamics:
    def test_energy(self):
        parent = CelestialObject.from_gravitational_parameter(4.0)
        assert jnp.abs(KeplerianOrbit(2.0, 0.3).energy(parent, 3.0) + 3.0) < _TOL

    def test_energy_parabola_is_zero(self):
        parent = CelestialObject.from_gravitational_parameter(4.0)
        assert KeplerianOrbit(2.0, 1.0).energy(parent, 3.0) == 0.0

    def test_orbital_period(self):
        parent = CelestialObject.from_gravitational_parameter(1.0)
        assert jnp.abs(KeplerianOrbit(1.0).orbital_period(parent) - 2.0 * math.pi) < _TOL

    def test_orbital_period_kepler_third_law(self):
        parent = CelestialObject.from_gravitational_parameter(1.0)
        T1 = KeplerianOrbit(1.0).orbital_period(parent)
        T4 = KeplerianOrbit(4.0, 0.6).orbital_period(parent)
        assert jnp.abs(T4 / T1 - 8.0) < _TOL

    def test_orbital_period_massless_parent(self):
        """A zero gravitational parameter is not validated; the period is infinite."""
        assert jnp.isinf(KeplerianOrbit(1.0).orbital_period(CelestialObject(0.0)))

    def test_mean_motion_matches_period(self):
        parent = CelestialObject(5.972e24)
        orbit = KeplerianOrbit(7.0e6, 0.01)
        n = orbit.mean_motion(parent)
        assert jnp.abs(n * orbit.orbital_period(parent) - 2.0 * math.pi) < 1e-10

    def test_mean_anomaly_at(self):
        parent = CelestialObject.from_gravitational_parameter(1.0)
        orbit = KeplerianOrbit(1.0, 0.2)
        M = orbit.mean_anomaly_at(0.5, parent, epoch_anomaly=0.25)
        assert isinstance(M, MeanAnomaly)
        assert jnp.abs(M.angle - 0.75) < _TOL

    def test_mean_anomaly_at_is_not_wrapped(self):
        parent = CelestialObject.from_gravitational_parameter(1.0)
        M = KeplerianOrbit(1.0).mean_anomaly_at(10.0, parent)
        assert jnp.abs(M.angle - 10.0) < _TOL


# ──────────────────────────────────────────────
# Frame rotation
# ──────────────────────────────────────────────

class TestRotatePoint:
    def test_identity(self):
        xy = KeplerianOrbit(1.0).rotate_point([0.3, -0.4])
        assert jnp.allclose(xy, jnp.array([0.3, -0.4]), atol=_TOL)

    def test_argument_of_periapsis_rotates_clockwise(self):
        orbit = KeplerianOrbit(1.0, 0.0, math.pi / 2.0)
        xy = orbit.rotate_point([1.0, 0.0])
        assert jnp.allclose(xy, jnp.array([0.0, -1.0]), atol=_TOL)

    def test_clockwise_flips_y(self):
        orbit = KeplerianOrbit(1.0, clockwise=True)
        xy = orbit.rotate_point([0.5, 1.0])
        assert jnp.allclose(xy, jnp.array([0.5, -1.0]), atol=_TOL)

    def test_flip_then_rotate(self):
        orbit = KeplerianOrbit(1.0, 0.0, math.pi / 2.0, clockwise=True)
        xy = orbit.rotate_point([0.0, 1.0])
        assert jnp.allclose(xy, jnp.array([-1.0, 0.0]), atol=_TOL)

    def test_preserves_norm(self):
        orbit = KeplerianOrbit(1.0, 0.3, 2.1, clockwise=True)
        xy = orbit.rotate_point([3.0, 4.0])
        assert jnp.abs(jnp.linalg.norm(xy) - 5.0) < _TOL


# ──────────────────────────────────────────────
# JAX compatibility
# ──────────────────────────────────────────────

class TestJAXCompatibility:
    def test_jit_orbit_argument(self):
        orbit = KeplerianOrbit(2.0, 0.5, 0.3, clockwise=True)
        rp = jax.jit(lambda o: o.periapsis())(orbit)
        assert jnp.abs(rp - 1.0) < _TOL

    def test_clockwise_survives_flatten(self):
        orbit = KeplerianOrbit(2.0, 0.5, clockwise=True)
        leaves, treedef = jax.tree_util.tree_flatten(orbit)
        assert len(leaves) == 3
        rebuilt = jax.tree_util.tree_unflatten(treedef, leaves)
        assert rebuilt.is_clockwise()

    def test_vmap_apoapsis(self):
        es = jnp.linspace(0.0, 0.9, 10)
        ra = jax.vmap(lambda e: KeplerianOrbit(1.0, e).apoapsis())(es)
        assert jnp.allclose(ra, 1.0 + es, atol=_TOL)
