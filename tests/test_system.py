import logging
import math

import jax
import jax.numpy as jnp
import pytest

from keplerjax.bodies import CelestialObject
from keplerjax.orbits import KeplerianOrbit, MeanAnomaly
from keplerjax.system import MeanMotion, OrbitalSystem

_TOL = 1e-12


@pytest.fixture
def system():
    """Star at (1, 2) with a planet and a moon orbiting the planet."""
    s = OrbitalSystem()
    star = s.add_root(CelestialObject.from_gravitational_parameter(4.0), position=(1.0, 2.0))
    planet = s.add_orbiter(star, KeplerianOrbit(2.0, 0.5, 0.3), CelestialObject.from_gravitational_parameter(0.1))
    s.add_orbiter(planet, KeplerianOrbit(0.25, 0.0, clockwise=True), phase=0.5)
    return s


class TestStructure:
    def test_len(self, system):
        assert len(system) == 3

    def test_empty_system(self):
        assert OrbitalSystem().positions(1.0).shape == (0, 2)

    def test_root_node(self, system):
        root = system.node(0)
        assert root.is_root
        assert root.orbit is None
        assert root.position == (1.0, 2.0)

    def test_children(self, system):
        assert system.children(0) == [1]
        assert system.children(1) == [2]
        assert system.children(2) == []

    def test_unknown_parent_raises(self, system):
        with pytest.raises(IndexError, match="No node with index 7"):
            system.add_orbiter(7, KeplerianOrbit(1.0))

    def test_negative_index_raises(self, system):
        with pytest.raises(IndexError):
            system.node(-1)

    def test_add_logs(self, caplog):
        s = OrbitalSystem()
        with caplog.at_level(logging.DEBUG, logger="keplerjax.system"):
            star = s.add_root()
            s.add_orbiter(star, KeplerianOrbit(1.0))
        assert "Added root node 0" in caplog.text
        assert "Added node 1 orbiting node 0" in caplog.text


class TestMeanAnomaly:
    def test_demo_model(self, system):
        M = system.mean_anomaly(1, 8.0)
        assert isinstance(M, MeanAnomaly)
        assert jnp.abs(M.angle - 8.0 / 4.0) < _TOL

    def test_demo_model_with_phase(self, system):
        M = system.mean_anomaly(2, 1.0, "demo")
        assert jnp.abs(M.angle - (0.5 + 1.0 / 0.0625)) < _TOL

    def test_physical_model(self, system):
        M = system.mean_anomaly(1, 3.0, MeanMotion.PHYSICAL)
        n = math.sqrt(4.0 / 2.0**3)
        assert jnp.abs(M.angle - n * 3.0) < _TOL

    def test_physical_model_needs_parent_body(self):
        s = OrbitalSystem()
        star = s.add_root()
        planet = s.add_orbiter(star, KeplerianOrbit(1.0))
        with pytest.raises(ValueError, match="needs a body"):
            s.mean_anomaly(planet, 1.0, MeanMotion.PHYSICAL)

    def test_root_has_no_mean_anomaly(self, system):
        with pytest.raises(ValueError, match="is a root"):
            system.mean_anomaly(0, 1.0)

    def test_unknown_model_raises(self, system):
        with pytest.raises(ValueError):
            system.mean_anomaly(1, 1.0, "relativistic")


class TestPositions:
    def test_shape(self, system):
        assert system.positions(0.0).shape == (3, 2)

    def test_root_is_fixed(self, system):
        for t in (0.0, 5.0, 100.0):
            assert jnp.allclose(system.positions(t)[0], jnp.array([1.0, 2.0]), atol=_TOL)

    def test_orbiter_relative_to_parent(self, system):
        t = 3.7
        xy = system.positions(t)
        orbit = system.node(1).orbit
        local = MeanAnomaly(t / 4.0).point_2d(orbit)
        assert jnp.allclose(xy[1], xy[0] + local, atol=_TOL)

    def test_moon_follows_planet(self, system):
        t = 1.3
        xy = system.positions(t)
        assert jnp.abs(jnp.linalg.norm(xy[2] - xy[1]) - 0.25) < 1e-12

    def test_planet_at_periapsis_at_start(self, system):
        xy = system.positions(0.0)
        assert jnp.abs(jnp.linalg.norm(xy[1] - xy[0]) - 1.0) < _TOL

    def test_physical_period_returns_to_start(self, system):
        period = system.node(1).orbit.orbital_period(system.node(0).body)
        start = system.positions(0.0, MeanMotion.PHYSICAL)[1]
        end = system.positions(period, MeanMotion.PHYSICAL)[1]
        assert jnp.allclose(start, end, atol=1e-9)

    def test_jit(self, system):
        sample = jax.jit(lambda t: system.positions(t))
        assert jnp.allclose(sample(2.0), system.positions(2.0), atol=1e-12)


class TestOrbitTrack:
    def test_shape(self, system):
        assert system.orbit_track(1, count=16).shape == (16, 2)

    @pytest.mark.parametrize("count", [0, -3])
    def test_empty_track(self, system, count):
        assert system.orbit_track(1, count=count).shape == (0, 2)

    def test_empty_track_still_checks_root(self, system):
        with pytest.raises(ValueError, match="is a root"):
            system.orbit_track(0, count=0)

    def test_points_on_orbit(self, system):
        orbit = system.node(1).orbit
        track = system.orbit_track(1, count=24, time=0.7)
        radii = jnp.linalg.norm(track, axis=1)
        assert jnp.all(radii >= orbit.periapsis() - 1e-9)
        assert jnp.all(radii <= orbit.apoapsis() + 1e-9)

    def test_first_point_is_current_position(self, system):
        t = 2.2
        track = system.orbit_track(1, count=8, time=t)
        xy = system.positions(t)
        assert jnp.allclose(track[0], xy[1] - xy[0], atol=1e-12)

    def test_circular_track_evenly_spaced(self, system):
        track = system.orbit_track(2, count=4)
        gaps = jnp.linalg.norm(jnp.roll(track, -1, axis=0) - track, axis=1)
        assert jnp.allclose(gaps, 0.25 * math.sqrt(2.0), atol=1e-12)
