"""Planar Keplerian orbits.

This sub-module provides:

- **KeplerianOrbit**: orbit shape and orientation with derived geometry
  (semi-minor axis, focal distance, apsides, period, energy) and the
  orbit-plane to parent-frame rotation.
- **Anomalies**: ``TrueAnomaly``, ``EccentricAnomaly`` and ``MeanAnomaly``,
  interchangeable parametrizations of a position along an orbit.
- **Kepler's equation**: a JAX-traceable Newton-Raphson solver with a
  bounded iteration count.
"""

from .anomaly import (
    Anomaly,
    EccentricAnomaly,
    MeanAnomaly,
    TrueAnomaly,
)
from .kepler import (
    KeplerSolution,
    anomaly_eccentric_to_mean,
    anomaly_eccentric_to_true,
    anomaly_mean_to_eccentric,
    anomaly_true_to_eccentric,
    kepler_residual,
    solve_kepler_equation,
)
from .keplerian_orbit import KeplerianOrbit

__all__ = [
    "KeplerianOrbit",
    "Anomaly",
    "TrueAnomaly",
    "EccentricAnomaly",
    "MeanAnomaly",
    "KeplerSolution",
    "kepler_residual",
    "solve_kepler_equation",
    "anomaly_eccentric_to_mean",
    "anomaly_eccentric_to_true",
    "anomaly_mean_to_eccentric",
    "anomaly_true_to_eccentric",
]
