"""
keplerjax is a small two-dimensional Keplerian orbit solver implemented in JAX.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    TWO_PI,
    G,
    KEPLER_TOLERANCE,
    KEPLER_MAX_ITERATIONS,
)

from .config import set_dtype, get_dtype

from .bodies import CelestialObject

from .orbits import (
    KeplerianOrbit,
    Anomaly,
    TrueAnomaly,
    EccentricAnomaly,
    MeanAnomaly,
    KeplerSolution,
    kepler_residual,
    solve_kepler_equation,
    anomaly_eccentric_to_mean,
    anomaly_eccentric_to_true,
    anomaly_mean_to_eccentric,
    anomaly_true_to_eccentric,
)

from .system import MeanMotion, OrbitalSystem, SystemNode

__all__ = [
    # Constants
    "DEG2RAD",
    "RAD2DEG",
    "TWO_PI",
    "G",
    "KEPLER_TOLERANCE",
    "KEPLER_MAX_ITERATIONS",
    # Config
    "set_dtype",
    "get_dtype",
    # Bodies
    "CelestialObject",
    # Orbits
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
    # System
    "MeanMotion",
    "OrbitalSystem",
    "SystemNode",
]
