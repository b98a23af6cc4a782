"""Kepler's equation and its Newton-Raphson solver.

Kepler's equation ``M = E - e * sin(E)`` relates the mean anomaly ``M``
to the eccentric anomaly ``E``.  The forward direction is closed form;
the inverse has no closed-form solution and is found iteratively.

The solver is implemented with ``jax.lax.while_loop`` so that it is
compatible with ``jax.jit`` and ``jax.vmap`` while still stopping as
soon as the residual drops below tolerance.  Each Newton correction is
clamped to at most half the eccentricity in magnitude.  The iteration count is
hard-capped; when the cap is reached the last estimate is returned
without raising.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from keplerjax.config import get_dtype
from keplerjax.constants import KEPLER_MAX_ITERATIONS, KEPLER_TOLERANCE
from keplerjax.utils import from_radians, to_radians


class KeplerSolution(NamedTuple):
    """Result of solving Kepler's equation.

    Attributes:
        eccentric_anomaly: Best estimate of the eccentric anomaly. Units: *rad*
        iterations: Number of Newton iterations performed (at most
            ``max_iterations``). Scalar even for array inputs: the
            batch iterates until its slowest element converges, so this
            is the maximum over the batch.
        converged: ``True`` if the last evaluated residual was below the
            tolerance.
    """

    eccentric_anomaly: Array
    iterations: Array
    converged: Array


def kepler_residual(anm_ecc: ArrayLike, anm_mean: ArrayLike, e: ArrayLike) -> Array:
    """Evaluate ``E - e * sin(E) - M``.

    Args:
        anm_ecc: Eccentric anomaly. Units: *rad*
        anm_mean: Mean anomaly. Units: *rad*
        e: Eccentricity. Dimensionless.

    Returns:
        Residual of Kepler's equation. Units: *rad*
    """
    return anm_ecc - e * jnp.sin(anm_ecc) - anm_mean


def solve_kepler_equation(
    anm_mean: ArrayLike,
    e: ArrayLike,
    tolerance: float = KEPLER_TOLERANCE,
    max_iterations: int = KEPLER_MAX_ITERATIONS,
) -> KeplerSolution:
    """Solve Kepler's equation for the eccentric anomaly.

    Starts from ``E = M`` and applies clamped Newton-Raphson steps

    ``E <- E - clip(f / f', -e/2, e/2)``

    with ``f = E - e sin(E) - M`` and ``f' = 1 - e cos(E)``.  Iteration
    stops once ``|f| < tolerance`` or after ``max_iterations`` steps.
    The mean anomaly is not wrapped, so the returned eccentric anomaly
    lies on the same revolution as the input.

    Array inputs are broadcast and solved together in one loop.  Elements
    that have already converged keep taking (vanishing) steps until every
    element meets the tolerance, and ``iterations`` reports the count for
    the whole batch.  Under ``jax.vmap`` each element gets its own count.

    Args:
        anm_mean: Mean anomaly. Units: *rad*
        e: Eccentricity. Dimensionless. Only elliptic orbits
            (``0 <= e < 1``) are supported.
        tolerance: Convergence threshold on ``|f|``. Units: *rad*
        max_iterations: Maximum number of Newton iterations.

    Returns:
        KeplerSolution: Eccentric anomaly with iteration diagnostics.

    Examples:
        ```python
        from keplerjax.orbits import solve_kepler_equation
        sol = solve_kepler_equation(1.0, 0.4)
        E = sol.eccentric_anomaly
        ```
    """
    M = jnp.asarray(anm_mean, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())
    M, e = jnp.broadcast_arrays(M, e)
    half_e = 0.5 * e

    def cond(state):
        _, f_abs, i = state
        return jnp.any(f_abs >= tolerance) & (i < max_iterations)

    def body(state):
        E, _, i = state
        f = kepler_residual(E, M, e)
        step = jnp.clip(f / (1.0 - e * jnp.cos(E)), -half_e, half_e)
        return (E - step, jnp.abs(f), i + 1)

    # Initial state: infinite residual forces the first iteration
    init_state = (M, jnp.full_like(M, jnp.inf), jnp.int32(0))
    E, f_abs, iterations = jax.lax.while_loop(cond, body, init_state)
    return KeplerSolution(E, iterations, f_abs < tolerance)


def anomaly_eccentric_to_mean(anm_ecc: ArrayLike, e: ArrayLike, use_degrees: bool = False) -> Array:
    """Convert eccentric anomaly to mean anomaly.

    Applies Kepler's equation: ``M = E - e * sin(E)``.

    Args:
        anm_ecc: Eccentric anomaly. Units: *rad* or *deg*
        e: Eccentricity. Dimensionless.
        use_degrees: If ``True``, input and output are in degrees.

    Returns:
        Mean anomaly. Units: *rad* or *deg*
    """
    anm_ecc = jnp.asarray(anm_ecc, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())

    E = to_radians(anm_ecc, use_degrees)
    return from_radians(E - e * jnp.sin(E), use_degrees)


def anomaly_mean_to_eccentric(anm_mean: ArrayLike, e: ArrayLike, use_degrees: bool = False) -> Array:
    """Convert mean anomaly to eccentric anomaly.

    Thin wrapper around :func:`solve_kepler_equation` that drops the
    iteration diagnostics.

    Args:
        anm_mean: Mean anomaly. Units: *rad* or *deg*
        e: Eccentricity. Dimensionless.
        use_degrees: If ``True``, input and output are in degrees.

    Returns:
        Eccentric anomaly. Units: *rad* or *deg*

    Examples:
        ```python
        from keplerjax.orbits import anomaly_mean_to_eccentric
        E = anomaly_mean_to_eccentric(84.27, 0.1, use_degrees=True)
        ```
    """
    anm_mean = jnp.asarray(anm_mean, dtype=get_dtype())

    M = to_radians(anm_mean, use_degrees)
    E = solve_kepler_equation(M, e).eccentric_anomaly
    return from_radians(E, use_degrees)


def anomaly_true_to_eccentric(anm_true: ArrayLike, e: ArrayLike, use_degrees: bool = False) -> Array:
    """Convert true anomaly to eccentric anomaly.

    Projects the orbit-plane point onto the auxiliary circle of a unit
    semi-major axis orbit: ``E = atan2(sqrt(1 - e^2) sin(nu), cos(nu) + e)``.
    The result lies in ``(-pi, pi]``.

    Args:
        anm_true: True anomaly. Units: *rad* or *deg*
        e: Eccentricity. Dimensionless. Only elliptic orbits
            (``0 <= e < 1``) are supported.
        use_degrees: If ``True``, input and output are in degrees.

    Returns:
        Eccentric anomaly. Units: *rad* or *deg*

    Examples:
        ```python
        from keplerjax.orbits import anomaly_true_to_eccentric
        E = anomaly_true_to_eccentric(90.0, 0.5, use_degrees=True)  # 60.0
        ```
    """
    anm_true = jnp.asarray(anm_true, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())

    nu = to_radians(anm_true, use_degrees)
    E = jnp.arctan2(jnp.sqrt(1.0 - e * e) * jnp.sin(nu), jnp.cos(nu) + e)
    return from_radians(E, use_degrees)


def anomaly_eccentric_to_true(anm_ecc: ArrayLike, e: ArrayLike, use_degrees: bool = False) -> Array:
    """Convert eccentric anomaly to true anomaly.

    Polar angle of the orbit-plane point ``[cos(E) - e, sqrt(1 - e^2) sin(E)]``.
    The result lies in ``(-pi, pi]``.

    Args:
        anm_ecc: Eccentric anomaly. Units: *rad* or *deg*
        e: Eccentricity. Dimensionless.
        use_degrees: If ``True``, input and output are in degrees.

    Returns:
        True anomaly. Units: *rad* or *deg*
    """
    anm_ecc = jnp.asarray(anm_ecc, dtype=get_dtype())
    e = jnp.asarray(e, dtype=get_dtype())

    E = to_radians(anm_ecc, use_degrees)
    nu = jnp.arctan2(jnp.sqrt(1.0 - e * e) * jnp.sin(E), jnp.cos(E) - e)
    return from_radians(nu, use_degrees)
