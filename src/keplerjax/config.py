"""Float precision shared by every keplerjax computation.

keplerjax works in ``jnp.float64`` unless told otherwise.  The Kepler
solver stops at a residual of 0.00001 degrees, which float32 cannot
resolve for angles near pi, so importing this module switches on JAX's
``jax_enable_x64`` flag.

The active dtype is read while a function is being traced.  A program
compiled with ``jax.jit`` keeps the dtype it was traced with, so pick the
precision with :func:`set_dtype` before compiling anything.
"""

from __future__ import annotations

import logging

import jax
import jax.numpy as jnp

logger = logging.getLogger(__name__)

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

jax.config.update("jax_enable_x64", True)
_dtype = jnp.float64


def set_dtype(dtype) -> None:
    """Choose the float dtype that keplerjax casts its inputs to.

    Eager calls see the new dtype at once; already compiled functions do
    not.  Selecting ``jnp.float64`` turns ``jax_enable_x64`` back on in
    case it was disabled elsewhere.  Narrower dtypes leave the flag alone
    and inputs are cast down to them.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    if dtype != _dtype:
        logger.debug("Switching keplerjax float dtype from %s to %s", jnp.dtype(_dtype).name, jnp.dtype(dtype).name)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_angle_tolerance() -> float:
    """Return the dtype-adaptive tolerance for angle equality comparisons.

    Used by :meth:`keplerjax.orbits.Anomaly.__eq__`.  The tolerance scales
    with the precision of the configured float dtype:

    - ``float16``:  1e-2 rad
    - ``bfloat16``: 1e-2 rad
    - ``float32``:  1e-5 rad
    - ``float64``:  1e-12 rad

    Returns:
        float: Tolerance in radians.
    """
    if _dtype == jnp.float64:
        return 1e-12
    if _dtype == jnp.float32:
        return 1e-5
    # float16 and bfloat16
    return 1e-2
