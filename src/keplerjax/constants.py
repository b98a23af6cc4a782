"""
The `constants` module defines the mathematical and physical constants used by keplerjax.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Full revolution. Units: *rad*
"""
TWO_PI = 2.0 * PI

# Physical Constants
"""
Newtonian constant of gravitation. Units: *m^3 kg^-1 s^-2*

Masses handed to :class:`keplerjax.bodies.CelestialObject` are multiplied
by this value to form the gravitational parameter.

References:

1. P. J. Mohr, and B. N. Taylor, *CODATA recommended values of the
fundamental physical constants: 2002*, 2005.
"""
G = 6.6742e-11  # [m^3/kg/s^2] CODATA 2002

# Kepler Solver Constants
"""
Convergence threshold on the residual of Kepler's equation. Equal to
0.00001 degrees expressed in radians. Units: *rad*
"""
KEPLER_TOLERANCE = 0.00001 * DEG2RAD

"""
Hard cap on Newton iterations performed by the Kepler equation solver.
"""
KEPLER_MAX_ITERATIONS = 10
