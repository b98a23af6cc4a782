# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "keplerjax"]
#
# [tool.uv.sources]
# keplerjax = { path = ".." }
# ///
"""Sample a star-and-planets system frame by frame.

Builds a star with three planets (one clockwise, one with a moon) and
prints the absolute position of every body for a sequence of frames,
the way a rendering loop would query it.

Requires keplerjax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/orbit_demo.py [OPTIONS]

Examples:
    # Ten frames with the visual mean-motion model
    uv run examples/orbit_demo.py --frames 10 --dt 0.5

    # Physically scaled mean motion around a solar-mass star
    uv run examples/orbit_demo.py --mean-motion physical --star-mass 1.989e30 --dt 86400
"""

import logging
import math
from typing import Annotated

import jax
import typer

from keplerjax import CelestialObject, KeplerianOrbit, MeanMotion, OrbitalSystem

logger = logging.getLogger("orbit_demo")


def build_system(star_mass: float) -> OrbitalSystem:
    """Star at the origin with three planets and one moon."""
    system = OrbitalSystem()
    star = system.add_root(CelestialObject(star_mass))
    system.add_orbiter(star, KeplerianOrbit(2.0, 0.1), CelestialObject(1e3))
    planet = system.add_orbiter(
        star,
        KeplerianOrbit(4.0, 0.4, argument_of_periapsis=math.pi / 4.0),
        CelestialObject(1e4),
        phase=1.0,
    )
    system.add_orbiter(planet, KeplerianOrbit(0.5, 0.0, clockwise=True))
    system.add_orbiter(star, KeplerianOrbit(7.0, 0.75, argument_of_periapsis=-1.0, clockwise=True))
    return system


def main(
    frames: Annotated[int, typer.Option(help="Number of frames to sample")] = 5,
    dt: Annotated[float, typer.Option(help="Time step between frames")] = 1.0,
    mean_motion: Annotated[
        MeanMotion, typer.Option(help="Mean-motion model", case_sensitive=False)
    ] = MeanMotion.DEMO,
    star_mass: Annotated[float, typer.Option(help="Mass of the central star")] = 1.0e11,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    system = build_system(star_mass)
    sample = jax.jit(lambda t: system.positions(t, mean_motion))
    logger.info("Sampling %d bodies for %d frames", len(system), frames)

    for frame in range(frames):
        t = frame * dt
        xy = sample(t)
        typer.echo(f"frame {frame:4d}  t={t:.3f}")
        for i in range(len(system)):
            typer.echo(f"  body {i}: x={float(xy[i, 0]):+.6f}  y={float(xy[i, 1]):+.6f}")


if __name__ == "__main__":
    typer.run(main)
