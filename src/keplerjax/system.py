"""Headless parent/child orbital systems.

Provides :class:`OrbitalSystem`, an arena of bodies linked by integer
parent indices.  Root nodes sit at fixed positions; every other node
follows a :class:`~keplerjax.orbits.KeplerianOrbit` around its parent.
Sampling the system at a time yields absolute 2D positions for all nodes,
which is what a rendering loop needs once per frame.

Two mean-motion models are available (see :class:`MeanMotion`):

- ``DEMO``: ``M = t / a^2``, a visual stand-in that needs no masses.
- ``PHYSICAL``: ``M = sqrt(mu / a^3) * t`` using the parent's
  gravitational parameter.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from keplerjax.bodies import CelestialObject
from keplerjax.config import get_dtype
from keplerjax.constants import TWO_PI
from keplerjax.orbits import KeplerianOrbit, MeanAnomaly

logger = logging.getLogger(__name__)


class MeanMotion(enum.Enum):
    """Model used to advance the mean anomaly with time.

    Resolved at trace time (Python value), not at runtime.

    Attributes:
        DEMO: ``M = phase + t / a^2``.
        PHYSICAL: ``M = phase + sqrt(mu_parent / a^3) * t``.
    """

    DEMO = "demo"
    PHYSICAL = "physical"


@dataclass(frozen=True)
class SystemNode:
    """A single body in an :class:`OrbitalSystem`.

    Args:
        body: Mass carrier, or ``None`` for a massless marker.
        parent: Index of the parent node, ``None`` for a root.
        orbit: Orbit around the parent, ``None`` for a root.
        position: Fixed position of a root node.
        phase: Mean anomaly at ``t = 0`` [rad].
    """

    body: CelestialObject | None = None
    parent: int | None = None
    orbit: KeplerianOrbit | None = None
    position: tuple[float, float] = (0.0, 0.0)
    phase: float = 0.0

    @property
    def is_root(self) -> bool:
        return self.parent is None


class OrbitalSystem:
    """Arena of bodies with explicit parent links.

    Nodes are appended and never removed, and a parent always has a
    smaller index than its children, so positions can be resolved in
    insertion order.

    Examples:
        ```python
        from keplerjax.orbits import KeplerianOrbit
        from keplerjax.system import OrbitalSystem

        system = OrbitalSystem()
        star = system.add_root()
        planet = system.add_orbiter(star, KeplerianOrbit(4.0, 0.2))
        moon = system.add_orbiter(planet, KeplerianOrbit(0.5), phase=1.0)
        xy = system.positions(10.0)  # shape (3, 2)
        ```
    """

    def __init__(self) -> None:
        self._nodes: list[SystemNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> SystemNode:
        """Return the node at *index*.

        Raises:
            IndexError: If *index* does not refer to a node.
        """
        if not 0 <= index < len(self._nodes):
            raise IndexError(f"No node with index {index} in a system of {len(self._nodes)} nodes")
        return self._nodes[index]

    def add_root(self, body: CelestialObject | None = None, position: tuple[float, float] = (0.0, 0.0)) -> int:
        """Add a node fixed at *position*.

        Returns:
            int: Index of the new node.
        """
        self._nodes.append(SystemNode(body=body, position=(float(position[0]), float(position[1]))))
        index = len(self._nodes) - 1
        logger.debug("Added root node %d at (%g, %g)", index, *position)
        return index

    def add_orbiter(
        self,
        parent: int,
        orbit: KeplerianOrbit,
        body: CelestialObject | None = None,
        phase: float = 0.0,
    ) -> int:
        """Add a node following *orbit* around *parent*.

        Args:
            parent: Index of the node at the orbit's focus.
            orbit: Orbit of the new node.
            body: Mass carrier of the new node.
            phase: Mean anomaly at ``t = 0`` [rad].

        Returns:
            int: Index of the new node.

        Raises:
            IndexError: If *parent* does not refer to a node.
        """
        self.node(parent)
        self._nodes.append(SystemNode(body=body, parent=parent, orbit=orbit, phase=float(phase)))
        index = len(self._nodes) - 1
        logger.debug("Added node %d orbiting node %d: %s", index, parent, orbit)
        return index

    def children(self, index: int) -> list[int]:
        """Return the indices of the nodes orbiting *index*."""
        self.node(index)
        return [i for i, n in enumerate(self._nodes) if n.parent == index]

    def mean_anomaly(
        self,
        index: int,
        time: ArrayLike,
        mean_motion: MeanMotion | str = MeanMotion.DEMO,
    ) -> MeanAnomaly:
        """Return the mean anomaly of an orbiting node at *time*.

        Raises:
            IndexError: If *index* does not refer to a node.
            ValueError: If the node is a root, if *mean_motion* is not a
                known model, or if ``PHYSICAL`` is requested for a node
                whose parent has no body.
        """
        mean_motion = MeanMotion(mean_motion)
        node = self.node(index)
        if node.is_root:
            raise ValueError(f"Node {index} is a root and has no orbit")

        time = jnp.asarray(time, dtype=get_dtype())
        a = node.orbit.semimajor_axis
        if mean_motion is MeanMotion.DEMO:
            return MeanAnomaly(node.phase + time / (a * a))

        parent_body = self._nodes[node.parent].body
        if parent_body is None:
            raise ValueError(f"Physical mean motion for node {index} needs a body on parent node {node.parent}")
        return node.orbit.mean_anomaly_at(time, parent_body, node.phase)

    def positions(self, time: ArrayLike, mean_motion: MeanMotion | str = MeanMotion.DEMO) -> Array:
        """Sample absolute positions of every node at *time*.

        Args:
            time: Elapsed time.
            mean_motion: Mean-motion model.

        Returns:
            Array of shape ``(n, 2)``; row ``i`` is the position of node ``i``.
        """
        out: list[Array] = []
        for i, node in enumerate(self._nodes):
            if node.is_root:
                out.append(jnp.asarray(node.position, dtype=get_dtype()))
                continue
            local = self.mean_anomaly(i, time, mean_motion).position_in_parent_frame(node.orbit)
            out.append(out[node.parent] + local)
        if not out:
            return jnp.zeros((0, 2), dtype=get_dtype())
        return jnp.stack(out)

    def orbit_track(
        self,
        index: int,
        count: int = 12,
        time: ArrayLike = 0.0,
        mean_motion: MeanMotion | str = MeanMotion.DEMO,
    ) -> Array:
        """Sample *count* points evenly spaced in mean anomaly along a node's orbit.

        Points start at the node's mean anomaly at *time* and are expressed
        in the parent frame, relative to the parent.

        Returns:
            Array of shape ``(count, 2)``; empty when ``count <= 0``.
        """
        node = self.node(index)
        start = self.mean_anomaly(index, time, mean_motion).angle
        if count <= 0:
            return jnp.zeros((0, 2), dtype=get_dtype())
        offsets = jnp.arange(count, dtype=get_dtype()) * (TWO_PI / count)

        def sample(offset):
            return MeanAnomaly(start + offset).position_in_parent_frame(node.orbit)

        return jax.vmap(sample)(offsets)
