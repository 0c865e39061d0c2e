# MIT License (see LICENSE)
"""
Force rules for the sub-stepped integrator.

A force rule mutates particle velocities (or temperatures) for one
sub-step of size dt. Rules belong to one of two stages, and the integrator
always runs every "source" rule before any "pairwise" rule:

    source    driven by an external source, O(N):
              ConstantAcceleration, Buoyancy, SourceHeating, AmbientCooling,
              CoulombCenter
    pairwise  driven by neighbours within a cutoff, O(N²) worst case:
              PairwiseRepulsion, ThermalExchange, PairwiseGravity

Rules are rebuilt by the owning simulation whenever its parameters
change, so every field here is fixed for at least one frame.

Key concepts:
- Every divisor that is a distance is softened or floored (MIN_DISTANCE).
- Pairwise rules apply equal and opposite changes (Newton's third law),
  so momentum / heat is exchanged, never created.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Protocol, Sequence

import numpy as np

from ..constants import MIN_DISTANCE
from ..types import Particle
from ..util import f64
from ..collision.broadphase import pairs_within
from .thermal import diffuse_pairwise, relax_to_ambient

SOURCE = "source"
PAIRWISE = "pairwise"


class ForceRule(Protocol):
    """Anything with a stage tag and an in-place apply(particles, dt)."""

    stage: ClassVar[str]

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        ...


# =============================================================================
# Source-driven rules
# =============================================================================

@dataclass
class ConstantAcceleration:
    """
    Uniform acceleration field: v += g·dt (gravity, a constant push).

    Attributes:
        g: Acceleration vector; its length must match particle dimension.
    """
    g: np.ndarray
    stage: ClassVar[str] = SOURCE

    def __post_init__(self) -> None:
        self.g = f64(self.g)

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        dv = self.g * dt
        for p in particles:
            p.velocity += dv


@dataclass
class Buoyancy:
    """
    Thermal buoyancy from the Boussinesq approximation.

        a_axis = −g · β · (T − T_ref) · gain

    With screen coordinates (y grows downward) a hot particle gets a
    negative, i.e. upward, acceleration.

    Attributes:
        gravity: Magnitude of gravitational acceleration.
        beta: Thermal expansion coefficient (1/degree).
        ambient: Reference temperature T_ref.
        gain: Extra scale (the convection demo ties it to heater power).
        axis: Velocity component the force acts on.
    """
    gravity: float
    beta: float
    ambient: float
    gain: float = 1.0
    axis: int = 1
    stage: ClassVar[str] = SOURCE

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        k = -self.gravity * self.beta * self.gain * dt
        for p in particles:
            p.velocity[self.axis] += k * (p.temperature - self.ambient)


@dataclass
class SourceHeating:
    """
    Proximity heating from a heater strip on the bottom wall.

    A particle within ``half_width`` horizontally of the heater centre and
    within ``depth`` of the bottom gains

        ΔT = (1 − |x − x_c|/half_width) · (1 − (y_bottom − y)/depth) · power · dt

    capped at ``t_max``.
    """
    center_x: float
    bottom: float
    half_width: float
    depth: float
    power: float
    t_max: float
    stage: ClassVar[str] = SOURCE

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        if self.half_width <= 0.0 or self.depth <= 0.0 or self.power == 0.0:
            return
        for p in particles:
            dx = abs(p.position[0] - self.center_x)
            dy = self.bottom - p.position[1]
            if dx < self.half_width and dy < self.depth:
                proximity = (1.0 - dx / self.half_width) * (1.0 - dy / self.depth)
                p.temperature = min(self.t_max, p.temperature + proximity * self.power * dt)


@dataclass
class AmbientCooling:
    """Newton cooling toward ``ambient`` at ``rate`` per second."""
    ambient: float
    rate: float
    stage: ClassVar[str] = SOURCE

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        relax_to_ambient(particles, self.ambient, self.rate, dt)


@dataclass
class CoulombCenter:
    """
    Softened Coulomb pull/push toward a fixed point charge.

        a = −gain · strength · q / (d² + softening) · d̂ ⊙ axis_scale

    where d̂ points from the particle to the centre. A positive source
    strength attracts negative charges and repels positive ones. Neutral
    particles and particles closer than ``min_distance`` (direction
    undefined) are skipped.

    Attributes:
        center: Source position.
        strength: Signed source strength (polarity × magnitude).
        softening: Added to d² so the force stays bounded near the source.
        gain: Visual scale of the interaction.
        axis_scale: Per-axis multiplier (anisotropic mobility).
    """
    center: np.ndarray
    strength: float
    softening: float = 1000.0
    gain: float = 200.0
    axis_scale: np.ndarray | None = None
    min_distance: float = 1.0
    stage: ClassVar[str] = SOURCE

    def __post_init__(self) -> None:
        self.center = f64(self.center)
        if self.axis_scale is not None:
            self.axis_scale = f64(self.axis_scale)

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        floor = max(self.min_distance, MIN_DISTANCE)
        for p in particles:
            if p.charge == 0.0:
                continue
            r = self.center - p.position
            d = float(np.sqrt(np.dot(r, r)))
            if d < floor:
                continue
            mag = -self.gain * self.strength * p.charge / (d * d + self.softening)
            dv = (mag * dt / d) * r
            if self.axis_scale is not None:
                dv *= self.axis_scale
            p.velocity += dv


# =============================================================================
# Pairwise rules
# =============================================================================

@dataclass
class PairwiseRepulsion:
    """
    Linear short-range repulsion that keeps particles from clumping.

    For every pair closer than ``cutoff``:
        overlap = cutoff − d
        Δv      = overlap · stiffness · dt   along the line of centres
    applied equal and opposite.
    """
    cutoff: float
    stiffness: float
    min_distance: float = 0.1
    stage: ClassVar[str] = PAIRWISE

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        if self.cutoff <= 0.0 or self.stiffness == 0.0:
            return
        floor = max(self.min_distance, MIN_DISTANCE)
        for i, j, d in pairs_within(particles, self.cutoff):
            if d <= floor:
                continue
            a, b = particles[i], particles[j]
            n = (b.position - a.position) / d
            kick = n * ((self.cutoff - d) * self.stiffness * dt)
            a.velocity -= kick
            b.velocity += kick


@dataclass
class ThermalExchange:
    """Conservative nearest-neighbour heat exchange (see core.thermal)."""
    radius: float
    coefficient: float
    stage: ClassVar[str] = PAIRWISE

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        diffuse_pairwise(particles, self.radius, self.coefficient, dt)


def gravity_accelerations(
    positions: np.ndarray,
    masses: np.ndarray,
    G: float,
    softening: float,
) -> np.ndarray:
    """
    Softened Newtonian accelerations for every body, by direct summation.

        a_i = Σ_j G·m_j·(x_j − x_i) / (|x_j − x_i|² + ε²)^{3/2}

    Args:
        positions: Array [N, D].
        masses: Array [N].
        G: Gravitational constant in simulation units.
        softening: ε; must be > 0 for coincident bodies to stay finite.

    Returns:
        Array [N, D] of accelerations.
    """
    n = positions.shape[0]
    acc = np.zeros_like(positions, dtype=np.float64)
    eps2 = softening * softening
    for i in range(n):
        for j in range(i + 1, n):
            r = positions[j] - positions[i]
            d2 = float(np.dot(r, r)) + eps2
            d2 = max(d2, MIN_DISTANCE * MIN_DISTANCE)
            inv_r3 = 1.0 / (d2 * np.sqrt(d2))
            acc[i] += (G * masses[j] * inv_r3) * r
            acc[j] -= (G * masses[i] * inv_r3) * r
    return acc


@dataclass
class PairwiseGravity:
    """
    Softened mutual gravity applied as a velocity kick (symplectic Euler).

    For orbit-quality integration use core.integrators.velocity_verlet_step
    with gravity_accelerations instead; this rule lets gravity join a mixed
    rule list.
    """
    G: float = 1.0
    softening: float = 0.5
    stage: ClassVar[str] = PAIRWISE

    def apply(self, particles: Sequence[Particle], dt: float) -> None:
        if len(particles) < 2:
            return
        pos = np.array([p.position for p in particles], dtype=np.float64)
        m = np.array([p.mass for p in particles], dtype=np.float64)
        acc = gravity_accelerations(pos, m, self.G, self.softening)
        for p, a in zip(particles, acc):
            p.velocity += a * dt


def split_by_stage(rules: Sequence[ForceRule]) -> tuple[list[ForceRule], list[ForceRule]]:
    """Partition rules into (source, pairwise), preserving relative order."""
    sources = [r for r in rules if r.stage == SOURCE]
    pairwise = [r for r in rules if r.stage == PAIRWISE]
    unknown = [r for r in rules if r.stage not in (SOURCE, PAIRWISE)]
    if unknown:
        raise ValueError(f"force rules with unknown stage: {unknown!r}")
    return sources, pairwise
