# MIT License (see LICENSE)
"""
Nearest-neighbour heat exchange and Newton cooling.

Diffusion is approximated by exchanging temperature between every pair of
particles closer than a cutoff radius:

    factor = D · (1 − d / R) · Δt
    δ      = (T_j − T_i) · factor
    T_i   += δ,  T_j −= δ

Each exchange is antisymmetric, so Σ T over the system is conserved up to
floating-point rounding by the exchange pass. Relaxation toward ambient
(Newton's law of cooling) is a separate, non-conserving pass:

    T += (T_ambient − T) · k · Δt
"""
from __future__ import annotations
from typing import Iterable, Sequence

from ..constants import MIN_DISTANCE
from ..types import Particle
from ..collision.broadphase import pairs_within


def exchange(a: Particle, b: Particle, distance: float, radius: float, coefficient: float, dt: float) -> float:
    """
    Exchange heat between one pair.

    Returns:
        The amount transferred into ``a`` (negative if ``a`` lost heat).
    """
    d = max(distance, MIN_DISTANCE)
    if d >= radius:
        return 0.0
    factor = coefficient * (1.0 - d / radius) * dt
    delta = (b.temperature - a.temperature) * factor
    a.temperature += delta
    b.temperature -= delta
    return delta


def diffuse_pairwise(
    particles: Sequence[Particle],
    radius: float,
    coefficient: float,
    dt: float = 1.0,
    pairs: Iterable[tuple[int, int, float]] | None = None,
) -> None:
    """
    One conservative exchange pass over all pairs within ``radius``.

    Pairs are processed in (i, j) lexicographic order with i < j, the same
    order as a nested loop, so results are reproducible.

    Args:
        particles: Population (temperatures modified in-place).
        radius: Interaction cutoff. Pairs at d >= radius do not interact.
        coefficient: Diffusion coefficient D.
        dt: Sub-step size. Defaults to 1 for a single unit pass.
        pairs: Precomputed (i, j, distance) triples. Computed here when None.
    """
    if radius <= 0.0 or coefficient == 0.0:
        return
    if pairs is None:
        pairs = pairs_within(particles, radius)
    for i, j, d in pairs:
        exchange(particles[i], particles[j], d, radius, coefficient, dt)


def relax_to_ambient(particles: Iterable[Particle], ambient: float, rate: float, dt: float) -> None:
    """Newton's law of cooling applied to every particle."""
    k = rate * dt
    if k == 0.0:
        return
    for p in particles:
        p.temperature += (ambient - p.temperature) * k


def total_temperature(particles: Iterable[Particle]) -> float:
    """Σ T over the population (the quantity the exchange pass conserves)."""
    return float(sum(p.temperature for p in particles))


def mean_temperature(particles: Sequence[Particle]) -> float:
    if not particles:
        return 0.0
    return total_temperature(particles) / len(particles)
