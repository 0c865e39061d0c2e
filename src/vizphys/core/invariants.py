# MIT License (see LICENSE)
"""
Conserved and monitored quantities.

Used by simulations to report derived state and by the tests to verify
the integrators: Boris preserves kinetic energy exactly, the heat exchange
pass preserves Σ T, velocity Verlet keeps total orbital energy bounded.
"""
from __future__ import annotations
from typing import Sequence

import numpy as np

from ..types import Particle


def kinetic_energy(particles: Sequence[Particle]) -> float:
    """
    Total kinetic energy T = Σ ½·m·|v|².
    """
    ke = 0.0
    for p in particles:
        ke += 0.5 * p.mass * float(np.dot(p.velocity, p.velocity))
    return ke


def linear_momentum(particles: Sequence[Particle]) -> np.ndarray:
    """
    Total linear momentum P = Σ m·v.

    Returns:
        Momentum vector with the particles' dimensionality (zeros(2) when empty).
    """
    if not particles:
        return np.zeros(2, dtype=np.float64)
    p_tot = np.zeros_like(particles[0].velocity, dtype=np.float64)
    for p in particles:
        p_tot += p.mass * p.velocity
    return p_tot


def max_speed(particles: Sequence[Particle]) -> float:
    if not particles:
        return 0.0
    return max(p.speed for p in particles)


def mean_speed(particles: Sequence[Particle]) -> float:
    if not particles:
        return 0.0
    return sum(p.speed for p in particles) / len(particles)


def gravitational_potential(positions: np.ndarray, masses: np.ndarray, G: float, softening: float) -> float:
    """
    Softened pairwise potential U = −Σ_{i<j} G·m_i·m_j / √(r² + ε²).

    Uses the same softening as core.forces.gravity_accelerations, so
    T + U is the conserved quantity of that force law.
    """
    u = 0.0
    eps2 = softening * softening
    n = positions.shape[0]
    for i in range(n):
        for j in range(i + 1, n):
            r = positions[j] - positions[i]
            u -= G * masses[i] * masses[j] / float(np.sqrt(np.dot(r, r) + eps2))
    return u


def center_of_mass(positions: np.ndarray, masses: np.ndarray) -> np.ndarray:
    """Mass-weighted mean position; the plain mean when total mass is 0."""
    total = float(np.sum(masses))
    if total <= 0.0:
        return positions.mean(axis=0)
    return (masses[:, None] * positions).sum(axis=0) / total
