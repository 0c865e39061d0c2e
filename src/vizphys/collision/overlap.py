# MIT License (see LICENSE)
"""
Soft positional correction for overlapping particles.

Not a constraint solver: each overlapping pair is pushed apart along the
line of centres by a fraction of its penetration depth, split by inverse
mass. Repeated every sub-step this settles overlaps over a few frames
without the jitter of a hard projection.

    penetration = (r_i + r_j) − d
    correction  = percent · max(penetration − slop, 0) / (1/m_i + 1/m_j)
    x_i −= n · correction / m_i
    x_j += n · correction / m_j
"""
from __future__ import annotations
from typing import Iterable, Sequence

import numpy as np

from ..constants import MIN_DISTANCE
from ..types import Particle
from .broadphase import pairs_within


def separate_pair(a: Particle, b: Particle, percent: float, slop: float) -> float:
    """
    Push one pair apart.

    The separation is measured from current positions, since earlier pairs
    in the same pass may already have moved either particle.

    Returns:
        The penetration depth that was found (0 if not overlapping).
    """
    r = b.position - a.position
    distance = float(np.sqrt(np.dot(r, r)))
    penetration = a.radius + b.radius - distance
    if penetration <= 0.0:
        return 0.0
    d = max(distance, MIN_DISTANCE)
    if distance < MIN_DISTANCE:
        # coincident centres: pick a fixed axis so the result is deterministic
        n = np.zeros_like(r)
        n[0] = 1.0
    else:
        n = r / d
    inv_a, inv_b = 1.0 / a.mass, 1.0 / b.mass
    correction = percent * max(penetration - slop, 0.0) / (inv_a + inv_b)
    a.position -= n * (correction * inv_a)
    b.position += n * (correction * inv_b)
    return penetration


def resolve_overlaps(
    particles: Sequence[Particle],
    percent: float = 0.8,
    slop: float = 0.0,
    pairs: Iterable[tuple[int, int, float]] | None = None,
) -> float:
    """
    One separation pass over all overlapping pairs.

    Args:
        particles: Population (positions modified in-place).
        percent: Fraction of penetration corrected per pass, in (0, 1].
        slop: Penetration tolerated without correction.
        pairs: Precomputed (i, j, distance) triples; computed from the
               largest particle diameter when None.

    Returns:
        Deepest penetration seen in this pass.
    """
    if len(particles) < 2:
        return 0.0
    if pairs is None:
        reach = 2.0 * max(p.radius for p in particles)
        pairs = pairs_within(particles, reach)
    deepest = 0.0
    for i, j, _ in pairs:
        deepest = max(deepest, separate_pair(particles[i], particles[j], percent, slop))
    return deepest
