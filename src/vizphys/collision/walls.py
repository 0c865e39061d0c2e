# MIT License (see LICENSE)
"""
Boundary clamping and reflection.

For each bounded axis, a particle whose extent (position ± radius) crosses
a wall is clamped back onto the wall and its velocity component on that
axis is set to point inward with magnitude |v|·restitution:

    left wall:   x = x_min + r,  vx =  |vx|·e
    right wall:  x = x_max − r,  vx = −|vx|·e

Forcing the sign (rather than negating) means a particle already moving
inward is never turned back out, even if it was pushed past the wall by
another rule. After this pass every particle lies inside the bounds, for
any input velocity.

The returned impulse is Σ |Δv| over all wall hits: the momentum (per unit
mass) handed to the walls, from which the gas simulation measures pressure.
"""
from __future__ import annotations
from typing import Iterable

from ..types import Bounds, Particle


def reflect_particle(p: Particle, bounds: Bounds, restitution: float) -> float:
    """
    Clamp one particle into bounds and reflect its velocity.

    Returns:
        |Δv| summed over the walls hit during this call.
    """
    impulse = 0.0
    r = p.radius
    pos, vel = p.position, p.velocity
    for axis, lo, hi in ((0, bounds.x_min, bounds.x_max), (1, bounds.y_min, bounds.y_max)):
        lo_r, hi_r = lo + r, hi - r
        if lo_r > hi_r:
            # box thinner than the particle: pin to the midline and stop
            pos[axis] = 0.5 * (lo + hi)
            impulse += abs(vel[axis])
            vel[axis] = 0.0
            continue
        if pos[axis] < lo_r:
            pos[axis] = lo_r
            v_in = abs(vel[axis]) * restitution
            impulse += abs(v_in - vel[axis])
            vel[axis] = v_in
        elif pos[axis] > hi_r:
            pos[axis] = hi_r
            v_in = -abs(vel[axis]) * restitution
            impulse += abs(v_in - vel[axis])
            vel[axis] = v_in
    return impulse


def reflect_into_bounds(particles: Iterable[Particle], bounds: Bounds, restitution: float) -> float:
    """
    Apply reflect_particle to a population.

    Args:
        particles: Population (modified in-place).
        bounds: Reflection box.
        restitution: Fraction of normal speed kept; 1 = elastic.

    Returns:
        Total wall impulse Σ|Δv| for this pass.
    """
    total = 0.0
    for p in particles:
        total += reflect_particle(p, bounds, restitution)
    return total


def clamp_into_bounds(particles: Iterable[Particle], bounds: Bounds) -> int:
    """
    Move particles back inside bounds without touching velocities.

    Used after a resize shrinks the box.

    Returns:
        Number of particles that had to be moved.
    """
    moved = 0
    for p in particles:
        if not bounds.contains(p.position, p.radius):
            bounds.clamp_point(p.position, p.radius)
            moved += 1
    return moved
