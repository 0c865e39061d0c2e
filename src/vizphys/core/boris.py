# MIT License (see LICENSE)
"""
Boris integrator for a charged particle in a uniform magnetic field.

The Boris scheme rotates the velocity instead of extrapolating it, so the
magnetic force does no work and |v| is preserved exactly (to rounding)
at every step, for any step size. There is no electric field in this
package, so the two half electric kicks of the full scheme are identity
and only the rotation remains:

    t  = (q/m)·B·Δt/2
    s  = 2t / (1 + |t|²)
    v' = v + v × t
    v⁺ = v + v' × s
    x += v⁺·Δt

Stability is unconditional, accuracy is not: the rotation angle per step
is 2·atan(|t|), so large Δt at strong field under-resolves the helix.
Callers split each frame into many small sub-steps (BORIS_SUBSTEPS).

Reference:
    J. P. Boris, "Relativistic plasma simulation", 1970.
    https://en.wikipedia.org/wiki/Particle-in-cell#The_particle_mover
"""
from __future__ import annotations
import math

import numpy as np

from ..constants import BORIS_SUBSTEPS
from ..util import cross3, f64, norm


def boris_rotate(v: np.ndarray, q_over_m: float, B: np.ndarray, dt: float) -> np.ndarray:
    """
    Rotate a velocity about B by the cyclotron angle for one step.

    Args:
        v: Velocity [vx, vy, vz].
        q_over_m: Charge-to-mass ratio.
        B: Magnetic field vector [Bx, By, Bz].
        dt: Step size.

    Returns:
        New velocity array with |v_new| == |v|.
    """
    t = (q_over_m * 0.5 * dt) * B
    s = (2.0 / (1.0 + float(np.dot(t, t)))) * t
    v_prime = v + cross3(v, t)
    return v + cross3(v_prime, s)


def boris_push(
    position: np.ndarray,
    velocity: np.ndarray,
    q_over_m: float,
    B: np.ndarray,
    dt: float,
) -> None:
    """
    One Boris step in place: rotate the velocity, then drift the position.

    Args:
        position: Position [x, y, z] (modified in-place).
        velocity: Velocity [vx, vy, vz] (modified in-place).
    """
    velocity[:] = boris_rotate(velocity, q_over_m, B, dt)
    position += velocity * dt


def boris_advance(
    position: np.ndarray,
    velocity: np.ndarray,
    q_over_m: float,
    B: np.ndarray,
    dt: float,
    substeps: int = BORIS_SUBSTEPS,
) -> None:
    """
    Advance a particle by dt using ``substeps`` equal Boris steps.

    Sub-steps are strictly sequential; each consumes the previous one's
    output.
    """
    if dt <= 0.0 or substeps < 1:
        return
    B = f64(B)
    h = dt / substeps
    for _ in range(substeps):
        boris_push(position, velocity, q_over_m, B, h)


# =============================================================================
# Derived quantities (recomputed for display, never integrated)
# =============================================================================

def split_velocity(v: np.ndarray, B: np.ndarray) -> tuple[float, float]:
    """
    Decompose v into speeds along and across the field axis.

    Returns:
        Tuple (v_parallel, v_perp). v_parallel is signed along B. With a
        zero field the whole speed is reported as perpendicular.
    """
    b = norm(B)
    if b == 0.0:
        return 0.0, norm(v)
    v_par = float(np.dot(v, B)) / b
    v_perp2 = max(float(np.dot(v, v)) - v_par * v_par, 0.0)
    return v_par, math.sqrt(v_perp2)


def cyclotron_frequency(q_over_m: float, B: np.ndarray) -> float:
    """Angular gyration frequency ω = |q|·|B| / m."""
    return abs(q_over_m) * norm(f64(B))


def cyclotron_period(q_over_m: float, B: np.ndarray) -> float:
    """T = 2π / ω; inf when the particle does not gyrate."""
    omega = cyclotron_frequency(q_over_m, B)
    return math.inf if omega == 0.0 else 2.0 * math.pi / omega


def cyclotron_radius(v: np.ndarray, q_over_m: float, B: np.ndarray) -> float:
    """Larmor radius r = m·v_perp / (|q|·B); inf for zero field or charge."""
    B = f64(B)
    omega = cyclotron_frequency(q_over_m, B)
    if omega == 0.0:
        return math.inf
    _, v_perp = split_velocity(v, B)
    return v_perp / omega


def helix_pitch(v: np.ndarray, q_over_m: float, B: np.ndarray) -> float:
    """Distance advanced along B per gyration: 2π·v_parallel / ω (signed)."""
    B = f64(B)
    omega = cyclotron_frequency(q_over_m, B)
    if omega == 0.0:
        return math.inf
    v_par, _ = split_velocity(v, B)
    return 2.0 * math.pi * v_par / omega
