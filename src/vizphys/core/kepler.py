# MIT License (see LICENSE)
"""
Kepler's equation and the orbital helpers built on it.

Kepler's equation links mean anomaly M to eccentric anomaly E:
    M = E - e·sin(E)
It has no closed-form inverse and is solved with bracketed Newton-Raphson:
    E_{n+1} = E_n - (E_n - e·sin E_n - M) / (1 - e·cos E_n),   E_0 = M

Orbital state is never integrated. Every frame the mean anomaly is
recomputed from elapsed time, wrapped into [0, 2π), and solved afresh, so
the true anomaly cannot drift no matter how long the session runs.

Reference:
    https://en.wikipedia.org/wiki/Kepler%27s_equation
"""
from __future__ import annotations
import logging
import math

from ..constants import KEPLER_ITERATIONS, MAX_ECCENTRICITY, TWO_PI
from ..types import OrbitalBody
from ..util import clamp

logger = logging.getLogger(__name__)


def normalize_anomaly(M: float) -> float:
    """
    Wrap an angle into [0, 2π).

    fmod keeps the sign of M, so negative inputs are shifted up by 2π; the
    last check handles a shifted value that rounds to exactly 2π.
    """
    out = math.fmod(M, TWO_PI)
    if out < 0.0:
        out += TWO_PI
    if out >= TWO_PI:
        out = 0.0
    return out


def clamp_eccentricity(e: float) -> float:
    """Clamp e into [0, MAX_ECCENTRICITY]; NaN becomes 0 (circular)."""
    if not math.isfinite(e):
        logger.debug("non-finite eccentricity %r replaced by 0", e)
        return 0.0
    out = clamp(e, 0.0, MAX_ECCENTRICITY)
    if out != e:
        logger.debug("eccentricity %r clamped to %r", e, out)
    return out


def solve_kepler(M: float, e: float, iterations: int = KEPLER_ITERATIONS) -> float:
    """
    Solve M = E - e·sin(E) for the eccentric anomaly E.

    Args:
        M: Mean anomaly in radians, any real value (wrapped internally).
        e: Eccentricity. Clamped into [0, MAX_ECCENTRICITY] first; Newton's
           method is not guaranteed to converge for e >= 1.
        iterations: Fixed Newton iteration count. No convergence test is
                    made; the count itself is the safety bound.

    Returns:
        E in radians, satisfying the equation for the wrapped M to better
        than 1e-6 for every e in [0, 0.99].

    Note:
        The root always lies in [M − e, M + e] (since |E − M| = |e·sin E|).
        Near e = 0.99 and M ≈ 0 a raw Newton step from E₀ = M can overshoot
        far outside that bracket and never come back, so a step that would
        leave the shrinking bracket is replaced by a bisection.
    """
    e = clamp_eccentricity(e)
    M = normalize_anomaly(M)
    lo, hi = M - e, M + e
    E = M
    for _ in range(iterations):
        f = E - e * math.sin(E) - M
        if f == 0.0:
            break
        if f < 0.0:
            lo = E
        else:
            hi = E
        E_next = E - f / (1.0 - e * math.cos(E))
        if not lo <= E_next <= hi:
            E_next = 0.5 * (lo + hi)
        E = E_next
    return E


def kepler_residual(E: float, M: float, e: float) -> float:
    """|M - (E - e·sin E)|, used to verify a solution."""
    return abs(normalize_anomaly(M) - (E - e * math.sin(E)))


def true_anomaly(E: float, e: float) -> float:
    """
    Convert eccentric anomaly to true anomaly ν.

        ν = 2·atan2(√(1+e)·sin(E/2), √(1−e)·cos(E/2))

    The atan2 form is quadrant-safe over the whole orbit.
    """
    return 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(0.5 * E),
        math.sqrt(1.0 - e) * math.cos(0.5 * E),
    )


def orbit_radius(a: float, e: float, nu: float) -> float:
    """Focal distance on the ellipse: r = a(1 − e²) / (1 + e·cos ν)."""
    return a * (1.0 - e * e) / (1.0 + e * math.cos(nu))


def mean_anomaly(t: float, period: float, phase: float = 0.0) -> float:
    """
    Mean anomaly after time t: M = 2π·t / T + phase.

    A non-positive period is treated as a body that never moves.
    """
    if period <= 0.0:
        return phase
    return TWO_PI * t / period + phase


def orbital_position(body: OrbitalBody, t: float) -> tuple[float, float, float]:
    """
    Heliocentric position of a body at time t.

    Returns:
        Tuple (x, y, ν): focus-centred coordinates and the true anomaly.
    """
    e = clamp_eccentricity(body.eccentricity)
    E = solve_kepler(mean_anomaly(t, body.period, body.phase), e)
    nu = true_anomaly(E, e)
    r = orbit_radius(body.semi_major_axis, e, nu)
    return r * math.cos(nu), r * math.sin(nu), nu


def swept_area_rate(a: float, e: float, period: float) -> float:
    """
    Area swept per unit time by the focus-body line (Kepler's second law).

        dA/dt = π·a·b / T,   b = a·√(1 − e²)

    Constant along the orbit; returns 0 for a non-positive period.
    """
    if period <= 0.0:
        return 0.0
    e = clamp_eccentricity(e)
    return math.pi * a * a * math.sqrt(1.0 - e * e) / period


def period_from_axis(a: float) -> float:
    """Kepler's third law in solar units: T² = a³ (T in years, a in AU)."""
    return math.sqrt(max(a, 0.0) ** 3)
