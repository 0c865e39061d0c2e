import math

from vizphys.core.kepler import (
    kepler_residual,
    mean_anomaly,
    normalize_anomaly,
    orbit_radius,
    orbital_position,
    period_from_axis,
    solve_kepler,
    true_anomaly,
)
from vizphys.types import OrbitalBody


def test_residual_grid():
    """
    For every e in [0, 0.99] and M in [0, 2π):
      |M - (E - e sin E)| < 1e-6
    The high-eccentricity rows (e = 0.9, 0.99) with small M are where an
    unguarded Newton iteration overshoots.
    """
    worst = 0.0
    for e in (0.0, 0.1, 0.3, 0.5, 0.7, 0.9, 0.99):
        for k in range(64):
            M = 2.0 * math.pi * k / 64
            E = solve_kepler(M, e)
            res = kepler_residual(E, M, e)
            worst = max(worst, res)
            assert math.isfinite(E)
            assert res < 1e-6, (e, M, E, res)
    print("kepler worst residual", worst)


def test_half_eccentricity_at_pi():
    """e = 0.5, M = π: sin(π) = 0, so E = π."""
    E = solve_kepler(math.pi, 0.5)
    print("E", E)
    assert abs(E - math.pi) < 1e-6
    assert abs(E - 0.5 * math.sin(E) - math.pi) < 1e-6


def test_circular_orbit_is_identity():
    """e = 0: E = M."""
    for M in (0.0, 0.3, 2.0, 5.5):
        assert abs(solve_kepler(M, 0.0) - M) < 1e-12


def test_unwrapped_mean_anomaly():
    """The solution depends on M only modulo 2π."""
    e = 0.6
    M = 1.234
    E0 = solve_kepler(M, e)
    for turns in (-3, -1, 1, 10, 1000):
        E = solve_kepler(M + turns * 2.0 * math.pi, e)
        assert abs(E - E0) < 1e-9
    assert 0.0 <= normalize_anomaly(-1e-3) < 2.0 * math.pi
    assert normalize_anomaly(2.0 * math.pi) == 0.0


def test_eccentricity_clamped_not_rejected():
    """e >= 1 and NaN are clamped before solving; the result stays finite."""
    for e in (1.0, 5.0, float("nan"), -0.2):
        E = solve_kepler(0.5, e)
        assert math.isfinite(E)


def test_true_anomaly_and_radius():
    """
    Perihelion (E = 0): ν = 0, r = a(1 - e)
    Aphelion   (E = π): ν = π, r = a(1 + e)
    """
    a, e = 2.0, 0.4
    assert abs(true_anomaly(0.0, e)) < 1e-12
    assert abs(abs(true_anomaly(math.pi, e)) - math.pi) < 1e-12
    assert abs(orbit_radius(a, e, 0.0) - a * (1 - e)) < 1e-12
    assert abs(orbit_radius(a, e, math.pi) - a * (1 + e)) < 1e-12


def test_orbit_closes_after_one_period():
    """Position is a pure function of t, so t and t + T coincide."""
    body = OrbitalBody("test", 1.5, 0.3, period=2.0, phase=0.7)
    x0, y0, _ = orbital_position(body, 0.25)
    x1, y1, _ = orbital_position(body, 0.25 + 50 * body.period)
    assert abs(x0 - x1) < 1e-9 and abs(y0 - y1) < 1e-9


def test_mean_anomaly_and_third_law():
    assert abs(mean_anomaly(0.5, 1.0) - math.pi) < 1e-12
    assert mean_anomaly(3.0, 0.0, phase=0.2) == 0.2
    assert abs(period_from_axis(4.0) - 8.0) < 1e-12
