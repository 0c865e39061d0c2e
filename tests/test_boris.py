import math

import numpy as np

from vizphys.core.boris import (
    boris_advance,
    boris_push,
    cyclotron_frequency,
    cyclotron_period,
    cyclotron_radius,
    helix_pitch,
)


def test_speed_preserved():
    """
    The Boris rotation does no work:
      |v_after| == |v_before|
    for any charge, mass, field and step size.
    """
    rng = np.random.default_rng(3)
    for _ in range(20):
        x = np.zeros(3)
        v = rng.normal(size=3) * 5.0
        B = rng.normal(size=3) * 4.0
        qm = rng.uniform(-5.0, 5.0)
        h = rng.uniform(1e-4, 0.5)
        speed0 = float(np.linalg.norm(v))
        for _ in range(500):
            boris_push(x, v, qm, B, h)
        rel = abs(np.linalg.norm(v) - speed0) / speed0
        assert rel < 1e-10


def test_helix_one_period():
    """
    q = m = 1, B = (0, 0, 1), v0 = (1, 1, 0.5)
      T = 2π m / (|q| B) = 2π
    After one period the transverse velocity returns to (1, 1) and
      z = v_parallel · T = π
    """
    T = 2.0 * math.pi
    substeps = int(math.ceil(T / 0.001))
    x = np.zeros(3)
    v = np.array([1.0, 1.0, 0.5])
    boris_advance(x, v, 1.0, np.array([0.0, 0.0, 1.0]), T, substeps=substeps)

    print("v after one period", v, "z", x[2])
    assert abs(v[0] - 1.0) < 1e-4
    assert abs(v[1] - 1.0) < 1e-4
    assert abs(v[2] - 0.5) < 1e-12
    assert abs(x[2] - math.pi) < 1e-9
    # one full circle brings the transverse position back too
    assert abs(x[0]) < 1e-3 and abs(x[1]) < 1e-3


def test_derived_quantities():
    """
    v_perp = √2, v_par = 0.5, ω = 1
      r = √2,  T = 2π,  pitch = 2π · 0.5 = π
    """
    v = np.array([1.0, 1.0, 0.5])
    B = np.array([0.0, 0.0, 1.0])
    assert abs(cyclotron_frequency(1.0, B) - 1.0) < 1e-12
    assert abs(cyclotron_period(1.0, B) - 2.0 * math.pi) < 1e-12
    assert abs(cyclotron_radius(v, 1.0, B) - math.sqrt(2.0)) < 1e-12
    assert abs(helix_pitch(v, 1.0, B) - math.pi) < 1e-12
    # heavier particle, stronger field: r = m v_perp / (|q| B)
    assert abs(cyclotron_radius(v, -2.0 / 4.0, B * 3.0) - math.sqrt(2.0) * 4.0 / 6.0) < 1e-12


def test_zero_field_is_straight_line():
    """With B = 0 there is no gyration: radius and period are infinite."""
    B = np.zeros(3)
    x = np.zeros(3)
    v = np.array([1.0, -2.0, 0.5])
    boris_advance(x, v, 1.0, B, 2.0, substeps=10)
    assert np.allclose(x, [2.0, -4.0, 1.0])
    assert math.isinf(cyclotron_radius(v, 1.0, B))
    assert math.isinf(cyclotron_period(1.0, B))
    assert math.isinf(cyclotron_radius(v, 0.0, np.array([0.0, 0.0, 1.0])))


def test_non_positive_dt_is_noop():
    x = np.zeros(3)
    v = np.array([1.0, 0.0, 0.0])
    boris_advance(x, v, 1.0, np.array([0.0, 0.0, 1.0]), 0.0)
    boris_advance(x, v, 1.0, np.array([0.0, 0.0, 1.0]), -1.0)
    assert np.all(x == 0.0)
    assert np.all(v == [1.0, 0.0, 0.0])
