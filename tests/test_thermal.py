import numpy as np

from vizphys.types import Particle
from vizphys.core.thermal import (
    diffuse_pairwise,
    exchange,
    mean_temperature,
    relax_to_ambient,
    total_temperature,
)


def test_two_particle_exchange():
    """
    T_a = 100, T_b = 0, D = 0.1, d ≈ 0 (floored), one pass with dt = 1:
      factor ≈ D · (1 - d/R) ≈ 0.1
      T_a ≈ 90, T_b ≈ 10, sum stays 100
    """
    a = Particle(position=(0.0, 0.0), temperature=100.0)
    b = Particle(position=(1e-9, 0.0), temperature=0.0)
    diffuse_pairwise([a, b], radius=10.0, coefficient=0.1)
    print("after one pass", a.temperature, b.temperature)
    assert abs(a.temperature - 90.0) < 1e-3
    assert abs(b.temperature - 10.0) < 1e-3
    assert abs((a.temperature - 100.0) + (b.temperature - 0.0)) < 1e-12
    assert abs(a.temperature + b.temperature - 100.0) < 1e-12


def test_coincident_particles_stay_finite():
    a = Particle(position=(5.0, 5.0), temperature=80.0)
    b = Particle(position=(5.0, 5.0), temperature=20.0)
    delta = exchange(a, b, 0.0, 4.0, 0.2, 1.0)
    assert np.isfinite(delta)
    assert np.isfinite(a.temperature) and np.isfinite(b.temperature)


def test_out_of_range_pair_untouched():
    a = Particle(position=(0.0, 0.0), temperature=100.0)
    b = Particle(position=(20.0, 0.0), temperature=0.0)
    diffuse_pairwise([a, b], radius=10.0, coefficient=0.5)
    assert a.temperature == 100.0 and b.temperature == 0.0


def test_total_conserved_many_particles():
    """Σ T is unchanged by the exchange pass (no ambient term)."""
    rng = np.random.default_rng(7)
    ps = [
        Particle(position=rng.random(2) * 100.0, temperature=float(rng.uniform(0.0, 100.0)))
        for _ in range(120)
    ]
    total0 = total_temperature(ps)
    for _ in range(50):
        diffuse_pairwise(ps, radius=15.0, coefficient=0.15, dt=1.0 / 60.0)
    total1 = total_temperature(ps)
    print("sum before", total0, "after", total1)
    assert abs(total1 - total0) <= 1e-9 * abs(total0)


def test_relax_to_ambient():
    """Newton cooling: T += (T_amb - T)·k·dt, not conservative."""
    ps = [Particle(temperature=100.0), Particle(temperature=0.0)]
    relax_to_ambient(ps, ambient=20.0, rate=0.5, dt=1.0)
    assert abs(ps[0].temperature - 60.0) < 1e-12
    assert abs(ps[1].temperature - 10.0) < 1e-12
    assert abs(mean_temperature(ps) - 35.0) < 1e-12
    assert mean_temperature([]) == 0.0
