import math

import numpy as np

from vizphys.materials import ELASTIC, Material
from vizphys.profiler import Profiler
from vizphys.types import Bounds, Particle
from vizphys.core.forces import (
    Buoyancy,
    ConstantAcceleration,
    CoulombCenter,
    PairwiseRepulsion,
    ThermalExchange,
    split_by_stage,
)
from vizphys.core.integrators import (
    IntegratorConfig,
    SubstepIntegrator,
    clamp_frame_dt,
    clamp_speed,
    damping_factor,
)
from vizphys.core.invariants import linear_momentum


def _population(n, rng, speed=50.0, box=(0.0, 0.0, 200.0, 100.0)):
    x0, y0, x1, y1 = box
    return [
        Particle(
            position=(rng.uniform(x0 + 5, x1 - 5), rng.uniform(y0 + 5, y1 - 5)),
            velocity=rng.normal(size=2) * speed,
            radius=2.0,
            temperature=float(rng.uniform(0.0, 100.0)),
            id=i,
        )
        for i in range(n)
    ]


def test_frame_dt_clamp():
    assert clamp_frame_dt(0.01) == 0.01
    assert clamp_frame_dt(10.0) == 0.05
    assert clamp_frame_dt(10.0, max_dt=0.016) == 0.016
    assert clamp_frame_dt(-1.0) == 0.0
    assert clamp_frame_dt(float("nan")) == 0.0
    assert clamp_frame_dt(float("inf")) == 0.0


def test_stalled_frame_does_not_leap():
    """A 5 s host stall integrates at most MAX_FRAME_DT of motion."""
    p = Particle(position=(0.0, 0.0), velocity=(10.0, 0.0))
    integ = SubstepIntegrator(config=IntegratorConfig(substeps=4))
    report = integ.step([p], 5.0)
    assert report.frame_dt == 0.05
    assert abs(report.sub_dt - 0.0125) < 1e-15
    assert abs(p.position[0] - 0.5) < 1e-12


def test_positions_stay_in_bounds_for_any_speed():
    """
    After wall reflection no particle lies outside the box,
    whatever the incoming velocity magnitude.
    """
    rng = np.random.default_rng(11)
    bounds = Bounds(0.0, 0.0, 200.0, 100.0)
    integ = SubstepIntegrator(
        config=IntegratorConfig(substeps=2),
        material=Material(restitution=0.7),
        bounds=bounds,
    )
    for speed in (1.0, 1e3, 1e6, 1e12):
        ps = _population(40, rng, speed=speed)
        for _ in range(30):
            integ.step(ps, 1.0 / 60.0)
            for p in ps:
                assert bounds.contains(p.position, p.radius), (speed, p.position)


def test_restitution_on_wall_hit():
    """Moving right into the wall: v_x' = -e·|v_x|."""
    bounds = Bounds(0.0, 0.0, 10.0, 10.0)
    p = Particle(position=(9.0, 5.0), velocity=(100.0, 0.0), radius=0.5)
    integ = SubstepIntegrator(config=IntegratorConfig(substeps=1), material=Material(restitution=0.5), bounds=bounds)
    report = integ.step([p], 0.05)
    assert p.position[0] == 9.5
    assert p.velocity[0] == -50.0
    assert abs(report.wall_impulse - 150.0) < 1e-12


def test_deterministic_without_jitter():
    """Identical input state and jitter = 0 give bit-identical output."""
    rules = [
        ConstantAcceleration((0.0, 30.0)),
        Buoyancy(200.0, 0.005, 20.0),
        ThermalExchange(radius=12.0, coefficient=0.15),
        PairwiseRepulsion(cutoff=5.0, stiffness=80.0),
    ]
    cfg = IntegratorConfig(substeps=3, damping=0.1, speed_limit=400.0, separate_overlaps=True)
    bounds = Bounds(0.0, 0.0, 200.0, 100.0)

    a = _population(60, np.random.default_rng(5))
    b = _population(60, np.random.default_rng(5))
    ia = SubstepIntegrator(rules, cfg, bounds=bounds)
    ib = SubstepIntegrator(rules, cfg, bounds=bounds)
    for _ in range(40):
        ia.step(a, 1.0 / 60.0)
        ib.step(b, 1.0 / 60.0)
    for pa, pb in zip(a, b):
        assert np.array_equal(pa.position, pb.position)
        assert np.array_equal(pa.velocity, pb.velocity)
        assert pa.temperature == pb.temperature


def test_jitter_uses_generator():
    """Jitter only touches the configured axes."""
    ps = [Particle(position=(50.0, 50.0)) for _ in range(10)]
    integ = SubstepIntegrator(
        config=IntegratorConfig(substeps=1, jitter=100.0, jitter_axes=(0,)),
        rng=np.random.default_rng(0),
    )
    integ.step(ps, 0.05)
    assert any(p.velocity[0] != 0.0 for p in ps)
    assert all(p.velocity[1] == 0.0 for p in ps)


def test_speed_clamp():
    ps = [
        Particle(velocity=(300.0, 400.0)),
        Particle(velocity=(1.0, 1.0)),
        Particle(velocity=(float("nan"), 0.0)),
    ]
    n = clamp_speed(ps, 100.0)
    assert n == 2
    assert abs(ps[0].speed - 100.0) < 1e-12
    # direction kept
    assert abs(ps[0].velocity[0] / ps[0].velocity[1] - 0.75) < 1e-12
    assert ps[1].speed == math.sqrt(2.0)
    assert np.all(ps[2].velocity == 0.0)


def test_damping_factor():
    assert damping_factor(0.0, 0.01) == 1.0
    assert abs(damping_factor(0.05, 1.0 / 60.0) - 0.95) < 1e-12
    # never removes more than 95 % per step
    assert abs(damping_factor(100.0, 1.0) - 0.05) < 1e-12


def test_pairwise_repulsion_conserves_momentum():
    """Equal and opposite kicks: Σ m·v unchanged by pairwise rules."""
    rng = np.random.default_rng(2)
    ps = _population(30, rng)
    p0 = linear_momentum(ps)
    PairwiseRepulsion(cutoff=30.0, stiffness=80.0).apply(ps, 0.01)
    assert np.allclose(linear_momentum(ps), p0, atol=1e-9)


def test_coulomb_center_sign():
    """Positive source pulls electrons in and pushes positive charges out."""
    rule = CoulombCenter(center=(100.0, 0.0), strength=1.0, gain=1000.0, softening=10.0)
    e = Particle(position=(0.0, 0.0), charge=-1.0)
    ion = Particle(position=(0.0, 0.0), charge=1.0)
    neutral = Particle(position=(0.0, 0.0))
    rule.apply([e, ion, neutral], 0.1)
    assert e.velocity[0] > 0.0
    assert ion.velocity[0] < 0.0
    assert neutral.velocity[0] == 0.0
    # on top of the source: direction undefined, skipped
    on = Particle(position=(100.0, 0.0), charge=-1.0)
    rule.apply([on], 0.1)
    assert np.all(np.isfinite(on.velocity)) and np.all(on.velocity == 0.0)


def test_overlap_separation_keeps_bounds():
    bounds = Bounds(0.0, 0.0, 20.0, 20.0)
    ps = [Particle(position=(1.0, 10.0), radius=3.0), Particle(position=(1.0, 10.0), radius=3.0)]
    integ = SubstepIntegrator(
        config=IntegratorConfig(substeps=1, separate_overlaps=True), material=ELASTIC, bounds=bounds
    )
    integ.step(ps, 0.02)
    for p in ps:
        assert bounds.contains(p.position, p.radius)


def test_rule_stages():
    src, pair = split_by_stage([ThermalExchange(5.0, 0.1), ConstantAcceleration((0.0, 1.0))])
    assert len(src) == 1 and len(pair) == 1
    assert isinstance(src[0], ConstantAcceleration)


def test_profiler_sections():
    profiler = Profiler()
    integ = SubstepIntegrator(
        rules=[ConstantAcceleration((0.0, 10.0))],
        config=IntegratorConfig(substeps=2),
        bounds=Bounds(0.0, 0.0, 10.0, 10.0),
        profiler=profiler,
    )
    integ.step([Particle(position=(5.0, 5.0))], 1.0 / 60.0)
    summary = profiler.stats.summary()
    assert summary["sources"]["n"] == 2
    assert summary["walls"]["n"] == 2
    assert "jitter" not in summary
