"""
Microbenchmark: time per frame vs number of particles.
Run:
  python benchmarks/bench_steps.py
"""
import time
import numpy as np
from vizphys.types import Bounds, Particle
from vizphys.materials import SOFT_FLUID
from vizphys.profiler import Profiler
from vizphys.core.forces import Buoyancy, PairwiseRepulsion, ThermalExchange
from vizphys.core.integrators import IntegratorConfig, SubstepIntegrator

def run(n: int, frames: int = 120):
    prof = Profiler()
    bounds = Bounds(0.0, 0.0, 640.0, 480.0)
    integrator = SubstepIntegrator(
        rules=[
            Buoyancy(200.0, 0.005, 20.0),
            ThermalExchange(radius=15.0, coefficient=0.15),
            PairwiseRepulsion(cutoff=7.5, stiffness=80.0),
        ],
        config=IntegratorConfig(substeps=2, damping=0.09, speed_limit=600.0),
        material=SOFT_FLUID,
        bounds=bounds,
        profiler=prof,
    )

    rng = np.random.default_rng(12345)  # determinism (jitter is off)
    particles = [
        Particle(
            position=(float(rng.uniform(0.0, 640.0)), float(rng.uniform(0.0, 480.0))),
            velocity=(0.0, 0.0),
            radius=3.0,
            temperature=float(rng.uniform(20.0, 100.0)),
            id=i,
        )
        for i in range(n)
    ]

    # warmup
    for _ in range(10):
        integrator.step(particles, 1 / 60)

    t0 = time.perf_counter()
    for _ in range(frames):
        integrator.step(particles, 1 / 60)
    t1 = time.perf_counter()

    per_frame = (t1 - t0) / frames
    return per_frame, prof.stats.summary()

if __name__ == "__main__":
    for n in [10, 50, 100, 150, 200]:
        per_frame, summary = run(n)
        print(f"N={n:4d}  frame={1e3*per_frame:8.3f} ms  frames/s={1/per_frame:8.1f}")
        # print top sections
        for k in ["sources", "pairwise", "integrate", "walls"]:
            if k in summary:
                print(" ", k, summary[k])
        print()
