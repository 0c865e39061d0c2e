import math

from vizphys import create
from vizphys.io import save_snapshot

# Ten years of the inner solar system; orbits are solved, never integrated
sim = create("keplers-law")
sim.initialize()

for _ in range(300):
    snapshot = sim.advance(1 / 60, {"speed": 2.0, "eccentricity": 0.9})

for body, (x, y) in zip(sim.planets, snapshot.positions):
    print(f"{body.name:8s} r={math.hypot(x, y):.3f} AU")
print(sim.describe_state())
save_snapshot(snapshot, "kepler_frame.json")
