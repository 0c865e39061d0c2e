import logging

from vizphys import create
from vizphys.renderer import DebugRenderer

logging.basicConfig(level=logging.INFO)

sim = create("convection", seed=1, params={"numParticles": 12})
sim.initialize()
renderer = DebugRenderer(verbose=True)

for frame in range(300):
    snapshot = sim.advance(1 / 60, {"heatIntensity": 80.0, "burnerPosition": 30.0})
    if frame % 100 == 0:
        renderer.render(snapshot)

print(sim.describe_state())
sim.destroy()
