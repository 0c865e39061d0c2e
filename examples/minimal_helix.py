# examples/minimal_helix.py
from vizphys import create

sim = create("lorentz-3d")
sim.initialize()

params = {"charge": 1.0, "magneticField": 1.0, "mass": 1.0}
for _ in range(400):
    snapshot = sim.advance(1 / 60, params)

print("t:", snapshot.time)
print("pos:", snapshot.positions[0])
print("vel:", snapshot.velocities[0])
print(sim.describe_state())
