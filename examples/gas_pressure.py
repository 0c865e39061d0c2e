from vizphys import create

# Heat the gas at constant volume and watch the measured pressure follow PV = nRT
sim = create("gas-laws", seed=7)
sim.initialize()

for temperature in (150.0, 300.0, 600.0, 900.0):
    for _ in range(180):
        snapshot = sim.advance(1 / 60, {"temperature": temperature})
    d = snapshot.derived
    print(f"T={temperature:6.1f} K  P={d['pressure']:8.4f}  P/T={d['pressure'] / temperature:.6f}")
