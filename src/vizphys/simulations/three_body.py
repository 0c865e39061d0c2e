# MIT License (see LICENSE)
"""
Three bodies under softened Newtonian gravity.

Integrated with velocity Verlet over 4 sub-steps per frame. The total
energy E = T + U (with the same softening ε in U as in the force) is
tracked every frame; its drift relative to the starting value is the
accuracy indicator shown to the user.

Presets:
    0  figure-8 choreography (Chenciner & Montgomery), scaled to screen units
    1  equilateral triangle, slightly sub-circular speeds
    2  random positions and velocities (from the driver's seeded generator)
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass

import numpy as np

from ..config import Parameters, param
from ..engine import FrameDriver
from ..history import TrailBuffer, append_position
from ..types import Particle
from ..core.forces import gravity_accelerations
from ..core.integrators import clamp_speed, velocity_verlet_step
from ..core.invariants import center_of_mass, gravitational_potential, kinetic_energy

logger = logging.getLogger(__name__)

G = 1.0
SOFTENING = 0.5
SUBSTEPS = 4
TRAIL_LENGTH = 500
ENERGY_HISTORY = 200
SPEED_LIMIT = 1000.0
PRESETS = ("Figure-8", "Equilateral Triangle", "Random")
# Mass changes smaller than this do not restart the preset.
MASS_TOLERANCE = 0.01

# Figure-8 initial conditions (unit masses, G = 1)
FIG8_X, FIG8_Y = 0.97000436, 0.24308753
FIG8_V, FIG8_VY_RATIO = 0.347111, 0.93240737
FIG8_POSITION_SCALE = 100.0
FIG8_VELOCITY_SCALE = 50.0


@dataclass(frozen=True)
class ThreeBodyParams(Parameters):
    preset: int = param(0, "preset", 0, len(PRESETS) - 1, integer=True)
    mass1: float = param(1.0, "mass1", 0.1, 10.0)
    mass2: float = param(1.0, "mass2", 0.1, 10.0)
    mass3: float = param(1.0, "mass3", 0.1, 10.0)
    time_step: float = param(0.5, "timeStep", 0.0, 5.0)

    @property
    def masses(self) -> tuple[float, float, float]:
        return (self.mass1, self.mass2, self.mass3)


def figure_eight(masses) -> list[Particle]:
    x = FIG8_X * FIG8_POSITION_SCALE
    y = FIG8_Y * FIG8_POSITION_SCALE
    vx = FIG8_V * FIG8_VELOCITY_SCALE
    vy = vx * FIG8_VY_RATIO
    return [
        Particle(position=(-x, -y), velocity=(vx, vy), mass=masses[0], id=0),
        Particle(position=(x, y), velocity=(vx, vy), mass=masses[1], id=1),
        Particle(position=(0.0, 0.0), velocity=(-2.0 * vx, -2.0 * vy), mass=masses[2], id=2),
    ]


def triangle(masses, r: float = 80.0) -> list[Particle]:
    """Bodies on a circle of radius r, moving tangentially at 0.8 × √(G·M/(3r))."""
    v = math.sqrt(G * sum(masses) / (3.0 * r)) * 0.8
    bodies = []
    for i in range(3):
        a = i * 2.0 * math.pi / 3.0 - 0.5 * math.pi
        va = a + 0.5 * math.pi
        bodies.append(Particle(
            position=(r * math.cos(a), r * math.sin(a)),
            velocity=(v * math.cos(va), v * math.sin(va)),
            mass=masses[i],
            id=i,
        ))
    return bodies


def random_bodies(masses, rng: np.random.Generator) -> list[Particle]:
    bodies = []
    for i in range(3):
        pos = (rng.random(2) - 0.5) * 150.0
        vel = (rng.random(2) - 0.5) * 20.0
        bodies.append(Particle(position=pos, velocity=vel, mass=masses[i], id=i))
    return bodies


class ThreeBodySim(FrameDriver):
    name = "three-body-problem"
    title = "Three-body problem"
    params_type = ThreeBodyParams

    def __init__(self, params=None, seed: int = 0) -> None:
        super().__init__(params, seed)
        self.trails = [TrailBuffer(TRAIL_LENGTH) for _ in range(3)]
        self.energy_history: TrailBuffer[float] = TrailBuffer(ENERGY_HISTORY)
        self.initial_energy = 0.0
        self._acc: np.ndarray | None = None

    def _spawn(self) -> None:
        p = self.params
        if p.preset == 0:
            self.particles = figure_eight(p.masses)
        elif p.preset == 1:
            self.particles = triangle(p.masses)
        else:
            self.particles = random_bodies(p.masses, self.rng)
        for t in self.trails:
            t.clear()
        self.energy_history.clear()
        self._acc = None
        self.initial_energy = self.total_energy()
        logger.debug("three-body preset %s, E0=%.6g", PRESETS[p.preset], self.initial_energy)

    def _apply_params(self, old: ThreeBodyParams) -> None:
        p = self.params
        self._acc = None
        masses_changed = any(abs(b.mass - m) > MASS_TOLERANCE for b, m in zip(self.particles, p.masses))
        if p.preset != old.preset or masses_changed:
            self.rng = np.random.default_rng(self.seed)
            self._spawn()

    def _arrays_of_state(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        pos = np.array([b.position for b in self.particles], dtype=np.float64)
        vel = np.array([b.velocity for b in self.particles], dtype=np.float64)
        m = np.array([b.mass for b in self.particles], dtype=np.float64)
        return pos, vel, m

    def _step(self, dt: float) -> None:
        if not self.particles:
            return
        h = dt * self.params.time_step * 0.5 / SUBSTEPS
        if h > 0.0:
            pos, vel, m = self._arrays_of_state()

            def acceleration(x: np.ndarray) -> np.ndarray:
                return gravity_accelerations(x, m, G, SOFTENING)

            acc = self._acc
            for _ in range(SUBSTEPS):
                acc = velocity_verlet_step(pos, vel, h, acceleration, acc)
            self._acc = acc
            for b, x, v in zip(self.particles, pos, vel):
                b.position[:] = x
                b.velocity[:] = v
            if clamp_speed(self.particles, SPEED_LIMIT):
                self._acc = None
        for b, trail in zip(self.particles, self.trails):
            append_position(trail, b.position)
        self.energy_history.append(self.total_energy())

    # -------------------------------------------------------------------------
    # Energy
    # -------------------------------------------------------------------------

    def potential_energy(self) -> float:
        if not self.particles:
            return 0.0
        pos, _, m = self._arrays_of_state()
        return gravitational_potential(pos, m, G, SOFTENING)

    def total_energy(self) -> float:
        return kinetic_energy(self.particles) + self.potential_energy()

    def energy_drift(self) -> float:
        """|E − E0| / |E0| in percent; 0 when E0 is 0."""
        if self.initial_energy == 0.0:
            return 0.0
        return abs((self.total_energy() - self.initial_energy) / self.initial_energy) * 100.0

    def _trails(self) -> dict[str, np.ndarray]:
        out: dict[str, np.ndarray] = {}
        for i, trail in enumerate(self.trails):
            pts = trail.to_list()
            out[f"body{i + 1}"] = np.array(pts) if pts else np.zeros((0, 2))
        out["energy"] = np.array(self.energy_history.to_list(), dtype=np.float64)
        return out

    def _release(self) -> None:
        super()._release()
        for t in self.trails:
            t.clear()
        self.energy_history.clear()
        self._acc = None

    def derived(self) -> dict[str, float]:
        ke = kinetic_energy(self.particles)
        pe = self.potential_energy()
        out = {
            "kinetic_energy": ke,
            "potential_energy": pe,
            "total_energy": ke + pe,
            "energy_drift_pct": self.energy_drift(),
        }
        if self.particles:
            pos, _, m = self._arrays_of_state()
            cm = center_of_mass(pos, m)
            out["com_x"], out["com_y"] = float(cm[0]), float(cm[1])
        return out

    def describe_state(self) -> str:
        return f"{super().describe_state()} Preset: {PRESETS[self.params.preset]}."
