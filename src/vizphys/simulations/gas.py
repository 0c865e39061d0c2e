# MIT License (see LICENSE)
"""
Ideal gas in a box with a movable wall (PV = nRT).

Particles start with Maxwell–Boltzmann velocities: each component is
normal with σ = √(k_B·T / m). They fly freely and bounce elastically off
the walls. Pressure is measured, not computed: the impulse handed to the
walls each frame, averaged over a window and divided by the perimeter.

Changing the temperature rescales every speed by √(T_new / T_old), the
same as if the gas had been heated isochorically.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass

import numpy as np

from ..config import Parameters, param
from ..constants import MAX_PARTICLES
from ..engine import FrameDriver
from ..history import TrailBuffer
from ..materials import ELASTIC
from ..types import Bounds, Particle
from ..core.integrators import IntegratorConfig, SubstepIntegrator
from ..core.invariants import kinetic_energy, mean_speed

logger = logging.getLogger(__name__)

K_B = 1.380649e-23          # J/K
PARTICLE_MASS_KG = 4.65e-26  # N2 molecule
REFERENCE_FPS = 60.0
# 476 m/s (mean N2 speed at 300 K) is drawn as 3 px per 60 Hz frame.
SPEED_SCALE = 3.0 / 476.0 * REFERENCE_FPS  # px/s per m/s
PARTICLE_RADIUS = 3.0
PRESSURE_WINDOW = 60
SPEED_LIMIT = 5000.0

MARGIN_TOP = 60.0
MARGIN_BOTTOM = 80.0
MARGIN_LEFT = 60.0
MARGIN_RIGHT = 60.0
PISTON_WIDTH = 18.0


def thermal_sigma(temperature: float) -> float:
    """Standard deviation of one velocity component, in m/s."""
    return math.sqrt(K_B * max(temperature, 0.0) / PARTICLE_MASS_KG)


def mean_thermal_speed(temperature: float) -> float:
    """Maxwell–Boltzmann mean speed √(8·k_B·T / (π·m)), in m/s."""
    return math.sqrt(8.0 * K_B * max(temperature, 0.0) / (math.pi * PARTICLE_MASS_KG))


@dataclass(frozen=True)
class GasParams(Parameters):
    temperature: float = param(300.0, "temperature", 50.0, 1000.0)
    volume: float = param(60.0, "volume", 20.0, 100.0)
    num_particles: int = param(80, "numParticles", 0, MAX_PARTICLES, integer=True)


class IdealGasSim(FrameDriver):
    name = "gas-laws"
    title = "Ideal gas"
    params_type = GasParams

    def __init__(self, params=None, seed: int = 0) -> None:
        super().__init__(params, seed)
        self.integrator = SubstepIntegrator(
            config=IntegratorConfig(substeps=3, speed_limit=SPEED_LIMIT),
            material=ELASTIC,
        )
        self.impulses: TrailBuffer[float] = TrailBuffer(PRESSURE_WINDOW)
        self.pressure = 0.0

    def _layout(self) -> None:
        w, h = self.surface.width, self.surface.height
        full = max(w - MARGIN_LEFT - MARGIN_RIGHT - PISTON_WIDTH, 2.0 * PARTICLE_RADIUS)
        left = MARGIN_LEFT + PISTON_WIDTH
        bottom = max(h - MARGIN_BOTTOM, MARGIN_TOP + 2.0 * PARTICLE_RADIUS)
        self.bounds = Bounds(left, MARGIN_TOP, left + full * self.params.volume / 100.0, bottom)
        self.integrator.bounds = self.bounds

    def _new_particle(self) -> Particle:
        b = self.bounds
        r = PARTICLE_RADIUS
        x = b.x_min + r + self.rng.random() * max(b.width - 2.0 * r, 0.0)
        y = b.y_min + r + self.rng.random() * max(b.height - 2.0 * r, 0.0)
        v = self.rng.normal(0.0, thermal_sigma(self.params.temperature), size=2) * SPEED_SCALE
        return Particle(position=(x, y), velocity=v, radius=r, id=len(self.particles))

    def _spawn(self) -> None:
        self.particles = []
        for _ in range(self.params.num_particles):
            self.particles.append(self._new_particle())
        self.impulses.clear()
        self.pressure = 0.0

    def _apply_params(self, old: GasParams) -> None:
        p = self.params
        if p.temperature != old.temperature and old.temperature > 0.0:
            factor = math.sqrt(p.temperature / old.temperature)
            for particle in self.particles:
                particle.velocity *= factor
            logger.debug("gas speeds rescaled by %.4f", factor)
        if p.volume != old.volume:
            self._layout()
        if p.num_particles != old.num_particles:
            while len(self.particles) < p.num_particles:
                self.particles.append(self._new_particle())
            del self.particles[p.num_particles:]

    def _step(self, dt: float) -> None:
        report = self.integrator.step(self.particles, dt)
        # impulse in px/frame units, independent of the host frame rate
        self.impulses.append(report.wall_impulse / REFERENCE_FPS)
        self.pressure = self.measured_pressure()

    def measured_pressure(self) -> float:
        """Mean wall impulse per frame over the window, per unit perimeter (×1000)."""
        if not len(self.impulses) or self.bounds is None:
            return 0.0
        perimeter = 2.0 * (self.bounds.width + self.bounds.height)
        if perimeter <= 0.0:
            return 0.0
        avg = sum(self.impulses) / len(self.impulses)
        return avg / perimeter * 1000.0

    def _trails(self) -> dict[str, np.ndarray]:
        return {"wall_impulse": np.array(self.impulses.to_list(), dtype=np.float64)}

    def _release(self) -> None:
        super()._release()
        self.impulses.clear()

    def derived(self) -> dict[str, float]:
        p = self.params
        return {
            "particles": float(len(self.particles)),
            "temperature": p.temperature,
            "volume": p.volume,
            "pressure": self.pressure,
            "mean_speed": mean_speed(self.particles),
            "kinetic_energy": kinetic_energy(self.particles),
            "mb_mean_speed": mean_thermal_speed(p.temperature),
        }
