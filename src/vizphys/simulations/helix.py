# MIT License (see LICENSE)
"""
Charged particle in a uniform magnetic field (3D helix).

The field points along +z. The velocity component across the field
gyrates at ω = |q|·B/m while the component along it is untouched, so the
path is a helix of radius m·v⊥/(|q|·B) and pitch 2π·v∥/ω. The Boris
push keeps |v| fixed for any field strength.
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass

import numpy as np

from ..config import Parameters, param
from ..constants import BORIS_SUBSTEPS, MIN_MASS
from ..engine import FrameDriver
from ..history import TrailBuffer, append_position
from ..types import FieldState, Particle
from ..core.boris import (
    boris_advance,
    cyclotron_frequency,
    cyclotron_period,
    cyclotron_radius,
    helix_pitch,
)

logger = logging.getLogger(__name__)

MAX_TRAIL = 3000
# Frames longer than this are truncated before the Boris sub-steps.
MAX_HELIX_DT = 0.016


@dataclass(frozen=True)
class HelixParams(Parameters):
    charge: float = param(1.0, "charge", -5.0, 5.0)
    magnetic_field: float = param(1.0, "magneticField", 0.0, 5.0)
    mass: float = param(1.0, "mass", MIN_MASS, 10.0)
    vx: float = param(1.0, "vx", -5.0, 5.0)
    vy: float = param(1.0, "vy", -5.0, 5.0)
    vz: float = param(0.5, "vz", -5.0, 5.0)


class HelixSim(FrameDriver):
    """
    Lorentz-force helix.

    ``vx``, ``vy`` and ``vz`` are launch velocities: they take effect on
    reset. Charge, mass and field strength apply from the next frame.
    """

    name = "lorentz-3d"
    title = "Lorentz force 3D"
    params_type = HelixParams
    dim = 3
    max_frame_dt = MAX_HELIX_DT

    def __init__(self, params=None, seed: int = 0) -> None:
        super().__init__(params, seed)
        self.trail: TrailBuffer[np.ndarray] = TrailBuffer(MAX_TRAIL)
        self.field = FieldState()
        self._update_field()

    @property
    def particle(self) -> Particle:
        return self.particles[0]

    def _update_field(self) -> None:
        self.field = FieldState(magnetic=(0.0, 0.0, self.params.magnetic_field))

    def _spawn(self) -> None:
        p = self.params
        self.particles = [
            Particle(
                position=(0.0, 0.0, 0.0),
                velocity=(p.vx, p.vy, p.vz),
                radius=0.05,
                mass=p.mass,
                charge=p.charge,
                id=0,
            )
        ]
        self.trail.clear()
        append_position(self.trail, self.particle.position)

    def _apply_params(self, old: HelixParams) -> None:
        self._update_field()
        if self.particles:
            self.particle.charge = self.params.charge
            self.particle.mass = max(self.params.mass, MIN_MASS)

    def _step(self, dt: float) -> None:
        p = self.particle
        boris_advance(p.position, p.velocity, p.charge_to_mass, self.field.magnetic, dt, BORIS_SUBSTEPS)
        append_position(self.trail, p.position)

    def _trails(self) -> dict[str, np.ndarray]:
        if not len(self.trail):
            return {"path": np.zeros((0, 3))}
        return {"path": np.array(self.trail.to_list())}

    def _release(self) -> None:
        super()._release()
        self.trail.clear()

    def derived(self) -> dict[str, float]:
        if not self.particles:
            return {}
        p = self.particle
        B = self.field.magnetic
        qm = p.charge_to_mass
        return {
            "speed": p.speed,
            "cyclotron_frequency": cyclotron_frequency(qm, B),
            "cyclotron_period": cyclotron_period(qm, B),
            "cyclotron_radius": cyclotron_radius(p.velocity, qm, B),
            "pitch": helix_pitch(p.velocity, qm, B),
            "z": float(p.position[2]),
        }

    def describe_state(self) -> str:
        base = super().describe_state()
        if self.particles and math.isinf(self.derived()["cyclotron_radius"]):
            base += " No magnetic force: the particle moves in a straight line."
        return base
