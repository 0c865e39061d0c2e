# MIT License (see LICENSE)
"""
Electrostatic induction in a two-part conductor next to a charged rod.

The conductor is two touching halves that hold equal numbers of fixed
positive ions and mobile electrons. A rod to the right pulls the electrons
toward its side (positive polarity) or pushes them away (negative
polarity), leaving the far side with a net charge of the opposite sign.
Electrons feel a softened Coulomb force, are damped every frame and stay
inside the conductor.

Raising ``separation`` to SEPARATED_AT or more pulls the halves apart.
Each half carries its charges with it, and from then on every electron is
confined to the half nearer to it, so a half that was separated while the
rod was near keeps its net charge after the rod is removed.
"""
from __future__ import annotations
from dataclasses import dataclass

from ..config import Parameters, param
from ..engine import FrameDriver
from ..materials import Material
from ..types import Bounds, Particle
from ..collision.walls import clamp_into_bounds
from ..core.forces import CoulombCenter
from ..core.integrators import IntegratorConfig, SubstepIntegrator

NUM_CHARGES = 40
COND_Y = 280.0
COND_H = 60.0
COND_W = 140.0       # width of each half of the conductor
ROD_GAP = 40.0
EDGE = 3.0
SOFTENING = 1000.0
# Force gain in px/s² (a per-frame gain of 200 at 60 Hz).
FORCE_GAIN = 200.0 * 60.0
VERTICAL_MOBILITY = 0.3
FRAME_DAMPING = 0.05
SPEED_LIMIT = 600.0
# Gap between the halves in px per unit of separation.
GAP_PER_SEPARATION = 1.5
SEPARATED_AT = 10.0

# Charges stop at the conductor surface.
CONDUCTOR = Material(restitution=0.0, stiffness=0.0)


def _inset(b: Bounds) -> Bounds:
    return Bounds(b.x_min + EDGE, b.y_min + EDGE, b.x_max - EDGE, b.y_max - EDGE)


@dataclass(frozen=True)
class InductionParams(Parameters):
    charge_strength: float = param(5.0, "chargeStrength", 0.0, 10.0)
    rod_distance: float = param(50.0, "rodDistance", 0.0, 100.0)
    polarity: float = param(1.0, "polarity", -1.0, 1.0)
    separation: float = param(0.0, "separation", 0.0, 100.0)


class InductionSim(FrameDriver):
    """
    Attributes:
        halves: (left, right) conductor boxes; the right half faces the rod.
        conductor: Box spanning both halves, gap included.
        electrons: The mobile subset of ``particles``.
    """

    name = "electrostatic-induction"
    title = "Electrostatic induction"
    params_type = InductionParams

    def __init__(self, params=None, seed: int = 0) -> None:
        super().__init__(params, seed)
        self.halves: tuple[Bounds, Bounds] | None = None
        self.conductor = Bounds(0.0, COND_Y, 2.0 * COND_W, COND_Y + COND_H)
        self.electrons: list[Particle] = []
        self.integrator = SubstepIntegrator(
            config=IntegratorConfig(substeps=1, damping=FRAME_DAMPING, speed_limit=SPEED_LIMIT),
            material=CONDUCTOR,
        )

    @property
    def connected(self) -> bool:
        return self.params.separation < SEPARATED_AT

    @property
    def rod_position(self) -> tuple[float, float]:
        x = self.conductor.x_max + ROD_GAP + 2.0 * self.params.rod_distance
        return x, COND_Y + 0.5 * COND_H

    def half_index(self, x: float) -> int:
        """0 for the left half, 1 for the right; ties go right."""
        left, right = self.halves
        return 0 if abs(x - left.center[0]) < abs(x - right.center[0]) else 1

    def _layout(self) -> None:
        cx = 0.5 * self.surface.width
        half_gap = 0.5 * GAP_PER_SEPARATION * self.params.separation
        halves = (
            Bounds(cx - half_gap - COND_W, COND_Y, cx - half_gap, COND_Y + COND_H),
            Bounds(cx + half_gap, COND_Y, cx + half_gap + COND_W, COND_Y + COND_H),
        )
        if self.halves is not None:
            # each half carries its charges to the new position
            for p in self.particles:
                k = self.half_index(p.position[0])
                p.position[0] += halves[k].x_min - self.halves[k].x_min
        self.halves = halves
        self.conductor = Bounds(halves[0].x_min, COND_Y, halves[1].x_max, COND_Y + COND_H)
        self.bounds = _inset(self.conductor)
        self.integrator.bounds = self.bounds
        self._configure()

    def _configure(self) -> None:
        p = self.params
        self.integrator.set_rules([
            CoulombCenter(
                center=self.rod_position,
                strength=p.polarity * p.charge_strength,
                softening=SOFTENING,
                gain=FORCE_GAIN,
                axis_scale=(1.0, VERTICAL_MOBILITY),
            )
        ])

    def _spawn(self) -> None:
        self.particles = []
        for i in range(NUM_CHARGES):
            # first half of the charges starts in the left conductor
            b = _inset(self.halves[0 if i < NUM_CHARGES // 2 else 1])
            self.particles.append(Particle(
                position=(b.x_min + self.rng.random() * b.width, b.y_min + self.rng.random() * b.height),
                velocity=(0.0, 0.0),
                charge=-1.0 if i % 2 == 0 else 1.0,
                id=i,
            ))
        self.electrons = [p for p in self.particles if p.charge < 0.0]

    def _confine(self, particles: list[Particle]) -> int:
        if self.connected:
            return clamp_into_bounds(particles, self.bounds)
        groups: tuple[list[Particle], list[Particle]] = ([], [])
        for p in particles:
            groups[self.half_index(p.position[0])].append(p)
        return sum(clamp_into_bounds(g, _inset(h)) for g, h in zip(groups, self.halves))

    def _apply_params(self, old: InductionParams) -> None:
        if self.params.separation != old.separation:
            self._layout()
            self._confine(self.particles)
        else:
            self._configure()

    def _step(self, dt: float) -> None:
        self.integrator.step(self.electrons, dt)
        if not self.connected:
            self._confine(self.electrons)

    def _reclamp(self) -> int:
        return self._confine(self.particles)

    def _release(self) -> None:
        super()._release()
        self.electrons = []

    def net_charges(self) -> tuple[float, float]:
        """Net charge (ions minus electrons) of the left and right halves."""
        net = [0.0, 0.0]
        for p in self.particles:
            net[self.half_index(p.position[0])] += p.charge
        return net[0], net[1]

    def derived(self) -> dict[str, float]:
        cx = 0.5 * (self.conductor.x_min + self.conductor.x_max)
        near = sum(1 for e in self.electrons if e.position[0] > cx)
        dipole = sum(p.charge * (p.position[0] - cx) for p in self.particles)
        left, right = self.net_charges()
        return {
            "electrons": float(len(self.electrons)),
            "electrons_near_rod": float(near),
            "electrons_far_side": float(len(self.electrons) - near),
            "dipole_x": dipole,
            "rod_strength": self.params.polarity * self.params.charge_strength,
            "net_charge_left": left,
            "net_charge_right": right,
        }

    def describe_state(self) -> str:
        base = super().describe_state()
        if self.particles:
            base += " The conductors are connected." if self.connected else " The conductors are separated."
        return base
