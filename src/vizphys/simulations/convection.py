# MIT License (see LICENSE)
"""
Thermal convection in a heated container.

Fluid parcels are point particles carrying a temperature. A burner strip
on the container floor heats nearby parcels, heat diffuses between
neighbours and leaks to the ambient, and buoyancy lifts hot parcels:

    a_y = −g · β · (T − T_ambient) · heat

Hot fluid rises over the burner, cools near the top and sinks along the
sides, forming convection cells. Coordinates are screen pixels with y
growing downward.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass

from ..config import Parameters, param
from ..constants import MAX_PARTICLES
from ..engine import FrameDriver
from ..materials import SOFT_FLUID
from ..types import Bounds, Particle
from ..core.forces import AmbientCooling, Buoyancy, PairwiseRepulsion, SourceHeating, ThermalExchange
from ..core.integrators import IntegratorConfig, SubstepIntegrator
from ..core.invariants import max_speed
from ..core.thermal import mean_temperature

logger = logging.getLogger(__name__)

# Fluid tuning (screen units)
GRAVITY = 200.0
BETA = 0.005
T_AMBIENT = 20.0
T_MAX = 100.0
HEAT_DIFFUSION = 0.15
COOLING_RATE = 0.02
NEIGHBOUR_RADIUS_FACTOR = 5.0
BURNER_POWER = 150.0
JITTER = 15.0
VISCOUS_DAMPING = 0.03
SPEED_LIMIT = 600.0

# Container margins as fractions of the surface
MARGIN_X = 0.08
MARGIN_TOP = 0.10
FLOOR = 0.82


@dataclass(frozen=True)
class ConvectionParams(Parameters):
    heat_intensity: float = param(50.0, "heatIntensity", 0.0, 100.0)
    num_particles: int = param(80, "numParticles", 0, MAX_PARTICLES, integer=True)
    viscosity: float = param(3.0, "viscosity", 0.0, 10.0)
    burner_position: float = param(50.0, "burnerPosition", 0.0, 100.0)


class ConvectionSim(FrameDriver):
    """Buoyancy-driven convection cells above a movable burner."""

    name = "convection"
    title = "Convection"
    params_type = ConvectionParams

    def __init__(self, params=None, seed: int = 0) -> None:
        super().__init__(params, seed)
        self.particle_radius = 3.0
        self.integrator = SubstepIntegrator(
            config=IntegratorConfig(
                substeps=2,
                jitter=JITTER,
                jitter_axes=(0,),
                speed_limit=SPEED_LIMIT,
            ),
            material=SOFT_FLUID,
        )

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def _layout(self) -> None:
        w, h = self.surface.width, self.surface.height
        self.bounds = Bounds(w * MARGIN_X, h * MARGIN_TOP, w * (1.0 - MARGIN_X), h * FLOOR)
        self.particle_radius = max(3.0, self.surface.short_side * 0.008)
        for p in self.particles:
            p.radius = self.particle_radius
        self._configure()

    @property
    def burner_x(self) -> float:
        return self.bounds.x_min + self.params.burner_position / 100.0 * self.bounds.width

    def _configure(self) -> None:
        """Rebuild the rule list for the current geometry and parameters."""
        b = self.bounds
        r = self.particle_radius
        heat = self.params.heat_intensity / 100.0
        self.integrator.bounds = b
        self.integrator.config.damping = self.params.viscosity * VISCOUS_DAMPING
        self.integrator.set_rules([
            SourceHeating(
                center_x=self.burner_x,
                bottom=b.y_max,
                half_width=0.25 * b.width,
                depth=6.0 * r,
                power=heat * BURNER_POWER,
                t_max=T_MAX,
            ),
            AmbientCooling(T_AMBIENT, COOLING_RATE),
            Buoyancy(GRAVITY, BETA, T_AMBIENT, gain=heat),
            ThermalExchange(radius=NEIGHBOUR_RADIUS_FACTOR * r, coefficient=HEAT_DIFFUSION),
            PairwiseRepulsion(cutoff=SOFT_FLUID.spacing * r, stiffness=SOFT_FLUID.stiffness),
        ])

    # -------------------------------------------------------------------------
    # Population
    # -------------------------------------------------------------------------

    def _new_particle(self) -> Particle:
        b = self.bounds
        x = b.x_min + self.rng.random() * b.width
        y = b.y_min + self.rng.random() * b.height
        return Particle(
            position=(x, y),
            velocity=(0.0, 0.0),
            radius=self.particle_radius,
            temperature=T_AMBIENT + self.rng.random() * 5.0,
            id=len(self.particles),
        )

    def _spawn(self) -> None:
        self.particles = []
        for _ in range(self.params.num_particles):
            self.particles.append(self._new_particle())

    def _apply_params(self, old: ConvectionParams) -> None:
        n = self.params.num_particles
        if n != old.num_particles:
            if n > len(self.particles):
                while len(self.particles) < n:
                    self.particles.append(self._new_particle())
            else:
                del self.particles[n:]
            logger.debug("convection population now %d", n)
        self._configure()

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def _step(self, dt: float) -> None:
        self.integrator.step(self.particles, dt)

    def derived(self) -> dict[str, float]:
        temps = [p.temperature for p in self.particles]
        return {
            "particles": float(len(self.particles)),
            "mean_temperature": mean_temperature(self.particles),
            "max_temperature": max(temps) if temps else 0.0,
            "max_speed": max_speed(self.particles),
            "heat_intensity": self.params.heat_intensity,
            "viscosity": self.params.viscosity,
        }

    def describe_state(self) -> str:
        base = super().describe_state()
        if self.particles:
            base += (
                " Buoyancy a = -g*beta*(T - T_ambient) lifts hot fluid over the burner;"
                " it cools at the top and sinks along the walls."
            )
        return base
