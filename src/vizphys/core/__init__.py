# MIT License (see LICENSE)
"""
Numerical time-stepping core.

This subpackage provides:
    - kepler: Newton-Raphson solver for Kepler's equation and orbit helpers.
    - boris: energy-preserving charged-particle push in a magnetic field.
    - forces: force rules (sources and pairwise) for the sub-step pipeline.
    - thermal: conservative heat exchange and Newton cooling.
    - integrators: frame-dt clamp, SubstepIntegrator, velocity Verlet.
    - invariants: energies, momenta and other monitored quantities.

Typical usage:
    from vizphys.core import SubstepIntegrator, IntegratorConfig, Buoyancy

    integrator = SubstepIntegrator([Buoyancy(200.0, 0.005, 20.0)], IntegratorConfig())
    integrator.step(particles, dt=1/60)
"""
from .kepler import (
    solve_kepler,
    true_anomaly,
    orbit_radius,
    orbital_position,
    normalize_anomaly,
    swept_area_rate,
)
from .boris import (
    boris_rotate,
    boris_push,
    boris_advance,
    cyclotron_frequency,
    cyclotron_period,
    cyclotron_radius,
    helix_pitch,
)
from .forces import (
    ConstantAcceleration,
    Buoyancy,
    SourceHeating,
    AmbientCooling,
    CoulombCenter,
    PairwiseRepulsion,
    ThermalExchange,
    PairwiseGravity,
    gravity_accelerations,
)
from .thermal import diffuse_pairwise, relax_to_ambient, total_temperature
from .integrators import (
    IntegratorConfig,
    IntegratorContext,
    StepReport,
    SubstepIntegrator,
    clamp_frame_dt,
    clamp_speed,
    velocity_verlet_step,
)
from .invariants import kinetic_energy, linear_momentum, gravitational_potential

__all__ = [
    # Kepler
    "solve_kepler",
    "true_anomaly",
    "orbit_radius",
    "orbital_position",
    "normalize_anomaly",
    "swept_area_rate",
    # Boris
    "boris_rotate",
    "boris_push",
    "boris_advance",
    "cyclotron_frequency",
    "cyclotron_period",
    "cyclotron_radius",
    "helix_pitch",
    # Force rules
    "ConstantAcceleration",
    "Buoyancy",
    "SourceHeating",
    "AmbientCooling",
    "CoulombCenter",
    "PairwiseRepulsion",
    "ThermalExchange",
    "PairwiseGravity",
    "gravity_accelerations",
    # Thermal
    "diffuse_pairwise",
    "relax_to_ambient",
    "total_temperature",
    # Integrators
    "IntegratorConfig",
    "IntegratorContext",
    "StepReport",
    "SubstepIntegrator",
    "clamp_frame_dt",
    "clamp_speed",
    "velocity_verlet_step",
    # Invariants
    "kinetic_energy",
    "linear_momentum",
    "gravitational_potential",
]
