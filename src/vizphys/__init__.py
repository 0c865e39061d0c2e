# MIT License (see LICENSE)
"""
vizphys - numerical time-stepping core for interactive physics visualizations.

This package advances particle and body state over a variable wall-clock
frame delta, stably and reproducibly, for a catalog of small simulations.

Main entry points:
    - FrameDriver: lifecycle base class (initialize / advance / reset / ...).
    - simulations.create: build a registered simulation by name.
    - Particle, OrbitalBody, Bounds, FieldState: state types.
    - SubstepIntegrator: the shared sub-stepped force integrator.

Submodules:
    - core: Kepler solver, Boris push, force rules, thermal exchange, integrators.
    - collision: neighbour search, wall reflection, overlap separation.
    - simulations: concrete drivers and the registry.
    - io: JSON parameter presets and snapshots.
    - renderer: optional visualization adapters.

Example:
    from vizphys import create

    sim = create("lorentz-3d")
    sim.initialize()
    for _ in range(60):
        snapshot = sim.advance(1 / 60, {"magneticField": 2.0})
    print(sim.describe_state())
"""
import logging

from .engine import DriverState, FrameDriver, FrameSnapshot, LifecycleError, Surface
from .types import Particle, OrbitalBody, Bounds, FieldState
from .materials import Material
from .config import Parameters, param
from .core.integrators import IntegratorConfig, SubstepIntegrator
from .simulations import SIMULATIONS, create

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Lifecycle
    "FrameDriver",
    "DriverState",
    "LifecycleError",
    "Surface",
    "FrameSnapshot",
    # State
    "Particle",
    "OrbitalBody",
    "Bounds",
    "FieldState",
    "Material",
    # Configuration
    "Parameters",
    "param",
    # Integration
    "IntegratorConfig",
    "SubstepIntegrator",
    # Registry
    "SIMULATIONS",
    "create",
]
