# MIT License (see LICENSE)
"""
Concrete simulations built on the frame driver.

This subpackage provides:
    - ConvectionSim ("convection"): buoyancy-driven convection cells.
    - HelixSim ("lorentz-3d"): charged particle helix via the Boris push.
    - KeplerOrbitsSim ("keplers-law"): planets on Keplerian ellipses.
    - IdealGasSim ("gas-laws"): Maxwell–Boltzmann gas and measured pressure.
    - ThreeBodySim ("three-body-problem"): softened gravity, velocity Verlet.
    - InductionSim ("electrostatic-induction"): charge separation in a conductor.

Typical usage:
    from vizphys.simulations import create

    sim = create("gas-laws", seed=1)
    sim.initialize()
    snapshot = sim.advance(1 / 60, {"temperature": 600})
"""
from __future__ import annotations

from ..engine import FrameDriver
from .convection import ConvectionSim
from .helix import HelixSim
from .orbits import KeplerOrbitsSim
from .gas import IdealGasSim
from .three_body import ThreeBodySim
from .induction import InductionSim

SIMULATIONS: dict[str, type[FrameDriver]] = {
    cls.name: cls
    for cls in (ConvectionSim, HelixSim, KeplerOrbitsSim, IdealGasSim, ThreeBodySim, InductionSim)
}


def create(name: str, **kwargs) -> FrameDriver:
    """
    Instantiate a registered simulation.

    Args:
        name: Registry name, e.g. "convection".
        **kwargs: Passed to the driver constructor (``params``, ``seed``).

    Raises:
        KeyError: If no simulation is registered under ``name``.
    """
    try:
        cls = SIMULATIONS[name]
    except KeyError:
        raise KeyError(f"unknown simulation {name!r}; available: {sorted(SIMULATIONS)}") from None
    return cls(**kwargs)


__all__ = [
    "SIMULATIONS",
    "create",
    "ConvectionSim",
    "HelixSim",
    "KeplerOrbitsSim",
    "IdealGasSim",
    "ThreeBodySim",
    "InductionSim",
]
