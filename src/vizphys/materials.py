# MIT License (see LICENSE)
"""
Surface properties for wall and particle-particle contact.

The values are visual tuning knobs carried over from the individual
simulations, not derived from first principles.
"""
from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Material:
    """
    Contact response of a particle population.

    Attributes:
        restitution: Fraction of the normal velocity kept (and reversed)
                     after hitting a wall. Range [0, 1], 1 = elastic.
        stiffness: Gain of the soft separation impulse applied to
                   overlapping particles, per unit penetration per second.
        spacing: Contact distance as a multiple of the particle radius.
                 Pairs closer than ``spacing * radius`` are pushed apart.
    """
    restitution: float = 0.5
    stiffness: float = 80.0
    spacing: float = 2.5


# Presets used by the shipped simulations.
ELASTIC = Material(restitution=1.0, stiffness=0.0)
SOFT_FLUID = Material(restitution=0.5, stiffness=80.0, spacing=2.5)
