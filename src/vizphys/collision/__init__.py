# MIT License (see LICENSE)
"""
Neighbour search, wall reflection and overlap separation.

This subpackage provides:
    - Broadphase: cutoff-radius pair search (spatial hash or nested loop,
      identical output order).
    - Walls: radius-aware clamping and restitution reflection.
    - Overlap: soft positional separation of interpenetrating particles.

Typical usage:
    from vizphys.collision import pairs_within, reflect_into_bounds

    for i, j, d in pairs_within(particles, cutoff):
        ...
    impulse = reflect_into_bounds(particles, bounds, restitution=0.5)
"""
from .broadphase import SpatialHashGrid, brute_force_pairs, pairs_within
from .walls import reflect_particle, reflect_into_bounds, clamp_into_bounds
from .overlap import separate_pair, resolve_overlaps

__all__ = [
    # Broadphase
    "SpatialHashGrid",
    "brute_force_pairs",
    "pairs_within",
    # Walls
    "reflect_particle",
    "reflect_into_bounds",
    "clamp_into_bounds",
    # Overlap
    "separate_pair",
    "resolve_overlaps",
]
