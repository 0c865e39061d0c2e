# MIT License (see LICENSE)
"""
Neighbour search within a cutoff radius using spatial hashing.

Particles are hashed into a uniform grid whose cell size equals the
cutoff, so every neighbour of a particle lies in its own cell or one of
the 8 surrounding cells. Candidate pairs are then tested exactly.

The output is sorted by (i, j) with i < j: precisely the pairs, and the
order, that a nested ``for i: for j > i`` loop would visit. Pairwise passes
that update state sequentially (heat exchange, repulsion) therefore give
bit-identical results whichever search is used.

Key concepts:
- Cell size = cutoff: a 3x3 cell neighbourhood is sufficient.
- Only the first two axes are hashed; distances use every axis.
"""
from __future__ import annotations
import math
from collections import defaultdict
from typing import Sequence

import numpy as np

from ..types import Particle

# Below this many particles the plain O(N²) loop is faster than hashing.
GRID_THRESHOLD = 48


def brute_force_pairs(particles: Sequence[Particle], cutoff: float) -> list[tuple[int, int, float]]:
    """
    All pairs (i, j, d) with i < j and d < cutoff, by exhaustive search.

    This is the reference ordering every pairwise pass relies on.
    """
    out: list[tuple[int, int, float]] = []
    c2 = cutoff * cutoff
    n = len(particles)
    for i in range(n):
        pi = particles[i].position
        for j in range(i + 1, n):
            r = particles[j].position - pi
            d2 = float(np.dot(r, r))
            if d2 < c2:
                out.append((i, j, math.sqrt(d2)))
    return out


class SpatialHashGrid:
    """
    Uniform grid for cutoff-radius neighbour queries.

    Attributes:
        cell: Grid cell size in world units (normally the cutoff).

    Example:
        grid = SpatialHashGrid(cell_size=neighbour_radius)
        for i, j, d in grid.pairs(particles, neighbour_radius):
            ...
    """

    def __init__(self, cell_size: float) -> None:
        if cell_size <= 0.0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell = float(cell_size)

    def _key(self, p: np.ndarray) -> tuple[int, int]:
        cs = self.cell
        return (int(math.floor(p[0] / cs)), int(math.floor(p[1] / cs)))

    def pairs(self, particles: Sequence[Particle], cutoff: float) -> list[tuple[int, int, float]]:
        """
        Find all pairs closer than ``cutoff``.

        Args:
            particles: Population to search.
            cutoff: Interaction radius; must not exceed the cell size.

        Returns:
            List of (i, j, distance) with i < j, sorted lexicographically.
        """
        if cutoff > self.cell:
            raise ValueError(f"cutoff {cutoff} exceeds cell size {self.cell}")

        grid: dict[tuple[int, int], list[int]] = defaultdict(list)
        for idx, p in enumerate(particles):
            grid[self._key(p.position)].append(idx)

        c2 = cutoff * cutoff
        out: list[tuple[int, int, float]] = []
        for (cx, cy), members in grid.items():
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    other = grid.get((cx + dx, cy + dy))
                    if not other:
                        continue
                    for i in members:
                        pi = particles[i].position
                        for j in other:
                            # each unordered pair is seen from both cells; keep i < j once
                            if j <= i:
                                continue
                            r = particles[j].position - pi
                            d2 = float(np.dot(r, r))
                            if d2 < c2:
                                out.append((i, j, math.sqrt(d2)))
        out.sort(key=lambda t: (t[0], t[1]))
        return out


def pairs_within(particles: Sequence[Particle], cutoff: float) -> list[tuple[int, int, float]]:
    """
    Pairs closer than ``cutoff``, choosing the search by population size.

    Returns the same list as brute_force_pairs in either case.
    """
    if cutoff <= 0.0 or len(particles) < 2:
        return []
    if len(particles) < GRID_THRESHOLD:
        return brute_force_pairs(particles, cutoff)
    return SpatialHashGrid(cell_size=cutoff).pairs(particles, cutoff)
