import numpy as np
import pytest

from vizphys.types import Bounds, Particle
from vizphys.collision import broadphase
from vizphys.collision.broadphase import SpatialHashGrid, brute_force_pairs, pairs_within
from vizphys.collision.walls import clamp_into_bounds, reflect_particle


def _cloud(n, seed, extent=300.0):
    rng = np.random.default_rng(seed)
    return [Particle(position=rng.random(2) * extent - 0.5 * extent) for _ in range(n)]


def test_grid_matches_brute_force():
    """
    The hash grid must return exactly the nested-loop pairs, in the same
    (i, j) order, including negative coordinates and cell edges.
    """
    for seed, cutoff in ((0, 10.0), (1, 25.0), (2, 3.0)):
        ps = _cloud(150, seed)
        ref = brute_force_pairs(ps, cutoff)
        got = SpatialHashGrid(cutoff).pairs(ps, cutoff)
        print("cutoff", cutoff, "pairs", len(ref))
        assert [(i, j) for i, j, _ in got] == [(i, j) for i, j, _ in ref]
        assert np.allclose([d for _, _, d in got], [d for _, _, d in ref])


def test_pairs_within_switches_search():
    small = _cloud(broadphase.GRID_THRESHOLD - 1, 3, extent=50.0)
    large = _cloud(broadphase.GRID_THRESHOLD + 20, 4, extent=50.0)
    assert pairs_within(small, 8.0) == brute_force_pairs(small, 8.0)
    assert [p[:2] for p in pairs_within(large, 8.0)] == [p[:2] for p in brute_force_pairs(large, 8.0)]
    assert pairs_within(large, 0.0) == []
    assert pairs_within(large[:1], 8.0) == []


def test_grid_rejects_bad_sizes():
    with pytest.raises(ValueError):
        SpatialHashGrid(0.0)
    with pytest.raises(ValueError):
        SpatialHashGrid(5.0).pairs(_cloud(10, 0), 6.0)


def test_reflect_forces_inward_velocity():
    """A particle outside the left wall that already moves inward keeps moving inward."""
    b = Bounds(0.0, 0.0, 10.0, 10.0)
    p = Particle(position=(-3.0, 5.0), velocity=(2.0, 0.0), radius=1.0)
    reflect_particle(p, b, 0.5)
    assert p.position[0] == 1.0
    assert p.velocity[0] == 1.0


def test_box_thinner_than_particle():
    b = Bounds(0.0, 0.0, 1.0, 10.0)
    p = Particle(position=(3.0, 5.0), velocity=(4.0, 1.0), radius=2.0)
    reflect_particle(p, b, 1.0)
    assert p.position[0] == 0.5
    assert p.velocity[0] == 0.0


def test_clamp_into_shrunk_bounds():
    ps = [Particle(position=(50.0, 50.0), velocity=(3.0, 4.0), radius=1.0), Particle(position=(5.0, 5.0))]
    moved = clamp_into_bounds(ps, Bounds(0.0, 0.0, 20.0, 20.0))
    assert moved == 1
    assert list(ps[0].position) == [19.0, 19.0]
    assert list(ps[0].velocity) == [3.0, 4.0]
