# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Vectors are numpy float64 arrays of shape (2,) or (3,). The helpers here
are dimension-agnostic unless their name says otherwise.
"""
from __future__ import annotations
import math

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase so tuple/list inputs for positions,
    velocities and field vectors always land in a consistent dtype.
    """
    return np.array(x, dtype=np.float64)


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a vector. Avoids sqrt for performance."""
    return float(np.dot(v, v))


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a vector."""
    return math.sqrt(norm2(v))


def cross3(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    3D cross product a × b written out component-wise.

    Explicit components keep the Boris rotation free of np.cross overhead
    and produce the same rounding on every platform.
    """
    return np.array(
        [
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ],
        dtype=np.float64,
    )


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp a scalar into [lo, hi]."""
    return lo if x < lo else hi if x > hi else x
