# MIT License (see LICENSE)
"""
Numeric defaults shared by every integrator.

These are the guard rails of the frame loop: the maximum frame delta that
may be integrated in one call, the distance floor that keeps pairwise
terms finite, and the caps applied to user-supplied parameters.
"""
from __future__ import annotations

import math

TWO_PI: float = 2.0 * math.pi

# Largest wall-clock delta (seconds) integrated in a single advance() call.
# A stalled host frame is truncated to this, never integrated in one leap.
MAX_FRAME_DT: float = 0.05

# Floor applied to any separation used as a divisor (Coulomb, diffusion,
# repulsion). Keeps r -> 0 from producing inf/NaN.
MIN_DISTANCE: float = 1e-6

# Newton iterations for Kepler's equation. Converges geometrically for
# e <= MAX_ECCENTRICITY over the whole range of M.
KEPLER_ITERATIONS: int = 20

# Eccentricities are clamped into [0, MAX_ECCENTRICITY] before solving.
MAX_ECCENTRICITY: float = 0.99

# Upper bound on particles in any pairwise O(N^2) simulation.
MAX_PARTICLES: int = 200

# Minimum mass accepted for a charged particle.
MIN_MASS: float = 0.01

# Default Boris sub-steps per frame.
BORIS_SUBSTEPS: int = 20
