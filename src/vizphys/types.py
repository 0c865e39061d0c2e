# MIT License (see LICENSE)
"""
Core type definitions for the time-stepping core.

Defines the state the integrators mutate and the immutable descriptions
of what drives them:
- Particle: position/velocity plus scalar attributes (temperature, charge).
- OrbitalBody: Keplerian elements; its anomaly is derived, never stored.
- Bounds: the axis-aligned box particles are reflected into.
- FieldState: external force sources, frozen for the duration of a frame.
"""
from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from .constants import MAX_ECCENTRICITY, MIN_MASS
from .util import f64, clamp


# =============================================================================
# Particle
# =============================================================================

@dataclass
class Particle:
    """
    A point particle owned by exactly one simulation.

    Attributes:
        position: Position [x, y] or [x, y, z].
        velocity: Velocity with the same dimensionality as position.
        radius: Collision radius used by wall and overlap resolution.
        mass: Inertial mass. Values below MIN_MASS are raised to it.
        temperature: Scalar carried by thermal exchange.
        charge: Electric charge (sign and magnitude).
        id: Index assigned by the owning simulation.

    Note:
        Position and velocity are converted to float64 numpy arrays on init.
    """
    position: np.ndarray | tuple[float, ...] = (0.0, 0.0)
    velocity: np.ndarray | tuple[float, ...] = (0.0, 0.0)
    radius: float = 0.0
    mass: float = 1.0
    temperature: float = 0.0
    charge: float = 0.0
    id: int = -1

    def __post_init__(self) -> None:
        self.position = f64(self.position)
        self.velocity = f64(self.velocity)
        if self.position.shape != self.velocity.shape:
            raise ValueError(
                f"position and velocity dimensions differ: "
                f"{self.position.shape} vs {self.velocity.shape}"
            )
        if self.mass < MIN_MASS:
            self.mass = MIN_MASS

    @property
    def dim(self) -> int:
        return int(self.position.shape[0])

    @property
    def charge_to_mass(self) -> float:
        """Charge-to-mass ratio q/m."""
        return self.charge / self.mass

    @property
    def speed(self) -> float:
        return float(np.sqrt(np.dot(self.velocity, self.velocity)))


# =============================================================================
# Orbital body
# =============================================================================

@dataclass
class OrbitalBody:
    """
    A body on a fixed Keplerian ellipse around the origin (focus).

    The current true anomaly is recomputed from elapsed time every frame
    (see core.kepler.orbital_position), so it can never drift.

    Attributes:
        name: Display label.
        semi_major_axis: a, in display units (AU for the solar system demo).
        eccentricity: e, clamped into [0, MAX_ECCENTRICITY].
        period: Orbital period T, in the same time unit as the clock.
        phase: Mean anomaly at t = 0 (radians).
    """
    name: str
    semi_major_axis: float
    eccentricity: float
    period: float
    phase: float = 0.0

    def __post_init__(self) -> None:
        self.eccentricity = clamp(float(self.eccentricity), 0.0, MAX_ECCENTRICITY)

    @property
    def semi_minor_axis(self) -> float:
        e = self.eccentricity
        return self.semi_major_axis * float(np.sqrt(1.0 - e * e))


# =============================================================================
# Bounds
# =============================================================================

@dataclass(frozen=True)
class Bounds:
    """
    Axis-aligned reflection box (x_min, y_min) - (x_max, y_max).

    Only the first two axes are bounded; a z component, when present,
    is free.
    """
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> tuple[float, float]:
        return (0.5 * (self.x_min + self.x_max), 0.5 * (self.y_min + self.y_max))

    def contains(self, point: np.ndarray, margin: float = 0.0) -> bool:
        """True if point lies inside the box shrunk by margin on every side."""
        return (
            self.x_min + margin <= point[0] <= self.x_max - margin
            and self.y_min + margin <= point[1] <= self.y_max - margin
        )

    def clamp_point(self, point: np.ndarray, margin: float = 0.0) -> None:
        """
        Clamp a point into the box in place.

        If the box is narrower than 2*margin along an axis the point is
        placed on that axis' midline.
        """
        for axis, (lo, hi) in enumerate(((self.x_min, self.x_max), (self.y_min, self.y_max))):
            lo_m, hi_m = lo + margin, hi - margin
            if lo_m > hi_m:
                point[axis] = 0.5 * (lo + hi)
            else:
                point[axis] = clamp(float(point[axis]), lo_m, hi_m)


# =============================================================================
# Field state
# =============================================================================

@dataclass(frozen=True)
class FieldState:
    """
    External force sources, immutable within one frame.

    Attributes:
        magnetic: Uniform magnetic field vector B (3 components).
        center: Position of a point charge / attractor, or None.
        center_strength: Signed strength of the point source
                         (positive attracts negative charges).
        gravity: Constant acceleration vector applied to every particle.
    """
    magnetic: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    center: np.ndarray | None = None
    center_strength: float = 0.0
    gravity: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=np.float64))

    def __post_init__(self) -> None:
        """Ensure vector fields are stored as float64."""
        object.__setattr__(self, "magnetic", f64(self.magnetic))
        object.__setattr__(self, "gravity", f64(self.gravity))
        if self.center is not None:
            object.__setattr__(self, "center", f64(self.center))

    @property
    def magnetic_strength(self) -> float:
        return float(np.sqrt(np.dot(self.magnetic, self.magnetic)))
