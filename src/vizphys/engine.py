# MIT License (see LICENSE)
"""
The frame driver lifecycle shared by every simulation.

A FrameDriver owns one simulation's state and exposes the host contract:

    initialize(surface)   UNINITIALIZED -> READY
    advance(dt, params)   READY/RUNNING -> RUNNING
    reset()               READY/RUNNING -> READY (same driver object)
    resize(w, h)          READY/RUNNING, state kept, positions re-clamped
    describe_state()      any state, pure read
    destroy()             any state -> DESTROYED

Each advance() resolves the host's parameter mapping against the previous
parameters, clamps the frame delta, runs the subclass step and returns a
FrameSnapshot: read-only copies taken after the last sub-step, so a
renderer can never observe a half-updated frame.

Structure:
    - Subclass FrameDriver, set ``name`` and ``params_type``.
    - Override the hooks: _layout, _spawn, _apply_params, _step
      (and optionally _arrays, _trails, derived, _release).
    - Host calls initialize() once, advance() every frame.
"""
from __future__ import annotations
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

import numpy as np

from .config import Parameters
from .constants import MAX_FRAME_DT
from .types import Bounds, Particle
from .collision.walls import clamp_into_bounds
from .core.integrators import clamp_frame_dt
from .core.invariants import kinetic_energy

logger = logging.getLogger(__name__)


class DriverState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    DESTROYED = "destroyed"


class LifecycleError(RuntimeError):
    """A driver method was called in a state that does not allow it."""


@dataclass(frozen=True)
class Surface:
    """
    Display surface the driver lays its geometry out on.

    Dimensions below one unit are raised to one, so scale-dependent
    geometry never collapses to zero.
    """
    width: float = 800.0
    height: float = 600.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", max(1.0, float(self.width)))
        object.__setattr__(self, "height", max(1.0, float(self.height)))

    @property
    def short_side(self) -> float:
        return min(self.width, self.height)


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, dtype=np.float64, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class FrameSnapshot:
    """
    Read-only view of a driver after a completed frame.

    Attributes:
        name: Registry name of the simulation.
        time: Simulation clock in the driver's own time unit.
        frame: Number of advance() calls since the last reset.
        positions: Array [N, D].
        velocities: Array [N, D].
        radii: Array [N].
        attributes: Per-particle scalars ("temperature", "charge", ...), each [N].
        trails: Named history arrays ([K, D] point trails or [K] series).
        derived: Scalar quantities for display.
        bounds: Reflection box, if the simulation has one.
    """
    name: str
    time: float
    frame: int
    positions: np.ndarray
    velocities: np.ndarray
    radii: np.ndarray
    attributes: dict[str, np.ndarray] = field(default_factory=dict)
    trails: dict[str, np.ndarray] = field(default_factory=dict)
    derived: dict[str, float] = field(default_factory=dict)
    bounds: Bounds | None = None

    def __len__(self) -> int:
        return int(self.positions.shape[0])


class FrameDriver:
    """
    Base class for a frame-driven simulation.

    Attributes:
        params: Current resolved parameters (frozen, replaced on change).
        seed: Seed of the spawn generator; reset() re-seeds with it.
        rng: Generator used for initial placement and velocities.
        surface: Surface passed to initialize() or resize().
        particles: Particle population owned by this driver.
        bounds: Reflection box derived from the surface, or None.
        time: Simulation clock.
        frame: Frames advanced since the last reset.
    """

    name: ClassVar[str] = "driver"
    title: ClassVar[str] = "Simulation"
    params_type: ClassVar[type[Parameters]] = Parameters
    dim: ClassVar[int] = 2
    # Largest frame delta this driver integrates in one advance().
    max_frame_dt: ClassVar[float] = MAX_FRAME_DT

    def __init__(self, params: Parameters | Mapping[str, float] | None = None, seed: int = 0) -> None:
        if isinstance(params, Parameters):
            self.params = params
        else:
            self.params = self.params_type.from_mapping(params)
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.state = DriverState.UNINITIALIZED
        self.surface: Surface | None = None
        self.particles: list[Particle] = []
        self.bounds: Bounds | None = None
        self.time = 0.0
        self.frame = 0

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _require(self, action: str, *allowed: DriverState) -> None:
        if self.state not in allowed:
            msg = f"{self.name}: cannot {action} while {self.state.value}"
            logger.error(msg)
            raise LifecycleError(msg)

    def initialize(self, surface: Surface | None = None) -> None:
        """
        Allocate state from the current parameters.

        Raises:
            LifecycleError: If the driver was already initialized or destroyed.
        """
        self._require("initialize", DriverState.UNINITIALIZED)
        self.surface = surface or Surface()
        self._layout()
        self._restart()
        self.state = DriverState.READY
        logger.info("%s initialized on %gx%g", self.name, self.surface.width, self.surface.height)

    def advance(self, dt: float, params: Mapping[str, float] | None = None) -> FrameSnapshot:
        """
        Advance one frame.

        Args:
            dt: Wall-clock delta in seconds; clamped to ``max_frame_dt``.
            params: Host parameter mapping; missing keys keep their value.

        Returns:
            FrameSnapshot of the state after the frame.

        Raises:
            LifecycleError: Before initialize() or after destroy().
        """
        self._require("advance", DriverState.READY, DriverState.RUNNING)
        resolved = self.params.resolve(params)
        if resolved != self.params:
            old, self.params = self.params, resolved
            self._apply_params(old)
        frame_dt = clamp_frame_dt(dt, self.max_frame_dt)
        if frame_dt > 0.0:
            self._step(frame_dt)
        self.time += self._elapsed(frame_dt)
        self.frame += 1
        self.state = DriverState.RUNNING
        return self.snapshot()

    def reset(self) -> None:
        """
        Rebuild the simulation state from the current parameters.

        The spawn generator is re-seeded, so two consecutive resets leave
        identical state.

        Raises:
            LifecycleError: Before initialize() or after destroy().
        """
        self._require("reset", DriverState.READY, DriverState.RUNNING)
        self._restart()
        self.state = DriverState.READY
        logger.info("%s reset", self.name)

    def resize(self, width: float, height: float) -> None:
        """
        Recompute scale-dependent geometry without resetting.

        Particles that end up outside the new bounds are clamped back in;
        velocities are left untouched.
        """
        self._require("resize", DriverState.READY, DriverState.RUNNING)
        self.surface = Surface(width, height)
        self._layout()
        moved = self._reclamp()
        logger.info("%s resized to %gx%g (%d particles re-clamped)",
                    self.name, self.surface.width, self.surface.height, moved)

    def destroy(self) -> None:
        """Release every buffer. Safe to call in any state, repeatedly."""
        if self.state is DriverState.DESTROYED:
            return
        self._release()
        self.state = DriverState.DESTROYED
        logger.info("%s destroyed", self.name)

    def describe_state(self) -> str:
        """Human-readable one-line summary of the derived quantities."""
        if self.state is DriverState.UNINITIALIZED:
            return f"{self.title}: not initialized."
        if self.state is DriverState.DESTROYED:
            return f"{self.title}: destroyed."
        parts = ", ".join(f"{k}={v:.4g}" for k, v in self.derived().items())
        return f"{self.title}: {parts}."

    def _restart(self) -> None:
        self.rng = np.random.default_rng(self.seed)
        self.time = 0.0
        self.frame = 0
        self._spawn()

    # =========================================================================
    # Read access
    # =========================================================================

    def snapshot(self) -> FrameSnapshot:
        """Read-only copies of the current state for a renderer."""
        positions, velocities, radii, attributes = self._arrays()
        return FrameSnapshot(
            name=self.name,
            time=self.time,
            frame=self.frame,
            positions=_frozen(positions),
            velocities=_frozen(velocities),
            radii=_frozen(radii),
            attributes={k: _frozen(v) for k, v in attributes.items()},
            trails={k: _frozen(v) for k, v in self._trails().items()},
            derived=self.derived() if self.state is not DriverState.DESTROYED else {},
            bounds=self.bounds,
        )

    def derived(self) -> dict[str, float]:
        """Quantities computed from the current state, never integrated."""
        return {
            "particles": float(len(self.particles)),
            "kinetic_energy": kinetic_energy(self.particles),
        }

    # =========================================================================
    # Subclass hooks
    # =========================================================================

    def _layout(self) -> None:
        """Recompute geometry that depends on ``self.surface``."""

    def _spawn(self) -> None:
        """Build the initial state from ``self.params`` using ``self.rng``."""

    def _apply_params(self, old: Parameters) -> None:
        """React to a parameter change (``self.params`` is already updated)."""

    def _step(self, dt: float) -> None:
        """Integrate one clamped frame delta."""
        raise NotImplementedError

    def _elapsed(self, dt: float) -> float:
        """Simulation time that passes during a clamped frame delta."""
        return dt

    def _reclamp(self) -> int:
        if self.bounds is None:
            return 0
        return clamp_into_bounds(self.particles, self.bounds)

    def _arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray, dict[str, np.ndarray]]:
        ps = self.particles
        if not ps:
            empty = np.zeros((0, self.dim), dtype=np.float64)
            return empty, empty, np.zeros(0), {}
        positions = np.array([p.position for p in ps], dtype=np.float64)
        velocities = np.array([p.velocity for p in ps], dtype=np.float64)
        radii = np.array([p.radius for p in ps], dtype=np.float64)
        attributes = {
            "temperature": np.array([p.temperature for p in ps], dtype=np.float64),
            "charge": np.array([p.charge for p in ps], dtype=np.float64),
        }
        return positions, velocities, radii, attributes

    def _trails(self) -> dict[str, Any]:
        return {}

    def _release(self) -> None:
        self.particles = []
