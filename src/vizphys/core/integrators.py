# MIT License (see LICENSE)
"""
Frame-delta clamping and the shared sub-stepped particle integrator.

Every particle simulation advances through the same pipeline. A frame
delta is first clamped to MAX_FRAME_DT, then split into S equal sub-steps.
Each sub-step runs, in this fixed order:

    1. source rules        (heating, Coulomb centre, buoyancy, gravity)
    2. pairwise rules      (heat exchange, repulsion, mutual gravity)
    3. thermal jitter      (the only non-deterministic stage)
    4. damping             v *= 1 − min(0.95, c·Δt·60)
    5. drift               x += v·Δt
    6. wall reflection     clamp + restitution
    7. overlap separation  optional positional correction
    then the speed clamp.

Forces are applied to velocities before the drift, so the scheme is
semi-implicit (symplectic) Euler. Setting ``jitter = 0`` makes the whole
pipeline deterministic for identical input state.

Also provided:
- velocity_verlet_step: two-evaluation velocity Verlet for few-body gravity.

Reference:
    Semi-implicit Euler: https://en.wikipedia.org/wiki/Semi-implicit_Euler_method
    Velocity Verlet: https://en.wikipedia.org/wiki/Verlet_integration#Velocity_Verlet
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from ..constants import MAX_FRAME_DT
from ..materials import Material
from ..profiler import Profiler
from ..types import Bounds, Particle
from ..collision.walls import reflect_into_bounds, clamp_into_bounds
from ..collision.overlap import resolve_overlaps
from .forces import ForceRule, split_by_stage

logger = logging.getLogger(__name__)

# Shared by every integrator that is not handed its own generator.
_PROCESS_RNG = np.random.default_rng()


def process_rng() -> np.random.Generator:
    """The process-wide random source used for thermal jitter."""
    return _PROCESS_RNG


def clamp_frame_dt(dt: float, max_dt: float = MAX_FRAME_DT) -> float:
    """
    Clamp a wall-clock frame delta before integrating it.

    Negative, NaN and infinite deltas become 0 (a paused frame); anything
    above ``max_dt`` is truncated so a stalled host never produces one
    catastrophic step.
    """
    if not math.isfinite(dt) or dt <= 0.0:
        if dt != 0.0:
            logger.debug("frame dt %r treated as 0", dt)
        return 0.0
    if dt > max_dt:
        logger.debug("frame dt %.4f clamped to %.4f", dt, max_dt)
        return max_dt
    return dt


def damping_factor(coefficient: float, dt: float) -> float:
    """
    Per-sub-step velocity multiplier for a viscosity coefficient.

    Calibrated so ``coefficient`` is the fractional loss per 1/60 s frame
    at unit scale; never removes more than 95% of the velocity in one step.
    """
    if coefficient <= 0.0:
        return 1.0
    return 1.0 - min(0.95, coefficient * dt * 60.0)


@dataclass
class IntegratorConfig:
    """
    Tuning of the sub-step pipeline.

    Attributes:
        substeps: Equal sub-steps per frame (S >= 1).
        max_dt: Frame delta clamp in seconds.
        damping: Viscosity coefficient fed to damping_factor.
        jitter: Amplitude of uniform random velocity kicks (units/s²);
                0 disables the stage entirely.
        jitter_axes: Velocity components that receive jitter.
        speed_limit: Max speed after each sub-step; None disables.
        separate_overlaps: Run the positional overlap pass (stage 7).
        overlap_percent: Fraction of penetration corrected per pass.
    """
    substeps: int = 2
    max_dt: float = MAX_FRAME_DT
    damping: float = 0.0
    jitter: float = 0.0
    jitter_axes: tuple[int, ...] = (0, 1)
    speed_limit: float | None = None
    separate_overlaps: bool = False
    overlap_percent: float = 0.8

    def __post_init__(self) -> None:
        if self.substeps < 1:
            logger.debug("substeps %r raised to 1", self.substeps)
            self.substeps = 1
        if self.max_dt <= 0.0:
            self.max_dt = MAX_FRAME_DT


@dataclass(frozen=True)
class IntegratorContext:
    """
    Per-frame integration context; recomputed every frame, never persisted.

    Attributes:
        frame_dt: The clamped frame delta.
        substeps: Number of sub-steps.
        sub_dt: frame_dt / substeps.
        bounds: Reflection box, or None for unbounded motion.
        damping: Per-sub-step velocity multiplier.
    """
    frame_dt: float
    substeps: int
    sub_dt: float
    bounds: Bounds | None
    damping: float

    @classmethod
    def for_frame(cls, dt: float, config: IntegratorConfig, bounds: Bounds | None) -> "IntegratorContext":
        frame_dt = clamp_frame_dt(dt, config.max_dt)
        sub_dt = frame_dt / config.substeps
        return cls(
            frame_dt=frame_dt,
            substeps=config.substeps,
            sub_dt=sub_dt,
            bounds=bounds,
            damping=damping_factor(config.damping, sub_dt),
        )


@dataclass
class StepReport:
    """What one frame of integration did."""
    frame_dt: float = 0.0
    substeps: int = 0
    sub_dt: float = 0.0
    wall_impulse: float = 0.0
    deepest_overlap: float = 0.0
    speed_clamped: int = 0


# =============================================================================
# Pipeline stages
# =============================================================================

def apply_jitter(
    particles: Sequence[Particle],
    amplitude: float,
    dt: float,
    rng: np.random.Generator,
    axes: tuple[int, ...] = (0, 1),
) -> None:
    """
    Brownian-like kick: v_axis += U(−0.5, 0.5)·amplitude·dt per axis.

    Draws from ``rng`` on every call; this stage is deliberately not
    reproducible.
    """
    if amplitude == 0.0 or not particles:
        return
    kicks = (rng.random((len(particles), len(axes))) - 0.5) * (amplitude * dt)
    for p, k in zip(particles, kicks):
        for a, dv in zip(axes, k):
            p.velocity[a] += dv


def apply_damping(particles: Sequence[Particle], factor: float) -> None:
    if factor == 1.0:
        return
    for p in particles:
        p.velocity *= factor


def drift(particles: Sequence[Particle], dt: float) -> None:
    """x += v·dt"""
    for p in particles:
        p.position += p.velocity * dt


def clamp_speed(particles: Sequence[Particle], limit: float) -> int:
    """
    Rescale any velocity whose magnitude exceeds ``limit``.

    Direction is preserved. Non-finite velocities are zeroed, so a NaN can
    never leak into later frames.

    Returns:
        Number of particles that were clamped.
    """
    clamped = 0
    lim2 = limit * limit
    for p in particles:
        v2 = float(np.dot(p.velocity, p.velocity))
        if not math.isfinite(v2):
            p.velocity[:] = 0.0
            clamped += 1
        elif v2 > lim2:
            p.velocity *= limit / math.sqrt(v2)
            clamped += 1
    return clamped


# =============================================================================
# Integrator
# =============================================================================

class SubstepIntegrator:
    """
    Shared sub-stepped integrator for particle simulations.

    Usage:
        integrator = SubstepIntegrator(
            rules=[Buoyancy(...), ThermalExchange(...)],
            config=IntegratorConfig(substeps=2, damping=3.0, jitter=15.0),
            material=Material(restitution=0.5),
            bounds=Bounds(0, 0, 800, 600),
        )
        report = integrator.step(particles, dt)

    ``rules`` may be listed in any order; they are run source-stage first.
    The integrator keeps no particle state between calls.
    """

    def __init__(
        self,
        rules: Sequence[ForceRule] = (),
        config: IntegratorConfig | None = None,
        material: Material | None = None,
        bounds: Bounds | None = None,
        rng: np.random.Generator | None = None,
        profiler: Profiler | None = None,
    ) -> None:
        self.config = config or IntegratorConfig()
        self.material = material or Material()
        self.bounds = bounds
        self.rng = rng if rng is not None else process_rng()
        self.profiler = profiler
        self.set_rules(rules)

    def set_rules(self, rules: Sequence[ForceRule]) -> None:
        self._sources, self._pairwise = split_by_stage(rules)

    @property
    def rules(self) -> list[ForceRule]:
        return self._sources + self._pairwise

    def _phase(self, name: str, fn: Callable[[], object]) -> object:
        if self.profiler is None:
            return fn()
        with self.profiler.section(name):
            return fn()

    def substep(self, particles: Sequence[Particle], ctx: IntegratorContext, report: StepReport) -> None:
        """Run one sub-step of the pipeline in place."""
        cfg = self.config
        h = ctx.sub_dt

        def sources() -> None:
            for rule in self._sources:
                rule.apply(particles, h)

        def pairwise() -> None:
            for rule in self._pairwise:
                rule.apply(particles, h)

        self._phase("sources", sources)
        self._phase("pairwise", pairwise)
        if cfg.jitter:
            self._phase("jitter", lambda: apply_jitter(particles, cfg.jitter, h, self.rng, cfg.jitter_axes))
        apply_damping(particles, ctx.damping)
        self._phase("integrate", lambda: drift(particles, h))

        if ctx.bounds is not None:
            report.wall_impulse += self._phase(
                "walls", lambda: reflect_into_bounds(particles, ctx.bounds, self.material.restitution)
            )
        if cfg.separate_overlaps:
            depth = self._phase("overlap", lambda: resolve_overlaps(particles, cfg.overlap_percent))
            report.deepest_overlap = max(report.deepest_overlap, depth)
            if ctx.bounds is not None:
                # separation can push a particle back through a wall
                clamp_into_bounds(particles, ctx.bounds)

        if cfg.speed_limit is not None:
            report.speed_clamped += clamp_speed(particles, cfg.speed_limit)

    def step(self, particles: Sequence[Particle], dt: float) -> StepReport:
        """
        Advance a population by one frame.

        Args:
            particles: Population (modified in-place).
            dt: Wall-clock frame delta; clamped before sub-stepping.

        Returns:
            StepReport with the clamped delta and accumulated wall impulse.
        """
        ctx = IntegratorContext.for_frame(dt, self.config, self.bounds)
        report = StepReport(frame_dt=ctx.frame_dt, substeps=ctx.substeps, sub_dt=ctx.sub_dt)
        if ctx.frame_dt == 0.0:
            return report
        for _ in range(ctx.substeps):
            self.substep(particles, ctx, report)
        return report


# =============================================================================
# Velocity Verlet (few-body gravity)
# =============================================================================

def velocity_verlet_step(
    positions: np.ndarray,
    velocities: np.ndarray,
    dt: float,
    acceleration: Callable[[np.ndarray], np.ndarray],
    a0: np.ndarray | None = None,
) -> np.ndarray:
    """
    Advance arrays in place using velocity Verlet.

        x(t+dt) = x + v·dt + ½·a(t)·dt²
        v(t+dt) = v + ½·(a(t) + a(t+dt))·dt

    Verlet is symplectic and time-reversible, so orbital energy oscillates
    instead of drifting.

    Args:
        positions: Array [N, D] (modified in-place).
        velocities: Array [N, D] (modified in-place).
        dt: Step size.
        acceleration: Maps positions [N, D] to accelerations [N, D].
        a0: Accelerations at the current positions, if already known.

    Returns:
        Accelerations at the new positions (pass back as ``a0`` next call).
    """
    if a0 is None:
        a0 = acceleration(positions)
    positions += velocities * dt + 0.5 * a0 * dt * dt
    a1 = acceleration(positions)
    velocities += 0.5 * (a0 + a1) * dt
    return a1
