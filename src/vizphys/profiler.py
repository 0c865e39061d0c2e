# MIT License (see LICENSE)
"""
Per-phase timing of the sub-step pipeline.

The integrator wraps each pipeline phase (sources, pairwise, jitter,
integrate, walls, overlap) in a profiler section when a profiler is
attached. Without one, no timing calls are made.

Example:
    profiler = Profiler()
    integrator = SubstepIntegrator(..., profiler=profiler)
    integrator.step(particles, dt)
    print(profiler.stats.summary()["walls"]["mean_ms"])
"""
from __future__ import annotations
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class ProfileStats:
    """
    Accumulated timing samples per phase name.

    Keeps running count/total/max rather than raw samples, so a long
    interactive session does not grow memory.
    """
    count: dict[str, int] = field(default_factory=dict)
    total: dict[str, float] = field(default_factory=dict)
    peak: dict[str, float] = field(default_factory=dict)

    def add(self, name: str, dt: float) -> None:
        """Record one sample (seconds) for a phase."""
        self.count[name] = self.count.get(name, 0) + 1
        self.total[name] = self.total.get(name, 0.0) + dt
        self.peak[name] = max(self.peak.get(name, 0.0), dt)

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Returns:
            Dict mapping phase name to {'n', 'mean_ms', 'max_ms'}.
        """
        return {
            name: {
                "n": n,
                "mean_ms": 1e3 * self.total[name] / n,
                "max_ms": 1e3 * self.peak[name],
            }
            for name, n in self.count.items()
        }

    def reset(self) -> None:
        self.count.clear()
        self.total.clear()
        self.peak.clear()


class Profiler:
    """Context-manager based phase timer."""

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time the enclosed block under ``name``."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)
