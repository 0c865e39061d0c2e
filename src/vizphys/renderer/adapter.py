# MIT License (see LICENSE)
"""
Renderer adapters for simulation visualization.

This module provides an abstract base class for rendering and a few
concrete implementations. Renderers consume FrameSnapshot objects only:
the arrays are read-only copies taken after a completed frame, so a
renderer can never observe (or disturb) a half-finished sub-step.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TextIO
import sys

if TYPE_CHECKING:
    from ..engine import FrameSnapshot


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Subclasses implement the drawing methods to integrate with a graphics
    backend (matplotlib, pyglet, a web frontend, ...).

    Usage:
        renderer = MyRenderer()
        renderer.begin_frame(snapshot)
        for i in range(len(snapshot)):
            renderer.draw_particle(snapshot, i)
        renderer.end_frame()

    Or use the convenience method:
        renderer.render(snapshot)
    """

    @abstractmethod
    def begin_frame(self, snapshot: "FrameSnapshot") -> None:
        """
        Begin a new frame.

        Args:
            snapshot: The frame about to be drawn (time, bounds, derived).
        """
        ...

    @abstractmethod
    def draw_particle(self, snapshot: "FrameSnapshot", index: int) -> None:
        """
        Draw one particle of the snapshot.

        Args:
            snapshot: The frame being drawn.
            index: Row into the snapshot arrays.
        """
        ...

    @abstractmethod
    def end_frame(self) -> None:
        """Finalize the current frame."""
        ...

    def render(self, snapshot: "FrameSnapshot") -> None:
        """Draw every particle of a snapshot as one frame."""
        self.begin_frame(snapshot)
        for i in range(len(snapshot)):
            self.draw_particle(snapshot, i)
        self.end_frame()


class DebugRenderer(RendererAdapter):
    """
    Console/text renderer for development and testing.

    Example:
        renderer = DebugRenderer()
        renderer.render(sim.advance(1 / 60))

    Output:
        === convection frame 12 t=0.2000 ===
        [0] @ (402.31, 377.90) v=(1.25, -8.04) T=41.2
        [1] @ (120.04, 95.11) v=(0.00, 3.10) T=20.9
        derived: particles=80 mean_temperature=24.1
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = True):
        """
        Args:
            output: Output stream (defaults to sys.stdout).
            verbose: If True, include velocity and scalar attributes.
        """
        self.output = output or sys.stdout
        self.verbose = verbose
        self._derived: dict[str, float] = {}

    def begin_frame(self, snapshot: "FrameSnapshot") -> None:
        self._derived = dict(snapshot.derived)
        self.output.write(f"=== {snapshot.name} frame {snapshot.frame} t={snapshot.time:.4f} ===\n")

    def draw_particle(self, snapshot: "FrameSnapshot", index: int) -> None:
        pos = snapshot.positions[index]
        coords = ", ".join(f"{c:.2f}" for c in pos)
        line = f"[{index}] @ ({coords})"
        if self.verbose:
            vel = ", ".join(f"{c:.2f}" for c in snapshot.velocities[index])
            line += f" v=({vel})"
            if "temperature" in snapshot.attributes:
                line += f" T={snapshot.attributes['temperature'][index]:.1f}"
        self.output.write(line + "\n")

    def end_frame(self) -> None:
        if self.verbose and self._derived:
            parts = " ".join(f"{k}={v:.4g}" for k, v in self._derived.items())
            self.output.write(f"derived: {parts}\n")
        self.output.write("\n")
        self.output.flush()


class NullRenderer(RendererAdapter):
    """No-op renderer, for timing runs without drawing overhead."""

    def begin_frame(self, snapshot: "FrameSnapshot") -> None:
        pass

    def draw_particle(self, snapshot: "FrameSnapshot", index: int) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Renderer that buffers frame data for later retrieval.

    Example:
        renderer = BufferedRenderer()
        for _ in range(100):
            renderer.render(sim.advance(1 / 60))

        for frame in renderer.frames:
            print(frame["time"], len(frame["particles"]))
    """

    def __init__(self) -> None:
        self.frames: list[dict[str, Any]] = []
        self._current_frame: dict[str, Any] | None = None

    def begin_frame(self, snapshot: "FrameSnapshot") -> None:
        self._current_frame = {
            "name": snapshot.name,
            "time": snapshot.time,
            "frame": snapshot.frame,
            "derived": dict(snapshot.derived),
            "particles": [],
        }

    def draw_particle(self, snapshot: "FrameSnapshot", index: int) -> None:
        if self._current_frame is None:
            return
        entry = {
            "position": snapshot.positions[index].tolist(),
            "velocity": snapshot.velocities[index].tolist(),
        }
        for key, values in snapshot.attributes.items():
            entry[key] = float(values[index])
        self._current_frame["particles"].append(entry)

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def clear(self) -> None:
        self.frames.clear()
