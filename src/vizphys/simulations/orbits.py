# MIT License (see LICENSE)
"""
Kepler's laws on the inner solar system plus Jupiter.

No forces are integrated: every frame each planet's true anomaly is
recomputed from the elapsed time through Kepler's equation, so orbits
close exactly however long the session runs. Distances are in AU, time
in years.
"""
from __future__ import annotations
import math
from dataclasses import dataclass

import numpy as np

from ..config import Parameters, param
from ..constants import MAX_ECCENTRICITY
from ..engine import FrameDriver
from ..history import TrailBuffer
from ..types import OrbitalBody
from ..core.kepler import orbit_radius, orbital_position, swept_area_rate

SWEEP_INTERVAL = 0.5  # years
SWEEP_HISTORY = 20
TRACKED = "Earth"


def solar_system() -> list[OrbitalBody]:
    """The five planets shown by the demo: (a [AU], e, T [yr], phase)."""
    return [
        OrbitalBody("Mercury", 0.387, 0.206, 0.241, 0.0),
        OrbitalBody("Venus", 0.723, 0.007, 0.615, 0.5 * math.pi),
        OrbitalBody("Earth", 1.0, 0.017, 1.0, math.pi),
        OrbitalBody("Mars", 1.524, 0.093, 1.881, 1.5 * math.pi),
        OrbitalBody("Jupiter", 5.203, 0.049, 11.86, 0.3),
    ]


@dataclass(frozen=True)
class KeplerParams(Parameters):
    speed: float = param(1.0, "speed", 0.0, 10.0)
    eccentricity: float = param(0.5, "eccentricity", 0.0, MAX_ECCENTRICITY)


class KeplerOrbitsSim(FrameDriver):
    """
    Planets on fixed ellipses plus one demo orbit whose eccentricity is
    user controlled.

    ``time`` counts simulated years (wall seconds × speed).
    """

    name = "keplers-law"
    title = "Kepler's laws"
    params_type = KeplerParams

    def __init__(self, params=None, seed: int = 0) -> None:
        super().__init__(params, seed)
        self.planets: list[OrbitalBody] = []
        self.demo = OrbitalBody("Demo", 1.0, self.params.eccentricity, 1.0)
        self.anomalies: dict[str, float] = {}
        self.sweep_angles: TrailBuffer[float] = TrailBuffer(SWEEP_HISTORY)
        self._sweep_timer = 0.0
        self.pixels_per_au = 1.0

    def _layout(self) -> None:
        # Jupiter's aphelion fits inside the short side
        aphelion = 5.203 * (1.0 + 0.049)
        self.pixels_per_au = 0.45 * self.surface.short_side / aphelion

    def _spawn(self) -> None:
        self.planets = solar_system()
        self.demo = OrbitalBody("Demo", 1.0, self.params.eccentricity, 1.0)
        self.sweep_angles.clear()
        self._sweep_timer = 0.0
        self._update_anomalies(0.0)

    def _apply_params(self, old: KeplerParams) -> None:
        self.demo.eccentricity = self.params.eccentricity

    def _update_anomalies(self, t: float) -> None:
        for body in self.planets + [self.demo]:
            _, _, nu = orbital_position(body, t)
            self.anomalies[body.name] = nu

    def _elapsed(self, dt: float) -> float:
        return dt * self.params.speed

    def _step(self, dt: float) -> None:
        years = self._elapsed(dt)
        self._update_anomalies(self.time + years)
        self._sweep_timer += years
        if self._sweep_timer >= SWEEP_INTERVAL:
            self.sweep_angles.append(self.anomalies[TRACKED])
            self._sweep_timer = 0.0

    def positions(self) -> np.ndarray:
        """Heliocentric [x, y] of every planet, in AU."""
        out = np.zeros((len(self.planets), 2), dtype=np.float64)
        for i, body in enumerate(self.planets):
            nu = self.anomalies.get(body.name, 0.0)
            r = orbit_radius(body.semi_major_axis, body.eccentricity, nu)
            out[i] = (r * math.cos(nu), r * math.sin(nu))
        return out

    def _arrays(self):
        pos = self.positions()
        n = len(self.planets)
        periods = np.array([b.period for b in self.planets], dtype=np.float64)
        return pos, np.zeros_like(pos), np.zeros(n), {"period": periods}

    def _trails(self) -> dict[str, np.ndarray]:
        return {"sweep_angles": np.array(self.sweep_angles.to_list(), dtype=np.float64)}

    def _release(self) -> None:
        super()._release()
        self.planets = []
        self.anomalies = {}
        self.sweep_angles.clear()

    def derived(self) -> dict[str, float]:
        d = self.demo
        nu = self.anomalies.get(d.name, 0.0)
        return {
            "years": self.time,
            "earth_anomaly": self.anomalies.get(TRACKED, 0.0),
            "demo_eccentricity": d.eccentricity,
            "demo_radius": orbit_radius(d.semi_major_axis, d.eccentricity, nu),
            "demo_swept_area_rate": swept_area_rate(d.semi_major_axis, d.eccentricity, d.period),
        }
