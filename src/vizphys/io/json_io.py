# MIT License (see LICENSE)
"""
JSON parameter presets and frame snapshots.

Parameter presets are flat JSON objects mapping the host's parameter keys
to numbers, exactly the mapping advance() accepts:

{
  "temperature": 600,
  "volume": 40,
  "numParticles": 120
}

Snapshots serialize a FrameSnapshot for offline inspection or a web
viewer:

{
  "name": string,
  "time": float,
  "frame": int,
  "positions": [[x, y(, z)], ...],
  "velocities": [[vx, vy(, vz)], ...],
  "radii": [float, ...],
  "attributes": {"temperature": [...], ...},   # optional
  "trails": {"path": [[x, y, z], ...], ...},   # optional
  "derived": {"pressure": float, ...},
  "bounds": [x_min, y_min, x_max, y_max]       # optional
}

Non-finite derived values (e.g. an infinite cyclotron radius) are written
as null, since JSON has no inf.
"""
from __future__ import annotations
import json
import math
from typing import TYPE_CHECKING, Any, Mapping

import numpy as np

if TYPE_CHECKING:
    from ..engine import FrameSnapshot


def load_parameters_raw(path: str) -> Any:
    """Load raw JSON data from a preset file without validation."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def parameters_from_json(data: Any) -> dict[str, float]:
    """
    Validate a decoded preset.

    Raises:
        ValueError: If the document is not an object of numbers.
    """
    if not isinstance(data, dict):
        raise ValueError(f"parameter preset must be a JSON object, got {type(data).__name__}")
    out: dict[str, float] = {}
    for key, value in data.items():
        # bool is an int subclass but not a meaningful parameter value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"parameter {key!r} must be a number, got {value!r}")
        out[str(key)] = float(value)
    return out


def load_parameters(path: str) -> dict[str, float]:
    """
    Load a parameter preset.

    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the document is not a flat object of numbers.
    """
    return parameters_from_json(load_parameters_raw(path))


def save_parameters(params: Mapping[str, float], path: str, indent: int = 2) -> None:
    """
    Save a parameter mapping (or a Parameters instance) as a preset.
    """
    if hasattr(params, "to_mapping"):
        params = params.to_mapping()
    data = {str(k): _to_number(v) for k, v in params.items()}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, sort_keys=True)


def snapshot_to_json(snapshot: "FrameSnapshot") -> dict[str, Any]:
    """
    Serialize a FrameSnapshot to a JSON-compatible dictionary.

    Empty attribute and trail maps and missing bounds are omitted.
    """
    result: dict[str, Any] = {
        "name": snapshot.name,
        "time": snapshot.time,
        "frame": snapshot.frame,
        "positions": _to_list(snapshot.positions),
        "velocities": _to_list(snapshot.velocities),
        "radii": _to_list(snapshot.radii),
        "derived": {k: _finite_or_none(v) for k, v in snapshot.derived.items()},
    }
    if snapshot.attributes:
        result["attributes"] = {k: _to_list(v) for k, v in snapshot.attributes.items()}
    if snapshot.trails:
        result["trails"] = {k: _to_list(v) for k, v in snapshot.trails.items()}
    if snapshot.bounds is not None:
        b = snapshot.bounds
        result["bounds"] = [b.x_min, b.y_min, b.x_max, b.y_max]
    return result


def save_snapshot(snapshot: "FrameSnapshot", path: str, indent: int = 2) -> None:
    """Save a FrameSnapshot to a JSON file on disk."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot_to_json(snapshot), f, indent=indent)


def _to_number(v: Any) -> float | int:
    if isinstance(v, (int, np.integer)) and not isinstance(v, bool):
        return int(v)
    return float(v)


def _finite_or_none(v: float) -> float | None:
    v = float(v)
    return v if math.isfinite(v) else None


def _to_list(arr: Any) -> list:
    """Helper: Convert numpy array or tuple to a nested list of floats."""
    if isinstance(arr, np.ndarray):
        return arr.tolist()
    return list(arr)
