# MIT License (see LICENSE)
"""
Input/Output utilities.

This subpackage provides:
    - Parameter presets: flat JSON objects of host parameters.
    - Snapshots: JSON dumps of a FrameSnapshot.

Typical usage:
    from vizphys.io import load_parameters, save_snapshot

    params = load_parameters("hot_gas.json")
    snapshot = sim.advance(1 / 60, params)
    save_snapshot(snapshot, "frame.json")
"""
from .json_io import (
    load_parameters,
    load_parameters_raw,
    parameters_from_json,
    save_parameters,
    snapshot_to_json,
    save_snapshot,
)

__all__ = [
    # Loading
    "load_parameters",
    "load_parameters_raw",
    "parameters_from_json",
    # Saving
    "save_parameters",
    "save_snapshot",
    # Serialization
    "snapshot_to_json",
]
