import json

import pytest

from vizphys.io import (
    load_parameters,
    parameters_from_json,
    save_parameters,
    save_snapshot,
    snapshot_to_json,
)
from vizphys.simulations import create
from vizphys.simulations.gas import GasParams


def test_preset_roundtrip(tmp_path):
    path = tmp_path / "gas.json"
    save_parameters(GasParams(temperature=600.0, num_particles=120), str(path))
    data = load_parameters(str(path))
    assert data == {"temperature": 600.0, "volume": 60.0, "numParticles": 120.0}

    sim = create("gas-laws", params=data)
    assert sim.params.temperature == 600.0
    assert sim.params.num_particles == 120


def test_preset_validation():
    assert parameters_from_json({"a": 1, "b": 2.5}) == {"a": 1.0, "b": 2.5}
    with pytest.raises(ValueError):
        parameters_from_json([1, 2])
    with pytest.raises(ValueError):
        parameters_from_json({"a": "fast"})
    with pytest.raises(ValueError):
        parameters_from_json({"a": True})


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_parameters(str(tmp_path / "missing.json"))


def test_snapshot_json_infinite_values_become_null(tmp_path):
    sim = create("lorentz-3d")
    sim.initialize()
    snap = sim.advance(0.01, {"magneticField": 0.0})
    data = snapshot_to_json(snap)
    assert data["name"] == "lorentz-3d"
    assert data["frame"] == 1
    assert data["derived"]["cyclotron_radius"] is None
    assert len(data["positions"][0]) == 3
    assert len(data["trails"]["path"]) == 2
    assert "bounds" not in data

    path = tmp_path / "snap.json"
    save_snapshot(snap, str(path))
    with open(path, encoding="utf-8") as f:
        loaded = json.load(f)
    assert loaded["derived"]["speed"] == pytest.approx(1.5)


def test_snapshot_json_bounds():
    sim = create("gas-laws", seed=1, params={"numParticles": 5})
    sim.initialize()
    data = snapshot_to_json(sim.advance(1.0 / 60.0))
    assert len(data["bounds"]) == 4
    assert len(data["attributes"]["temperature"]) == 5
    json.dumps(data)
