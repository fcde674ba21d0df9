"""Tests for session and fuel catalog persistence."""

import json

import numpy as np
import pytest

from dexa.core.config import (
    BenchSession,
    ProjectMeta,
    load_fuel_catalog,
    load_session_json,
    save_fuel_catalog,
    save_session_json,
)
from dexa.core.fuels import CustomFuel, FuelRegistry


class TestBenchSession:
    def test_defaults(self):
        state = BenchSession()
        assert state.fuel == "diesel"
        assert state.operating_point == {}
        assert state.balance == {}

    def test_meta_touch(self):
        meta = ProjectMeta(name="Test")
        meta.touch()
        assert meta.modified != ""
        assert meta.created == meta.modified

    def test_touch_keeps_created(self):
        meta = ProjectMeta(name="Test", created="2024-01-01T00:00:00+00:00")
        meta.touch()
        assert meta.created == "2024-01-01T00:00:00+00:00"


class TestJsonPersistence:
    def test_save_and_load(self, tmp_path):
        state = BenchSession(
            meta=ProjectMeta(name="Bench 3"),
            fuel="biodiesel20",
            operating_point={"brake_load": 10.0},
            balance={"energy_efficiency": 22.66},
        )
        path = tmp_path / "session.json"
        save_session_json(state, path)

        loaded = load_session_json(path)
        assert loaded.meta.name == "Bench 3"
        assert loaded.fuel == "biodiesel20"
        assert loaded.operating_point["brake_load"] == pytest.approx(10.0)
        assert loaded.balance["energy_efficiency"] == pytest.approx(22.66)

    def test_numpy_serialization(self, tmp_path):
        """Numpy arrays and scalars in dicts should be serialized."""
        state = BenchSession()
        state.simulation = {
            "pressure": np.linspace(1e5, 2e5, 5),
            "samples": np.int64(5),
            "peak": np.float64(2e5),
        }
        path = tmp_path / "np.json"
        save_session_json(state, path)

        with open(path) as f:
            data = json.load(f)
        assert len(data["simulation"]["pressure"]) == 5
        assert data["simulation"]["samples"] == 5
        assert data["simulation"]["peak"] == pytest.approx(2e5)


class TestFuelCatalog:
    def test_round_trip(self, tmp_path):
        registry = FuelRegistry()
        registry.create(CustomFuel(name="Jatropha", lhv=39.5))
        registry.create(CustomFuel(name="Karanja", lhv=38.0))
        registry.delete("custom_1")

        path = tmp_path / "fuels.json"
        save_fuel_catalog(registry, path)
        loaded = load_fuel_catalog(path)

        assert loaded.fuel_ids() == ["diesel", "biodiesel20", "biodiesel100", "custom_2"]
        assert loaded.display_name("custom_2") == "Karanja"
        assert loaded.counter == 2

    def test_missing_file(self, tmp_path):
        registry = load_fuel_catalog(tmp_path / "absent.json")
        assert len(registry) == 0
        assert registry.counter == 0
