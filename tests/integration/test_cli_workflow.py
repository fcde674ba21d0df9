"""Integration tests for end-to-end CLI workflows.

Tests the bench pipeline: fuel catalog → balance → sweep, plus the cycle
simulation and session inspection.
"""

import json
import os
import tempfile

import pytest
from click.testing import CliRunner

from dexa.cli.fuel_cmd import fuel_add, fuel_edit
from dexa.cli.main import cli

BENCH_ARGS = [
    "--fuel-flow", "0.0008",
    "--speed", "1500",
    "--air-flow", "0.02",
    "--water-flow", "0.15",
    "--water-in", "25",
    "--water-out", "65",
    "--exhaust-temp", "450",
]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tmp_dir():
    with tempfile.TemporaryDirectory() as d:
        yield d


class TestBalance:
    def test_balance_diesel(self, runner):
        result = runner.invoke(cli, ["balance", "--load", "10", *BENCH_ARGS])
        assert result.exit_code == 0, result.output
        assert "Energy Balance" in result.output
        assert "Exergy Balance" in result.output
        assert "49.05" in result.output

    def test_balance_saves_session(self, runner, tmp_dir):
        out = os.path.join(tmp_dir, "session.json")
        result = runner.invoke(cli, ["balance", "--load", "10", *BENCH_ARGS, "-o", out])
        assert result.exit_code == 0, result.output

        with open(out) as f:
            data = json.load(f)
        assert data["fuel"] == "diesel"
        assert data["operating_point"]["brake_load"] == 10.0
        assert data["balance"]["input_energy"] == pytest.approx(34.0)
        assert data["balance"]["torque"] == pytest.approx(49.05)

    def test_invalid_temperatures_exit_1(self, runner):
        args = [a if a != "65" else "20" for a in BENCH_ARGS]
        result = runner.invoke(cli, ["balance", "--load", "10", *args])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_zero_fuel_warns(self, runner):
        args = [a if a != "0.0008" else "0" for a in BENCH_ARGS]
        result = runner.invoke(cli, ["balance", "--load", "10", *args])
        assert result.exit_code == 0, result.output
        assert "Warning" in result.output


class TestSweep:
    def test_sweep_two_fuels(self, runner):
        result = runner.invoke(cli, [
            "sweep", "--fuel", "diesel", "--fuel", "biodiesel100",
            "--load", "4", "--load", "8", "--load", "12",
            "--cr", "16", "--cr", "18",
            *BENCH_ARGS,
        ])
        assert result.exit_code == 0, result.output
        assert "Energy Efficiency vs Brake Load" in result.output
        assert "Exergy Efficiency vs Compression Ratio" in result.output


class TestSimulate:
    def test_simulate_defaults(self, runner):
        result = runner.invoke(cli, ["simulate"])
        assert result.exit_code == 0, result.output
        assert "Cycle Summary" in result.output
        assert "1441" in result.output

    def test_simulate_trace_rows(self, runner):
        result = runner.invoke(cli, ["simulate", "--every", "180"])
        assert result.exit_code == 0, result.output
        assert "Trace" in result.output

    def test_simulate_saves_arrays(self, runner, tmp_dir):
        out = os.path.join(tmp_dir, "session.json")
        result = runner.invoke(cli, ["simulate", "-o", out])
        assert result.exit_code == 0, result.output

        with open(out) as f:
            data = json.load(f)
        sim = data["simulation"]
        assert len(sim["pressure"]) == 1441
        assert sim["input"]["compression_ratio"] == 17.0
        assert sim["summary"]["indicated_work"] > 0

    def test_invalid_cr_exit_1(self, runner):
        result = runner.invoke(cli, ["simulate", "--cr", "1"])
        assert result.exit_code == 1


class TestFuelCatalog:
    def test_list_builtins(self, runner, tmp_dir):
        catalog = os.path.join(tmp_dir, "fuels.json")
        result = runner.invoke(cli, ["fuel", "--catalog", catalog, "list"])
        assert result.exit_code == 0, result.output
        assert "diesel" in result.output
        assert "biodiesel100" in result.output

    def test_add_edit_remove(self, runner, tmp_dir):
        catalog = os.path.join(tmp_dir, "fuels.json")

        result = runner.invoke(cli, ["fuel", "--catalog", catalog, "add", "Jatropha", "--lhv", "39.5"])
        assert result.exit_code == 0, result.output
        assert "custom_1" in result.output

        result = runner.invoke(cli, ["fuel", "--catalog", catalog, "edit", "custom_1", "--cetane", "55"])
        assert result.exit_code == 0, result.output

        with open(catalog) as f:
            data = json.load(f)
        record = data["fuels"][0]
        assert record["lhv"] == 39.5
        assert record["cetane"] == 55.0

        result = runner.invoke(cli, ["fuel", "--catalog", catalog, "remove", "custom_1"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["fuel", "--catalog", catalog, "add", "Karanja"])
        assert "custom_2" in result.output

    def test_remove_missing_exit_1(self, runner, tmp_dir):
        catalog = os.path.join(tmp_dir, "fuels.json")
        result = runner.invoke(cli, ["fuel", "--catalog", catalog, "remove", "custom_5"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_add_invalid_exit_1(self, runner, tmp_dir):
        catalog = os.path.join(tmp_dir, "fuels.json")
        result = runner.invoke(cli, ["fuel", "--catalog", catalog, "add", "Bad", "--lhv", "0"])
        assert result.exit_code == 1

    def test_balance_with_custom_fuel(self, runner, tmp_dir):
        catalog = os.path.join(tmp_dir, "fuels.json")
        runner.invoke(cli, ["fuel", "--catalog", catalog, "add", "Jatropha", "--lhv", "39.5"])

        out = os.path.join(tmp_dir, "session.json")
        result = runner.invoke(cli, [
            "balance", "--fuel", "custom_1", "--load", "10", *BENCH_ARGS,
            "--catalog", catalog, "-o", out,
        ])
        assert result.exit_code == 0, result.output
        with open(out) as f:
            data = json.load(f)
        assert data["operating_point"]["lhv"] == 39.5


class TestSessionInfo:
    def test_info_after_balance_and_simulate(self, runner, tmp_dir):
        out = os.path.join(tmp_dir, "session.json")
        runner.invoke(cli, ["balance", "--load", "10", *BENCH_ARGS, "-o", out])
        runner.invoke(cli, ["simulate", "-o", out])

        with open(out) as f:
            data = json.load(f)
        assert data["balance"]
        assert data["simulation"]

        result = runner.invoke(cli, ["info", "session", out])
        assert result.exit_code == 0, result.output
        assert "Operating Point" in result.output
        assert "Simulation" in result.output


class TestFuelOptions:
    def test_add_and_edit_expose_every_field(self):
        fields = {"lhv", "density", "viscosity", "cetane", "flash_point", "hc_ratio", "oc_ratio", "sc_ratio"}
        for command in (fuel_add, fuel_edit):
            names = {p.name for p in command.params}
            assert fields <= names

    def test_add_all_fields(self, runner, tmp_dir):
        catalog = os.path.join(tmp_dir, "fuels.json")
        result = runner.invoke(cli, [
            "fuel", "--catalog", catalog, "add", "Blend",
            "--lhv", "40", "--density", "860", "--viscosity", "3.5", "--cetane", "53",
            "--flash-point", "90", "--hc", "1.85", "--oc", "0.05", "--sc", "0.001",
        ])
        assert result.exit_code == 0, result.output
        with open(catalog) as f:
            record = json.load(f)["fuels"][0]
        assert record["flash_point"] == 90.0
        assert record["oc_ratio"] == 0.05
        assert record["sc_ratio"] == 0.001
