"""Tests for the energy/exergy balance calculator."""

import math

import pytest

from dexa.core.balance import (
    EnergyExergyCalculator,
    EngineOperatingInput,
    chemical_exergy_factor,
    compute_balance,
    cr_correction_factor,
    fuel_efficiency_factor,
    ideal_efficiency,
    torque_from_load,
)
from dexa.core.fuels import BUILTIN_FUELS, BuiltinFuel, CustomFuel, FuelRegistry


def bench_point(**overrides):
    values = dict(
        fuel_mass_flow=0.0008,
        lhv=42.5,
        engine_speed=1500.0,
        air_mass_flow=0.02,
        water_mass_flow=0.15,
        water_temp_in=25.0,
        water_temp_out=65.0,
        exhaust_temp=450.0,
        ambient_temp=25.0,
        compression_ratio=16.0,
        brake_load=10.0,
        arm_length=0.5,
    )
    values.update(overrides)
    return EngineOperatingInput(**values)


@pytest.fixture
def calculator():
    return EnergyExergyCalculator()


class TestFactors:
    def test_torque(self):
        assert torque_from_load(10.0, 0.5) == pytest.approx(49.05)

    def test_ideal_efficiency_cr16(self):
        # (1 - 16^-0.35) * 100
        assert ideal_efficiency(16.0) == pytest.approx(62.11, abs=0.01)

    def test_ideal_efficiency_cr1(self):
        assert ideal_efficiency(1.0) == pytest.approx(0.0)

    def test_ideal_efficiency_increases_with_cr(self):
        assert ideal_efficiency(18.0) > ideal_efficiency(14.0)

    def test_cr_factor_unity_at_reference(self):
        assert cr_correction_factor(16.0) == pytest.approx(1.0)
        assert cr_correction_factor(18.0) == pytest.approx(1.03)

    def test_diesel_fuel_factor(self):
        assert fuel_efficiency_factor(BUILTIN_FUELS[BuiltinFuel.DIESEL]) == pytest.approx(1.0)

    def test_biodiesel_fuel_factors(self):
        b20 = BUILTIN_FUELS[BuiltinFuel.BIODIESEL20]
        b100 = BUILTIN_FUELS[BuiltinFuel.BIODIESEL100]
        assert fuel_efficiency_factor(b20) == pytest.approx(0.98 * 1.02 * 0.997)
        assert fuel_efficiency_factor(b100) == pytest.approx(0.95 * 1.05 * 0.98)

    def test_viscosity_penalty_floor(self):
        registry = FuelRegistry()
        fuel_id = registry.create(CustomFuel(name="Thick", viscosity=30.0))
        props = registry.resolve(fuel_id)
        assert fuel_efficiency_factor(props) == pytest.approx(
            props.combustion_efficiency * props.ignition_quality * 0.9
        )

    def test_chemical_exergy_factor_diesel(self):
        assert chemical_exergy_factor(BUILTIN_FUELS[BuiltinFuel.DIESEL]) == pytest.approx(
            1.0374 + 0.0159 * 1.8
        )


class TestBenchScenario:
    """Diesel at 10 kg load, 1500 rpm, CR 16."""

    def test_energy_terms(self, calculator):
        r = calculator.compute(bench_point(), "diesel")
        assert r.torque == pytest.approx(49.05)
        assert r.input_energy == pytest.approx(34.0)
        assert r.brake_power == pytest.approx(2 * math.pi * 1500 * 49.05 / 60000)
        assert r.brake_power == pytest.approx(7.705, abs=1e-3)
        assert r.cooling_water_energy == pytest.approx(0.15 * 4.18 * 40.0)
        assert r.exhaust_gas_energy == pytest.approx(0.0208 * 1.15 * 425.0)

    def test_energy_closure(self, calculator):
        r = calculator.compute(bench_point(), "diesel")
        total = r.brake_power + r.cooling_water_energy + r.exhaust_gas_energy + r.unaccounted_energy
        assert total == pytest.approx(r.input_energy)

    def test_energy_efficiency(self, calculator):
        r = calculator.compute(bench_point(), "diesel")
        assert r.energy_efficiency == pytest.approx(r.brake_power / r.input_energy * 100.0)
        assert 20.0 < r.energy_efficiency < 25.0

    def test_exergy_terms(self, calculator):
        r = calculator.compute(bench_point(), "diesel")
        assert r.input_exergy == pytest.approx(34.0 * (1.0374 + 0.0159 * 1.8))
        assert r.shaft_exergy == pytest.approx(r.brake_power)
        total = r.shaft_exergy + r.cooling_water_exergy + r.exhaust_gas_exergy + r.exergy_destruction
        assert total == pytest.approx(r.input_exergy)
        assert r.exergy_efficiency == pytest.approx(r.shaft_exergy / r.input_exergy * 100.0)

    def test_cooling_water_exergy_below_energy(self, calculator):
        r = calculator.compute(bench_point(), "diesel")
        assert 0.0 < r.cooling_water_exergy < r.cooling_water_energy

    def test_sustainability_metrics(self, calculator):
        r = calculator.compute(bench_point(), "diesel")
        assert r.sustainability_index == pytest.approx(1.0 / (1.0 - r.shaft_exergy / r.input_exergy))
        assert r.exergy_performance_coefficient == pytest.approx(r.shaft_exergy / r.exergy_destruction)

    def test_ideal_efficiency_in_result(self, calculator):
        r = calculator.compute(bench_point(), "diesel")
        assert r.ideal_efficiency == pytest.approx(62.11, abs=0.01)

    def test_idempotent(self, calculator):
        inp = bench_point()
        assert calculator.compute(inp, "diesel") == calculator.compute(inp, "diesel")

    def test_as_dict(self, calculator):
        d = calculator.compute(bench_point(), "diesel").as_dict()
        assert len(d) == 16
        assert d["torque"] == pytest.approx(49.05)


class TestFuelEffects:
    def test_biodiesel_lowers_efficiency(self, calculator):
        diesel = calculator.compute(bench_point(), "diesel")
        b100 = calculator.compute(bench_point(), "biodiesel100")
        # same measured input, only the correction factor differs
        assert b100.input_energy == pytest.approx(diesel.input_energy)
        assert b100.energy_efficiency == pytest.approx(diesel.energy_efficiency * 0.95 * 1.05 * 0.98)

    def test_cr_correction_applied(self, calculator):
        base = calculator.compute(bench_point(), "diesel")
        high = calculator.compute(bench_point(compression_ratio=18.0), "diesel")
        assert high.energy_efficiency == pytest.approx(base.energy_efficiency * 1.03)

    def test_unknown_fuel_uses_diesel(self, calculator):
        assert calculator.compute(bench_point(), "custom_77") == calculator.compute(bench_point(), "diesel")

    def test_compute_balance_matches_calculator(self, calculator):
        inp = bench_point()
        assert compute_balance(inp, BUILTIN_FUELS[BuiltinFuel.DIESEL]) == calculator.compute(inp, "diesel")


class TestDegenerateInput:
    def test_zero_input_energy_does_not_raise(self, calculator):
        r = calculator.compute(bench_point(fuel_mass_flow=0.0), "diesel")
        assert r.input_energy == 0.0
        assert not math.isfinite(r.energy_efficiency)
        assert not math.isfinite(r.exergy_efficiency)

    def test_zero_load(self, calculator):
        r = calculator.compute(bench_point(brake_load=0.0), "diesel")
        assert r.torque == 0.0
        assert r.brake_power == 0.0
        assert r.energy_efficiency == 0.0
