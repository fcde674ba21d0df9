"""Energy and exergy balance of a compression-ignition engine test bench.

Given one operating point (fuel/air/water flows, temperatures, speed and
dynamometer load) and a resolved fuel, computes the first-law energy
distribution, the second-law exergy distribution and the derived
sustainability metrics.

Note: The calculator does not validate its input. Degenerate input (for
example zero fuel flow, hence zero input energy) yields ``nan``/``inf``
efficiencies instead of raising; run ``dexa.utils.validation`` guards
before calling it when that matters.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

import numpy as np

from dexa.core.fuels import FuelProperties, FuelRegistry
from dexa.utils.constants import (
    AMBIENT_PRESSURE_BAR,
    CP_EXHAUST,
    CP_WATER,
    EXHAUST_PRESSURE_BAR,
    G_LOAD,
    GAMMA_IDEAL,
    MJ_TO_KJ,
    REFERENCE_CR,
    R_EXHAUST,
    T_CELSIUS_OFFSET,
    TWO_PI,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineOperatingInput:
    """One measured operating point of the test bench.

    Temperatures in °C, flows in kg/s.
    """

    fuel_mass_flow: float  # kg/s
    lhv: float  # MJ/kg — may override the catalog value of the fuel
    engine_speed: float  # rpm
    air_mass_flow: float  # kg/s
    water_mass_flow: float  # kg/s — cooling water
    water_temp_in: float  # °C
    water_temp_out: float  # °C
    exhaust_temp: float  # °C
    ambient_temp: float  # °C
    compression_ratio: float = 16.0
    brake_load: float = 0.0  # kg — dynamometer reading
    arm_length: float = 0.5  # m — dynamometer lever arm


@dataclass(frozen=True)
class EnergyExergyResult:
    """Energy and exergy balance of one operating point.

    Energies and exergies in kW, efficiencies in percent.
    """

    torque: float  # N·m
    input_energy: float  # kW
    brake_power: float  # kW
    cooling_water_energy: float  # kW
    exhaust_gas_energy: float  # kW
    unaccounted_energy: float  # kW
    ideal_efficiency: float  # %
    energy_efficiency: float  # %
    input_exergy: float  # kW
    shaft_exergy: float  # kW
    cooling_water_exergy: float  # kW — loss
    exhaust_gas_exergy: float  # kW — loss
    exergy_destruction: float  # kW
    exergy_efficiency: float  # %
    sustainability_index: float
    exergy_performance_coefficient: float

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


# --- Empirical factors ---


def torque_from_load(brake_load: float, arm_length: float) -> float:
    """Shaft torque [N·m] from dynamometer load [kg] and lever arm [m]."""
    return brake_load * G_LOAD * arm_length


def ideal_efficiency(compression_ratio: float, gamma: float = GAMMA_IDEAL) -> float:
    """Air-standard Otto efficiency [%]: (1 - CR^(1-γ)) · 100."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float((1.0 - np.power(np.float64(compression_ratio), 1.0 - gamma)) * 100.0)


def cr_correction_factor(compression_ratio: float) -> float:
    """Empirical efficiency correction, unity at CR = 16."""
    return 1.0 + 0.015 * (compression_ratio - REFERENCE_CR)


def fuel_efficiency_factor(fuel: FuelProperties) -> float:
    """Combined combustion, ignition and viscosity factor of a fuel."""
    viscosity_penalty = max(0.9, 1.0 - (fuel.viscosity - 2.5) * 0.01)
    return fuel.combustion_efficiency * fuel.ignition_quality * viscosity_penalty


def chemical_exergy_factor(fuel: FuelProperties) -> float:
    """Ratio of chemical exergy to LHV for a liquid CHOS fuel (Szargut form)."""
    return (
        1.0374
        + 0.0159 * fuel.hc_ratio
        + 0.0567 * fuel.oc_ratio
        + 0.5985 * fuel.sc_ratio * (1.0 - 0.1737 * fuel.hc_ratio)
    )


# --- Balance ---


def compute_balance(inp: EngineOperatingInput, fuel: FuelProperties) -> EnergyExergyResult:
    """Compute the energy and exergy balance for a resolved fuel.

    Args:
        inp: Operating point. ``inp.lhv`` is used for the input energy even
             if it differs from ``fuel.lhv``.
        fuel: Fuel properties driving the correction and exergy factors.

    Returns:
        EnergyExergyResult with all balance terms.
    """
    mf = np.float64(inp.fuel_mass_flow)
    ma = np.float64(inp.air_mass_flow)
    mw = np.float64(inp.water_mass_flow)
    m_exh = ma + mf

    T1, T2 = np.float64(inp.water_temp_in), np.float64(inp.water_temp_out)
    T5, Ta = np.float64(inp.exhaust_temp), np.float64(inp.ambient_temp)
    T1K, T2K = T1 + T_CELSIUS_OFFSET, T2 + T_CELSIUS_OFFSET
    T5K, TaK = T5 + T_CELSIUS_OFFSET, Ta + T_CELSIUS_OFFSET

    torque = np.float64(torque_from_load(inp.brake_load, inp.arm_length))
    cr_factor = cr_correction_factor(inp.compression_ratio)
    fuel_factor = fuel_efficiency_factor(fuel)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        # Energy balance [kW]
        e_in = mf * inp.lhv * MJ_TO_KJ
        e_bp = (TWO_PI * inp.engine_speed * torque) / (60.0 * 1000.0)
        e_cw = mw * CP_WATER * (T2 - T1)
        e_eg = m_exh * CP_EXHAUST * (T5 - Ta)
        e_unaccounted = e_in - (e_bp + e_cw + e_eg)
        eta_e = (e_bp / e_in) * 100.0 * cr_factor * fuel_factor

        # Exergy balance [kW]
        ex_in = e_in * chemical_exergy_factor(fuel)
        ex_shaft = e_bp
        ex_cw = e_cw + mw * CP_WATER * TaK * np.log(T1K / T2K)
        ex_eg = e_eg + (
            m_exh * TaK * (CP_EXHAUST * np.log(TaK / T5K))
            - R_EXHAUST * np.log(AMBIENT_PRESSURE_BAR / EXHAUST_PRESSURE_BAR)
        )
        ex_d = ex_in - (ex_shaft + ex_cw + ex_eg)
        eta_ex = (ex_shaft / ex_in) * 100.0 * cr_factor * fuel_factor

        sustainability_index = 1.0 / (1.0 - ex_shaft / ex_in)
        epc = ex_shaft / ex_d

    return EnergyExergyResult(
        torque=float(torque),
        input_energy=float(e_in),
        brake_power=float(e_bp),
        cooling_water_energy=float(e_cw),
        exhaust_gas_energy=float(e_eg),
        unaccounted_energy=float(e_unaccounted),
        ideal_efficiency=ideal_efficiency(inp.compression_ratio),
        energy_efficiency=float(eta_e),
        input_exergy=float(ex_in),
        shaft_exergy=float(ex_shaft),
        cooling_water_exergy=float(ex_cw),
        exhaust_gas_exergy=float(ex_eg),
        exergy_destruction=float(ex_d),
        exergy_efficiency=float(eta_ex),
        sustainability_index=float(sustainability_index),
        exergy_performance_coefficient=float(epc),
    )


class EnergyExergyCalculator:
    """Balance calculator bound to a fuel registry.

    Args:
        registry: Registry used to resolve fuel ids. A fresh registry with
                  only the built-in fuels is created if omitted.
    """

    def __init__(self, registry: FuelRegistry | None = None):
        self.registry = registry if registry is not None else FuelRegistry()

    def compute(self, inp: EngineOperatingInput, fuel_id: str) -> EnergyExergyResult:
        """Resolve *fuel_id* and compute the balance of *inp*."""
        fuel = self.registry.resolve(fuel_id)
        result = compute_balance(inp, fuel)
        logger.debug(
            "Balance for %s: eta_E=%.3f %%, eta_Ex=%.3f %%",
            fuel_id,
            result.energy_efficiency,
            result.exergy_efficiency,
        )
        return result
