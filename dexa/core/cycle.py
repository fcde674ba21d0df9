"""Single-zone in-cylinder pressure simulation for a four-stroke engine.

Combines slider-crank volume kinematics, a Wiebe burn-fraction curve and
an explicit first-law pressure update over one 720° cycle.

Crank angle convention: θ = 0° and θ = 360° are top dead centre, the
intake stroke runs 0–180°, compression and power 180–540°, exhaust
540–720°. Intake and exhaust pressures are held constant; only the
closed part of the cycle is integrated.

Note: This is a simplified model, not a full closed-cycle simulation.
Phase boundaries and the pressure floors below are part of the model and
must stay as they are for traces to remain comparable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from scipy.integrate import trapezoid

from dexa.utils.constants import KJ_TO_J, P_ATM, PA_TO_BAR, PI

logger = logging.getLogger(__name__)

CYCLE_DEGREES = 720.0
INTAKE_END = 180.0  # deg — intake valve closes, compression starts
POWER_END = 540.0  # deg — exhaust stroke starts
PRESSURE_FLOOR_FRACTION = 0.5  # of initial pressure, closed part of the cycle
EXHAUST_PRESSURE_FRACTION = 1.05  # of initial pressure
SQRT_FLOOR = 1e-12  # m² — guards the slider-crank square root


@dataclass(frozen=True)
class CycleInput:
    """Geometry and combustion parameters of one simulation run."""

    bore: float = 0.08  # m
    stroke: float = 0.09  # m
    conrod: float = 0.15  # m — connecting-rod length
    compression_ratio: float = 17.0
    gamma: float = 1.35  # ratio of specific heats
    soc: float = 355.0  # deg — start of combustion
    duration: float = 40.0  # deg — combustion duration
    wiebe_a: float = 5.0  # Wiebe efficiency parameter
    wiebe_m: float = 2.0  # Wiebe form factor
    fuel_mass: float = 0.015  # g — injected per cycle
    lhv: float = 43000.0  # kJ/kg
    initial_pressure: float = P_ATM  # Pa
    step: float = 0.5  # deg — crank-angle resolution


@dataclass
class CycleTrace:
    """Pressure and heat-release trace of one simulated cycle.

    Arrays share one index; ``heat_release[i]`` is the heat released over
    the step from sample ``i`` to ``i + 1`` (zero for the last sample).
    """

    crank_angle: np.ndarray = field(default_factory=lambda: np.array([]))  # deg
    volume: np.ndarray = field(default_factory=lambda: np.array([]))  # m³
    burn_fraction: np.ndarray = field(default_factory=lambda: np.array([]))  # —
    pressure: np.ndarray = field(default_factory=lambda: np.array([]))  # Pa
    heat_release: np.ndarray = field(default_factory=lambda: np.array([]))  # J per step

    step: float = 0.5  # deg
    swept_volume: float = 0.0  # m³
    clearance_volume: float = 0.0  # m³
    heat_input: float = 0.0  # J — total chemical energy of the charge
    indicated_work: float = 0.0  # J — closed-cycle ∮P·dV
    thermal_efficiency: float = 0.0  # — indicated work / heat input
    peak_pressure: float = 0.0  # Pa
    peak_angle: float = 0.0  # deg

    def __len__(self) -> int:
        return len(self.crank_angle)

    @property
    def indicated_work_kj(self) -> float:
        return self.indicated_work / KJ_TO_J

    @property
    def imep(self) -> float:
        """Indicated mean effective pressure [Pa]."""
        return self.indicated_work / self.swept_volume if self.swept_volume > 0 else 0.0

    @property
    def pressure_bar(self) -> np.ndarray:
        return self.pressure * PA_TO_BAR

    @property
    def heat_release_rate(self) -> np.ndarray:
        """Heat-release rate [J/deg]."""
        return self.heat_release / self.step

    def summary(self) -> dict[str, float]:
        """Scalar results of the run."""
        return {
            "heat_input": self.heat_input,
            "indicated_work": self.indicated_work,
            "thermal_efficiency": self.thermal_efficiency,
            "peak_pressure": self.peak_pressure,
            "peak_angle": self.peak_angle,
            "imep": self.imep,
            "swept_volume": self.swept_volume,
            "clearance_volume": self.clearance_volume,
        }


# --- Geometry ---


def swept_volume(bore: float, stroke: float) -> float:
    """Displacement of one cylinder [m³]."""
    return (PI / 4.0) * bore**2 * stroke


def clearance_volume(bore: float, stroke: float, compression_ratio: float) -> float:
    """Volume at top dead centre [m³]."""
    return swept_volume(bore, stroke) / (compression_ratio - 1.0)


def map_crank_angle(theta_deg: float | np.ndarray) -> float | np.ndarray:
    """Fold a cycle angle into [-180°, 180°) around top dead centre."""
    return np.mod(np.asarray(theta_deg, dtype=float) + 180.0, 360.0) - 180.0


def cylinder_volume(
    theta_deg: float | np.ndarray,
    bore: float,
    stroke: float,
    conrod: float,
    clearance: float,
) -> float | np.ndarray:
    """Slider-crank cylinder volume [m³] at crank angle(s) θ [deg].

    Args:
        theta_deg: Crank angle(s), any range; folded around TDC.
        bore: Cylinder bore [m].
        stroke: Piston stroke [m].
        conrod: Connecting-rod length [m].
        clearance: Clearance volume [m³].

    Returns:
        Volume, scalar for scalar input.
    """
    theta = np.radians(map_crank_angle(theta_deg))
    r = stroke / 2.0
    lateral = r * np.sin(theta)
    x = r * (1.0 - np.cos(theta)) + conrod - np.sqrt(np.maximum(SQRT_FLOOR, conrod**2 - lateral**2))
    volume = clearance + (PI / 4.0) * bore**2 * x
    return float(volume) if np.isscalar(theta_deg) else volume


# --- Combustion ---


def wiebe_burn_fraction(
    theta_deg: float | np.ndarray,
    soc: float,
    duration: float,
    a: float,
    m: float,
) -> float | np.ndarray:
    """Cumulative mass fraction burned (Wiebe function).

    x_b = 1 - exp(-a · ((θ - θ_soc) / Δθ)^(m+1)) inside the burn window,
    0 before the start of combustion and 1 once the window has elapsed.
    """
    theta = np.asarray(theta_deg, dtype=float)
    progress = (theta - soc) / duration
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        xb = 1.0 - np.exp(-a * np.clip(progress, 0.0, 1.0) ** (m + 1.0))
    xb = np.where(theta < soc, 0.0, np.where(progress >= 1.0, 1.0, xb))
    return float(xb) if np.isscalar(theta_deg) else xb


def crank_angle_grid(step: float = 0.5) -> np.ndarray:
    """Crank angles 0–720° inclusive at a fixed step [deg]."""
    n = int(np.floor(CYCLE_DEGREES / step + 1e-9)) + 1
    return np.arange(n) * step


# --- Simulation ---


def simulate_cycle(inp: CycleInput) -> CycleTrace:
    """Simulate one four-stroke cycle.

    Args:
        inp: Geometry and combustion parameters.

    Returns:
        CycleTrace with per-sample arrays and scalar summary.
    """
    vs = swept_volume(inp.bore, inp.stroke)
    vc = vs / (inp.compression_ratio - 1.0)

    theta = crank_angle_grid(inp.step)
    volume = cylinder_volume(theta, inp.bore, inp.stroke, inp.conrod, vc)
    xb = wiebe_burn_fraction(theta, inp.soc, inp.duration, inp.wiebe_a, inp.wiebe_m)

    q_in = (inp.fuel_mass / 1000.0) * inp.lhv * KJ_TO_J  # g → kg, kJ → J
    n = len(theta)

    heat = np.zeros(n)
    heat[:-1] = np.diff(xb) * q_in
    dv = np.diff(volume)

    p0 = inp.initial_pressure
    g = inp.gamma
    floor = p0 * PRESSURE_FLOOR_FRACTION
    p_exhaust = p0 * EXHAUST_PRESSURE_FRACTION

    pressure = np.zeros(n)
    pressure[0] = p0
    for i in range(n - 1):
        angle = theta[i]
        if angle < INTAKE_END:
            pressure[i + 1] = p0
        elif angle < POWER_END:
            p, v = pressure[i], volume[i]
            pressure[i + 1] = max(p + ((g - 1.0) / v) * heat[i] - (g * p / v) * dv[i], floor)
        else:
            pressure[i + 1] = p_exhaust

    # Closed-cycle work: trapezoids over every step that starts in [180°, 540°)
    closed = np.flatnonzero((theta >= INTAKE_END) & (theta < POWER_END))
    if closed.size:
        sl = slice(closed[0], closed[-1] + 2)
        work = float(trapezoid(pressure[sl], volume[sl]))
    else:
        work = 0.0

    peak_idx = int(np.argmax(pressure))  # first occurrence on ties

    trace = CycleTrace(
        crank_angle=theta,
        volume=volume,
        burn_fraction=xb,
        pressure=pressure,
        heat_release=heat,
        step=inp.step,
        swept_volume=vs,
        clearance_volume=vc,
        heat_input=q_in,
        indicated_work=work,
        thermal_efficiency=work / q_in if q_in > 0 else 0.0,
        peak_pressure=float(pressure[peak_idx]),
        peak_angle=float(theta[peak_idx]),
    )
    logger.debug(
        "Cycle: %d samples, peak %.2f bar @ %.1f deg, W=%.4f kJ",
        n,
        trace.peak_pressure * PA_TO_BAR,
        trace.peak_angle,
        trace.indicated_work_kj,
    )
    return trace


class CycleSimulator:
    """Stateless runner; every call recomputes the trace from scratch."""

    def run(self, inp: CycleInput) -> CycleTrace:
        return simulate_cycle(inp)

    def run_with(self, **overrides: Any) -> CycleTrace:
        """Run with the default input, replacing the given fields."""
        return simulate_cycle(CycleInput(**overrides))
