"""Input guards and design rule checking for DEXA.

The core calculators never validate; callers run these guards first and
abort on ``ValidationError``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from dexa.core.balance import EngineOperatingInput
    from dexa.core.cycle import CycleInput
    from dexa.core.fuels import CustomFuel


class Severity(Enum):
    """Severity level for validation messages."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationMessage:
    """A single validation finding."""

    severity: Severity
    parameter: str
    message: str
    value: Any = None
    limit: Any = None


@dataclass
class ValidationResult:
    """Aggregated validation result."""

    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not any(m.severity == Severity.ERROR for m in self.messages)

    @property
    def has_warnings(self) -> bool:
        return any(m.severity == Severity.WARNING for m in self.messages)

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    def add(self, severity: Severity, parameter: str, message: str, **kwargs: Any) -> None:
        self.messages.append(
            ValidationMessage(severity=severity, parameter=parameter, message=message, **kwargs)
        )

    def error(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.ERROR, parameter, message, **kwargs)

    def warning(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.WARNING, parameter, message, **kwargs)

    def info(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.INFO, parameter, message, **kwargs)

    def merge(self, other: ValidationResult) -> None:
        self.messages.extend(other.messages)

    def raise_for_errors(self) -> None:
        """Raise ``ValidationError`` if any finding has ERROR severity."""
        if not self.is_valid:
            raise ValidationError(self)


class ValidationError(ValueError):
    """Raised by the caller-side guards when input is unusable.

    Attributes:
        result: The ``ValidationResult`` holding every finding.
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__("; ".join(m.message for m in result.errors))


# --- Common validators ---


def validate_positive(name: str, value: float, result: ValidationResult) -> None:
    """Validate that a value is strictly positive."""
    if value <= 0:
        result.error(name, f"{name} must be positive, got {value}", value=value, limit=0.0)


def validate_non_negative(name: str, value: float, result: ValidationResult) -> None:
    """Validate that a value is zero or positive."""
    if value < 0:
        result.error(name, f"{name} must not be negative, got {value}", value=value, limit=0.0)


def validate_range(
    name: str,
    value: float,
    low: float,
    high: float,
    result: ValidationResult,
    severity: Severity = Severity.ERROR,
) -> None:
    """Validate that a value falls within [low, high]."""
    if value < low or value > high:
        result.add(severity, name, f"{name} = {value} is outside [{low}, {high}]", value=value)


def validate_greater(
    name: str,
    value: float,
    other_name: str,
    other: float,
    result: ValidationResult,
) -> None:
    """Validate the ordering ``value > other``."""
    if value <= other:
        result.error(
            name,
            f"{name} ({value}) must be higher than {other_name} ({other})",
            value=value,
            limit=other,
        )


def _to_number(name: str, raw: Any, result: ValidationResult) -> float | None:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        result.error(name, f"{name} is required")
        return None
    if isinstance(raw, bool):
        result.error(name, f"{name} must be numeric, got {raw!r}", value=raw)
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        result.error(name, f"{name} must be numeric, got {raw!r}", value=raw)
        return None
    if not math.isfinite(value):
        result.error(name, f"{name} must be finite, got {raw!r}", value=raw)
        return None
    return value


# --- Operating point guard ---

OPERATING_FIELDS = (
    "fuel_mass_flow",
    "lhv",
    "engine_speed",
    "air_mass_flow",
    "water_mass_flow",
    "water_temp_in",
    "water_temp_out",
    "exhaust_temp",
    "ambient_temp",
    "brake_load",
    "arm_length",
    "compression_ratio",
)


def validate_operating_input(inp: EngineOperatingInput) -> ValidationResult:
    """Check an assembled operating point against the bench rules.

    Every field must be non-negative, the cooling water must heat up and
    the exhaust must leave hotter than ambient.
    """
    result = ValidationResult()
    for name in OPERATING_FIELDS:
        validate_non_negative(name, getattr(inp, name), result)

    validate_greater("water_temp_out", inp.water_temp_out, "water_temp_in", inp.water_temp_in, result)
    validate_greater("exhaust_temp", inp.exhaust_temp, "ambient_temp", inp.ambient_temp, result)

    if inp.compression_ratio <= 1.0:
        result.warning(
            "compression_ratio",
            f"Compression ratio {inp.compression_ratio} gives no ideal-cycle efficiency",
            value=inp.compression_ratio,
        )
    if inp.arm_length == 0.0:
        result.warning("arm_length", "Lever arm of zero yields zero torque", value=0.0)
    if inp.fuel_mass_flow == 0.0 or inp.lhv == 0.0:
        result.warning(
            "fuel_mass_flow",
            "Zero input energy: efficiencies will not be finite",
        )
    return result


def parse_operating_input(raw: Mapping[str, Any]) -> EngineOperatingInput:
    """Build a validated ``EngineOperatingInput`` from raw field values.

    Args:
        raw: Mapping of field name to raw value (number or numeric string),
             as read from a form or command line.

    Returns:
        The assembled operating point.

    Raises:
        ValidationError: If a field is missing, non-numeric, negative, or an
            ordering rule is violated. Nothing is computed in that case.
    """
    from dexa.core.balance import EngineOperatingInput

    result = ValidationResult()
    values: dict[str, float] = {}
    for name in OPERATING_FIELDS:
        value = _to_number(name, raw.get(name), result)
        if value is not None:
            values[name] = value
    result.raise_for_errors()

    inp = EngineOperatingInput(**values)
    validate_operating_input(inp).raise_for_errors()
    return inp


# --- Cycle simulation guard ---


def validate_cycle_input(inp: CycleInput) -> ValidationResult:
    """Run validation checks on a cycle simulation input."""
    result = ValidationResult()

    for name in ("bore", "stroke", "conrod", "duration", "lhv", "initial_pressure", "step"):
        validate_positive(name, getattr(inp, name), result)
    validate_non_negative("fuel_mass", inp.fuel_mass, result)

    if inp.compression_ratio <= 1.0:
        result.error("compression_ratio", "Compression ratio must be > 1.0", value=inp.compression_ratio)
    if inp.gamma <= 1.0:
        result.error("gamma", "Specific heat ratio must be > 1.0", value=inp.gamma)

    if inp.conrod > 0 and inp.conrod < inp.stroke / 2.0:
        result.warning(
            "conrod",
            f"Connecting rod {inp.conrod * 1e3:.1f} mm is shorter than the crank radius",
            value=inp.conrod,
        )
    validate_range("soc", inp.soc, 180.0, 540.0, result, Severity.WARNING)
    return result


# --- Custom fuel guard ---


def validate_custom_fuel(fuel: CustomFuel) -> ValidationResult:
    """Check a custom fuel record before it enters the registry."""
    result = ValidationResult()

    if not fuel.name or not fuel.name.strip():
        result.error("name", "Fuel name must not be empty")

    for name in ("lhv", "density", "viscosity", "cetane"):
        validate_positive(name, getattr(fuel, name), result)
    for name in ("hc_ratio", "oc_ratio", "sc_ratio"):
        validate_non_negative(name, getattr(fuel, name), result)

    if fuel.lhv > 50.0:
        result.warning("lhv", f"LHV {fuel.lhv} MJ/kg is unusually high for a liquid fuel")
    return result
