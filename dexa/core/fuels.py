"""Fuel property registry for DEXA.

Holds the built-in fuel catalog and user-defined custom fuels, and resolves
a fuel identifier to its thermophysical and composition properties.

Unknown identifiers never raise on lookup: ``resolve`` falls back to the
diesel properties so that a stale selection keeps the calculator running.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any

from dexa.utils.validation import validate_custom_fuel

logger = logging.getLogger(__name__)


class NotFoundError(KeyError):
    """Raised when a custom fuel id is not in the registry."""


@dataclass(frozen=True)
class FuelProperties:
    """Resolved fuel properties consumed by the energy/exergy calculator."""

    lhv: float  # MJ/kg
    density: float  # kg/m³
    viscosity: float  # cSt
    cetane: float  # —
    flash_point: float  # °C
    hc_ratio: float  # H/C atomic ratio
    oc_ratio: float  # O/C atomic ratio
    sc_ratio: float  # S/C atomic ratio
    combustion_efficiency: float
    ignition_quality: float


class BuiltinFuel(Enum):
    """Fuels shipped with the catalog."""

    DIESEL = "diesel"
    BIODIESEL20 = "biodiesel20"
    BIODIESEL100 = "biodiesel100"


BUILTIN_FUELS: dict[BuiltinFuel, FuelProperties] = {
    BuiltinFuel.DIESEL: FuelProperties(
        lhv=42.5, density=830.0, viscosity=2.5, cetane=50.0, flash_point=55.0,
        hc_ratio=1.8, oc_ratio=0.0, sc_ratio=0.0,
        combustion_efficiency=1.0, ignition_quality=1.0,
    ),
    BuiltinFuel.BIODIESEL20: FuelProperties(
        lhv=41.8, density=845.0, viscosity=2.8, cetane=52.0, flash_point=65.0,
        hc_ratio=1.78, oc_ratio=0.04, sc_ratio=0.0,
        combustion_efficiency=0.98, ignition_quality=1.02,
    ),
    BuiltinFuel.BIODIESEL100: FuelProperties(
        lhv=37.5, density=880.0, viscosity=4.5, cetane=55.0, flash_point=130.0,
        hc_ratio=1.76, oc_ratio=0.11, sc_ratio=0.0,
        combustion_efficiency=0.95, ignition_quality=1.05,
    ),
}

DEFAULT_FUEL = BuiltinFuel.DIESEL

BUILTIN_NAMES: dict[BuiltinFuel, str] = {
    BuiltinFuel.DIESEL: "Diesel (B0)",
    BuiltinFuel.BIODIESEL20: "Biodiesel B20",
    BuiltinFuel.BIODIESEL100: "Biodiesel B100",
}

# (border, fill) colour tokens for chart series
BUILTIN_COLORS: dict[BuiltinFuel, tuple[str, str]] = {
    BuiltinFuel.DIESEL: ("#3b82f6", "rgba(59,130,246,0.55)"),
    BuiltinFuel.BIODIESEL20: ("#10b981", "rgba(16,185,129,0.55)"),
    BuiltinFuel.BIODIESEL100: ("#f59e0b", "rgba(245,158,11,0.55)"),
}

CUSTOM_COLOR_POOL: tuple[tuple[str, str], ...] = (
    ("#8b5cf6", "rgba(139,92,246,0.55)"),
    ("#ef4444", "rgba(239,68,68,0.55)"),
    ("#06b6d4", "rgba(6,182,212,0.55)"),
    ("#ec4899", "rgba(236,72,153,0.55)"),
    ("#84cc16", "rgba(132,204,22,0.55)"),
    ("#f97316", "rgba(249,115,22,0.55)"),
    ("#14b8a6", "rgba(20,184,166,0.55)"),
    ("#a855f7", "rgba(168,85,247,0.55)"),
    ("#64748b", "rgba(100,116,139,0.55)"),
    ("#dc2626", "rgba(220,38,38,0.55)"),
)

UNKNOWN_FUEL_NAME = "Unknown Fuel"
CUSTOM_ID_PREFIX = "custom_"


def parse_fuel_id(fuel_id: str) -> BuiltinFuel | str:
    """Split a raw fuel identifier into a built-in member or a custom id."""
    try:
        return BuiltinFuel(fuel_id)
    except ValueError:
        return fuel_id


@dataclass(frozen=True)
class CustomFuel:
    """User-editable fields of a custom fuel (a record without id).

    Defaults match a fresh entry in the fuel editor (diesel-like values).
    """

    name: str
    lhv: float = 42.5  # MJ/kg
    density: float = 830.0  # kg/m³
    viscosity: float = 2.5  # cSt
    cetane: float = 50.0
    flash_point: float = 55.0  # °C
    hc_ratio: float = 1.8
    oc_ratio: float = 0.0
    sc_ratio: float = 0.0


@dataclass(frozen=True)
class CustomFuelRecord:
    """A custom fuel as stored by the registry."""

    id: str
    name: str
    lhv: float
    density: float
    viscosity: float
    cetane: float
    flash_point: float
    hc_ratio: float
    oc_ratio: float
    sc_ratio: float
    color_index: int

    @classmethod
    def from_fuel(cls, fuel_id: str, fuel: CustomFuel, color_index: int) -> CustomFuelRecord:
        """Build a stored record from editable fields plus registry-assigned data."""
        return cls(id=fuel_id, color_index=color_index, **asdict(fuel))

    def to_fuel(self) -> CustomFuel:
        """Return the editable fields, e.g. to pre-fill an edit form."""
        return CustomFuel(**{f.name: getattr(self, f.name) for f in fields(CustomFuel)})

    def properties(self) -> FuelProperties:
        """Derive calculator properties from the stored composition data."""
        comb_eff = max(0.85, 1.0 - max(0.0, (self.viscosity - 2.5) * 0.008))
        ign_qual = max(0.90, min(1.15, 1.0 + (self.cetane - 50.0) * 0.004))
        return FuelProperties(
            lhv=self.lhv,
            density=self.density,
            viscosity=self.viscosity,
            cetane=self.cetane,
            flash_point=self.flash_point,
            hc_ratio=self.hc_ratio,
            oc_ratio=self.oc_ratio,
            sc_ratio=self.sc_ratio,
            combustion_efficiency=comb_eff,
            ignition_quality=ign_qual,
        )


class FuelRegistry:
    """Built-in catalog plus the session's custom fuels.

    Custom ids are ``custom_1``, ``custom_2``, ... drawn from a counter that
    only ever increases, so an id is never reused after deletion. Stored
    records are frozen; all access goes through one re-entrant lock so that
    concurrent readers never observe a half-applied mutation.

    Usage::

        registry = FuelRegistry()
        fuel_id = registry.create(CustomFuel(name="Jatropha B50", lhv=40.1))
        props = registry.resolve(fuel_id)

    """

    def __init__(self) -> None:
        self._custom: dict[str, CustomFuelRecord] = {}
        self._counter = 0
        self._lock = threading.RLock()

    # --- Lookup ---

    def resolve(self, fuel_id: str) -> FuelProperties:
        """Return properties for *fuel_id*, falling back to diesel."""
        key = parse_fuel_id(fuel_id)
        if isinstance(key, BuiltinFuel):
            return BUILTIN_FUELS[key]
        with self._lock:
            record = self._custom.get(key)
        if record is not None:
            return record.properties()
        logger.debug("Unknown fuel '%s', resolving to %s", fuel_id, DEFAULT_FUEL.value)
        return BUILTIN_FUELS[DEFAULT_FUEL]

    def display_name(self, fuel_id: str) -> str:
        """Human-readable fuel name, or "Unknown Fuel" for unknown ids."""
        key = parse_fuel_id(fuel_id)
        if isinstance(key, BuiltinFuel):
            return BUILTIN_NAMES[key]
        with self._lock:
            record = self._custom.get(key)
        return record.name if record is not None else UNKNOWN_FUEL_NAME

    def color_token(self, fuel_id: str) -> tuple[str, str]:
        """(border, fill) colours for chart series of *fuel_id*."""
        key = parse_fuel_id(fuel_id)
        if isinstance(key, BuiltinFuel):
            return BUILTIN_COLORS[key]
        with self._lock:
            record = self._custom.get(key)
        if record is None:
            return CUSTOM_COLOR_POOL[0]
        return CUSTOM_COLOR_POOL[record.color_index % len(CUSTOM_COLOR_POOL)]

    def get(self, fuel_id: str) -> CustomFuelRecord:
        """Return the stored custom record.

        Raises:
            NotFoundError: If *fuel_id* is not a custom fuel of this registry.
        """
        with self._lock:
            try:
                return self._custom[fuel_id]
            except KeyError:
                raise NotFoundError(f"Custom fuel '{fuel_id}' not found") from None

    def list(self) -> list[tuple[str, CustomFuelRecord]]:
        """Custom fuels in insertion order."""
        with self._lock:
            return list(self._custom.items())

    @staticmethod
    def builtin_ids() -> list[str]:
        return [member.value for member in BuiltinFuel]

    def fuel_ids(self) -> list[str]:
        """All selectable ids: built-ins first, then custom fuels."""
        with self._lock:
            return self.builtin_ids() + list(self._custom)

    @property
    def counter(self) -> int:
        with self._lock:
            return self._counter

    def __contains__(self, fuel_id: object) -> bool:
        with self._lock:
            return fuel_id in self._custom

    def __len__(self) -> int:
        with self._lock:
            return len(self._custom)

    # --- Mutation ---

    def create(self, fuel: CustomFuel) -> str:
        """Store a new custom fuel and return its id.

        Raises:
            ValidationError: If the record fails ``validate_custom_fuel``.
        """
        validate_custom_fuel(fuel).raise_for_errors()
        with self._lock:
            self._counter += 1
            fuel_id = f"{CUSTOM_ID_PREFIX}{self._counter}"
            color_index = (self._counter - 1) % len(CUSTOM_COLOR_POOL)
            self._custom[fuel_id] = CustomFuelRecord.from_fuel(fuel_id, fuel, color_index)
        logger.info("Created custom fuel %s (%s)", fuel_id, fuel.name)
        return fuel_id

    def update(self, fuel_id: str, fuel: CustomFuel) -> CustomFuelRecord:
        """Replace a custom fuel in place, keeping its id and colour.

        Raises:
            NotFoundError: If *fuel_id* does not exist.
            ValidationError: If the record fails ``validate_custom_fuel``.
        """
        with self._lock:
            existing = self.get(fuel_id)
            validate_custom_fuel(fuel).raise_for_errors()
            record = CustomFuelRecord.from_fuel(fuel_id, fuel, existing.color_index)
            self._custom[fuel_id] = record
        logger.info("Updated custom fuel %s (%s)", fuel_id, fuel.name)
        return record

    def delete(self, fuel_id: str) -> None:
        """Remove a custom fuel permanently.

        Callers holding a selection on *fuel_id* should move it back to
        ``DEFAULT_FUEL``; ``resolve`` already does so for lookups.

        Raises:
            NotFoundError: If *fuel_id* does not exist.
        """
        with self._lock:
            if fuel_id not in self._custom:
                raise NotFoundError(f"Custom fuel '{fuel_id}' not found")
            del self._custom[fuel_id]
        logger.info("Deleted custom fuel %s", fuel_id)

    # --- Serialisation ---

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {
                "counter": self._counter,
                "fuels": [asdict(record) for record in self._custom.values()],
            }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FuelRegistry:
        """Rebuild a registry saved with ``to_dict``.

        The counter is restored to at least the highest stored id so that
        new ids never collide with saved ones.
        """
        registry = cls()
        highest = 0
        for item in data.get("fuels", []):
            record = CustomFuelRecord(**item)
            registry._custom[record.id] = record
            suffix = record.id[len(CUSTOM_ID_PREFIX):]
            if record.id.startswith(CUSTOM_ID_PREFIX) and suffix.isdigit():
                highest = max(highest, int(suffix))
        registry._counter = max(int(data.get("counter", 0)), highest)
        return registry
