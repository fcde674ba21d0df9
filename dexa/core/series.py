"""Efficiency chart series accumulated across balance calculations.

Holds the data behind the four efficiency charts (energy and exergy
efficiency against brake load and against compression ratio). Every
``record`` call appends one point to each chart, in the series of the
fuel used; points stay sorted by x and accumulate until ``clear``.
Rendering is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dexa.core.balance import EnergyExergyResult
from dexa.core.fuels import FuelRegistry

ENERGY_VS_LOAD = "energy_vs_load"
EXERGY_VS_LOAD = "exergy_vs_load"
ENERGY_VS_CR = "energy_vs_cr"
EXERGY_VS_CR = "exergy_vs_cr"

CHART_NAMES = (ENERGY_VS_LOAD, EXERGY_VS_LOAD, ENERGY_VS_CR, EXERGY_VS_CR)

CHART_TITLES = {
    ENERGY_VS_LOAD: ("Energy Efficiency vs Brake Load", "Brake Load (kg)", "Energy Efficiency (%)"),
    EXERGY_VS_LOAD: ("Exergy Efficiency vs Brake Load", "Brake Load (kg)", "Exergy Efficiency (%)"),
    ENERGY_VS_CR: ("Energy Efficiency vs Compression Ratio", "Compression Ratio", "Energy Efficiency (%)"),
    EXERGY_VS_CR: ("Exergy Efficiency vs Compression Ratio", "Compression Ratio", "Exergy Efficiency (%)"),
}


@dataclass
class Series:
    """Points of one fuel on one chart."""

    fuel_id: str
    label: str
    border_color: str
    fill_color: str
    points: list[tuple[float, float]] = field(default_factory=list)

    def add(self, x: float, y: float) -> None:
        self.points.append((x, y))
        # stable: equal x keep arrival order
        self.points.sort(key=lambda p: p[0])

    @property
    def x(self) -> list[float]:
        return [p[0] for p in self.points]

    @property
    def y(self) -> list[float]:
        return [p[1] for p in self.points]


@dataclass
class Chart:
    """One efficiency chart; one series per fuel in order of first use."""

    name: str
    title: str
    x_label: str
    y_label: str
    series: list[Series] = field(default_factory=list)

    def find(self, fuel_id: str) -> Series | None:
        for s in self.series:
            if s.fuel_id == fuel_id:
                return s
        return None


class EfficiencyCharts:
    """Data model for the energy/exergy efficiency charts.

    Args:
        registry: Supplies series labels and colours the first time a fuel
                  appears on a chart.
    """

    def __init__(self, registry: FuelRegistry | None = None):
        self.registry = registry if registry is not None else FuelRegistry()
        self._charts: dict[str, Chart] = {}
        self.clear()

    def clear(self) -> None:
        """Drop every series from every chart."""
        self._charts = {
            name: Chart(name, *CHART_TITLES[name]) for name in CHART_NAMES
        }

    def chart(self, name: str) -> Chart:
        """Return a chart by name.

        Raises:
            KeyError: If *name* is not one of ``CHART_NAMES``.
        """
        return self._charts[name]

    def charts(self) -> list[Chart]:
        return [self._charts[name] for name in CHART_NAMES]

    def series(self, name: str, fuel_id: str) -> Series | None:
        return self._charts[name].find(fuel_id)

    def record(
        self,
        result: EnergyExergyResult,
        brake_load: float,
        compression_ratio: float,
        fuel_id: str,
    ) -> None:
        """Append one calculation to all four charts."""
        points = {
            ENERGY_VS_LOAD: (brake_load, result.energy_efficiency),
            EXERGY_VS_LOAD: (brake_load, result.exergy_efficiency),
            ENERGY_VS_CR: (compression_ratio, result.energy_efficiency),
            EXERGY_VS_CR: (compression_ratio, result.exergy_efficiency),
        }
        for name, (x, y) in points.items():
            self._get_or_create(self._charts[name], fuel_id).add(x, y)

    def _get_or_create(self, chart: Chart, fuel_id: str) -> Series:
        existing = chart.find(fuel_id)
        if existing is not None:
            return existing
        border, fill = self.registry.color_token(fuel_id)
        series = Series(
            fuel_id=fuel_id,
            label=self.registry.display_name(fuel_id),
            border_color=border,
            fill_color=fill,
        )
        chart.series.append(series)
        return series
