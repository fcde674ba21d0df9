"""CLI commands for energy/exergy balance calculations."""

from __future__ import annotations

from typing import Any, Callable

import click
from rich.console import Console
from rich.table import Table

from dexa.cli.common import load_registry, open_session, print_validation
from dexa.core.balance import EnergyExergyCalculator, EnergyExergyResult
from dexa.core.config import save_session_json
from dexa.core.series import EfficiencyCharts
from dexa.utils.validation import ValidationError, parse_operating_input, validate_operating_input


def operating_point_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the measured operating-point options to a command."""
    options = [
        click.option("--fuel-flow", type=float, required=True, help="Fuel mass flow [kg/s]."),
        click.option("--lhv", type=float, default=None, help="LHV override [MJ/kg] (default: catalog value)."),
        click.option("--speed", type=float, required=True, help="Engine speed [rpm]."),
        click.option("--air-flow", type=float, required=True, help="Air mass flow [kg/s]."),
        click.option("--water-flow", type=float, required=True, help="Cooling water mass flow [kg/s]."),
        click.option("--water-in", type=float, required=True, help="Cooling water inlet temperature [°C]."),
        click.option("--water-out", type=float, required=True, help="Cooling water outlet temperature [°C]."),
        click.option("--exhaust-temp", type=float, required=True, help="Exhaust gas temperature [°C]."),
        click.option("--ambient-temp", type=float, default=25.0, show_default=True, help="Ambient temperature [°C]."),
        click.option("--arm", type=float, default=0.5, show_default=True, help="Dynamometer lever arm [m]."),
        click.option("--catalog", type=click.Path(), default=None, help="Custom fuel catalog (JSON)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _raw_input(
    fuel_flow: float,
    lhv: float,
    speed: float,
    air_flow: float,
    water_flow: float,
    water_in: float,
    water_out: float,
    exhaust_temp: float,
    ambient_temp: float,
    cr: float,
    load: float,
    arm: float,
) -> dict[str, Any]:
    return {
        "fuel_mass_flow": fuel_flow,
        "lhv": lhv,
        "engine_speed": speed,
        "air_mass_flow": air_flow,
        "water_mass_flow": water_flow,
        "water_temp_in": water_in,
        "water_temp_out": water_out,
        "exhaust_temp": exhaust_temp,
        "ambient_temp": ambient_temp,
        "compression_ratio": cr,
        "brake_load": load,
        "arm_length": arm,
    }


def _result_tables(result: EnergyExergyResult) -> list[Table]:
    energy = Table(title="Energy Balance")
    energy.add_column("Parameter", style="cyan")
    energy.add_column("Value", style="green", justify="right")
    energy.add_column("Unit", style="dim")
    energy.add_row("Torque", f"{result.torque:.2f}", "N·m")
    energy.add_row("Input Energy", f"{result.input_energy:.3f}", "kW")
    energy.add_row("Brake Power", f"{result.brake_power:.3f}", "kW")
    energy.add_row("Cooling Water Energy", f"{result.cooling_water_energy:.3f}", "kW")
    energy.add_row("Exhaust Gas Energy", f"{result.exhaust_gas_energy:.3f}", "kW")
    energy.add_row("Unaccounted Energy", f"{result.unaccounted_energy:.3f}", "kW")
    energy.add_row("Ideal Cycle Efficiency", f"{result.ideal_efficiency:.2f}", "%")
    energy.add_row("Energy Efficiency", f"{result.energy_efficiency:.2f}", "%")

    exergy = Table(title="Exergy Balance")
    exergy.add_column("Parameter", style="cyan")
    exergy.add_column("Value", style="green", justify="right")
    exergy.add_column("Unit", style="dim")
    exergy.add_row("Input Exergy", f"{result.input_exergy:.3f}", "kW")
    exergy.add_row("Shaft Exergy", f"{result.shaft_exergy:.3f}", "kW")
    exergy.add_row("Cooling Water Exergy", f"{result.cooling_water_exergy:.3f}", "kW")
    exergy.add_row("Exhaust Gas Exergy", f"{result.exhaust_gas_exergy:.3f}", "kW")
    exergy.add_row("Exergy Destruction", f"{result.exergy_destruction:.3f}", "kW")
    exergy.add_row("Exergy Efficiency", f"{result.exergy_efficiency:.2f}", "%")
    exergy.add_row("Sustainability Index", f"{result.sustainability_index:.3f}", "—")
    exergy.add_row("Exergy Performance Coeff.", f"{result.exergy_performance_coefficient:.3f}", "—")
    return [energy, exergy]


@click.command("balance")
@click.option("--fuel", type=str, default="diesel", show_default=True, help="Fuel id.")
@click.option("--load", type=float, required=True, help="Brake load [kg].")
@click.option("--cr", type=float, default=16.0, show_default=True, help="Compression ratio.")
@operating_point_options
@click.option("--output", "-o", type=click.Path(), default=None, help="Session file (JSON), updated in place.")
@click.pass_context
def balance(
    ctx: click.Context,
    fuel: str,
    load: float,
    cr: float,
    fuel_flow: float,
    lhv: float | None,
    speed: float,
    air_flow: float,
    water_flow: float,
    water_in: float,
    water_out: float,
    exhaust_temp: float,
    ambient_temp: float,
    arm: float,
    catalog: str | None,
    output: str | None,
) -> None:
    """Compute the energy and exergy balance of one operating point."""
    console: Console = ctx.obj.get("console", Console())
    registry = load_registry(catalog)
    if lhv is None:
        lhv = registry.resolve(fuel).lhv

    raw = _raw_input(
        fuel_flow, lhv, speed, air_flow, water_flow, water_in, water_out,
        exhaust_temp, ambient_temp, cr, load, arm,
    )
    try:
        inp = parse_operating_input(raw)
    except ValidationError as exc:
        print_validation(console, exc.result)
        raise SystemExit(1)
    print_validation(console, validate_operating_input(inp))

    result = EnergyExergyCalculator(registry).compute(inp, fuel)

    console.print(f"\n[bold]DEXA — Energy & Exergy Balance ({registry.display_name(fuel)})[/bold]\n")
    for table in _result_tables(result):
        console.print(table)

    if output:
        state = open_session(output, "Test Bench Session")
        state.fuel = fuel
        state.operating_point = raw
        state.balance = result.as_dict()
        save_session_json(state, output)
        console.print(f"\n[dim]Saved to {output}[/dim]")


@click.command("sweep")
@click.option("--fuel", "fuels", type=str, multiple=True, help="Fuel id (repeatable, default: diesel).")
@click.option("--load", "loads", type=float, multiple=True, required=True, help="Brake load [kg] (repeatable).")
@click.option("--cr", "crs", type=float, multiple=True, help="Compression ratio (repeatable, default: 16).")
@operating_point_options
@click.pass_context
def sweep(
    ctx: click.Context,
    fuels: tuple[str, ...],
    loads: tuple[float, ...],
    crs: tuple[float, ...],
    fuel_flow: float,
    lhv: float | None,
    speed: float,
    air_flow: float,
    water_flow: float,
    water_in: float,
    water_out: float,
    exhaust_temp: float,
    ambient_temp: float,
    arm: float,
    catalog: str | None,
) -> None:
    """Sweep brake load and compression ratio and tabulate efficiency series.

    Every load is run at the first compression ratio and every compression
    ratio at the first load; each run adds one point to all four charts.
    """
    console: Console = ctx.obj.get("console", Console())
    registry = load_registry(catalog)
    calculator = EnergyExergyCalculator(registry)
    charts = EfficiencyCharts(registry)

    fuels = fuels or ("diesel",)
    crs = crs or (16.0,)

    for fuel_id in fuels:
        fuel_lhv = lhv if lhv is not None else registry.resolve(fuel_id).lhv
        points = [(load, crs[0]) for load in loads] + [(loads[0], cr) for cr in crs[1:]]
        for load, cr in points:
            raw = _raw_input(
                fuel_flow, fuel_lhv, speed, air_flow, water_flow, water_in, water_out,
                exhaust_temp, ambient_temp, cr, load, arm,
            )
            try:
                inp = parse_operating_input(raw)
            except ValidationError as exc:
                print_validation(console, exc.result)
                raise SystemExit(1)
            result = calculator.compute(inp, fuel_id)
            charts.record(result, load, cr, fuel_id)

    console.print("\n[bold]DEXA — Efficiency Sweep[/bold]\n")
    for chart in charts.charts():
        table = Table(title=chart.title)
        table.add_column("Fuel", style="cyan")
        table.add_column(chart.x_label, justify="right")
        table.add_column(chart.y_label, style="green", justify="right")
        for series in chart.series:
            for x, y in series.points:
                table.add_row(series.label, f"{x:g}", f"{y:.2f}")
        console.print(table)
