"""CLI command for the in-cylinder pressure simulation."""

from __future__ import annotations

from dataclasses import asdict

import click
from rich.console import Console
from rich.table import Table

from dexa.cli.common import open_session, print_validation
from dexa.core.config import save_session_json
from dexa.core.cycle import CycleInput, CycleSimulator
from dexa.utils.constants import PA_TO_BAR
from dexa.utils.validation import validate_cycle_input

_DEFAULTS = CycleInput()


@click.command("simulate")
@click.option("--bore", type=float, default=_DEFAULTS.bore, show_default=True, help="Bore [m].")
@click.option("--stroke", type=float, default=_DEFAULTS.stroke, show_default=True, help="Stroke [m].")
@click.option("--conrod", type=float, default=_DEFAULTS.conrod, show_default=True, help="Connecting-rod length [m].")
@click.option("--cr", type=float, default=_DEFAULTS.compression_ratio, show_default=True, help="Compression ratio.")
@click.option("--gamma", type=float, default=_DEFAULTS.gamma, show_default=True, help="Ratio of specific heats.")
@click.option("--soc", type=float, default=_DEFAULTS.soc, show_default=True, help="Start of combustion [deg].")
@click.option("--duration", type=float, default=_DEFAULTS.duration, show_default=True, help="Combustion duration [deg].")
@click.option("--wiebe-a", type=float, default=_DEFAULTS.wiebe_a, show_default=True, help="Wiebe efficiency parameter a.")
@click.option("--wiebe-m", type=float, default=_DEFAULTS.wiebe_m, show_default=True, help="Wiebe form factor m.")
@click.option("--fuel-mass", type=float, default=_DEFAULTS.fuel_mass, show_default=True, help="Injected fuel mass [g].")
@click.option("--lhv", type=float, default=_DEFAULTS.lhv, show_default=True, help="Fuel LHV [kJ/kg].")
@click.option("--p0", type=float, default=_DEFAULTS.initial_pressure, show_default=True, help="Intake pressure [Pa].")
@click.option("--every", type=int, default=0, help="Print every N-th trace sample (0: summary only).")
@click.option("--output", "-o", type=click.Path(), default=None, help="Session file (JSON), updated in place.")
@click.pass_context
def simulate(
    ctx: click.Context,
    bore: float,
    stroke: float,
    conrod: float,
    cr: float,
    gamma: float,
    soc: float,
    duration: float,
    wiebe_a: float,
    wiebe_m: float,
    fuel_mass: float,
    lhv: float,
    p0: float,
    every: int,
    output: str | None,
) -> None:
    """Simulate in-cylinder pressure over one four-stroke cycle."""
    console: Console = ctx.obj.get("console", Console())

    inp = CycleInput(
        bore=bore,
        stroke=stroke,
        conrod=conrod,
        compression_ratio=cr,
        gamma=gamma,
        soc=soc,
        duration=duration,
        wiebe_a=wiebe_a,
        wiebe_m=wiebe_m,
        fuel_mass=fuel_mass,
        lhv=lhv,
        initial_pressure=p0,
    )
    check = validate_cycle_input(inp)
    print_validation(console, check)
    if not check.is_valid:
        raise SystemExit(1)

    trace = CycleSimulator().run(inp)

    console.print("\n[bold]DEXA — Pressure Cycle Simulation[/bold]\n")

    table = Table(title="Cycle Summary")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Unit", style="dim")
    table.add_row("Swept Volume", f"{trace.swept_volume * 1e6:.2f}", "cm³")
    table.add_row("Clearance Volume", f"{trace.clearance_volume * 1e6:.2f}", "cm³")
    table.add_row("Heat Input", f"{trace.heat_input:.1f}", "J")
    table.add_row("Peak Pressure", f"{trace.peak_pressure * PA_TO_BAR:.1f}", "bar")
    table.add_row("Peak Pressure Angle", f"{trace.peak_angle:.1f}", "° CA")
    table.add_row("Indicated Work", f"{trace.indicated_work_kj:.4f}", "kJ")
    table.add_row("Thermal Efficiency", f"{trace.thermal_efficiency * 100:.3f}", "%")
    table.add_row("IMEP", f"{trace.imep * PA_TO_BAR:.2f}", "bar")
    table.add_row("Samples", str(len(trace)), "—")
    console.print(table)

    if every > 0:
        samples = Table(title="Trace")
        samples.add_column("θ [deg]", justify="right")
        samples.add_column("V [cm³]", justify="right")
        samples.add_column("x_b", justify="right")
        samples.add_column("P [bar]", style="green", justify="right")
        samples.add_column("dQ/dθ [J/deg]", justify="right")
        rate = trace.heat_release_rate
        for i in range(0, len(trace), every):
            samples.add_row(
                f"{trace.crank_angle[i]:.1f}",
                f"{trace.volume[i] * 1e6:.2f}",
                f"{trace.burn_fraction[i]:.4f}",
                f"{trace.pressure[i] * PA_TO_BAR:.2f}",
                f"{rate[i]:.3f}",
            )
        console.print(samples)

    if output:
        state = open_session(output, "Test Bench Session")
        state.simulation = {
            "input": asdict(inp),
            "summary": trace.summary(),
            "crank_angle": trace.crank_angle,
            "volume": trace.volume,
            "burn_fraction": trace.burn_fraction,
            "pressure": trace.pressure,
            "heat_release": trace.heat_release,
        }
        save_session_json(state, output)
        console.print(f"\n[dim]Saved to {output}[/dim]")
