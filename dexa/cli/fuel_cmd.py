"""CLI commands for the fuel catalog (built-in and custom fuels)."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

import click
from rich.console import Console
from rich.table import Table

from dexa.cli.common import print_validation
from dexa.core.config import load_fuel_catalog, save_fuel_catalog
from dexa.core.fuels import CustomFuel, NotFoundError
from dexa.utils.validation import ValidationError

DEFAULT_CATALOG = "dexa_fuels.json"

# (option, attribute, help) for every editable CustomFuel field except name
_FIELD_OPTIONS = (
    ("--lhv", "lhv", "Lower heating value [MJ/kg]."),
    ("--density", "density", "Density [kg/m³]."),
    ("--viscosity", "viscosity", "Kinematic viscosity [cSt]."),
    ("--cetane", "cetane", "Cetane number."),
    ("--flash-point", "flash_point", "Flash point [°C]."),
    ("--hc", "hc_ratio", "H/C atomic ratio."),
    ("--oc", "oc_ratio", "O/C atomic ratio."),
    ("--sc", "sc_ratio", "S/C atomic ratio."),
)


def _fuel_field_options(func: Callable[..., Any]) -> Callable[..., Any]:
    for flag, attr, help_text in reversed(_FIELD_OPTIONS):
        func = click.option(flag, attr, type=float, default=None, help=help_text)(func)
    return func


def _overrides(values: dict[str, float | None]) -> dict[str, float]:
    return {k: v for k, v in values.items() if v is not None}


@click.group("fuel")
@click.option(
    "--catalog",
    type=click.Path(),
    default=DEFAULT_CATALOG,
    show_default=True,
    help="Custom fuel catalog (JSON).",
)
@click.pass_context
def fuel(ctx: click.Context, catalog: str) -> None:
    """List, inspect and edit fuels."""
    ctx.ensure_object(dict)
    ctx.obj["catalog"] = catalog


@fuel.command("list")
@click.pass_context
def fuel_list(ctx: click.Context) -> None:
    """List built-in and custom fuels."""
    console: Console = ctx.obj.get("console", Console())
    registry = load_fuel_catalog(ctx.obj["catalog"])

    table = Table(title="Available Fuels")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Type", style="yellow")
    table.add_column("LHV [MJ/kg]", justify="right")
    table.add_column("Cetane", justify="right")

    for fuel_id in registry.fuel_ids():
        props = registry.resolve(fuel_id)
        kind = "custom" if fuel_id in registry else "built-in"
        table.add_row(
            fuel_id,
            registry.display_name(fuel_id),
            kind,
            f"{props.lhv:.2f}",
            f"{props.cetane:.0f}",
        )
    console.print(table)


@fuel.command("show")
@click.argument("fuel_id")
@click.pass_context
def fuel_show(ctx: click.Context, fuel_id: str) -> None:
    """Show resolved properties of a fuel (unknown ids resolve to diesel)."""
    console: Console = ctx.obj.get("console", Console())
    registry = load_fuel_catalog(ctx.obj["catalog"])
    props = registry.resolve(fuel_id)

    table = Table(title=f"{registry.display_name(fuel_id)} ({fuel_id})")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Unit", style="dim")
    table.add_row("Lower Heating Value", f"{props.lhv:.2f}", "MJ/kg")
    table.add_row("Density", f"{props.density:.1f}", "kg/m³")
    table.add_row("Viscosity", f"{props.viscosity:.2f}", "cSt")
    table.add_row("Cetane Number", f"{props.cetane:.1f}", "—")
    table.add_row("Flash Point", f"{props.flash_point:.1f}", "°C")
    table.add_row("H/C Ratio", f"{props.hc_ratio:.3f}", "—")
    table.add_row("O/C Ratio", f"{props.oc_ratio:.3f}", "—")
    table.add_row("S/C Ratio", f"{props.sc_ratio:.3f}", "—")
    table.add_row("Combustion Efficiency", f"{props.combustion_efficiency:.4f}", "—")
    table.add_row("Ignition Quality", f"{props.ignition_quality:.4f}", "—")
    console.print(table)


@fuel.command("add")
@click.argument("name")
@_fuel_field_options
@click.pass_context
def fuel_add(ctx: click.Context, name: str, **values: float | None) -> None:
    """Add a custom fuel; unset properties take diesel-like defaults."""
    console: Console = ctx.obj.get("console", Console())
    catalog = ctx.obj["catalog"]
    registry = load_fuel_catalog(catalog)

    try:
        fuel_id = registry.create(CustomFuel(name=name, **_overrides(values)))
    except ValidationError as exc:
        print_validation(console, exc.result)
        raise SystemExit(1)

    save_fuel_catalog(registry, catalog)
    console.print(f"[green]Added[/green] {fuel_id}: {name}")


@fuel.command("edit")
@click.argument("fuel_id")
@click.option("--name", type=str, default=None, help="Display name.")
@_fuel_field_options
@click.pass_context
def fuel_edit(ctx: click.Context, fuel_id: str, name: str | None, **values: float | None) -> None:
    """Edit a custom fuel; only the given properties change."""
    console: Console = ctx.obj.get("console", Console())
    catalog = ctx.obj["catalog"]
    registry = load_fuel_catalog(catalog)

    try:
        current = registry.get(fuel_id).to_fuel()
        changes = _overrides(values)
        if name is not None:
            changes["name"] = name
        registry.update(fuel_id, replace(current, **changes))
    except NotFoundError:
        console.print(f"[red]Error:[/red] custom fuel '{fuel_id}' not found")
        raise SystemExit(1)
    except ValidationError as exc:
        print_validation(console, exc.result)
        raise SystemExit(1)

    save_fuel_catalog(registry, catalog)
    console.print(f"[green]Updated[/green] {fuel_id}")


@fuel.command("remove")
@click.argument("fuel_id")
@click.pass_context
def fuel_remove(ctx: click.Context, fuel_id: str) -> None:
    """Delete a custom fuel. Its id is never reused."""
    console: Console = ctx.obj.get("console", Console())
    catalog = ctx.obj["catalog"]
    registry = load_fuel_catalog(catalog)

    try:
        registry.delete(fuel_id)
    except NotFoundError:
        console.print(f"[red]Error:[/red] custom fuel '{fuel_id}' not found")
        raise SystemExit(1)

    save_fuel_catalog(registry, catalog)
    console.print(f"[green]Removed[/green] {fuel_id}")
