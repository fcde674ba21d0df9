"""CLI command for inspecting session files."""

from __future__ import annotations

import click
from rich.console import Console
from rich.tree import Tree

from dexa.core.config import load_session_json


@click.group("info")
@click.pass_context
def info(ctx: click.Context) -> None:
    """Inspect session files."""
    pass


@info.command("session")
@click.argument("path", type=click.Path(exists=True))
@click.pass_context
def info_session(ctx: click.Context, path: str) -> None:
    """Display summary of a session file."""
    console: Console = ctx.obj.get("console", Console())
    state = load_session_json(path)

    tree = Tree(f"[bold]{state.meta.name}[/bold]")
    meta = tree.add("[cyan]Metadata[/cyan]")
    meta.add(f"Author: {state.meta.author or '—'}")
    meta.add(f"Version: {state.meta.version}")
    meta.add(f"Modified: {state.meta.modified or '—'}")

    tree.add(f"[cyan]Fuel[/cyan]: {state.fuel}")

    if state.operating_point:
        op = tree.add("[cyan]Operating Point[/cyan]")
        for k, v in state.operating_point.items():
            op.add(f"{k}: {v}")

    if state.balance:
        bal = tree.add("[cyan]Balance[/cyan]")
        for k, v in state.balance.items():
            bal.add(f"{k}: {v:.4g}" if isinstance(v, float) else f"{k}: {v}")

    if state.simulation:
        sim = tree.add("[cyan]Simulation[/cyan]")
        for k, v in state.simulation.get("summary", {}).items():
            sim.add(f"{k}: {v:.4g}" if isinstance(v, float) else f"{k}: {v}")
        samples = state.simulation.get("crank_angle")
        if samples is not None:
            sim.add(f"samples: {len(samples)}")

    console.print(tree)
