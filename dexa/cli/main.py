"""DEXA command-line interface.

Entry point for the ``dexa`` CLI tool.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from dexa import __app_name__, __version__

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name=__app_name__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """DEXA — Diesel Energy & eXergy Analysis.

    Energy/exergy balances for CI engine test benches and single-zone
    in-cylinder pressure simulation.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["console"] = console


# Import and register sub-command groups
from dexa.cli.balance_cmd import balance, sweep  # noqa: E402
from dexa.cli.simulate_cmd import simulate  # noqa: E402
from dexa.cli.fuel_cmd import fuel  # noqa: E402
from dexa.cli.info_cmd import info  # noqa: E402

cli.add_command(balance)
cli.add_command(sweep)
cli.add_command(simulate)
cli.add_command(fuel)
cli.add_command(info)


def main() -> None:
    """Convenience wrapper for entry-point scripts."""
    cli()
