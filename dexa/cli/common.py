"""Helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from dexa.core.config import BenchSession, ProjectMeta, load_fuel_catalog, load_session_json
from dexa.core.fuels import FuelRegistry
from dexa.utils.validation import ValidationResult


def load_registry(catalog: str | None) -> FuelRegistry:
    """Registry from a catalog file, or built-ins only when none is given."""
    return load_fuel_catalog(catalog) if catalog else FuelRegistry()


def open_session(path: str, name: str) -> BenchSession:
    """Load an existing session file so several commands can share it."""
    if Path(path).exists():
        return load_session_json(path)
    return BenchSession(meta=ProjectMeta(name=name))


def print_validation(console: Console, result: ValidationResult) -> None:
    for msg in result.errors:
        console.print(f"[red]Error:[/red] {msg.message}")
    for msg in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {msg.message}")
