"""Session state and fuel catalog persistence for DEXA.

A session snapshot bundles the selected fuel, the operating point, the
latest balance result and the latest cycle simulation into one JSON file.
The custom fuel catalog is stored separately so it can be shared between
sessions.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from dexa.core.fuels import DEFAULT_FUEL, FuelRegistry

logger = logging.getLogger(__name__)


# --- Session metadata ---


@dataclass
class ProjectMeta:
    """Top-level session metadata."""

    name: str = "Untitled"
    description: str = ""
    author: str = ""
    version: str = "0.1.0"
    created: str = ""
    modified: str = ""

    def touch(self) -> None:
        """Update the modified timestamp."""
        now = datetime.now(timezone.utc).isoformat()
        if not self.created:
            self.created = now
        self.modified = now


@dataclass
class BenchSession:
    """Snapshot of one test-bench session.

    Populated piecewise by the CLI commands; empty dicts mean the step has
    not been run.
    """

    meta: ProjectMeta = field(default_factory=ProjectMeta)

    fuel: str = DEFAULT_FUEL.value

    # EngineOperatingInput fields
    operating_point: dict[str, Any] = field(default_factory=dict)

    # EnergyExergyResult fields
    balance: dict[str, Any] = field(default_factory=dict)

    # CycleInput fields under "input", summary scalars and trace arrays
    simulation: dict[str, Any] = field(default_factory=dict)


# --- JSON serialization ---


class _NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.floating,)):
            return float(obj)
        return super().default(obj)


def save_session_json(state: BenchSession, path: str | Path) -> None:
    """Save a session snapshot to a JSON file."""
    path = Path(path)
    state.meta.touch()

    with open(path, "w") as f:
        json.dump(asdict(state), f, indent=2, cls=_NumpyEncoder)

    logger.info("Saved session to %s", path)


def load_session_json(path: str | Path) -> BenchSession:
    """Load a session snapshot from a JSON file."""
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    meta = ProjectMeta(**data.pop("meta", {}))
    state = BenchSession(meta=meta, **data)
    logger.info("Loaded session from %s", path)
    return state


# --- Fuel catalog ---


def save_fuel_catalog(registry: FuelRegistry, path: str | Path) -> None:
    """Write the custom fuels and id counter of *registry* to JSON."""
    path = Path(path)
    with open(path, "w") as f:
        json.dump(registry.to_dict(), f, indent=2)
    logger.info("Saved %d custom fuels to %s", len(registry), path)


def load_fuel_catalog(path: str | Path) -> FuelRegistry:
    """Read a catalog written by ``save_fuel_catalog``.

    A missing file yields a registry with only the built-in fuels.
    """
    path = Path(path)
    if not path.exists():
        logger.info("Fuel catalog not found at %s, using built-in fuels only", path)
        return FuelRegistry()
    with open(path) as f:
        registry = FuelRegistry.from_dict(json.load(f))
    logger.info("Loaded %d custom fuels from %s", len(registry), path)
    return registry
