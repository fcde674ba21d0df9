"""DEXA command-line interface package.

Supports ``python -m dexa.cli`` as an alternative to the ``dexa`` entry point.
"""

from dexa.cli.main import cli, main

__all__ = ["cli", "main"]
