"""DEXA — Diesel Energy & eXergy Analysis.

Energy/exergy balances for compression-ignition engine test benches and a
single-zone in-cylinder pressure simulator.
"""

__app_name__ = "dexa"
__version__ = "0.1.0"
