"""Utility modules for DEXA."""

from dexa.utils.constants import CP_EXHAUST, CP_WATER, G_LOAD, GAMMA_IDEAL, T_CELSIUS_OFFSET

__all__ = ["CP_EXHAUST", "CP_WATER", "G_LOAD", "GAMMA_IDEAL", "T_CELSIUS_OFFSET"]
