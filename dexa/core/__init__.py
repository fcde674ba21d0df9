"""Core calculation modules for DEXA.

This package contains the primary engineering calculations:
- fuels: Built-in and custom fuel property registry
- balance: Energy and exergy balance of a test-bench operating point
- cycle: Single-zone in-cylinder pressure simulation (Wiebe heat release)
- series: Efficiency chart series accumulated across calculations
- config: Session and fuel catalog persistence (JSON)
"""
