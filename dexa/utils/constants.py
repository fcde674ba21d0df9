"""Physical constants and test-bench reference values used throughout DEXA.

All values in SI units unless otherwise noted.
"""

import math

# Atmospheric
P_ATM = 101325.0  # Pa — standard atmospheric pressure

# Thermodynamic
T_CELSIUS_OFFSET = 273.15  # K

# Mathematical
PI = math.pi
TWO_PI = 2.0 * math.pi

# Conversion factors
PA_TO_BAR = 1.0e-5
KJ_TO_J = 1.0e3
MJ_TO_KJ = 1.0e3

# Test bench
G_LOAD = 9.81  # m/s² — dynamometer load-to-force factor used by the bench
CP_WATER = 4.18  # kJ/(kg·K) — cooling water
CP_EXHAUST = 1.15  # kJ/(kg·K) — exhaust gas
R_EXHAUST = 0.287  # kJ/(kg·K) — exhaust gas constant
AMBIENT_PRESSURE_BAR = 1.01325  # bar
EXHAUST_PRESSURE_BAR = 1.05  # bar
GAMMA_IDEAL = 1.35  # ratio of specific heats for the ideal cycle efficiency
REFERENCE_CR = 16.0  # compression ratio at which the CR correction is unity
