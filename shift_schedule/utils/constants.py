"""
Constants module for the shift schedule package.

This module provides unit conversion factors, table grid dimensions and the
reference values used when no configuration file overrides them.
"""

from enum import Enum, auto

# Unit conversion factors
KMH_TO_MS = 1.0 / 3.6  # Convert km/h to m/s
MS_TO_KMH = 3.6  # Convert m/s to km/h
KW_TO_HP = 1.34102  # Convert kilowatts to horsepower
HP_TO_KW = 0.7457  # Convert horsepower to kilowatts
SECONDS_PER_HOUR = 3600.0

# Shift table grid
DEFAULT_MAX_SPEED = 150  # speed bins 0..150 inclusive
LOAD_BINS = 10  # load bins 0..10, fraction = bin / LOAD_BINS
DEFAULT_MINIMUM_DWELL_BINS = 3  # minimum consecutive speed bins per gear

# Policy search parameters
MODEL_POLICY_FIRST_GEAR = 3  # model-based policies search gears 3..N
FALLBACK_GEAR = 3  # gear used when a model-based policy finds no candidate
INTERPOLATION_FALLBACK_GEAR = 1  # gear used when bilinear interpolation degenerates
PERFORMANCE_MIN_LOAD = 0.2  # load floor for the performance policy
EFFICIENCY_MIN_LOAD = 0.10  # load floor for the efficiency policy
ECONOMY_POWER_SCALE = 600.0  # hp demanded per unit load by the economy policy

# Engine reference values (heavy truck diesel)
DEFAULT_IDLE_RPM = 400
DEFAULT_PEAK_RPM = 1750
DEFAULT_MAXIMUM_RPM = 2100
DEFAULT_MAX_TORQUE_NM = 3550
STALL_RPM_FRACTION = 0.3  # stall RPM as a fraction of idle when not configured

# Drivetrain reference values
DEFAULT_DIFFERENTIAL_RATIO = 3.04
DEFAULT_FINAL_DRIVE_RATIO = 18.3 / 3.6  # wheel RPM per km/h of road speed
DEFAULT_GEAR_RATIOS = [9.16, 7.33, 5.82, 4.66, 3.72, 3.0, 2.44, 1.96, 1.55, 1.24, 1.0, 0.8]


class PolicyType(Enum):
    """Enumeration of shift table construction policies."""
    PEAK_RPM = auto()     # Upshift once RPM exceeds a load-scaled ceiling
    PERFORMANCE = auto()  # Maximise instantaneous power
    EFFICIENCY = auto()   # Maximise power per unit fuel
    ECONOMY = auto()      # Minimise fuel at a required power
