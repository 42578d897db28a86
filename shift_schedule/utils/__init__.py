"""
Utility modules for shift schedule construction.

This package provides constants, validation and plotting helpers. Validation and
plotting depend on the transmission package and are imported from their own
modules (shift_schedule.utils.validation, shift_schedule.utils.plotting).
"""

# Import key constants for easier access
from .constants import (
    # Unit conversion factors
    KMH_TO_MS, MS_TO_KMH, KW_TO_HP, HP_TO_KW,

    # Grid and policy parameters
    DEFAULT_MAX_SPEED, LOAD_BINS, DEFAULT_MINIMUM_DWELL_BINS,
    FALLBACK_GEAR, INTERPOLATION_FALLBACK_GEAR,

    # Reference values
    DEFAULT_IDLE_RPM, DEFAULT_PEAK_RPM, DEFAULT_MAXIMUM_RPM,
    DEFAULT_GEAR_RATIOS, DEFAULT_DIFFERENTIAL_RATIO, DEFAULT_FINAL_DRIVE_RATIO,

    # Enumerations
    PolicyType
)

__all__ = [
    'KMH_TO_MS', 'MS_TO_KMH', 'KW_TO_HP', 'HP_TO_KW',
    'DEFAULT_MAX_SPEED', 'LOAD_BINS', 'DEFAULT_MINIMUM_DWELL_BINS',
    'FALLBACK_GEAR', 'INTERPOLATION_FALLBACK_GEAR',
    'DEFAULT_IDLE_RPM', 'DEFAULT_PEAK_RPM', 'DEFAULT_MAXIMUM_RPM',
    'DEFAULT_GEAR_RATIOS', 'DEFAULT_DIFFERENTIAL_RATIO', 'DEFAULT_FINAL_DRIVE_RATIO',
    'PolicyType'
]
