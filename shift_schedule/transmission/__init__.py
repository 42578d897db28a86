"""
Transmission module for shift schedule construction.

This module provides the classes and functions that turn a drivetrain and an
engine model into a shift schedule and serve gear recommendations from it.

The transmission side consists of:
1. Gearing (gearbox, differential and final drive ratios)
2. Shift policies that fill the raw speed x load table
3. The dwell smoother that suppresses gear hunting along the speed axis
4. The interpolated lookup used by the control loop

Together these provide BuildSchedule and Lookup for a real-time controller.
"""

# Import gearing components
from .gearing import (
    GearRatioTable,
    load_drivetrain_config,
    load_gear_ratio_table
)

# Import table data model
from .shift_table import ShiftTable

# Import shift policy components
from .shift_policies import (
    ShiftPolicy,
    PeakRpmPolicy,
    ModelBasedPolicy,
    PerformancePolicy,
    EfficiencyPolicy,
    EconomyPolicy,
    create_policy,
    parse_policy_type,
    describe_policies
)

# Import smoothing and lookup
from .dwell_smoother import enforce_minimum_dwell, merge_short_runs, find_runs
from .lookup import LookupResult, lookup, interpolate_gear

# Import schedule construction
from .schedule import (
    build_schedule,
    ScheduleConfig,
    ShiftScheduleManager
)

# Define public API
__all__ = [
    # Gearing components
    'GearRatioTable',
    'load_drivetrain_config',
    'load_gear_ratio_table',

    # Table
    'ShiftTable',

    # Shift policy components
    'ShiftPolicy',
    'PeakRpmPolicy',
    'ModelBasedPolicy',
    'PerformancePolicy',
    'EfficiencyPolicy',
    'EconomyPolicy',
    'create_policy',
    'parse_policy_type',
    'describe_policies',

    # Smoothing and lookup
    'enforce_minimum_dwell',
    'merge_short_runs',
    'find_runs',
    'LookupResult',
    'lookup',
    'interpolate_gear',

    # Schedule construction
    'build_schedule',
    'ScheduleConfig',
    'ShiftScheduleManager'
]
