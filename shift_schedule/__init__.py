"""
Transmission shift schedule construction and lookup.

Builds a speed x load -> gear table for a drivetrain and engine under one of
four policies, smooths it against gear hunting and answers gear queries for a
real-time control loop.
"""

from .engine import TruckEngine, EngineCharacteristics
from .transmission import (
    GearRatioTable,
    ShiftTable,
    LookupResult,
    build_schedule,
    lookup,
    enforce_minimum_dwell,
    ScheduleConfig,
    ShiftScheduleManager
)
from .utils.constants import PolicyType
from .utils.validation import validate_shift_table

__version__ = "0.1.0"

__all__ = [
    'TruckEngine',
    'EngineCharacteristics',
    'GearRatioTable',
    'ShiftTable',
    'LookupResult',
    'build_schedule',
    'lookup',
    'enforce_minimum_dwell',
    'ScheduleConfig',
    'ShiftScheduleManager',
    'PolicyType',
    'validate_shift_table'
]
