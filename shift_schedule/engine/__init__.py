"""
Engine module for shift schedule construction.

This module provides the engine performance model consulted by the schedule
builder and the fixed RPM characteristics derived from it.
"""

# Import main engine model
from .truck_engine import TruckEngine

# Import engine characteristics
from .characteristics import EngineCharacteristics

__all__ = [
    'TruckEngine',
    'EngineCharacteristics',
]
