"""
Interpolated lookup into a finished shift table.

A query at an arbitrary (speed, load) pair brackets the query between grid
points on both axes and evaluates a bilinear interpolation of the four corner
gears. The gear actually returned is the table's exact gear at the grid point
nearest to the query; the interpolated value is reported alongside it for
diagnostics. Queries outside the grid never fail: a missing bracket falls back
to the first two keys of the axis, and a degenerate interpolation falls back to
first gear.
"""

import numpy as np
from typing import NamedTuple, Tuple
import logging

from .shift_table import ShiftTable
from ..utils.constants import INTERPOLATION_FALLBACK_GEAR

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Shift_Lookup")


class LookupResult(NamedTuple):
    """Gear recommendation for one query."""
    gear: int                 # Exact table gear at the nearest grid point
    nearest_speed: int        # Speed key of the nearest grid point
    nearest_load: float       # Load key of the nearest grid point
    interpolated_gear: float  # Bilinear estimate over the bracketing cell


def bracket(keys: np.ndarray, value: float) -> Tuple[int, int]:
    """
    Find the indices of the grid keys around a value.

    The bracket satisfies keys[a] <= value < keys[b]; a value equal to the last
    key uses the last cell. Without a bracket the first two keys are used.

    Args:
        keys: Ascending grid keys
        value: Query value

    Returns:
        (a, b) index pair; a == b only when the axis has a single key
    """
    if len(keys) < 2:
        return 0, 0

    upper = int(np.searchsorted(keys, value, side='right'))
    if value == keys[-1]:
        upper = len(keys) - 1

    if 1 <= upper < len(keys):
        return upper - 1, upper

    return 0, 1


def interpolate_gear(table: ShiftTable, speed: float, load: float) -> float:
    """
    Bilinear interpolation of the four corner gears around a query.

    Args:
        table: Finished shift table
        speed: Query road speed
        load: Query load fraction

    Returns:
        Interpolated gear, or first gear if the interpolation is undefined
    """
    sa, sb = bracket(table.speeds, speed)
    la, lb = bracket(table.loads, load)

    speed_a, speed_b = float(table.speeds[sa]), float(table.speeds[sb])
    load_a, load_b = float(table.loads[la]), float(table.loads[lb])
    gears = table.gears

    with np.errstate(divide='ignore', invalid='ignore'):
        weight = np.float64(1.0) / (speed_b - speed_a) / (load_b - load_a)
        value = weight * (
            gears[sa, la] * (speed_b - speed) * (load_b - load) +
            gears[sb, la] * (speed - speed_a) * (load_b - load) +
            gears[sa, lb] * (speed_b - speed) * (load - load_a) +
            gears[sb, lb] * (speed - speed_a) * (load - load_a)
        )

    if not np.isfinite(value):
        return float(INTERPOLATION_FALLBACK_GEAR)

    return float(value)


def lookup(table: ShiftTable, speed: float, load: float) -> LookupResult:
    """
    Recommend a gear for an arbitrary (speed, load) pair.

    Args:
        table: Finished shift table
        speed: Query road speed
        load: Query load fraction

    Returns:
        LookupResult with the nearest grid point's gear and coordinates
    """
    interpolated = interpolate_gear(table, speed, load)

    # First key wins on ties
    speed_index = int(np.argmin(np.abs(table.speeds - speed)))
    load_index = int(np.argmin(np.abs(table.loads - load)))

    gear = table.get_gear(speed_index, load_index)
    nearest_speed = int(table.speeds[speed_index])
    nearest_load = float(table.loads[load_index])

    logger.debug(f"Lookup ({speed:.2f}, {load:.2f}) -> gear {gear} at ({nearest_speed}, {nearest_load:.1f}), "
                 f"interpolated {interpolated:.2f}")

    return LookupResult(gear, nearest_speed, nearest_load, interpolated)
