"""
Dwell smoother for shift tables.

A raw schedule can switch gear every few speed bins, which makes the control
loop hunt between gears for small speed changes. The smoother rewrites each load
column so that every gear below the top gear holds for at least a minimum number
of consecutive speed bins.

Each column is run-length encoded along the speed axis. Short runs only ever
move up. The left-most run that is too short is absorbed by the run that
follows it when that run holds a higher gear. Otherwise (a lower successor, or
the end of the column) the short run is relabelled with the next higher gear.
Neighbouring runs that end up with the same gear are coalesced, and the pass
repeats until no short run is left. Runs of the top gear keep whatever width
they have since there is no higher gear to move to.
"""

import numpy as np
from typing import List, Tuple
import logging

from .shift_table import ShiftTable

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Dwell_Smoother")


def find_runs(column: np.ndarray) -> List[Tuple[int, int]]:
    """
    Run-length encode a column of gears.

    Args:
        column: Gears along the speed axis

    Returns:
        List of (gear, length) pairs in speed order
    """
    if len(column) == 0:
        return []

    # Indices where the gear changes from the previous bin
    boundaries = np.flatnonzero(np.diff(column)) + 1
    starts = np.concatenate(([0], boundaries))
    ends = np.concatenate((boundaries, [len(column)]))

    return [(int(column[start]), int(end - start)) for start, end in zip(starts, ends)]


def _coalesce(runs: List[List[int]]) -> List[List[int]]:
    merged = []
    for gear, length in runs:
        if merged and merged[-1][0] == gear:
            merged[-1][1] += length
        else:
            merged.append([gear, length])
    return merged


def _first_short_run(runs: List[List[int]], minimum_width: int, top_gear: int) -> int:
    for index, (gear, length) in enumerate(runs):
        if length < minimum_width and gear < top_gear:
            return index
    return -1


def merge_short_runs(column: np.ndarray, minimum_width: int, top_gear: int) -> np.ndarray:
    """
    Smooth one load column.

    Args:
        column: Gears along the speed axis
        minimum_width: Minimum number of consecutive bins per gear
        top_gear: Highest gear; its runs are exempt

    Returns:
        New array with the smoothed gears
    """
    runs = [list(run) for run in find_runs(column)]

    while len(runs) > 1:
        index = _first_short_run(runs, minimum_width, top_gear)
        if index < 0:
            break

        gear = runs[index][0]
        if index + 1 < len(runs) and runs[index + 1][0] > gear:
            runs[index + 1][1] += runs[index][1]
            del runs[index]
        else:
            # No higher run to join, step up one gear
            runs[index][0] = gear + 1

        runs = _coalesce(runs)

    return np.repeat([gear for gear, _ in runs], [length for _, length in runs]).astype(column.dtype)


def enforce_minimum_dwell(table: ShiftTable, minimum_width: int) -> int:
    """
    Enforce the minimum dwell width on every load column, in place.

    Args:
        table: Mutable shift table
        minimum_width: Minimum number of consecutive speed bins per gear

    Returns:
        Number of cells whose gear changed
    """
    if minimum_width < 1:
        raise ValueError(f"Minimum dwell width must be at least 1: {minimum_width}")
    if table.frozen:
        raise ValueError("Shift table is frozen and cannot be smoothed")

    changed = 0
    for load_bin in range(len(table.loads)):
        column = table.column(load_bin)
        smoothed = merge_short_runs(column, minimum_width, table.num_gears)

        column_changes = int(np.count_nonzero(smoothed != column))
        if column_changes:
            logger.debug(f"Load {table.load_fraction(load_bin):.1f}: {column_changes} cells re-geared")
            table.gears[:, load_bin] = smoothed
            changed += column_changes

    logger.info(f"Minimum dwell of {minimum_width} bins enforced, {changed} cells changed")
    return changed
