"""
Validation utilities for shift schedules.

This module checks finished shift tables against the properties a control loop
relies on: every cell holds a valid gear, no gear hunts along the speed axis,
and (for policies that promise it) gears never drop as speed rises. Findings are
returned as status dictionaries rather than raised, since a degenerate table is
still usable and the caller decides what to do with a warning.
"""

import numpy as np
from typing import Dict, List, Optional, Tuple
import logging

from ..transmission.dwell_smoother import find_runs
from ..transmission.shift_table import ShiftTable

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Validation")


def find_dwell_violations(table: ShiftTable, minimum_width: int) -> List[Tuple[float, int, int, int]]:
    """
    List gear runs shorter than the minimum dwell width.

    Runs of the top gear and columns made of a single run are exempt.

    Args:
        table: Shift table
        minimum_width: Minimum consecutive speed bins per gear

    Returns:
        List of (load, start speed, gear, run length) tuples
    """
    violations = []
    for load_bin in range(len(table.loads)):
        runs = find_runs(table.column(load_bin))
        if len(runs) < 2:
            continue

        start = 0
        for gear, length in runs:
            if length < minimum_width and gear < table.num_gears:
                violations.append((table.load_fraction(load_bin), int(table.speeds[start]), gear, length))
            start += length

    return violations


def find_monotonicity_violations(table: ShiftTable) -> List[Tuple[float, int, int, int]]:
    """
    List places where the gear drops as speed increases.

    Args:
        table: Shift table

    Returns:
        List of (load, speed, gear before, gear after) tuples
    """
    violations = []
    drops = np.argwhere(np.diff(table.gears, axis=0) < 0)
    for speed_index, load_bin in drops:
        violations.append((
            table.load_fraction(int(load_bin)),
            int(table.speeds[speed_index + 1]),
            int(table.gears[speed_index, load_bin]),
            int(table.gears[speed_index + 1, load_bin]),
        ))
    return violations


def validate_shift_table(table: ShiftTable, minimum_dwell_bins: Optional[int] = None,
                         check_monotonic: bool = False) -> Dict:
    """
    Run all table checks.

    Args:
        table: Shift table
        minimum_dwell_bins: Dwell width to check, skipped if None
        check_monotonic: Whether to require gears non-decreasing in speed

    Returns:
        Dictionary of check name -> result dictionary, plus an overall 'status'
    """
    results = {}

    out_of_range = int(np.count_nonzero((table.gears < 1) | (table.gears > table.num_gears)))
    results['gear_range'] = {
        'status': 'valid' if out_of_range == 0 else 'error',
        'invalid_cells': out_of_range,
        'message': (f"All cells within 1..{table.num_gears}" if out_of_range == 0
                    else f"{out_of_range} cells outside 1..{table.num_gears}")
    }

    unused = [gear for gear, count in enumerate(table.gear_counts(), start=1) if count == 0]
    results['coverage'] = {
        'status': 'valid' if len(unused) < table.num_gears - 1 else 'warning',
        'unused_gears': unused,
        'message': (f"Gears never selected: {unused}" if unused else "Every gear is selected somewhere")
    }

    if minimum_dwell_bins is not None:
        violations = find_dwell_violations(table, minimum_dwell_bins)
        results['dwell'] = {
            'status': 'valid' if not violations else 'warning',
            'violations': violations,
            'message': (f"All runs hold for at least {minimum_dwell_bins} speed bins" if not violations
                        else f"{len(violations)} runs shorter than {minimum_dwell_bins} speed bins")
        }

    if check_monotonic:
        violations = find_monotonicity_violations(table)
        results['monotonic'] = {
            'status': 'valid' if not violations else 'warning',
            'violations': violations,
            'message': ("Gears never drop with rising speed" if not violations
                        else f"{len(violations)} downshifts with rising speed")
        }

    statuses = [result['status'] for result in results.values()]
    if 'error' in statuses:
        overall = 'error'
    elif 'warning' in statuses:
        overall = 'warning'
    else:
        overall = 'valid'

    for name, result in results.items():
        if result['status'] != 'valid':
            logger.warning(f"Shift table check '{name}': {result['message']}")

    results['status'] = overall
    return results
