import numpy as np

from shift_schedule.transmission import ShiftTable, build_schedule
from shift_schedule.utils.validation import (
    find_dwell_violations, find_monotonicity_violations, validate_shift_table
)


def _table(*columns, num_gears=4):
    table = ShiftTable(len(columns[0]) - 1, num_gears, load_bins=len(columns) - 1)
    for load_bin, column in enumerate(columns):
        table.gears[:, load_bin] = column
    return table


def test_dwell_violations_are_reported():
    table = _table([1, 1, 1, 2, 3, 3, 3], [1, 1, 1, 1, 2, 2, 2])
    violations = find_dwell_violations(table, 3)

    assert violations == [(0.0, 3, 2, 1)]


def test_top_gear_and_single_run_columns_are_exempt():
    table = _table([1, 1, 1, 1, 1, 1, 4], [2, 2, 2, 2, 2, 2, 2])
    assert find_dwell_violations(table, 3) == []


def test_monotonicity_violations():
    table = _table([1, 2, 2, 1, 3], [1, 1, 2, 3, 4])
    assert find_monotonicity_violations(table) == [(0.0, 3, 2, 1)]


def test_valid_table(gear_ratios, engine):
    table = build_schedule('peak_rpm', gear_ratios, engine)
    results = validate_shift_table(table, 3, check_monotonic=True)

    assert results['status'] == 'valid'
    assert results['gear_range']['invalid_cells'] == 0
    assert results['dwell']['violations'] == []
    assert results['monotonic']['violations'] == []


def test_incomplete_table_is_an_error():
    table = ShiftTable(5, 3)
    results = validate_shift_table(table)

    assert results['status'] == 'error'
    assert results['gear_range']['invalid_cells'] == table.gears.size


def test_single_gear_table_is_a_warning():
    table = ShiftTable(5, 4)
    table.gears[:, :] = 3
    results = validate_shift_table(table, 3)

    assert results['status'] == 'warning'
    assert results['coverage']['unused_gears'] == [1, 2, 4]
    assert 'monotonic' not in results


def test_optional_checks_skipped():
    table = _table(np.array([1, 2, 1, 2]), np.array([1, 1, 2, 2]), num_gears=2)
    results = validate_shift_table(table)

    assert set(results) == {'gear_range', 'coverage', 'status'}
