import numpy as np
import pytest

from shift_schedule.transmission import ShiftTable, build_schedule, lookup, interpolate_gear
from shift_schedule.transmission.lookup import bracket


@pytest.fixture
def table(gear_ratios, engine):
    return build_schedule('peak_rpm', gear_ratios, engine)


def test_bracket():
    keys = np.arange(151)

    assert bracket(keys, 10) == (10, 11)
    assert bracket(keys, 10.5) == (10, 11)
    assert bracket(keys, 0) == (0, 1)
    assert bracket(keys, 150) == (149, 150)


def test_bracket_outside_grid_uses_first_keys():
    keys = np.arange(11) / 10

    assert bracket(keys, -0.2) == (0, 1)
    assert bracket(keys, 1.5) == (0, 1)


def test_bracket_single_key():
    assert bracket(np.array([0.0]), 3.0) == (0, 0)


def test_lookup_at_grid_points_returns_table_gear(table):
    for speed in range(0, 151, 7):
        for load_bin in range(11):
            result = lookup(table, speed, load_bin / 10)
            assert result.gear == table.get_gear(speed, load_bin)
            assert result.nearest_speed == speed
            assert result.nearest_load == table.loads[load_bin]


def test_interpolation_exact_at_interior_grid_points(table):
    assert interpolate_gear(table, 40, 0.5) == pytest.approx(table.get_gear(40, 5))
    assert interpolate_gear(table, 75, 0.2) == pytest.approx(table.get_gear(75, 2))


def test_lookup_between_grid_points_uses_nearest(table):
    result = lookup(table, 40.3, 0.46)

    assert result.nearest_speed == 40
    assert result.nearest_load == pytest.approx(0.5)
    assert result.gear == table.get_gear(40, 5)
    lo = min(table.get_gear(s, l) for s in (40, 41) for l in (4, 5))
    hi = max(table.get_gear(s, l) for s in (40, 41) for l in (4, 5))
    assert lo - 1e-9 <= result.interpolated_gear <= hi + 1e-9


def test_lookup_beyond_grid_never_fails(table):
    for speed, load in ((200.0, 0.5), (-5.0, 0.5), (60.0, 1.3), (500.0, -1.0)):
        result = lookup(table, speed, load)
        assert 1 <= result.gear <= table.num_gears
        assert np.isfinite(result.interpolated_gear)

    # Outside the grid the first two keys bracket the query
    assert bracket(table.speeds, 200.0) == (0, 1)
    assert bracket(table.loads, 1.3) == (0, 1)

    assert lookup(table, 200.0, 1.0).gear == table.get_gear(150, 10)


def test_single_speed_table_interpolates_to_first_gear():
    table = ShiftTable(0, 12)
    table.gears[:, :] = 7
    table.freeze()

    assert interpolate_gear(table, 0.0, 0.5) == 1.0
    assert lookup(table, 0.0, 0.5).gear == 7
