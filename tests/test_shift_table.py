import numpy as np
import pytest

from shift_schedule.transmission import ShiftTable


def test_new_table_is_unset():
    table = ShiftTable(150, 12)

    assert table.shape == (151, 11)
    assert not table.is_complete()
    assert not table.frozen
    assert table.loads[0] == 0.0
    assert table.loads[-1] == 1.0


def test_load_fraction_is_exact():
    table = ShiftTable(10, 3)
    assert [table.load_fraction(b) for b in range(11)] == [b / 10 for b in range(11)]
    assert table.load_fraction(3) == table.loads[3]


def test_set_gear_validates_range():
    table = ShiftTable(5, 3)
    table.set_gear(2, 4, 3)
    assert table.get_gear(2, 4) == 3

    with pytest.raises(ValueError):
        table.set_gear(2, 4, 0)
    with pytest.raises(ValueError):
        table.set_gear(2, 4, 4)


def test_frozen_table_is_read_only():
    table = ShiftTable(5, 3)
    table.gears[:, :] = 1
    table.freeze()

    assert table.frozen
    with pytest.raises(ValueError):
        table.set_gear(0, 0, 2)
    with pytest.raises(ValueError):
        table.gears[0, 0] = 2


def test_copy_is_writable_and_equal():
    table = ShiftTable(5, 3)
    table.gears[:, :] = 2
    table.freeze()

    duplicate = table.copy()
    assert duplicate == table
    assert not duplicate.frozen

    duplicate.set_gear(0, 0, 1)
    assert duplicate != table
    assert table.get_gear(0, 0) == 2


def test_gear_counts():
    table = ShiftTable(4, 3, load_bins=1)
    table.gears[:, 0] = [1, 1, 2, 3, 3]
    table.gears[:, 1] = [1, 2, 2, 2, 3]

    assert table.gear_counts() == [3, 4, 3]
    assert table.is_complete()


def test_to_dataframe():
    table = ShiftTable(20, 12)
    table.gears[:, :] = np.arange(21)[:, None] % 12 + 1
    df = table.to_dataframe()

    assert df.shape == (21, 11)
    assert df.index.name == 'speed'
    assert df.loc[5, 0.5] == table.get_gear(5, 5)


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        ShiftTable(-1, 12)
    with pytest.raises(ValueError):
        ShiftTable(10, 0)
