"""
Shift table data model.

A shift table maps a (speed bin, load bin) grid cell to a gear. Both axes are
fixed-step and fixed-range, so the table is stored as a dense 2-D integer array
indexed by bin number: row = speed bin (0..max_speed), column = load bin
(0..LOAD_BINS). Load fractions are derived from the bin number by division and
never accumulated.

A table is filled once by a policy, smoothed once, then frozen. Frozen tables
are read-only and safe to share between readers.
"""

import numpy as np
import pandas as pd
from typing import List, Tuple

from ..utils.constants import LOAD_BINS

UNSET_GEAR = 0


class ShiftTable:
    """
    Dense speed x load -> gear table.
    """

    def __init__(self, max_speed: int, num_gears: int, load_bins: int = LOAD_BINS):
        """
        Initialize an empty table with every cell unset.

        Args:
            max_speed: Highest speed bin (inclusive)
            num_gears: Number of gears; valid cells hold 1..num_gears
            load_bins: Number of load steps; fractions are 0/load_bins..load_bins/load_bins
        """
        if max_speed < 0:
            raise ValueError(f"Maximum speed must be non-negative: {max_speed}")
        if num_gears < 1:
            raise ValueError(f"Number of gears must be at least 1: {num_gears}")
        if load_bins < 1:
            raise ValueError(f"Number of load bins must be at least 1: {load_bins}")

        self.max_speed = int(max_speed)
        self.num_gears = int(num_gears)
        self.load_bins = int(load_bins)

        self.speeds = np.arange(self.max_speed + 1)
        self.loads = np.arange(self.load_bins + 1) / self.load_bins
        self.gears = np.full((len(self.speeds), len(self.loads)), UNSET_GEAR, dtype=np.int64)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.gears.shape

    @property
    def frozen(self) -> bool:
        return not self.gears.flags.writeable

    def load_fraction(self, load_bin: int) -> float:
        """Load fraction of a load bin."""
        return load_bin / self.load_bins

    def get_gear(self, speed_bin: int, load_bin: int) -> int:
        return int(self.gears[speed_bin, load_bin])

    def set_gear(self, speed_bin: int, load_bin: int, gear: int):
        """
        Store a gear in one cell.

        Args:
            speed_bin: Row index
            load_bin: Column index
            gear: Gear number (1-N)
        """
        if self.frozen:
            raise ValueError("Shift table is frozen and cannot be modified")
        if not 1 <= gear <= self.num_gears:
            raise ValueError(f"Gear {gear} outside 1..{self.num_gears}")
        self.gears[speed_bin, load_bin] = gear

    def column(self, load_bin: int) -> np.ndarray:
        """Gears along the speed axis for one load bin (a view)."""
        return self.gears[:, load_bin]

    def is_complete(self) -> bool:
        """True when every cell holds a valid gear."""
        return bool(np.all((self.gears >= 1) & (self.gears <= self.num_gears)))

    def freeze(self) -> 'ShiftTable':
        """Make the table read-only. Returns self for chaining."""
        self.gears.setflags(write=False)
        return self

    def copy(self) -> 'ShiftTable':
        """Writable deep copy."""
        table = ShiftTable(self.max_speed, self.num_gears, self.load_bins)
        table.gears[:, :] = self.gears
        return table

    def gear_counts(self) -> List[int]:
        """Number of cells per gear, index 0 = first gear."""
        return [int(np.count_nonzero(self.gears == gear)) for gear in range(1, self.num_gears + 1)]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Tabular view of the table.

        Returns:
            DataFrame indexed by speed with one column per load fraction
        """
        return pd.DataFrame(
            self.gears.copy(),
            index=pd.Index(self.speeds, name='speed'),
            columns=pd.Index(np.round(self.loads, 6), name='load'),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShiftTable):
            return NotImplemented
        return (self.load_bins == other.load_bins and self.num_gears == other.num_gears
                and np.array_equal(self.gears, other.gears))

    def __repr__(self) -> str:
        state = 'frozen' if self.frozen else 'mutable'
        return (f"ShiftTable(speeds=0..{self.max_speed}, loads={len(self.loads)}, "
                f"gears={self.num_gears}, {state})")
