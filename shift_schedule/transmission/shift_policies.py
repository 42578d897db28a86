"""
Shift policy module for shift schedule construction.

This module provides the policies that fill a shift table. Every policy answers
one question, which gear to use at a given (speed, load) pair, and shares the
outer loop that visits every grid cell. The policies are:
- Peak RPM: upshift once RPM would exceed a load-scaled ceiling
- Performance: maximise instantaneous engine power
- Efficiency: maximise power per unit of fuel
- Economy: minimise fuel while delivering a required power

Every policy has an explicit fallback gear, so no cell is ever left unset.
"""

import numpy as np
from typing import Dict, Iterable, Optional, Union
import logging

from .gearing import GearRatioTable
from .shift_table import ShiftTable
from ..engine.characteristics import EngineCharacteristics
from ..utils.constants import (
    PolicyType, MODEL_POLICY_FIRST_GEAR, FALLBACK_GEAR,
    PERFORMANCE_MIN_LOAD, EFFICIENCY_MIN_LOAD, ECONOMY_POWER_SCALE
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Shift_Policies")


class ShiftPolicy:
    """
    Base class for shift table policies.

    Subclasses implement find_gear(); the base class turns a failed search into
    the policy's fallback gear and fills a whole table.
    """

    def __init__(self, policy_type: PolicyType, gear_ratios: GearRatioTable,
                 characteristics: EngineCharacteristics, name: str = ""):
        """
        Initialize the shift policy.

        Args:
            policy_type: Type of shift policy
            gear_ratios: Gear ratio table of the drivetrain
            characteristics: Engine RPM limits
            name: Optional name for the policy
        """
        self.policy_type = policy_type
        self.gear_ratios = gear_ratios
        self.characteristics = characteristics
        self.num_gears = gear_ratios.num_gears
        self.name = name or policy_type.name.lower().replace("_", " ").title()

        # Cells filled by the fallback branch during the last build
        self.fallback_count = 0

        logger.info(f"Shift policy initialized: {self.name}")

    @property
    def fallback_gear(self) -> int:
        """Gear used when the search finds no candidate."""
        raise NotImplementedError

    def find_gear(self, speed: float, load: float) -> Optional[int]:
        """
        Search for the best gear at one operating point.

        Args:
            speed: Road speed
            load: Engine load fraction (0-1)

        Returns:
            Gear number, or None if no gear qualifies
        """
        raise NotImplementedError

    def select_gear(self, speed: float, load: float) -> int:
        """
        Pick the gear for one operating point, falling back when no gear qualifies.

        Args:
            speed: Road speed
            load: Engine load fraction (0-1)

        Returns:
            Gear number (1-N)
        """
        gear = self.find_gear(speed, load)
        if gear is None:
            self.fallback_count += 1
            return self.fallback_gear
        return gear

    def build_table(self, max_speed: int) -> ShiftTable:
        """
        Fill a fresh shift table over every speed and load bin.

        Args:
            max_speed: Highest speed bin (inclusive)

        Returns:
            Fully populated, still mutable ShiftTable
        """
        table = ShiftTable(max_speed, self.num_gears)
        self.fallback_count = 0

        for speed_bin in table.speeds:
            for load_bin in range(len(table.loads)):
                load = table.load_fraction(load_bin)
                table.set_gear(speed_bin, load_bin, self.select_gear(float(speed_bin), load))

        logger.info(f"{self.name} table built: {table.shape[0]}x{table.shape[1]} cells, "
                    f"{self.fallback_count} fallback cells")
        return table


class PeakRpmPolicy(ShiftPolicy):
    """
    Lowest usable gear whose RPM stays under a load-scaled ceiling.

    The ceiling runs linearly from idle RPM at zero load to maximum RPM at full
    load. Needs no power or fuel model and is monotonic in speed for a fixed
    load.
    """

    def __init__(self, gear_ratios: GearRatioTable, characteristics: EngineCharacteristics,
                 name: str = "Peak RPM"):
        super().__init__(PolicyType.PEAK_RPM, gear_ratios, characteristics, name)

    @property
    def fallback_gear(self) -> int:
        return self.num_gears

    def find_gear(self, speed: float, load: float) -> Optional[int]:
        shift_rpm = self.characteristics.shift_rpm(load)
        stall_rpm = self.characteristics.stall_rpm

        for gear in range(1, self.num_gears + 1):
            rpm = self.gear_ratios.calculate_engine_speed(speed, gear)

            # At standstill no gear turns the engine, so none can stall it
            if 0 < rpm < stall_rpm:
                continue
            if rpm > shift_rpm:
                continue

            return gear

        return None


class ModelBasedPolicy(ShiftPolicy):
    """
    Base class for policies that score gears 3..N with an engine performance model.

    The first two gears are reserved for low speed manoeuvring and never
    evaluated. Candidates whose score is missing or not finite are discarded.
    """

    # Whether a higher score is better
    maximize = True

    def __init__(self, policy_type: PolicyType, gear_ratios: GearRatioTable,
                 characteristics: EngineCharacteristics, engine, name: str = ""):
        """
        Initialize the model-based policy.

        Args:
            policy_type: Type of shift policy
            gear_ratios: Gear ratio table of the drivetrain
            characteristics: Engine RPM limits
            engine: Engine performance model (get_power, get_fuel_consumption,
                get_throttle_for_power)
            name: Optional name for the policy
        """
        super().__init__(policy_type, gear_ratios, characteristics, name)
        self.engine = engine

    @property
    def fallback_gear(self) -> int:
        return min(FALLBACK_GEAR, self.num_gears)

    def candidate_gears(self) -> Iterable[int]:
        return range(MODEL_POLICY_FIRST_GEAR, self.num_gears + 1)

    def score_gear(self, gear: int, speed: float, load: float) -> Optional[float]:
        """
        Score one candidate gear.

        Args:
            gear: Gear number
            speed: Road speed
            load: Engine load fraction (0-1)

        Returns:
            Score, or None if the gear is not usable at this point
        """
        raise NotImplementedError

    def _in_operating_range(self, rpm: float) -> bool:
        return self.characteristics.stall_rpm <= rpm <= self.characteristics.maximum_rpm

    def find_gear(self, speed: float, load: float) -> Optional[int]:
        best_gear = None
        best_score = None

        for gear in self.candidate_gears():
            score = self.score_gear(gear, speed, load)
            if score is None or not np.isfinite(score):
                continue

            if best_score is None or (score > best_score if self.maximize else score < best_score):
                best_score = score
                best_gear = gear

        return best_gear


class PerformancePolicy(ModelBasedPolicy):
    """
    Gear delivering the most power.

    RPM is clamped up to stall RPM and load is floored at 0.2 so near-zero
    throttle does not make every gear look alike.
    """

    def __init__(self, gear_ratios: GearRatioTable, characteristics: EngineCharacteristics,
                 engine, name: str = "Performance"):
        super().__init__(PolicyType.PERFORMANCE, gear_ratios, characteristics, engine, name)

    def score_gear(self, gear: int, speed: float, load: float) -> Optional[float]:
        rpm = max(self.gear_ratios.calculate_engine_speed(speed, gear), self.characteristics.stall_rpm)
        return self.engine.get_power(rpm, max(load, PERFORMANCE_MIN_LOAD))


class EfficiencyPolicy(ModelBasedPolicy):
    """
    Gear with the best specific efficiency (power divided by fuel rate).
    """

    def __init__(self, gear_ratios: GearRatioTable, characteristics: EngineCharacteristics,
                 engine, name: str = "Efficiency"):
        super().__init__(PolicyType.EFFICIENCY, gear_ratios, characteristics, engine, name)

    def score_gear(self, gear: int, speed: float, load: float) -> Optional[float]:
        rpm = self.gear_ratios.calculate_engine_speed(speed, gear)
        if not self._in_operating_range(rpm):
            return None

        throttle = max(load, EFFICIENCY_MIN_LOAD)
        power = np.float64(self.engine.get_power(rpm, throttle))
        fuel = np.float64(self.engine.get_fuel_consumption(rpm, throttle))

        with np.errstate(divide='ignore', invalid='ignore'):
            return float(power / fuel)


class EconomyPolicy(ModelBasedPolicy):
    """
    Gear burning the least fuel while delivering load * 600 hp.

    Gears that would need a throttle outside 0..1, or for which the engine
    model cannot resolve a throttle at all, are rejected.
    """

    maximize = False

    def __init__(self, gear_ratios: GearRatioTable, characteristics: EngineCharacteristics,
                 engine, name: str = "Economy"):
        super().__init__(PolicyType.ECONOMY, gear_ratios, characteristics, engine, name)

    def score_gear(self, gear: int, speed: float, load: float) -> Optional[float]:
        rpm = self.gear_ratios.calculate_engine_speed(speed, gear)
        if not self._in_operating_range(rpm):
            return None

        throttle = self.engine.get_throttle_for_power(rpm, load * ECONOMY_POWER_SCALE)
        if not np.isfinite(throttle) or throttle < 0.0 or throttle > 1.0:
            return None

        return self.engine.get_fuel_consumption(rpm, throttle)


_POLICY_CLASSES = {
    PolicyType.PEAK_RPM: PeakRpmPolicy,
    PolicyType.PERFORMANCE: PerformancePolicy,
    PolicyType.EFFICIENCY: EfficiencyPolicy,
    PolicyType.ECONOMY: EconomyPolicy,
}


def parse_policy_type(policy: Union[PolicyType, str]) -> PolicyType:
    """
    Resolve a policy given as enum member or name ('peak_rpm', 'Economy', ...).

    Args:
        policy: PolicyType or policy name

    Returns:
        PolicyType member
    """
    if isinstance(policy, PolicyType):
        return policy

    try:
        return PolicyType[str(policy).strip().upper().replace("-", "_").replace(" ", "_")]
    except KeyError:
        raise ValueError(f"Unknown shift policy: {policy}. "
                         f"Available: {[p.name.lower() for p in PolicyType]}")


def create_policy(policy: Union[PolicyType, str], gear_ratios: GearRatioTable,
                  characteristics: EngineCharacteristics, engine=None) -> ShiftPolicy:
    """
    Create a shift policy.

    Args:
        policy: PolicyType or policy name
        gear_ratios: Gear ratio table of the drivetrain
        characteristics: Engine RPM limits
        engine: Engine performance model, required by every policy except Peak RPM

    Returns:
        ShiftPolicy instance
    """
    policy_type = parse_policy_type(policy)
    policy_class = _POLICY_CLASSES[policy_type]

    if policy_type == PolicyType.PEAK_RPM:
        return policy_class(gear_ratios, characteristics)

    if engine is None:
        raise ValueError(f"Policy {policy_type.name.lower()} needs an engine performance model")

    return policy_class(gear_ratios, characteristics, engine)


def describe_policies() -> Dict[str, str]:
    """Policy names mapped to the first line of their description."""
    return {
        policy_type.name.lower(): policy_class.__doc__.strip().splitlines()[0]
        for policy_type, policy_class in _POLICY_CLASSES.items()
    }
