"""
Shift schedule construction and publication.

This module ties the pieces together: it builds a raw table with the selected
policy, enforces the minimum dwell width, freezes the result and hands it out
for lookups. The ShiftScheduleManager keeps the table a control loop reads from
and replaces it wholesale when the policy changes.
"""

import os
import yaml
from typing import Dict, Optional, Tuple, Union
import logging

from .gearing import GearRatioTable, load_gear_ratio_table
from .shift_table import ShiftTable
from .shift_policies import create_policy, parse_policy_type
from .dwell_smoother import enforce_minimum_dwell
from .lookup import LookupResult, lookup
from ..engine.characteristics import EngineCharacteristics
from ..utils.constants import (
    PolicyType, DEFAULT_MAX_SPEED, DEFAULT_MINIMUM_DWELL_BINS,
    DEFAULT_IDLE_RPM, DEFAULT_PEAK_RPM, DEFAULT_MAXIMUM_RPM
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Shift_Schedule")


def build_schedule(policy: Union[PolicyType, str], gear_ratios: GearRatioTable, engine,
                   minimum_dwell_bins: int = DEFAULT_MINIMUM_DWELL_BINS,
                   max_speed: int = DEFAULT_MAX_SPEED,
                   characteristics: Optional[EngineCharacteristics] = None) -> ShiftTable:
    """
    Build, smooth and freeze a shift table.

    Args:
        policy: PolicyType or policy name
        gear_ratios: Gear ratio table of the drivetrain
        engine: Engine performance model; may be None for the Peak RPM policy
            when characteristics are given
        minimum_dwell_bins: Minimum consecutive speed bins per gear
        max_speed: Highest speed bin (inclusive)
        characteristics: Engine RPM limits; derived from the engine if None

    Returns:
        Frozen ShiftTable
    """
    if max_speed < 1:
        raise ValueError(f"Maximum speed must be at least 1: {max_speed}")
    if minimum_dwell_bins < 1:
        raise ValueError(f"Minimum dwell width must be at least 1: {minimum_dwell_bins}")

    if characteristics is None:
        if engine is None:
            raise ValueError("Engine characteristics or an engine model are required")
        characteristics = EngineCharacteristics.from_engine(engine)

    shift_policy = create_policy(policy, gear_ratios, characteristics, engine)
    table = shift_policy.build_table(max_speed)
    enforce_minimum_dwell(table, minimum_dwell_bins)

    if shift_policy.fallback_count == table.gears.size:
        logger.warning(f"{shift_policy.name} found no candidate gear anywhere, "
                       f"table holds fallback gear {shift_policy.fallback_gear} only")

    return table.freeze()


class ScheduleConfig:
    """
    Schedule settings: policy, drivetrain profile, grid size, dwell and RPM limits.
    """

    def __init__(self, policy: Union[PolicyType, str] = PolicyType.PEAK_RPM,
                 drivetrain_profile: Optional[str] = None,
                 max_speed: int = DEFAULT_MAX_SPEED,
                 minimum_dwell_bins: int = DEFAULT_MINIMUM_DWELL_BINS,
                 idle_rpm: float = DEFAULT_IDLE_RPM,
                 peak_rpm: float = DEFAULT_PEAK_RPM,
                 maximum_rpm: float = DEFAULT_MAXIMUM_RPM):
        """
        Initialize schedule settings.

        Args:
            policy: PolicyType or policy name
            drivetrain_profile: Name of the drivetrain profile to use
            max_speed: Highest speed bin (inclusive)
            minimum_dwell_bins: Minimum consecutive speed bins per gear
            idle_rpm: Shift target at zero load
            peak_rpm: Nominal operating RPM
            maximum_rpm: Shift target at full load
        """
        if max_speed < 1:
            raise ValueError(f"Maximum speed must be at least 1: {max_speed}")
        if minimum_dwell_bins < 1:
            raise ValueError(f"Minimum dwell width must be at least 1: {minimum_dwell_bins}")

        self.policy = parse_policy_type(policy)
        self.drivetrain_profile = drivetrain_profile
        self.max_speed = int(max_speed)
        self.minimum_dwell_bins = int(minimum_dwell_bins)
        self.idle_rpm = idle_rpm
        self.peak_rpm = peak_rpm
        self.maximum_rpm = maximum_rpm

    @classmethod
    def from_config(cls, config_path: str) -> 'ScheduleConfig':
        """
        Create a ScheduleConfig from a YAML configuration file.

        Args:
            config_path: Path to the configuration file

        Returns:
            ScheduleConfig instance
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Shift schedule configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        rpm = config.get('rpm', {})
        return cls(
            policy=config.get('policy', 'peak_rpm'),
            drivetrain_profile=config.get('drivetrain_profile'),
            max_speed=config.get('max_speed', DEFAULT_MAX_SPEED),
            minimum_dwell_bins=config.get('minimum_dwell_bins', DEFAULT_MINIMUM_DWELL_BINS),
            idle_rpm=rpm.get('idle', DEFAULT_IDLE_RPM),
            peak_rpm=rpm.get('peak', DEFAULT_PEAK_RPM),
            maximum_rpm=rpm.get('maximum', DEFAULT_MAXIMUM_RPM),
        )

    def characteristics_for(self, engine) -> EngineCharacteristics:
        """Engine characteristics with this configuration's RPM limits applied."""
        return EngineCharacteristics.from_engine(
            engine, idle_rpm=self.idle_rpm, peak_rpm=self.peak_rpm, maximum_rpm=self.maximum_rpm
        )

    def to_dict(self) -> Dict:
        return {
            'policy': self.policy.name.lower(),
            'drivetrain_profile': self.drivetrain_profile,
            'max_speed': self.max_speed,
            'minimum_dwell_bins': self.minimum_dwell_bins,
            'rpm': {'idle': self.idle_rpm, 'peak': self.peak_rpm, 'maximum': self.maximum_rpm},
        }


class ShiftScheduleManager:
    """
    Owner of the shift table a control loop reads from.

    The active (policy, table) pair is published as one reference. Switching
    policy builds a complete new table first and only then replaces that
    reference, so readers never see a partially built table and tables handed
    out earlier are never modified.
    """

    def __init__(self, engine, gear_ratios: GearRatioTable,
                 config: Optional[ScheduleConfig] = None):
        """
        Initialize the manager and build the configured policy's table.

        Args:
            engine: Engine performance model
            gear_ratios: Gear ratio table of the drivetrain
            config: Schedule settings; defaults if None
        """
        self.engine = engine
        self.gear_ratios = gear_ratios
        self.config = config or ScheduleConfig()
        self.characteristics = self.config.characteristics_for(engine)

        self._active: Tuple[PolicyType, ShiftTable] = (
            self.config.policy, self._build(self.config.policy)
        )

        logger.info(f"Shift schedule manager initialized with policy {self.config.policy.name.lower()}")

    @classmethod
    def from_config(cls, engine, schedule_config_path: str,
                    drivetrain_config_path: str) -> 'ShiftScheduleManager':
        """
        Create a manager from schedule and drivetrain configuration files.

        Args:
            engine: Engine performance model
            schedule_config_path: Path to the shift schedule configuration
            drivetrain_config_path: Path to the drivetrain profile configuration

        Returns:
            ShiftScheduleManager instance
        """
        config = ScheduleConfig.from_config(schedule_config_path)
        gear_ratios = load_gear_ratio_table(drivetrain_config_path, config.drivetrain_profile)
        return cls(engine, gear_ratios, config)

    def _build(self, policy: PolicyType) -> ShiftTable:
        return build_schedule(
            policy, self.gear_ratios, self.engine,
            minimum_dwell_bins=self.config.minimum_dwell_bins,
            max_speed=self.config.max_speed,
            characteristics=self.characteristics,
        )

    @property
    def active_policy(self) -> PolicyType:
        return self._active[0]

    @property
    def table(self) -> ShiftTable:
        return self._active[1]

    def set_active_policy(self, policy: Union[PolicyType, str]) -> ShiftTable:
        """
        Switch policy, publishing a freshly built table.

        Args:
            policy: PolicyType or policy name

        Returns:
            The newly published table
        """
        policy_type = parse_policy_type(policy)
        if policy_type == self.active_policy:
            return self.table

        table = self._build(policy_type)
        self._active = (policy_type, table)

        logger.info(f"Activated policy: {policy_type.name.lower()}")
        return table

    def lookup(self, speed: float, load: float) -> LookupResult:
        """
        Recommend a gear from the active table.

        Args:
            speed: Query road speed
            load: Query load fraction

        Returns:
            LookupResult
        """
        _, table = self._active
        return lookup(table, speed, load)
