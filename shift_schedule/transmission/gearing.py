"""
Gearing module for shift schedule construction.

This module models the ratio chain between road speed and engine speed: the
gearbox ratios, the differential and the final drive. The product of the three
is the overall ratio per gear, which converts a road speed bin straight into
engine RPM (rpm = overall_ratio * speed).

Drivetrain profiles are stored in YAML and selected by name.
"""

import os
import yaml
import numpy as np
from typing import Dict, List, Optional
import logging

from ..utils.constants import (
    DEFAULT_GEAR_RATIOS, DEFAULT_DIFFERENTIAL_RATIO, DEFAULT_FINAL_DRIVE_RATIO
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Gearing_System")


class GearRatioTable:
    """
    Ordered per-gear overall ratios, fixed after construction.

    Gears are numbered 1..N, 1 being the lowest (highest ratio) gear.
    """

    def __init__(self, gear_ratios: List[float],
                 differential_ratio: float = DEFAULT_DIFFERENTIAL_RATIO,
                 final_drive_ratio: float = DEFAULT_FINAL_DRIVE_RATIO,
                 name: str = "custom"):
        """
        Initialize the ratio table.

        Args:
            gear_ratios: Gearbox ratios ordered from first to last gear
            differential_ratio: Differential (axle) ratio
            final_drive_ratio: Wheel RPM per unit of road speed
            name: Profile name
        """
        if not gear_ratios:
            raise ValueError("At least one gear ratio is required")
        if any(r <= 0 for r in gear_ratios):
            raise ValueError(f"Gear ratios must be positive: {gear_ratios}")
        if differential_ratio <= 0 or final_drive_ratio <= 0:
            raise ValueError("Differential and final drive ratios must be positive")

        self.name = name
        self.gearbox_ratios = tuple(float(r) for r in gear_ratios)
        self.differential_ratio = float(differential_ratio)
        self.final_drive_ratio = float(final_drive_ratio)
        self.num_gears = len(self.gearbox_ratios)

        self.overall_ratios = self._calculate_overall_ratios()

        logger.info(f"Gear ratio table '{name}' initialized with {self.num_gears} gears")
        logger.debug(f"Overall ratios: {[f'{ratio:.2f}' for ratio in self.overall_ratios]}")

    def _calculate_overall_ratios(self) -> np.ndarray:
        """
        Calculate the overall drive ratios for each gear.

        Returns:
            Read-only array of overall ratios, index 0 = first gear
        """
        overall = np.array(self.gearbox_ratios) * self.differential_ratio * self.final_drive_ratio
        overall.setflags(write=False)
        return overall

    @classmethod
    def from_profile(cls, profile: Dict, name: str = "custom") -> 'GearRatioTable':
        """
        Create a ratio table from a profile dictionary.

        Args:
            profile: Dictionary with 'gear_ratios' and optional 'differential_ratio',
                'final_drive_ratio'
            name: Profile name

        Returns:
            GearRatioTable instance
        """
        if 'gear_ratios' not in profile:
            raise ValueError(f"Drivetrain profile '{name}' has no gear_ratios")

        final_drive = profile.get('final_drive_ratio', DEFAULT_FINAL_DRIVE_RATIO)
        # Allow "18.3/3.6" style ratios in YAML
        if isinstance(final_drive, str):
            numerator, _, denominator = final_drive.partition('/')
            final_drive = float(numerator) / float(denominator or 1.0)

        return cls(
            profile['gear_ratios'],
            differential_ratio=profile.get('differential_ratio', DEFAULT_DIFFERENTIAL_RATIO),
            final_drive_ratio=final_drive,
            name=name,
        )

    @classmethod
    def default(cls) -> 'GearRatioTable':
        """Standard 12-speed profile."""
        return cls(DEFAULT_GEAR_RATIOS, name="standard")

    def get_ratio(self, gear: int) -> float:
        """
        Get the overall ratio for the specified gear.

        Args:
            gear: Gear number (1-N)

        Returns:
            Overall ratio, or 0.0 for an invalid gear
        """
        if 1 <= gear <= self.num_gears:
            return float(self.overall_ratios[gear - 1])

        logger.warning(f"Invalid gear requested: {gear}")
        return 0.0

    def calculate_engine_speed(self, vehicle_speed: float, gear: int) -> float:
        """
        Calculate engine RPM for a road speed in the given gear.

        Args:
            vehicle_speed: Road speed (speed bin units)
            gear: Gear number (1-N)

        Returns:
            Engine speed in RPM
        """
        return self.get_ratio(gear) * vehicle_speed

    def calculate_vehicle_speed(self, engine_rpm: float, gear: int) -> float:
        """
        Calculate road speed for an engine RPM in the given gear.

        Args:
            engine_rpm: Engine speed in RPM
            gear: Gear number (1-N)

        Returns:
            Road speed, or 0.0 for an invalid gear
        """
        ratio = self.get_ratio(gear)
        if ratio == 0.0:
            return 0.0
        return engine_rpm / ratio

    def engine_speeds(self, vehicle_speed: float) -> np.ndarray:
        """Engine RPM in every gear at one road speed, index 0 = first gear."""
        return self.overall_ratios * vehicle_speed

    def get_specs(self) -> Dict:
        return {
            'name': self.name,
            'gearbox_ratios': list(self.gearbox_ratios),
            'differential_ratio': self.differential_ratio,
            'final_drive_ratio': self.final_drive_ratio,
            'overall_ratios': self.overall_ratios.tolist(),
        }


def load_drivetrain_config(config_path: str) -> Dict:
    """
    Load the drivetrain configuration file.

    Args:
        config_path: Path to the drivetrain configuration file

    Returns:
        Dictionary with 'profiles' and optional 'default_profile'
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Drivetrain configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f) or {}

    if not config.get('profiles'):
        raise ValueError(f"No drivetrain profiles defined in {config_path}")

    return config


def load_gear_ratio_table(config_path: str, profile_name: Optional[str] = None) -> GearRatioTable:
    """
    Load a named drivetrain profile as a GearRatioTable.

    Args:
        config_path: Path to the drivetrain configuration file
        profile_name: Profile to load; the file's 'default_profile' if None

    Returns:
        GearRatioTable for the profile
    """
    config = load_drivetrain_config(config_path)
    profiles = config['profiles']
    name = profile_name or config.get('default_profile')

    if name not in profiles:
        raise ValueError(f"Unknown drivetrain profile: {name}. Available: {sorted(profiles)}")

    return GearRatioTable.from_profile(profiles[name], name=name)
