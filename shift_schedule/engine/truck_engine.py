"""
Truck engine module for shift schedule construction.

This module models the steady-state behaviour of a heavy truck diesel engine:
full-load torque curve, power output at part throttle, fuel consumption and the
throttle required to deliver a target power. It is the performance model the
schedule builder consults when evaluating candidate gears.
"""

import os
import numpy as np
import yaml
from typing import Dict, Optional
from scipy.interpolate import interp1d

from ..utils.constants import (
    KW_TO_HP, SECONDS_PER_HOUR, STALL_RPM_FRACTION,
    DEFAULT_IDLE_RPM, DEFAULT_PEAK_RPM, DEFAULT_MAXIMUM_RPM, DEFAULT_MAX_TORQUE_NM
)


# Configuration keys mapped to engine attributes
_PARAMETER_MAP = {
    'make': 'make',
    'model': 'model',
    'max_torque_nm': 'max_torque',
    'max_power_rpm': 'max_power_rpm',
    'redline_rpm': 'redline',
    'idle_rpm': 'idle_rpm',
    'stall_rpm': 'configured_stall_rpm',
    'bsfc_g_kwh': 'base_bsfc',
    'idle_fuel_rate_g_s': 'idle_fuel_rate',
    'throttle_exponent': 'throttle_exponent',
}


class TruckEngine:
    """
    Models a heavy truck diesel engine.

    Power is reported in hp, fuel consumption in g/s. Torque is cut above the
    redline, so operating points past it produce no power. The engine can be
    parameterized from a YAML configuration file or a parameter dictionary.
    """

    def __init__(self, config_path: Optional[str] = None, engine_params: Optional[Dict] = None):
        """
        Initialize the TruckEngine with either a config file path or direct parameters.

        Args:
            config_path: Path to YAML configuration file
            engine_params: Dictionary of engine parameters (used if config_path is None)
        """
        self.make = "Generic"
        self.model = "Truck 3550"
        self.max_torque = DEFAULT_MAX_TORQUE_NM  # Nm
        self.max_power_rpm = DEFAULT_PEAK_RPM
        self.redline = DEFAULT_MAXIMUM_RPM
        self.idle_rpm = DEFAULT_IDLE_RPM
        self.configured_stall_rpm = None
        self.base_bsfc = 195.0  # g/kWh, well-tuned heavy diesel
        self.idle_fuel_rate = 0.6  # g/s at idle with no load
        self.throttle_exponent = 0.8

        # Normalized full-load torque curve (fraction of max torque)
        self.curve_rpm = np.array([400, 600, 800, 1000, 1400, 1600, 1750, 1900, 2100], dtype=float)
        self.curve_torque_fraction = np.array([0.45, 0.62, 0.82, 1.0, 1.0, 0.93, 0.86, 0.78, 0.66])

        self.torque_function = None

        if config_path:
            self.load_config(config_path)
        elif engine_params:
            self.set_parameters(engine_params)
        else:
            self.generate_performance_curves()

    def load_config(self, config_path: str):
        """
        Load engine configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Engine configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)

        self.set_parameters(config or {})

    def set_parameters(self, params: Dict):
        """
        Set engine parameters from dictionary.

        Args:
            params: Dictionary of engine parameters
        """
        for key, value in params.items():
            if key in _PARAMETER_MAP:
                setattr(self, _PARAMETER_MAP[key], value)
            elif key == 'torque_curve' and isinstance(value, dict):
                self.curve_rpm = np.asarray(value['rpm'], dtype=float)
                self.curve_torque_fraction = np.asarray(value['torque_fraction'], dtype=float)

        if self.idle_rpm <= 0 or self.redline <= self.idle_rpm:
            raise ValueError(f"Invalid RPM range: idle {self.idle_rpm}, redline {self.redline}")
        if len(self.curve_rpm) != len(self.curve_torque_fraction) or len(self.curve_rpm) < 2:
            raise ValueError("Torque curve needs matching rpm and torque_fraction lists of at least two points")

        self.generate_performance_curves()

    def generate_performance_curves(self):
        """Build the full-load torque interpolation from the normalized curve points."""
        idx = np.argsort(self.curve_rpm)
        rpm_points = self.curve_rpm[idx]
        torque_points = self.curve_torque_fraction[idx] * self.max_torque

        # Below the first point hold the first value, above the redline cut fuel
        self.torque_function = interp1d(
            rpm_points, torque_points,
            kind='linear',
            bounds_error=False,
            fill_value=(torque_points[0], 0.0)
        )
        self.rpm_range = np.arange(0, self.redline + 1, 25)
        self.torque_curve = self.torque_function(self.rpm_range)
        self.power_curve = self.torque_curve * self.rpm_range * 2 * np.pi / 60 / 1000 * KW_TO_HP

    @property
    def stall_rpm(self) -> float:
        """RPM below which the engine cannot sustain a gear."""
        if self.configured_stall_rpm is not None:
            return float(self.configured_stall_rpm)
        return self.idle_rpm * STALL_RPM_FRACTION

    @property
    def maximum_rpm(self) -> float:
        """Redline RPM, the upper limit of the operating range."""
        return float(self.redline)

    def get_torque(self, rpm: float, throttle: float = 1.0) -> float:
        """
        Calculate engine torque at specified RPM and throttle position.

        Args:
            rpm: Engine speed in RPM
            throttle: Throttle position (0.0 to 1.0)

        Returns:
            Torque in Nm
        """
        if rpm > self.redline:
            return 0.0

        throttle = min(max(throttle, 0.0), 1.0)
        base_torque = float(self.torque_function(max(rpm, 0.0)))

        return base_torque * throttle ** self.throttle_exponent

    def get_power(self, rpm: float, throttle: float = 1.0) -> float:
        """
        Calculate engine power at specified RPM and throttle position.

        Args:
            rpm: Engine speed in RPM
            throttle: Throttle position (0.0 to 1.0)

        Returns:
            Power in hp
        """
        torque = self.get_torque(rpm, throttle)

        # Power (kW) = Torque (Nm) * Angular velocity (rad/s) / 1000
        power_kw = torque * rpm * 2 * np.pi / 60 / 1000

        return power_kw * KW_TO_HP

    def get_fuel_consumption(self, rpm: float, throttle: float = 1.0) -> float:
        """
        Calculate fuel consumption rate at the given operating point.

        The rate is the sum of a load term (BSFC times brake power) and a
        friction term that grows with RPM, so a turning engine always burns fuel.

        Args:
            rpm: Engine speed in RPM
            throttle: Throttle position (0.0 to 1.0)

        Returns:
            Fuel consumption in g/s
        """
        throttle = min(max(throttle, 0.0), 1.0)
        power_kw = self.get_power(rpm, throttle) / KW_TO_HP

        # BSFC is best slightly below the middle of the operating range
        normalized_rpm = (rpm - self.idle_rpm) / (self.redline - self.idle_rpm)
        rpm_factor = 1.0 + 0.25 * abs(normalized_rpm - 0.45)

        # Part throttle raises BSFC
        load_factor = 1.0 + 0.3 * (1.0 - throttle) ** 0.5

        actual_bsfc = self.base_bsfc * rpm_factor * load_factor
        load_fuel = actual_bsfc * power_kw / SECONDS_PER_HOUR
        friction_fuel = self.idle_fuel_rate * max(rpm, 0.0) / self.idle_rpm

        return load_fuel + friction_fuel

    def get_throttle_for_power(self, rpm: float, target_power: float) -> float:
        """
        Calculate the throttle position needed to deliver a target power.

        Args:
            rpm: Engine speed in RPM
            target_power: Requested power in hp

        Returns:
            Throttle fraction. Values above 1.0 mean the target is out of reach;
            nan or inf are returned when the engine makes no power at this RPM.
        """
        full_power = np.float64(self.get_power(rpm, 1.0))

        with np.errstate(divide='ignore', invalid='ignore'):
            ratio = np.float64(target_power) / full_power
            throttle = ratio ** (1.0 / self.throttle_exponent)

        return float(throttle)

    def get_engine_specs(self) -> Dict:
        """
        Get a dictionary of engine specifications.

        Returns:
            Dictionary with engine specifications
        """
        return {
            'make': self.make,
            'model': self.model,
            'max_torque_nm': self.max_torque,
            'max_power_hp': float(np.max(self.power_curve)),
            'max_power_rpm': self.max_power_rpm,
            'redline_rpm': self.redline,
            'idle_rpm': self.idle_rpm,
            'stall_rpm': self.stall_rpm,
        }
