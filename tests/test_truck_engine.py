import math
import os

import numpy as np
import pytest

from shift_schedule.engine import TruckEngine, EngineCharacteristics


def test_default_engine_limits(engine):
    assert engine.idle_rpm == 400
    assert engine.redline == 2100
    assert engine.stall_rpm == pytest.approx(120.0)
    assert engine.maximum_rpm == 2100.0


def test_configured_stall_rpm_overrides_fraction():
    engine = TruckEngine(engine_params={'stall_rpm': 250})
    assert engine.stall_rpm == 250.0


def test_power_at_full_torque(engine):
    expected_kw = 3550 * 1000 * 2 * math.pi / 60 / 1000
    assert engine.get_power(1000, 1.0) == pytest.approx(expected_kw * 1.34102)


def test_no_torque_above_redline(engine):
    assert engine.get_torque(2200, 1.0) == 0.0
    assert engine.get_power(2200, 1.0) == 0.0


def test_throttle_is_clipped(engine):
    assert engine.get_torque(1200, 1.5) == engine.get_torque(1200, 1.0)
    assert engine.get_torque(1200, -0.5) == 0.0


def test_throttle_for_power_inverts_get_power(engine):
    target = engine.get_power(1200, 0.5)
    assert engine.get_throttle_for_power(1200, target) == pytest.approx(0.5)


def test_throttle_for_power_beyond_full_power(engine):
    target = engine.get_power(1200, 1.0) * 1.5
    assert engine.get_throttle_for_power(1200, target) > 1.0


def test_throttle_for_power_without_power_is_not_finite(engine):
    assert not np.isfinite(engine.get_throttle_for_power(2500, 100.0))


def test_fuel_at_idle_is_friction_only(engine):
    assert engine.get_fuel_consumption(400, 0.0) == pytest.approx(0.6)


def test_fuel_grows_with_throttle(engine):
    assert engine.get_fuel_consumption(1400, 1.0) > engine.get_fuel_consumption(1400, 0.3)


def test_invalid_rpm_range_rejected():
    with pytest.raises(ValueError):
        TruckEngine(engine_params={'idle_rpm': 2500})


def test_mismatched_torque_curve_rejected():
    with pytest.raises(ValueError):
        TruckEngine(engine_params={'torque_curve': {'rpm': [400, 1000], 'torque_fraction': [0.5]}})


def test_missing_config_file():
    with pytest.raises(FileNotFoundError):
        TruckEngine(config_path='does/not/exist.yaml')


def test_load_engine_config(config_dir):
    engine = TruckEngine(config_path=os.path.join(config_dir, 'engine', 'truck_3550.yaml'))
    specs = engine.get_engine_specs()

    assert specs['max_torque_nm'] == 3550
    assert specs['redline_rpm'] == 2100
    assert specs['max_power_hp'] > 0


def test_characteristics_from_engine(engine):
    characteristics = EngineCharacteristics.from_engine(engine)

    assert characteristics.stall_rpm == pytest.approx(120.0)
    assert characteristics.idle_rpm == 400
    assert characteristics.peak_rpm == 1750
    assert characteristics.maximum_rpm == 2100
    assert characteristics.shift_rpm(0.0) == 400
    assert characteristics.shift_rpm(0.5) == pytest.approx(1250)
    assert characteristics.shift_rpm(1.0) == 2100


def test_characteristics_overrides(engine):
    characteristics = EngineCharacteristics.from_engine(engine, maximum_rpm=1900)
    assert characteristics.maximum_rpm == 1900
    assert characteristics.idle_rpm == 400


def test_characteristics_validation():
    with pytest.raises(ValueError):
        EngineCharacteristics(stall_rpm=500, idle_rpm=400, peak_rpm=1750, maximum_rpm=2100)
    with pytest.raises(ValueError):
        EngineCharacteristics(stall_rpm=120, idle_rpm=400, peak_rpm=1750, maximum_rpm=300)
