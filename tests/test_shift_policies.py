import numpy as np
import pytest

from shift_schedule.transmission import (
    GearRatioTable, PeakRpmPolicy, PerformancePolicy, EfficiencyPolicy, EconomyPolicy,
    create_policy, parse_policy_type, describe_policies
)
from shift_schedule.engine import EngineCharacteristics
from shift_schedule.utils.constants import PolicyType


def test_parse_policy_type():
    assert parse_policy_type(PolicyType.ECONOMY) is PolicyType.ECONOMY
    assert parse_policy_type('peak_rpm') is PolicyType.PEAK_RPM
    assert parse_policy_type('Peak-RPM') is PolicyType.PEAK_RPM
    assert parse_policy_type(' efficiency ') is PolicyType.EFFICIENCY

    with pytest.raises(ValueError):
        parse_policy_type('sport')


def test_create_policy(gear_ratios, characteristics, engine):
    assert isinstance(create_policy('peak_rpm', gear_ratios, characteristics), PeakRpmPolicy)
    assert isinstance(create_policy('performance', gear_ratios, characteristics, engine), PerformancePolicy)
    assert isinstance(create_policy('efficiency', gear_ratios, characteristics, engine), EfficiencyPolicy)
    assert isinstance(create_policy('economy', gear_ratios, characteristics, engine), EconomyPolicy)


def test_model_policy_requires_engine(gear_ratios, characteristics):
    with pytest.raises(ValueError):
        create_policy('economy', gear_ratios, characteristics)


def test_describe_policies():
    descriptions = describe_policies()
    assert set(descriptions) == {'peak_rpm', 'performance', 'efficiency', 'economy'}
    assert all(descriptions.values())


def test_peak_rpm_standstill_uses_first_gear(gear_ratios, characteristics):
    policy = PeakRpmPolicy(gear_ratios, characteristics)
    assert policy.select_gear(0.0, 0.0) == 1
    assert policy.select_gear(0.0, 1.0) == 1


def test_peak_rpm_respects_load_scaled_ceiling(gear_ratios, characteristics):
    policy = PeakRpmPolicy(gear_ratios, characteristics)

    for speed in (5.0, 30.0, 60.0):
        for load in (0.3, 0.7, 1.0):
            gear = policy.select_gear(speed, load)
            rpm = gear_ratios.calculate_engine_speed(speed, gear)
            assert rpm <= characteristics.shift_rpm(load)
            if gear > 1:
                # The next lower gear would have exceeded the ceiling
                assert gear_ratios.calculate_engine_speed(speed, gear - 1) > characteristics.shift_rpm(load)


def test_peak_rpm_falls_back_to_top_gear(gear_ratios, characteristics):
    policy = PeakRpmPolicy(gear_ratios, characteristics)

    # Top gear turns well above idle at 150 km/h
    assert policy.select_gear(150.0, 0.0) == 12
    assert policy.fallback_count == 1


def test_peak_rpm_raw_table_is_monotonic(gear_ratios, characteristics):
    table = PeakRpmPolicy(gear_ratios, characteristics).build_table(150)

    assert table.is_complete()
    assert np.all(np.diff(table.gears, axis=0) >= 0)


def test_peak_rpm_single_gear():
    single = GearRatioTable([1.0], name="single")
    characteristics = EngineCharacteristics(120, 400, 1750, 2100)
    table = PeakRpmPolicy(single, characteristics).build_table(20)

    assert np.all(table.gears == 1)


def test_performance_never_uses_first_two_gears(gear_ratios, characteristics, engine):
    table = PerformancePolicy(gear_ratios, characteristics, engine).build_table(150)

    assert table.is_complete()
    assert table.gears.min() >= 3


def test_performance_standstill_ties_to_lowest_candidate(gear_ratios, characteristics, engine):
    policy = PerformancePolicy(gear_ratios, characteristics, engine)
    assert policy.select_gear(0.0, 1.0) == 3


def test_performance_prefers_high_power_gear(gear_ratios, characteristics, engine):
    policy = PerformancePolicy(gear_ratios, characteristics, engine)
    gear = policy.select_gear(60.0, 1.0)
    rpm = gear_ratios.calculate_engine_speed(60.0, gear)
    best = max(engine.get_power(max(gear_ratios.calculate_engine_speed(60.0, g), characteristics.stall_rpm), 1.0)
               for g in range(3, 13))

    assert engine.get_power(rpm, 1.0) == pytest.approx(best)


def test_efficiency_falls_back_at_standstill(gear_ratios, characteristics, engine):
    policy = EfficiencyPolicy(gear_ratios, characteristics, engine)
    assert policy.select_gear(0.0, 0.5) == 3
    assert policy.fallback_count == 1


def test_efficiency_gear_in_operating_range(gear_ratios, characteristics, engine):
    policy = EfficiencyPolicy(gear_ratios, characteristics, engine)
    for speed in (20.0, 50.0, 80.0, 120.0):
        gear = policy.select_gear(speed, 0.6)
        rpm = gear_ratios.calculate_engine_speed(speed, gear)
        assert characteristics.stall_rpm <= rpm <= characteristics.maximum_rpm


def test_economy_zero_load_picks_lowest_fuel_gear(gear_ratios, characteristics, engine):
    policy = EconomyPolicy(gear_ratios, characteristics, engine)

    # No power demanded: the lowest turning RPM burns the least fuel
    assert policy.select_gear(20.0, 0.0) == 12
    assert policy.fallback_count == 0


def test_economy_rejects_unreachable_power(gear_ratios, characteristics, engine):
    policy = EconomyPolicy(gear_ratios, characteristics, engine)

    # 600 hp cannot be delivered at 5 km/h in any candidate gear
    assert policy.find_gear(5.0, 1.0) is None
    assert policy.select_gear(5.0, 1.0) == 3


def test_economy_throttle_within_bounds(gear_ratios, characteristics, engine):
    policy = EconomyPolicy(gear_ratios, characteristics, engine)
    for speed in (40.0, 70.0, 100.0):
        gear = policy.find_gear(speed, 0.3)
        assert gear is not None
        rpm = gear_ratios.calculate_engine_speed(speed, gear)
        assert 0.0 <= engine.get_throttle_for_power(rpm, 0.3 * 600) <= 1.0


def test_fallback_gear_with_short_gearbox(engine):
    short = GearRatioTable([4.0, 2.0], name="two_speed")
    characteristics = EngineCharacteristics.from_engine(engine)
    policy = EconomyPolicy(short, characteristics, engine)

    assert policy.fallback_gear == 2
    assert policy.select_gear(50.0, 0.5) == 2
