#!/usr/bin/env python3
"""
Shift Schedule Generation Example

This script builds shift schedules for a heavy truck under every shift policy,
validates them, compares the resulting gear maps and exports the tables and
plots for inspection. It finishes by exercising the schedule manager the way a
control loop would: a stream of gear lookups with a policy switch in between.
"""

import os
import sys
import time
import json
import numpy as np
import matplotlib.pyplot as plt
import pandas as pd
from datetime import datetime

# Add project root to Python path for imports
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from shift_schedule.engine import TruckEngine
from shift_schedule.transmission import (
    load_gear_ratio_table, build_schedule, describe_policies,
    ScheduleConfig, ShiftScheduleManager
)
from shift_schedule.utils.constants import PolicyType
from shift_schedule.utils.validation import validate_shift_table
from shift_schedule.utils.plotting import plot_shift_table, plot_gear_rpm_profile


def load_configurations():
    """
    Load engine, drivetrain and schedule configuration paths.

    Returns:
        dict: Dictionary containing configuration settings
    """
    config = {
        'engine_config': os.path.join('configs', 'engine', 'truck_3550.yaml'),
        'drivetrain_config': os.path.join('configs', 'transmission', 'drivetrain.yaml'),
        'schedule_config': os.path.join('configs', 'transmission', 'shift_schedule.yaml'),
        'output_dir': os.path.join('data', 'output', 'shift_schedules'),
        'lookup_settings': {
            'samples': 2000,
            'max_speed': 160.0,  # km/h, past the table edge on purpose
        }
    }

    # Create output directory if it doesn't exist
    os.makedirs(config['output_dir'], exist_ok=True)

    return config


def create_engine(config):
    """
    Create the truck engine model from its configuration file.

    Args:
        config: Configuration dictionary

    Returns:
        TruckEngine: Engine model
    """
    engine_config = config['engine_config']
    if os.path.exists(engine_config):
        engine = TruckEngine(config_path=engine_config)
    else:
        print(f"Engine configuration {engine_config} not found, using default engine")
        engine = TruckEngine()

    specs = engine.get_engine_specs()
    print(f"Engine: {specs['make']} {specs['model']}")
    print(f"  Max torque: {specs['max_torque_nm']:.0f} Nm")
    print(f"  Max power: {specs['max_power_hp']:.0f} hp")
    print(f"  Idle / stall / redline: {specs['idle_rpm']:.0f} / {specs['stall_rpm']:.0f} / "
          f"{specs['redline_rpm']:.0f} RPM")

    return engine


def build_all_schedules(engine, gear_ratios, schedule_config, output_dir):
    """
    Build, validate and plot a schedule for every policy.

    Args:
        engine: Engine model
        gear_ratios: Drivetrain gear ratio table
        schedule_config: ScheduleConfig with grid and dwell settings
        output_dir: Directory to save results

    Returns:
        dict: Policy name -> {'table', 'validation', 'build_time'}
    """
    print("\n--- Building Shift Schedules ---")

    characteristics = schedule_config.characteristics_for(engine)
    print(f"Characteristics: {characteristics}")

    descriptions = describe_policies()
    schedules = {}

    for policy in PolicyType:
        name = policy.name.lower()
        print(f"\n{name}: {descriptions[name]}")

        start_time = time.time()
        table = build_schedule(
            policy, gear_ratios, engine,
            minimum_dwell_bins=schedule_config.minimum_dwell_bins,
            max_speed=schedule_config.max_speed,
            characteristics=characteristics
        )
        build_time = time.time() - start_time

        validation = validate_shift_table(
            table, schedule_config.minimum_dwell_bins,
            check_monotonic=(policy == PolicyType.PEAK_RPM)
        )

        print(f"  Built in {build_time:.2f}s, validation: {validation['status']}")
        print(f"  Cells per gear: {table.gear_counts()}")

        fig = plot_shift_table(
            table,
            title=f"{name.replace('_', ' ').title()} Shift Table ({gear_ratios.name})",
            save_path=os.path.join(output_dir, f"shift_table_{name}.png")
        )
        plt.close(fig)

        table.to_dataframe().to_csv(os.path.join(output_dir, f"shift_table_{name}.csv"))

        schedules[name] = {
            'table': table,
            'validation': validation,
            'build_time': build_time
        }

    return schedules


def compare_schedules(schedules):
    """
    Compare policies by mean gear and agreement with the Peak RPM schedule.

    Args:
        schedules: Output of build_all_schedules

    Returns:
        pd.DataFrame: One row per policy
    """
    print("\n--- Comparing Policies ---")

    reference = schedules['peak_rpm']['table'].gears
    rows = []
    for name, entry in schedules.items():
        gears = entry['table'].gears
        rows.append({
            'policy': name,
            'mean_gear': float(np.mean(gears)),
            'mean_gear_full_load': float(np.mean(gears[:, -1])),
            'gears_used': int(np.count_nonzero(entry['table'].gear_counts())),
            'agreement_with_peak_rpm': float(np.mean(gears == reference)),
            'status': entry['validation']['status'],
            'build_time': entry['build_time']
        })

    df = pd.DataFrame(rows).set_index('policy')
    print(df.to_string(float_format=lambda v: f"{v:.2f}"))
    return df


def run_lookup_stream(engine, config):
    """
    Feed a stream of random operating points through the schedule manager.

    The policy is switched halfway through, as a driver would change mode.

    Args:
        engine: Engine model
        config: Configuration dictionary

    Returns:
        pd.DataFrame: One row per lookup
    """
    print("\n--- Running Lookup Stream ---")

    manager = ShiftScheduleManager.from_config(
        engine, config['schedule_config'], config['drivetrain_config']
    )
    settings = config['lookup_settings']
    rng = np.random.default_rng(0)

    records = []
    start_time = time.time()
    for i in range(settings['samples']):
        if i == settings['samples'] // 2:
            manager.set_active_policy(PolicyType.ECONOMY)

        speed = rng.uniform(0.0, settings['max_speed'])
        load = rng.uniform(0.0, 1.0)
        result = manager.lookup(speed, load)

        records.append({
            'policy': manager.active_policy.name.lower(),
            'speed': speed,
            'load': load,
            'gear': result.gear,
            'interpolated_gear': result.interpolated_gear,
            'rpm': manager.gear_ratios.calculate_engine_speed(speed, result.gear)
        })
    elapsed = time.time() - start_time

    df = pd.DataFrame(records)
    print(f"{settings['samples']} lookups in {elapsed * 1000:.1f} ms "
          f"({elapsed / settings['samples'] * 1e6:.1f} us per lookup)")
    print(df.groupby('policy')[['gear', 'rpm']].mean().to_string(float_format=lambda v: f"{v:.1f}"))
    return df


def export_results(schedules, comparison, lookups, schedule_config, output_dir):
    """
    Export the comparison and lookup results.

    Args:
        schedules: Output of build_all_schedules
        comparison: Output of compare_schedules
        lookups: Output of run_lookup_stream
        schedule_config: ScheduleConfig used for the build
        output_dir: Directory to save results

    Returns:
        bool: True if export was successful
    """
    print("\n--- Exporting Results ---")

    summary_json_path = os.path.join(output_dir, "summary.json")
    comparison_csv_path = os.path.join(output_dir, "policy_comparison.csv")
    lookups_csv_path = os.path.join(output_dir, "lookup_stream.csv")

    try:
        comparison.to_csv(comparison_csv_path)
        lookups.to_csv(lookups_csv_path, index=False)

        summary = {
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'schedule_config': schedule_config.to_dict(),
            'validation': {
                name: {check: result['status'] if isinstance(result, dict) else result
                       for check, result in entry['validation'].items()}
                for name, entry in schedules.items()
            }
        }
        with open(summary_json_path, 'w') as f:
            json.dump(summary, f, indent=4)

        print("Results exported to:")
        print(f"  JSON: {summary_json_path}")
        print(f"  CSV: {comparison_csv_path}")
        print(f"  CSV: {lookups_csv_path}")

        return True

    except OSError as e:
        print(f"Error exporting results: {str(e)}")
        return False


def main():
    """Main function to run the shift schedule example."""
    print("Truck Shift Schedule Generation")
    print("===============================")

    config = load_configurations()
    output_dir = config['output_dir']

    print("\n=== Loading Engine and Drivetrain ===")
    engine = create_engine(config)
    schedule_config = ScheduleConfig.from_config(config['schedule_config'])
    gear_ratios = load_gear_ratio_table(config['drivetrain_config'], schedule_config.drivetrain_profile)

    characteristics = schedule_config.characteristics_for(engine)
    fig = plot_gear_rpm_profile(
        gear_ratios, schedule_config.max_speed,
        maximum_rpm=characteristics.maximum_rpm,
        save_path=os.path.join(output_dir, "gear_rpm_profile.png")
    )
    plt.close(fig)

    print("\n=== Shift Schedules ===")
    schedules = build_all_schedules(engine, gear_ratios, schedule_config, output_dir)
    comparison = compare_schedules(schedules)

    print("\n=== Control Loop ===")
    lookups = run_lookup_stream(engine, config)

    export_results(schedules, comparison, lookups, schedule_config, output_dir)

    print("\n=== Overall Conclusion ===")
    failed = [name for name, entry in schedules.items() if entry['validation']['status'] == 'error']
    if failed:
        print(f"Schedules with errors: {', '.join(failed)}")
    else:
        print("All schedules complete and within gear range")

    print(f"\nResults saved to: {output_dir}")


if __name__ == "__main__":
    main()
