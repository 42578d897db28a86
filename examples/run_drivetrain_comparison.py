#!/usr/bin/env python3
"""
Drivetrain Comparison Demonstration Script

This script builds a Peak RPM shift schedule for every drivetrain profile in
the configuration and shows how the gearing changes the recommended gear for a
few typical operating points.
"""

import os
import sys
from pathlib import Path

import matplotlib.pyplot as plt

# Add the project root to the path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from shift_schedule.engine import TruckEngine, EngineCharacteristics
from shift_schedule.transmission import (
    load_drivetrain_config, load_gear_ratio_table, build_schedule, lookup
)
from shift_schedule.utils.plotting import plot_shift_table, plot_gear_rpm_profile

# (speed km/h, load) pairs to report
OPERATING_POINTS = [
    (0.0, 0.0),
    (15.0, 0.8),
    (40.0, 0.3),
    (60.0, 1.0),
    (85.0, 0.5),
    (110.0, 0.2),
]


def create_directories():
    """Create necessary directories for the demonstration."""
    directories = [
        "data/output/drivetrains"
    ]

    print("Creating directories...")
    for directory in directories:
        Path(directory).mkdir(parents=True, exist_ok=True)
        print(f"✓ {directory} directory is ready")


def run_drivetrain_comparison(drivetrain_config: str, output_dir: str):
    """
    Build and compare a schedule per drivetrain profile.

    Args:
        drivetrain_config: Path to the drivetrain configuration file
        output_dir: Directory to save plots
    """
    engine = TruckEngine()
    characteristics = EngineCharacteristics.from_engine(engine)
    profiles = load_drivetrain_config(drivetrain_config)['profiles']

    tables = {}
    for name in profiles:
        gear_ratios = load_gear_ratio_table(drivetrain_config, name)
        print(f"\nProfile '{name}': first gear {gear_ratios.get_ratio(1):.1f} RPM per km/h, "
              f"top gear {gear_ratios.get_ratio(gear_ratios.num_gears):.1f} RPM per km/h")

        table = build_schedule('peak_rpm', gear_ratios, engine, characteristics=characteristics)
        tables[name] = (gear_ratios, table)

        fig = plot_shift_table(table, title=f"Peak RPM Shift Table ({name})",
                               save_path=os.path.join(output_dir, f"peak_rpm_{name}.png"))
        plt.close(fig)

        fig = plot_gear_rpm_profile(gear_ratios, table.max_speed, maximum_rpm=characteristics.maximum_rpm,
                                    save_path=os.path.join(output_dir, f"rpm_profile_{name}.png"))
        plt.close(fig)

    print("\nRecommended gears:")
    header = "  speed   load  " + "  ".join(f"{name:>12}" for name in tables)
    print(header)
    for speed, load in OPERATING_POINTS:
        cells = []
        for name, (gear_ratios, table) in tables.items():
            gear = lookup(table, speed, load).gear
            rpm = gear_ratios.calculate_engine_speed(speed, gear)
            cells.append(f"{gear:>3} @ {rpm:>4.0f}rpm")
        print(f"  {speed:5.0f}  {load:5.1f}  " + "  ".join(f"{cell:>12}" for cell in cells))


def main():
    """Main function to run the demonstration."""
    print("Drivetrain Comparison Demonstration")
    print("===================================\n")

    create_directories()

    drivetrain_config = os.path.join("configs", "transmission", "drivetrain.yaml")
    output_dir = os.path.join("data", "output", "drivetrains")
    run_drivetrain_comparison(drivetrain_config, output_dir)

    print(f"\n✓ Demonstration completed. Plots saved to {output_dir}")


if __name__ == "__main__":
    main()
