import os

import matplotlib.pyplot as plt

from shift_schedule.transmission import build_schedule
from shift_schedule.utils.plotting import plot_shift_table, plot_gear_rpm_profile, save_plot


def test_plot_shift_table(tmp_path, gear_ratios, engine):
    table = build_schedule('peak_rpm', gear_ratios, engine, max_speed=60)
    path = tmp_path / "table.png"

    fig = plot_shift_table(table, title="Peak RPM", save_path=str(path))

    assert fig.axes[0].get_title() == "Peak RPM"
    assert path.exists()
    plt.close(fig)


def test_plot_gear_rpm_profile(gear_ratios):
    fig = plot_gear_rpm_profile(gear_ratios, 100, maximum_rpm=2100)

    # One line per gear plus the redline
    assert len(fig.axes[0].get_lines()) == gear_ratios.num_gears + 1
    plt.close(fig)


def test_save_plot_creates_directory(tmp_path, gear_ratios):
    fig = plot_gear_rpm_profile(gear_ratios, 50)
    filepath = save_plot(fig, "profile.pdf", directory=str(tmp_path / "plots"), format='png', dpi=50)

    assert filepath.endswith("profile.png")
    assert os.path.exists(filepath)
    plt.close(fig)
