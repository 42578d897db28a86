"""
Plotting utilities for shift schedules.

This module provides plots for inspecting a shift table and the drivetrain it
was built for.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import BoundaryNorm
from typing import Optional
import os
import logging

from ..transmission.gearing import GearRatioTable
from ..transmission.shift_table import ShiftTable

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger("Plotting")


# Default style settings for plots
DEFAULT_FIG_SIZE = (12, 8)
DEFAULT_DPI = 300
DEFAULT_GRID_ALPHA = 0.3
DEFAULT_SAVE_FORMAT = 'png'


def save_plot(fig: plt.Figure, filename: str, directory: Optional[str] = None,
             format: str = DEFAULT_SAVE_FORMAT, dpi: int = DEFAULT_DPI) -> str:
    """
    Save a plot to file with proper directory handling.

    Args:
        fig: Matplotlib figure to save
        filename: Base filename (without extension)
        directory: Directory to save in (created if doesn't exist)
        format: File format ('png', 'pdf', 'svg', etc.)
        dpi: Resolution for raster formats

    Returns:
        Full path to saved file
    """
    if '.' in filename:
        base, ext = os.path.splitext(filename)
        if ext[1:].lower() != format.lower():
            logger.warning(f"Filename extension ({ext}) doesn't match format ({format}). Using {format}.")
        filename = base

    if directory:
        os.makedirs(directory, exist_ok=True)
        filepath = os.path.join(directory, f"{filename}.{format}")
    else:
        filepath = f"{filename}.{format}"

    fig.savefig(filepath, format=format, dpi=dpi, bbox_inches='tight')
    logger.info(f"Plot saved to {filepath}")

    return filepath


def plot_shift_table(table: ShiftTable, title: str = "Shift Table",
                     save_path: Optional[str] = None) -> plt.Figure:
    """
    Plot a shift table as a speed x load gear map.

    Args:
        table: Shift table to plot
        title: Plot title
        save_path: Optional path to save the plot

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=DEFAULT_FIG_SIZE)

    # One colour band per gear
    bounds = np.arange(0.5, table.num_gears + 1.5)
    cmap = plt.colormaps['viridis'].resampled(table.num_gears)
    norm = BoundaryNorm(bounds, cmap.N)

    mesh = ax.pcolormesh(
        np.append(table.speeds, table.speeds[-1] + 1) - 0.5,
        np.append(table.loads, table.loads[-1] + 1.0 / table.load_bins) - 0.5 / table.load_bins,
        table.gears.T,
        cmap=cmap, norm=norm, shading='flat'
    )

    cbar = fig.colorbar(mesh, ax=ax, ticks=np.arange(1, table.num_gears + 1))
    cbar.set_label('Gear')

    ax.set_xlabel('Speed (km/h)')
    ax.set_ylabel('Load')
    ax.set_title(title)
    ax.grid(True, linestyle='--', alpha=DEFAULT_GRID_ALPHA)
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=DEFAULT_DPI, bbox_inches='tight')
        logger.info(f"Shift table plot saved to {save_path}")

    return fig


def plot_gear_rpm_profile(gear_ratios: GearRatioTable, max_speed: int,
                          maximum_rpm: Optional[float] = None,
                          save_path: Optional[str] = None) -> plt.Figure:
    """
    Plot engine RPM against road speed for every gear.

    Args:
        gear_ratios: Gear ratio table
        max_speed: Highest speed to plot
        maximum_rpm: Optional redline to draw and clip the y-axis at
        save_path: Optional path to save the plot

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 6))
    speeds = np.arange(0, max_speed + 1)

    for gear in range(1, gear_ratios.num_gears + 1):
        ax.plot(speeds, [gear_ratios.calculate_engine_speed(s, gear) for s in speeds], label=f"Gear {gear}")

    if maximum_rpm:
        ax.axhline(y=maximum_rpm, color='r', linestyle='--', alpha=0.7, label='Maximum RPM')
        ax.set_ylim(0, maximum_rpm * 1.1)

    ax.set_xlabel("Speed (km/h)")
    ax.set_ylabel("Engine Speed (RPM)")
    ax.set_title(f"Engine Speed by Gear ({gear_ratios.name})")
    ax.grid(True, linestyle='--', alpha=0.7)
    ax.legend(ncol=2)
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=DEFAULT_DPI, bbox_inches='tight')
        logger.info(f"RPM profile plot saved to {save_path}")

    return fig
