"""Visualization utilities for plotting simulation results.

This module provides functions for creating publication-quality figures.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

if TYPE_CHECKING:
    from rupower.energy.power_model import PowerBreakdown
    from rupower.simulation.environment import SimulationResult


def setup_plotting_style(style: str = "seaborn-v0_8-whitegrid") -> None:
    """Set up matplotlib style for publication-quality figures.

    Args:
        style: Matplotlib style to use.
    """
    if style in plt.style.available:
        plt.style.use(style)

    plt.rcParams.update(
        {
            "figure.figsize": (8, 6),
            "figure.dpi": 100,
            "savefig.dpi": 300,
            "font.size": 12,
            "axes.titlesize": 14,
            "axes.labelsize": 12,
            "xtick.labelsize": 10,
            "ytick.labelsize": 10,
            "legend.fontsize": 10,
            "figure.titlesize": 16,
            "axes.grid": True,
            "grid.alpha": 0.3,
        }
    )


def plot_power_timeline(
    result: SimulationResult,
    title: str = "Radio Unit Power Draw",
    figsize: tuple[float, float] = (12, 8),
) -> Figure:
    """Plot transmit power, power draw and current over time.

    Args:
        result: Recorded simulation run.
        title: Plot title.
        figsize: Figure size.

    Returns:
        Matplotlib figure.
    """
    fig, axes = plt.subplots(3, 1, figsize=figsize, sharex=True)

    axes[0].step(result.times_s, result.tx_power_dbm, where="pre", color="tab:purple")
    axes[0].set_ylabel("Tx Power (dBm)")

    axes[1].step(result.times_s, result.power_w, where="pre", color="tab:red")
    axes[1].set_ylabel("Power (W)")

    sleeping = np.array([s == "sleep" for s in result.states])
    if sleeping.any():
        axes[1].fill_between(
            result.times_s,
            0,
            result.power_w.max(),
            where=sleeping,
            step="pre",
            alpha=0.15,
            color="tab:blue",
            label="Sleep",
        )
        axes[1].legend(loc="upper right")

    axes[2].step(result.times_s, result.current_a, where="pre", color="tab:orange")
    axes[2].set_ylabel("Current (A)")
    axes[2].set_xlabel("Time (s)")

    axes[0].set_title(title)
    plt.tight_layout()
    return fig


def plot_power_breakdown(
    breakdown: PowerBreakdown,
    title: str = "Per-TRX Power Chain",
    figsize: tuple[float, float] = (8, 6),
) -> Figure:
    """Plot the per-TRX power after each stage of the power chain.

    Args:
        breakdown: Stage values from ``PowerModel.breakdown``.
        title: Plot title.
        figsize: Figure size.

    Returns:
        Matplotlib figure.
    """
    fig, ax = plt.subplots(figsize=figsize)

    labels = ["Tx", "PA", "RF", "DC-DC", "Mains", "Cooling"]
    values = [
        breakdown.tx_w,
        breakdown.pa_w,
        breakdown.rf_w,
        breakdown.dc_w,
        breakdown.mains_w,
        breakdown.cooling_w,
    ]
    colors = plt.cm.viridis(np.linspace(0.2, 0.9, len(labels)))

    bars = ax.bar(labels, values, color=colors)
    for bar, value in zip(bars, values):
        ax.text(
            bar.get_x() + bar.get_width() / 2,
            bar.get_height(),
            f"{value:.1f}",
            ha="center",
            va="bottom",
            fontsize=9,
        )

    ax.set_ylabel("Power per TRX (W)")
    ax.set_title(f"{title} ({breakdown.state.value})")
    plt.tight_layout()
    return fig


def save_figure(
    fig: Figure,
    path: str | Path,
    formats: list[str] | None = None,
    dpi: int = 300,
) -> None:
    """Save figure to file(s).

    Args:
        fig: Matplotlib figure.
        path: Output path (without extension).
        formats: List of formats to save (default: ["pdf", "png"]).
        dpi: Resolution for raster formats.
    """
    if formats is None:
        formats = ["pdf", "png"]

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    for fmt in formats:
        fig.savefig(path.with_suffix(f".{fmt}"), dpi=dpi, bbox_inches="tight")
