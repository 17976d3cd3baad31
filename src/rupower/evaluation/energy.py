"""Energy evaluation metrics.

This module summarizes a recorded simulation run. Each sample's power is
taken to hold over the interval since the previous sample, matching how the
device model accumulates energy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from rupower.simulation.environment import SimulationResult

J_PER_KWH = 3.6e6


@dataclass
class EnergyMetrics:
    """Energy metrics of one simulation run.

    Attributes:
        total_energy_j: Energy consumed by the radio unit (J).
        duration_s: Simulated duration covered by the samples (s).
        avg_power_w: Time-averaged power (W).
        peak_power_w: Highest sampled power (W).
        avg_current_a: Time-averaged current (A).
        sleep_fraction: Fraction of time spent in sleep state.
        estimated_autonomy_hours: Time the initial budget lasts at the average power.
        remaining_energy_fraction: Remaining budget at the end of the run.
    """

    total_energy_j: float
    duration_s: float
    avg_power_w: float
    peak_power_w: float
    avg_current_a: float
    sleep_fraction: float
    estimated_autonomy_hours: float
    remaining_energy_fraction: float

    @property
    def total_energy_kwh(self) -> float:
        """Total energy in kilowatt-hours."""
        return self.total_energy_j / J_PER_KWH

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_energy_j": self.total_energy_j,
            "total_energy_kwh": self.total_energy_kwh,
            "duration_s": self.duration_s,
            "avg_power_w": self.avg_power_w,
            "peak_power_w": self.peak_power_w,
            "avg_current_a": self.avg_current_a,
            "sleep_fraction": self.sleep_fraction,
            "estimated_autonomy_hours": self.estimated_autonomy_hours,
            "remaining_energy_fraction": self.remaining_energy_fraction,
        }

    def summary(self) -> str:
        """Get summary string."""
        return (
            f"Energy: {self.total_energy_kwh:.3f} kWh over {self.duration_s:.1f} s\n"
            f"Avg Power: {self.avg_power_w:.1f} W (peak {self.peak_power_w:.1f} W)\n"
            f"Avg Current: {self.avg_current_a:.2f} A\n"
            f"Sleep: {self.sleep_fraction * 100:.1f}%\n"
            f"Autonomy: {self.estimated_autonomy_hours:.1f} hours"
        )


def interval_weights(times_s: NDArray[np.float64]) -> NDArray[np.float64]:
    """Length of the interval each sample closes (0 for the first sample)."""
    if len(times_s) == 0:
        return np.zeros(0, dtype=np.float64)
    return np.diff(times_s, prepend=times_s[0])


def compute_energy_metrics(result: SimulationResult) -> EnergyMetrics:
    """Compute energy metrics for a simulation run.

    Args:
        result: Recorded simulation run.

    Returns:
        EnergyMetrics with computed values.
    """
    remaining_fraction = (
        result.remaining_energy_j / result.initial_energy_j
        if result.initial_energy_j > 0
        else 0.0
    )

    if result.n_samples == 0:
        return EnergyMetrics(
            total_energy_j=0.0,
            duration_s=0.0,
            avg_power_w=0.0,
            peak_power_w=0.0,
            avg_current_a=0.0,
            sleep_fraction=0.0,
            estimated_autonomy_hours=float("inf"),
            remaining_energy_fraction=remaining_fraction,
        )

    weights = interval_weights(result.times_s)
    covered = float(weights.sum())
    peak_power = float(np.max(result.power_w))

    if covered > 0:
        avg_power = result.total_energy_j / covered
        avg_current = float(np.dot(result.current_a, weights)) / covered
        sleeping = np.array([s == "sleep" for s in result.states])
        sleep_fraction = float(weights[sleeping].sum()) / covered
    else:
        # A single instant: report the instantaneous values
        avg_power = float(result.power_w[-1])
        avg_current = float(result.current_a[-1])
        sleep_fraction = 1.0 if result.states[-1] == "sleep" else 0.0

    if avg_power > 0:
        autonomy_hours = result.initial_energy_j / avg_power / 3600.0
    else:
        autonomy_hours = float("inf")

    return EnergyMetrics(
        total_energy_j=result.total_energy_j,
        duration_s=covered,
        avg_power_w=avg_power,
        peak_power_w=peak_power,
        avg_current_a=avg_current,
        sleep_fraction=sleep_fraction,
        estimated_autonomy_hours=autonomy_hours,
        remaining_energy_fraction=remaining_fraction,
    )
