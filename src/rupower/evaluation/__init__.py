"""Evaluation metrics module for rupower."""

from rupower.evaluation.energy import (
    EnergyMetrics,
    compute_energy_metrics,
    interval_weights,
)

__all__ = [
    "EnergyMetrics",
    "compute_energy_metrics",
    "interval_weights",
]
