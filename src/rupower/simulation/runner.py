"""Experiment runner for radio-unit energy simulations.

This module provides utilities for running and comparing simulation
experiments, optionally from YAML configuration files.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rupower.evaluation import EnergyMetrics, compute_energy_metrics
from rupower.simulation.environment import (
    RadioUnitSimulator,
    SimulationConfig,
    SimulationResult,
)
from rupower.utils.config import load_config, to_dict
from rupower.utils.logging import get_logger, log_metrics

logger = get_logger("simulation.runner")


@dataclass
class ExperimentResult:
    """Results from a complete experiment.

    Attributes:
        name: Experiment name.
        simulation_result: Raw simulation results.
        energy_metrics: Energy metrics derived from the samples.
    """

    name: str
    simulation_result: SimulationResult
    energy_metrics: EnergyMetrics

    def summary(self) -> str:
        """Get experiment summary."""
        return f"=== {self.name} ===\n\n{self.energy_metrics.summary()}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "energy": self.energy_metrics.to_dict(),
            "depleted_at_s": self.simulation_result.depleted_at_s,
        }


class ExperimentRunner:
    """Run and manage simulation experiments.

    Example:
        >>> runner = ExperimentRunner()
        >>> runner.run_experiment("macro", SimulationConfig(duration_s=600.0))
        >>> runner.run_experiment("macro_idle", SimulationConfig(duration_s=600.0, tx_power_dbm=-10.0))
        >>> print(runner.get_comparison_table())
    """

    def __init__(self, output_dir: str | Path | None = None):
        """Initialize the runner.

        Args:
            output_dir: Directory for saving results.
        """
        self.output_dir = Path(output_dir) if output_dir else None
        self.results: dict[str, ExperimentResult] = {}

    def run_experiment(self, name: str, config: SimulationConfig | None = None) -> ExperimentResult:
        """Run a single experiment.

        Args:
            name: Experiment name.
            config: Simulation configuration.

        Returns:
            ExperimentResult with metrics.
        """
        if config is None:
            config = SimulationConfig()

        sim_result = RadioUnitSimulator(config).run()
        energy_metrics = compute_energy_metrics(sim_result)
        log_metrics(logger, energy_metrics.to_dict(), prefix=name)

        result = ExperimentResult(
            name=name,
            simulation_result=sim_result,
            energy_metrics=energy_metrics,
        )
        self.results[name] = result

        if self.output_dir is not None:
            self._save_result(result)

        return result

    def run_from_config(self, config_path: str | Path, name: str | None = None) -> ExperimentResult:
        """Run an experiment described by a YAML configuration file.

        Args:
            config_path: Path to the configuration file.
            name: Experiment name (defaults to the file stem).

        Returns:
            ExperimentResult with metrics.
        """
        config_path = Path(config_path)
        config = SimulationConfig.from_dict(to_dict(load_config(config_path)))
        return self.run_experiment(name or config_path.stem, config)

    def run_comparison(self, configs: dict[str, SimulationConfig]) -> dict[str, ExperimentResult]:
        """Run multiple experiments for comparison.

        Args:
            configs: Dictionary of experiment name to config.

        Returns:
            Dictionary of experiment name to result.
        """
        return {name: self.run_experiment(name, config) for name, config in configs.items()}

    def _save_result(self, result: ExperimentResult) -> None:
        """Save experiment metrics and samples to files."""
        if self.output_dir is None:
            return

        self.output_dir.mkdir(parents=True, exist_ok=True)
        with open(self.output_dir / f"{result.name}_results.json", "w") as f:
            json.dump(result.to_dict(), f, indent=2)
        result.simulation_result.save(self.output_dir / f"{result.name}_samples.json")

    def get_comparison_table(self) -> str:
        """Get comparison table of all results.

        Returns:
            Formatted comparison table string.
        """
        if not self.results:
            return "No results available."

        lines = [
            "| Experiment | Energy (kWh) | Avg Power (W) | Peak Power (W) | Sleep % | Autonomy (h) |",
            "|------------|--------------|---------------|----------------|---------|--------------|",
        ]

        for name, result in self.results.items():
            m = result.energy_metrics
            lines.append(
                f"| {name:10} | "
                f"{m.total_energy_kwh:.3f} | "
                f"{m.avg_power_w:.1f} | "
                f"{m.peak_power_w:.1f} | "
                f"{m.sleep_fraction * 100:.1f} | "
                f"{m.estimated_autonomy_hours:.1f} |"
            )

        return "\n".join(lines)
