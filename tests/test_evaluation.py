"""Tests for energy evaluation metrics."""

from __future__ import annotations

import numpy as np
import pytest

from rupower.evaluation import compute_energy_metrics, interval_weights
from rupower.simulation import SimulationResult


def make_result(times, powers, states, total_energy_j, initial_energy_j=1e6):
    times = np.asarray(times, dtype=np.float64)
    powers = np.asarray(powers, dtype=np.float64)
    return SimulationResult(
        name="test",
        times_s=times,
        power_w=powers,
        current_a=powers / 48.0,
        tx_power_dbm=np.full(len(times), 30.0),
        states=list(states),
        total_energy_j=total_energy_j,
        remaining_energy_j=initial_energy_j - total_energy_j,
        initial_energy_j=initial_energy_j,
        duration_s=float(times[-1]) if len(times) else 0.0,
    )


class TestIntervalWeights:
    """Tests for interval_weights."""

    def test_weights(self):
        """Test interval weights between sample times."""
        np.testing.assert_allclose(interval_weights(np.array([0.0, 1.0, 4.0])), [0.0, 1.0, 3.0])

    def test_empty(self):
        """Test interval weights for no samples."""
        assert len(interval_weights(np.array([]))) == 0


class TestComputeEnergyMetrics:
    """Tests for compute_energy_metrics."""

    def test_piecewise_run(self):
        """Test metrics for a run with piecewise constant power."""
        result = make_result(
            times=[0.0, 10.0, 20.0],
            powers=[100.0, 100.0, 50.0],
            states=["active", "active", "sleep"],
            total_energy_j=1500.0,
        )

        metrics = compute_energy_metrics(result)

        assert metrics.duration_s == 20.0
        assert metrics.avg_power_w == pytest.approx(75.0)
        assert metrics.peak_power_w == 100.0
        assert metrics.avg_current_a == pytest.approx(75.0 / 48.0)
        assert metrics.sleep_fraction == pytest.approx(0.5)
        assert metrics.estimated_autonomy_hours == pytest.approx(1e6 / 75.0 / 3600.0)
        assert metrics.remaining_energy_fraction == pytest.approx(1 - 1500.0 / 1e6)
        assert metrics.total_energy_kwh == pytest.approx(1500.0 / 3.6e6)

    def test_single_instant(self):
        """Test metrics for a single sample."""
        result = make_result([0.0], [320.0], ["sleep"], 0.0)

        metrics = compute_energy_metrics(result)

        assert metrics.duration_s == 0.0
        assert metrics.avg_power_w == 320.0
        assert metrics.sleep_fraction == 1.0

    def test_empty_run(self):
        """Test metrics for a run without samples."""
        result = make_result([], [], [], 0.0)

        metrics = compute_energy_metrics(result)

        assert metrics.total_energy_j == 0.0
        assert metrics.estimated_autonomy_hours == float("inf")

    def test_zero_power_autonomy(self):
        """Test autonomy when no power is drawn."""
        result = make_result([0.0, 10.0], [0.0, 0.0], ["active", "active"], 0.0)

        assert compute_energy_metrics(result).estimated_autonomy_hours == float("inf")

    def test_to_dict_and_summary(self):
        """Test metric serialization and summary."""
        result = make_result([0.0, 10.0], [100.0, 100.0], ["active", "active"], 1000.0)
        metrics = compute_energy_metrics(result)

        data = metrics.to_dict()
        assert data["avg_power_w"] == pytest.approx(100.0)
        assert "Avg Power: 100.0 W" in metrics.summary()
