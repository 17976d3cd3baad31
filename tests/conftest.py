"""Pytest fixtures for rupower tests."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest

from rupower.energy import BasicEnergySource, DeviceEnergyModel, HardwareProfile, PowerModel


class RecordingTracker:
    """Tracker that only records the draw reports it receives."""

    def __init__(self):
        self.attached: list[tuple[str, float]] = []
        self.reports: list[tuple[str, float, float, float]] = []

    def attach(self, source_id, time_s):
        self.attached.append((source_id, time_s))

    def report_draw(self, source_id, current_a, power_w, time_s):
        self.reports.append((source_id, current_a, power_w, time_s))


class FixedPhy:
    """PHY stub reporting a settable transmit power."""

    def __init__(self, tx_power_dbm):
        self.tx_power_dbm = tx_power_dbm

    def get_current_transmit_power_dbm(self):
        return self.tx_power_dbm


@pytest.fixture
def scenario_profile():
    """64-TRX macro profile used in the reference scenarios."""
    return HardwareProfile(
        eta_pa=0.3,
        fixed_overhead_w=80.0,
        num_trx=64,
        delta_af=0.0,
        delta_dc=0.07,
        delta_ms=0.09,
        delta_cool=0.10,
        vdc=48.0,
        sleep_power_w=5.0,
        sleep_threshold_dbm=0.0,
        losses_in_sleep=False,
    )


@pytest.fixture
def power_model(scenario_profile):
    """Power model over the reference profile."""
    return PowerModel(scenario_profile)


@pytest.fixture
def tracker():
    """Tracker that records draw reports without a budget."""
    return RecordingTracker()


@pytest.fixture
def battery():
    """Energy source large enough never to deplete in tests."""
    return BasicEnergySource(initial_energy_j=1e9, supply_voltage_v=48.0)


@pytest.fixture
def device(scenario_profile, battery):
    """Device model in fallback mode attached to a large battery."""
    model = DeviceEnergyModel(profile=scenario_profile, name="ru-test")
    model.set_tracker(battery)
    return model


@pytest.fixture
def phy():
    """PHY stub starting at 30 dBm."""
    return FixedPhy(30.0)
