"""Simulation environment for radio-unit energy sampling.

This module wires a :class:`~rupower.energy.device.DeviceEnergyModel` to a
discrete-event scheduler, an optional simulated PHY and a finite energy
source, and records every sample.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import numpy as np
from numpy.typing import NDArray

from rupower.energy.device import DeviceEnergyModel
from rupower.energy.hardware import OPTION_NAMES, HardwareProfile, get_profile
from rupower.energy.power_model import SampleResult
from rupower.energy.providers import DEFAULT_TX_POWER_DBM
from rupower.energy.source import BasicEnergySource
from rupower.exceptions import ConfigurationError
from rupower.simulation.phy import SimulatedPhy
from rupower.simulation.scheduler import Event, EventScheduler
from rupower.utils.logging import get_logger

logger = get_logger("simulation.environment")


@dataclass
class SimulationConfig:
    """Configuration for a radio-unit energy simulation.

    Attributes:
        profile: Hardware profile of the radio unit.
        tx_power_dbm: Fallback transmit power (dBm), used when no PHY is bound.
        duration_s: Simulated duration (s).
        update_interval_s: Period of energy updates (s).
        initial_energy_j: Energy budget of the source (J).
        supply_voltage_v: Source voltage; defaults to the profile's Vdc.
        low_threshold: Depletion threshold as a fraction of the budget.
        high_threshold: Recharge threshold as a fraction of the budget.
        tx_power_schedule: Optional (time_s, dBm) changes applied to a live
            PHY. When given, the PHY starts at ``tx_power_dbm`` and is bound
            to the device.
        stop_on_depletion: End the run when the energy source is depleted.
        name: Radio-unit identifier.
    """

    profile: HardwareProfile = field(default_factory=HardwareProfile)
    tx_power_dbm: float = DEFAULT_TX_POWER_DBM
    duration_s: float = 3600.0
    update_interval_s: float = 1.0
    initial_energy_j: float = 1e9
    supply_voltage_v: float | None = None
    low_threshold: float = 0.10
    high_threshold: float = 0.15
    tx_power_schedule: list[tuple[float, float]] | None = None
    stop_on_depletion: bool = False
    name: str = "ru0"

    def __post_init__(self) -> None:
        if self.duration_s <= 0:
            raise ConfigurationError(f"duration_s must be > 0, got {self.duration_s}")
        if self.update_interval_s <= 0:
            raise ConfigurationError(
                f"update_interval_s must be > 0, got {self.update_interval_s}"
            )
        if self.tx_power_schedule is not None:
            self.tx_power_schedule = sorted(
                (float(t), float(p)) for t, p in self.tx_power_schedule
            )
            for t, _ in self.tx_power_schedule:
                if not 0.0 <= t <= self.duration_s:
                    raise ConfigurationError(
                        f"tx_power_schedule time {t} outside [0, {self.duration_s}]"
                    )

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "SimulationConfig":
        """Create a SimulationConfig from a nested configuration mapping.

        Recognized sections are ``hardware``, ``device``, ``energy_source``
        and ``simulation``.

        Args:
            config: Plain mapping (e.g. from ``to_dict(load_config(path))``).

        Returns:
            SimulationConfig instance.
        """
        hardware = config.get("hardware") or {}
        device = config.get("device") or {}
        source = config.get("energy_source") or {}
        sim = config.get("simulation") or {}

        # A named preset may be refined by explicit options
        hardware = dict(hardware)
        profile_name = hardware.pop("profile", None)
        if profile_name is not None:
            overrides = {OPTION_NAMES.get(k, k): v for k, v in hardware.items()}
            profile = get_profile(profile_name).with_changes(**overrides)
        else:
            profile = HardwareProfile.from_dict(hardware)

        schedule = sim.get("tx_power_schedule")
        if schedule is not None:
            schedule = [(entry[0], entry[1]) for entry in schedule]

        return cls(
            profile=profile,
            tx_power_dbm=device.get(
                "TxPowerDbm", device.get("tx_power_dbm", DEFAULT_TX_POWER_DBM)
            ),
            duration_s=sim.get("duration_s", 3600.0),
            update_interval_s=sim.get("update_interval_s", 1.0),
            initial_energy_j=source.get("initial_energy_j", 1e9),
            supply_voltage_v=source.get("supply_voltage_v"),
            low_threshold=source.get("low_threshold", 0.10),
            high_threshold=source.get("high_threshold", 0.15),
            tx_power_schedule=schedule,
            stop_on_depletion=sim.get("stop_on_depletion", False),
            name=device.get("name", "ru0"),
        )


@dataclass
class SimulationResult:
    """Recorded samples of one simulation run.

    Attributes:
        name: Radio-unit identifier.
        times_s: Sample times.
        power_w: Sampled power.
        current_a: Sampled current.
        tx_power_dbm: Transmit power used per sample.
        states: Operating state name per sample.
        total_energy_j: Energy accumulated by the device model.
        remaining_energy_j: Energy left in the source at the end of the run.
        initial_energy_j: Energy budget at the start of the run.
        duration_s: Simulated duration actually covered.
        depleted_at_s: Time the source was depleted, if it was.
    """

    name: str
    times_s: NDArray[np.float64]
    power_w: NDArray[np.float64]
    current_a: NDArray[np.float64]
    tx_power_dbm: NDArray[np.float64]
    states: list[str]
    total_energy_j: float
    remaining_energy_j: float
    initial_energy_j: float
    duration_s: float
    depleted_at_s: float | None = None

    @classmethod
    def from_samples(
        cls,
        name: str,
        samples: list[SampleResult],
        total_energy_j: float,
        remaining_energy_j: float,
        initial_energy_j: float,
        duration_s: float,
        depleted_at_s: float | None = None,
    ) -> "SimulationResult":
        return cls(
            name=name,
            times_s=np.array([s.time_s for s in samples], dtype=np.float64),
            power_w=np.array([s.power_w for s in samples], dtype=np.float64),
            current_a=np.array([s.current_a for s in samples], dtype=np.float64),
            tx_power_dbm=np.array([s.tx_power_dbm for s in samples], dtype=np.float64),
            states=[s.state.value for s in samples],
            total_energy_j=total_energy_j,
            remaining_energy_j=remaining_energy_j,
            initial_energy_j=initial_energy_j,
            duration_s=duration_s,
            depleted_at_s=depleted_at_s,
        )

    @property
    def n_samples(self) -> int:
        return len(self.times_s)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "times_s": self.times_s.tolist(),
            "power_w": self.power_w.tolist(),
            "current_a": self.current_a.tolist(),
            "tx_power_dbm": self.tx_power_dbm.tolist(),
            "states": list(self.states),
            "total_energy_j": self.total_energy_j,
            "remaining_energy_j": self.remaining_energy_j,
            "initial_energy_j": self.initial_energy_j,
            "duration_s": self.duration_s,
            "depleted_at_s": self.depleted_at_s,
        }

    def save(self, path: str | Path) -> None:
        """Save results to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


class PeriodicSampler:
    """Drive a device model from a scheduler.

    Samples at ``start, start + interval, ...`` up to ``end_s`` (with a final
    sample exactly at ``end_s``), and immediately whenever a bound PHY
    reports a transmit-power change.
    """

    def __init__(
        self,
        scheduler: EventScheduler,
        device: DeviceEnergyModel,
        interval_s: float,
        end_s: float,
    ):
        if interval_s <= 0:
            raise ValueError(f"interval_s must be > 0, got {interval_s}")
        self.scheduler = scheduler
        self.device = device
        self.interval_s = interval_s
        self.end_s = end_s
        self.history: list[SampleResult] = []
        self._start_s = scheduler.now
        self._tick = 0
        self._next: Event | None = None
        self._stopped = False

    def start(self) -> None:
        """Take an initial sample and schedule the periodic ones."""
        self.sample_now()
        self._schedule_next()

    def stop(self) -> None:
        """Cancel the pending periodic sample and schedule no more."""
        self._stopped = True
        if self._next is not None:
            self._next.cancel()
            self._next = None

    def sample_now(self) -> SampleResult:
        """Sample the device at the scheduler's current time."""
        result = self.device.sample(self.scheduler.now)
        self.history.append(result)
        return result

    def on_tx_power_change(self, old_dbm: float, new_dbm: float) -> None:
        """PHY listener raising an immediate energy update."""
        self.sample_now()

    def _schedule_next(self) -> None:
        if self._stopped:
            return
        self._tick += 1
        next_time = min(self._start_s + self._tick * self.interval_s, self.end_s)
        if next_time <= self.scheduler.now:
            self._next = None
            return
        self._next = self.scheduler.schedule_at(next_time, self._on_tick)

    def _on_tick(self) -> None:
        self.sample_now()
        self._schedule_next()


class RadioUnitSimulator:
    """Simulate the energy draw of one radio unit.

    Example:
        >>> config = SimulationConfig(duration_s=60.0, tx_power_schedule=[(30.0, -10.0)])
        >>> result = RadioUnitSimulator(config).run()
        >>> result.states[0], result.states[-1]
        ('active', 'sleep')
    """

    def __init__(self, config: SimulationConfig):
        """Initialize the simulator.

        Args:
            config: Simulation configuration.
        """
        self.config = config
        self.scheduler = EventScheduler()
        self.device = DeviceEnergyModel(
            profile=config.profile,
            tx_power_dbm=config.tx_power_dbm,
            name=config.name,
        )
        voltage = (
            config.supply_voltage_v
            if config.supply_voltage_v is not None
            else config.profile.vdc
        )
        self.energy_source = BasicEnergySource(
            initial_energy_j=config.initial_energy_j,
            supply_voltage_v=voltage,
            low_threshold=config.low_threshold,
            high_threshold=config.high_threshold,
        )
        self.device.set_tracker(self.energy_source)
        self.energy_source.add_depletion_listener(self._on_depletion)

        self.sampler = PeriodicSampler(
            self.scheduler, self.device, config.update_interval_s, config.duration_s
        )
        self.phy: SimulatedPhy | None = None
        if config.tx_power_schedule is not None:
            self.phy = SimulatedPhy(config.tx_power_dbm)
            self.device.bind_phy(self.phy)
            self.phy.add_tx_power_listener(self.sampler.on_tx_power_change)

        self.depleted_at_s: float | None = None

    def _on_depletion(self) -> None:
        if self.depleted_at_s is None:
            self.depleted_at_s = self.scheduler.now
        if self.config.stop_on_depletion:
            logger.info(f"Stopping simulation at t={self.scheduler.now:.3f}s on depletion")
            self.sampler.stop()
            self.scheduler.stop()

    def _apply_tx_power(self, tx_power_dbm: float) -> None:
        # Close the interval at the old power before the change takes effect
        self.sampler.sample_now()
        if self.phy is not None:
            self.phy.set_tx_power_dbm(tx_power_dbm)

    def run(self) -> SimulationResult:
        """Run the simulation for the configured duration.

        Returns:
            SimulationResult with every recorded sample.
        """
        logger.info(
            f"Simulating {self.config.name} for {self.config.duration_s:.1f}s "
            f"every {self.config.update_interval_s:.3f}s"
        )
        for time_s, tx_power_dbm in self.config.tx_power_schedule or []:
            self.scheduler.schedule_at(time_s, self._apply_tx_power, tx_power_dbm)

        self.sampler.start()
        self.scheduler.run(until=self.config.duration_s)

        return SimulationResult.from_samples(
            name=self.config.name,
            samples=self.sampler.history,
            total_energy_j=self.device.get_total_energy_consumption(),
            remaining_energy_j=self.energy_source.get_remaining_energy(),
            initial_energy_j=self.energy_source.initial_energy_j,
            duration_s=self.device.account.last_time_s,
            depleted_at_s=self.depleted_at_s,
        )
