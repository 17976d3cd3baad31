"""Energy-budget trackers.

A tracker holds a finite energy budget and debits it according to the draw
reported by one or more attached sources. The device model only reports draw
values; all budget bookkeeping happens here.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Protocol

from rupower.exceptions import ConfigurationError
from rupower.utils.logging import get_logger

logger = get_logger("energy.source")


class EnergyTracker(Protocol):
    """Interface consumed by :class:`~rupower.energy.device.DeviceEnergyModel`."""

    def attach(self, source_id: str, time_s: float) -> None: ...

    def report_draw(
        self, source_id: str, current_a: float, power_w: float, time_s: float
    ) -> None: ...


@dataclass
class DrawRecord:
    """Last draw reported by one attached source."""

    current_a: float = 0.0
    power_w: float = 0.0
    last_time_s: float = 0.0
    energy_debited_j: float = 0.0


class BasicEnergySource:
    """Finite energy store debited by ``current * voltage * dt``.

    Each attached source keeps its own clock: a report at time ``t`` debits
    the reported current over ``t - last_report``. Remaining energy is
    clamped at zero. Depletion listeners fire once when the remaining
    fraction reaches the low threshold (or zero); recharged listeners fire
    when a recharge lifts it above the high threshold.

    Example:
        >>> battery = BasicEnergySource(initial_energy_j=1e6, supply_voltage_v=48.0)
        >>> battery.attach("ru0", 0.0)
        >>> battery.report_draw("ru0", current_a=10.0, power_w=480.0, time_s=60.0)
        >>> battery.get_remaining_energy()
        971200.0
    """

    def __init__(
        self,
        initial_energy_j: float = 1e7,
        supply_voltage_v: float = 48.0,
        low_threshold: float = 0.10,
        high_threshold: float = 0.15,
    ):
        """Initialize the energy source.

        Args:
            initial_energy_j: Energy budget at start (J).
            supply_voltage_v: Supply voltage used to convert current to power (V).
            low_threshold: Remaining fraction at or below which the source is depleted.
            high_threshold: Remaining fraction above which a recharge clears depletion.
        """
        if initial_energy_j <= 0:
            raise ConfigurationError(f"initial_energy_j must be > 0, got {initial_energy_j}")
        if supply_voltage_v <= 0:
            raise ConfigurationError(f"supply_voltage_v must be > 0, got {supply_voltage_v}")
        if not 0.0 <= low_threshold <= high_threshold <= 1.0:
            raise ConfigurationError(
                "thresholds must satisfy 0 <= low_threshold <= high_threshold <= 1, "
                f"got low={low_threshold}, high={high_threshold}"
            )

        self.initial_energy_j = float(initial_energy_j)
        self.supply_voltage_v = float(supply_voltage_v)
        self.low_threshold = low_threshold
        self.high_threshold = high_threshold

        self._remaining_j = self.initial_energy_j
        self._depleted = False
        self._draws: dict[str, DrawRecord] = {}
        self._depletion_listeners: list[Callable[[], None]] = []
        self._recharged_listeners: list[Callable[[], None]] = []
        self._lock = threading.RLock()

    def attach(self, source_id: str, time_s: float) -> None:
        """Start tracking a draw source from ``time_s``.

        Re-attaching a known source restarts its clock without touching the
        energy already debited for it.
        """
        with self._lock:
            record = self._draws.get(source_id)
            if record is None:
                self._draws[source_id] = DrawRecord(last_time_s=time_s)
            else:
                record.last_time_s = time_s
        logger.info(f"Attached draw source {source_id!r} at t={time_s:.3f}s")

    def detach(self, source_id: str) -> None:
        """Stop tracking a draw source."""
        with self._lock:
            self._draws.pop(source_id, None)

    def report_draw(
        self, source_id: str, current_a: float, power_w: float, time_s: float
    ) -> None:
        """Debit energy for the interval since the source's previous report.

        Args:
            source_id: Identifier given to :meth:`attach`.
            current_a: Current drawn by the source (A).
            power_w: Power drawn by the source (W), kept for reporting.
            time_s: Simulated time of the report.

        Raises:
            KeyError: If the source was never attached.
            ValueError: If ``time_s`` precedes the previous report.
        """
        notify = False
        with self._lock:
            if source_id not in self._draws:
                raise KeyError(f"Draw source {source_id!r} is not attached")
            record = self._draws[source_id]
            dt = time_s - record.last_time_s
            if dt < 0:
                raise ValueError(
                    f"Report time {time_s} precedes last report {record.last_time_s} "
                    f"for {source_id!r}"
                )

            energy_j = current_a * self.supply_voltage_v * dt
            record.energy_debited_j += energy_j
            record.current_a = current_a
            record.power_w = power_w
            record.last_time_s = time_s

            self._remaining_j = max(0.0, self._remaining_j - energy_j)
            if not self._depleted and self.get_energy_fraction() <= self.low_threshold:
                self._depleted = True
                notify = True

        if notify:
            logger.warning(
                f"Energy source depleted at t={time_s:.3f}s "
                f"({self._remaining_j:.1f} J remaining)"
            )
            for listener in list(self._depletion_listeners):
                listener()

    def recharge(self, energy_j: float) -> None:
        """Add energy to the store, capped at the initial budget."""
        if energy_j < 0:
            raise ValueError(f"energy_j must be >= 0, got {energy_j}")
        notify = False
        with self._lock:
            self._remaining_j = min(self.initial_energy_j, self._remaining_j + energy_j)
            if self._depleted and self.get_energy_fraction() > self.high_threshold:
                self._depleted = False
                notify = True

        if notify:
            logger.info("Energy source recharged above high threshold")
            for listener in list(self._recharged_listeners):
                listener()

    def add_depletion_listener(self, callback: Callable[[], None]) -> None:
        self._depletion_listeners.append(callback)

    def add_recharged_listener(self, callback: Callable[[], None]) -> None:
        self._recharged_listeners.append(callback)

    def remove_depletion_listener(self, callback: Callable[[], None]) -> None:
        """Unregister a depletion listener; unknown callbacks are ignored."""
        if callback in self._depletion_listeners:
            self._depletion_listeners.remove(callback)

    def remove_recharged_listener(self, callback: Callable[[], None]) -> None:
        """Unregister a recharged listener; unknown callbacks are ignored."""
        if callback in self._recharged_listeners:
            self._recharged_listeners.remove(callback)

    def get_remaining_energy(self) -> float:
        """Remaining energy (J)."""
        return self._remaining_j

    def get_energy_fraction(self) -> float:
        """Remaining energy as a fraction of the initial budget."""
        return self._remaining_j / self.initial_energy_j

    def get_total_current(self) -> float:
        """Sum of the most recently reported currents (A)."""
        with self._lock:
            return sum(r.current_a for r in self._draws.values())

    def get_draw(self, source_id: str) -> DrawRecord:
        """Draw record of an attached source."""
        return self._draws[source_id]

    @property
    def is_depleted(self) -> bool:
        return self._depleted
