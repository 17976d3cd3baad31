"""Device energy model for a radio unit.

:class:`DeviceEnergyModel` bridges simulated time and an energy-budget
tracker to a :class:`~rupower.energy.power_model.PowerModel`. It never
schedules itself; an external driver calls :meth:`DeviceEnergyModel.sample`
whenever an energy update is due.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass

from rupower.energy.hardware import HardwareProfile
from rupower.energy.power_model import PowerModel, SampleResult
from rupower.energy.providers import (
    DEFAULT_TX_POWER_DBM,
    FallbackProvider,
    LiveProvider,
    TransmitPowerProvider,
    TransmitPowerSource,
)
from rupower.energy.source import EnergyTracker
from rupower.energy.trace import TraceSource
from rupower.exceptions import TrackerNotAttachedError
from rupower.utils.logging import LoggerAdapter, get_logger

_ids = itertools.count()


@dataclass
class EnergyAccount:
    """Cumulative energy bookkeeping of one device model.

    Attributes:
        energy_j: Total energy consumed since the last reset (J).
        last_time_s: Simulated time of the previous sample.
        n_samples: Number of samples taken since the last reset.
    """

    energy_j: float = 0.0
    last_time_s: float = 0.0
    n_samples: int = 0


class DeviceEnergyModel:
    """Sample radio-unit power over simulated time and account for its energy.

    Each sample resolves the transmit power (live PHY if bound, otherwise the
    fallback value), computes power and current, reports the draw to the
    attached tracker, accumulates ``power * dt`` and emits the ``current``,
    ``power``, ``tx_power`` and ``total_energy`` traces.

    Example:
        >>> battery = BasicEnergySource(initial_energy_j=1e8)
        >>> device = DeviceEnergyModel()
        >>> device.set_tracker(battery)
        >>> device.sample(10.0).state
        <OperatingState.ACTIVE: 'active'>
        >>> round(device.get_total_energy_consumption())
        70022
    """

    def __init__(
        self,
        profile: HardwareProfile | None = None,
        tx_power_dbm: float = DEFAULT_TX_POWER_DBM,
        name: str | None = None,
        start_time_s: float = 0.0,
    ):
        """Initialize the device model.

        Args:
            profile: Hardware profile for the owned power model.
            tx_power_dbm: Fallback transmit power used while no PHY is bound.
            name: Identifier reported to the tracker.
            start_time_s: Simulated time from which energy is accounted.
        """
        self.name = name if name is not None else f"ru{next(_ids)}"
        self.power_model = PowerModel(profile)
        self._fallback = FallbackProvider(tx_power_dbm)
        self._live: LiveProvider | None = None
        self._tracker: EnergyTracker | None = None
        self._depleted = False
        self._start_time_s = start_time_s

        self.account = EnergyAccount(last_time_s=start_time_s)
        self.last_result: SampleResult | None = None

        self.current_trace = TraceSource("current", "A")
        self.power_trace = TraceSource("power", "W")
        self.tx_power_trace = TraceSource("tx_power", "dBm")
        self.total_energy_trace = TraceSource("total_energy", "J")

        self.log = LoggerAdapter(get_logger("energy.device"), {"ru": self.name})

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def profile(self) -> HardwareProfile:
        return self.power_model.profile

    @property
    def tx_power_dbm(self) -> float:
        """Fallback transmit power (dBm)."""
        return self._fallback.tx_power_dbm

    def set_tx_power_dbm(self, tx_power_dbm: float) -> None:
        """Set the fallback transmit power used while no PHY is bound."""
        self._fallback = FallbackProvider(tx_power_dbm)

    def bind_phy(self, source: TransmitPowerSource) -> None:
        """Read transmit power from ``source`` from the next sample on."""
        self._live = LiveProvider(source)
        self.log.info(f"Bound live transmit-power source {source!r}")

    def unbind_phy(self) -> None:
        """Fall back to the configured transmit power from the next sample on."""
        if self._live is not None:
            self.log.info("Unbound live transmit-power source")
        self._live = None

    @property
    def provider(self) -> TransmitPowerProvider:
        """Provider used for the next sample."""
        return self._live if self._live is not None else self._fallback

    # ------------------------------------------------------------------
    # Tracker binding
    # ------------------------------------------------------------------

    @property
    def tracker(self) -> EnergyTracker | None:
        return self._tracker

    def set_tracker(self, tracker: EnergyTracker) -> None:
        """Attach the energy-budget tracker that receives draw reports.

        Rebinding after sampling has begun keeps the accumulated energy; the
        new tracker only sees draw from subsequent samples, and depletion of
        the old tracker no longer affects this device.
        """
        if tracker is self._tracker:
            return
        if self._tracker is not None:
            self.log.info(
                f"Rebinding energy tracker at t={self.account.last_time_s:.3f}s; "
                f"keeping {self.account.energy_j:.1f} J accumulated"
            )
            self._release_tracker(self._tracker)
        self._tracker = tracker
        self._depleted = False
        tracker.attach(self.name, self.account.last_time_s)

        add_depletion = getattr(tracker, "add_depletion_listener", None)
        if add_depletion is not None:
            add_depletion(self.handle_energy_depletion)
        add_recharged = getattr(tracker, "add_recharged_listener", None)
        if add_recharged is not None:
            add_recharged(self.handle_energy_recharged)

    def _release_tracker(self, tracker: EnergyTracker) -> None:
        detach = getattr(tracker, "detach", None)
        if detach is not None:
            detach(self.name)
        remove_depletion = getattr(tracker, "remove_depletion_listener", None)
        if remove_depletion is not None:
            remove_depletion(self.handle_energy_depletion)
        remove_recharged = getattr(tracker, "remove_recharged_listener", None)
        if remove_recharged is not None:
            remove_recharged(self.handle_energy_recharged)

    def handle_energy_depletion(self) -> None:
        """Called by the tracker when its budget is depleted."""
        self._depleted = True
        self.log.warning("Energy budget depleted")

    def handle_energy_recharged(self) -> None:
        """Called by the tracker when its budget is recharged."""
        self._depleted = False
        self.log.info("Energy budget recharged")

    @property
    def is_depleted(self) -> bool:
        return self._depleted

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def sample(self, now: float) -> SampleResult:
        """Take one energy sample at simulated time ``now``.

        Args:
            now: Simulated time in seconds; must not precede the previous sample.

        Returns:
            SampleResult stamped with ``now``.

        Raises:
            TrackerNotAttachedError: If no tracker has been attached.
            ValueError: If ``now`` precedes the previous sample.
        """
        if self._tracker is None:
            raise TrackerNotAttachedError(
                f"{self.name}: attach an energy tracker with set_tracker() before sampling"
            )
        dt = now - self.account.last_time_s
        if dt < 0:
            raise ValueError(
                f"{self.name}: sample time {now} precedes previous sample "
                f"{self.account.last_time_s}"
            )

        tx_power_dbm = self.provider.resolve()
        computed = self.power_model.compute(tx_power_dbm)
        result = SampleResult(
            power_w=computed.power_w,
            current_a=computed.current_a,
            tx_power_dbm=computed.tx_power_dbm,
            state=computed.state,
            time_s=now,
        )

        self._tracker.report_draw(self.name, result.current_a, result.power_w, now)

        self.account.energy_j += result.power_w * dt
        self.account.last_time_s = now
        self.account.n_samples += 1
        self.last_result = result

        self.log.debug(
            f"t={now:.3f}s {result.state.value} tx={tx_power_dbm:.2f} dBm "
            f"P={result.power_w:.2f} W I={result.current_a:.3f} A"
        )

        self.current_trace.emit(now, result.current_a)
        self.power_trace.emit(now, result.power_w)
        self.tx_power_trace.emit(now, result.tx_power_dbm)
        self.total_energy_trace.emit(now, self.account.energy_j)
        return result

    def get_total_energy_consumption(self) -> float:
        """Total energy consumed since the last reset (J)."""
        return self.account.energy_j

    def get_current_a(self) -> float:
        """Current of the most recent sample (A), or 0 before the first sample."""
        return self.last_result.current_a if self.last_result is not None else 0.0

    def reset(self, start_time_s: float | None = None) -> None:
        """Restart the energy account, keeping configuration and bindings."""
        if start_time_s is None:
            start_time_s = self._start_time_s
        self._start_time_s = start_time_s
        self.account = EnergyAccount(last_time_s=start_time_s)
        self.last_result = None
        if self._tracker is not None:
            self._tracker.attach(self.name, start_time_s)
