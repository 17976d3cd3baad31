"""Radio-unit power composition model.

The active-state power of one TRX is composed as a chain of stages:

    P_tx   = 10^(dBm / 10) / 1000
    P_PA   = P_tx / (eta_PA * (1 - delta_af))
    P_RF   = P_PA + P_fixed + P_mmwave
    P_cool = P_RF / ((1 - delta_dc) * (1 - delta_ms) * (1 - delta_cool))

and the radio unit draws ``P_cool * num_trx``. In sleep the per-TRX power is
the configured sleep power, optionally passed through the same supply chain.
Current is always ``P / Vdc``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from rupower.energy.hardware import HardwareProfile


class OperatingState(Enum):
    """Radio-unit operating state."""

    ACTIVE = "active"
    SLEEP = "sleep"


@dataclass(frozen=True)
class SampleResult:
    """Result of one power computation.

    Attributes:
        power_w: Instantaneous power drawn by the radio unit (W).
        current_a: Instantaneous current drawn from the DC supply (A).
        tx_power_dbm: Transmit power used for the computation (dBm).
        state: Operating state derived from the transmit power.
        time_s: Simulated time of the sample, if produced by a sampler.
    """

    power_w: float
    current_a: float
    tx_power_dbm: float
    state: OperatingState
    time_s: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "power_w": self.power_w,
            "current_a": self.current_a,
            "tx_power_dbm": self.tx_power_dbm,
            "state": self.state.value,
            "time_s": self.time_s,
        }


@dataclass(frozen=True)
class PowerBreakdown:
    """Per-stage power values of one computation.

    Per-TRX values are in watts; ``total_w`` is scaled by TRX count. In sleep
    the transmit-side stages are zero and ``rf_w`` carries the sleep power.
    """

    state: OperatingState
    tx_w: float
    pa_w: float
    rf_w: float
    dc_w: float
    mains_w: float
    cooling_w: float
    total_w: float

    def to_dict(self) -> dict[str, float]:
        return {
            "tx_w": self.tx_w,
            "pa_w": self.pa_w,
            "rf_w": self.rf_w,
            "dc_w": self.dc_w,
            "mains_w": self.mains_w,
            "cooling_w": self.cooling_w,
            "total_w": self.total_w,
        }


def dbm_to_watts(power_dbm: float) -> float:
    """Convert a power in dBm to watts.

    Raises:
        ValueError: If the result is not representable as a float.
    """
    try:
        return 10.0 ** (power_dbm / 10.0) / 1000.0
    except OverflowError as err:
        raise ValueError(f"Transmit power {power_dbm} dBm is out of range") from err


def pa_input_power(tx_w: float, eta_pa: float, delta_af: float) -> float:
    """Power amplifier input power needed to radiate ``tx_w`` after feeder loss."""
    return tx_w / (eta_pa * (1.0 - delta_af))


def apply_loss(power_w: float, loss: float) -> float:
    """Input power of a stage that dissipates fraction ``loss`` of its input."""
    return power_w / (1.0 - loss)


class PowerModel:
    """Compute radio-unit power and current from transmit power.

    The model is stateless apart from its hardware profile; every call to
    :meth:`compute` evaluates the sleep threshold afresh.

    Example:
        >>> model = PowerModel()
        >>> result = model.compute(30.0)
        >>> print(f"{result.state.value}: {result.power_w:.0f} W, {result.current_a:.1f} A")
        active: 7002 W, 145.9 A
    """

    def __init__(self, profile: HardwareProfile | None = None):
        """Initialize the power model.

        Args:
            profile: Hardware profile. Defaults to ``HardwareProfile()``.
        """
        self._profile = profile if profile is not None else HardwareProfile()

    @property
    def profile(self) -> HardwareProfile:
        """Current hardware profile."""
        return self._profile

    @profile.setter
    def profile(self, profile: HardwareProfile) -> None:
        if not isinstance(profile, HardwareProfile):
            raise TypeError(f"Expected HardwareProfile, got {type(profile).__name__}")
        self._profile = profile

    def configure(self, **changes: Any) -> HardwareProfile:
        """Reconfigure named profile fields.

        The whole profile is re-validated; on rejection the previous profile
        stays in place.

        Args:
            **changes: Field names and new values, e.g. ``eta_pa=0.35``.

        Returns:
            The new hardware profile.
        """
        self._profile = self._profile.with_changes(**changes)
        return self._profile

    def state_for(self, tx_power_dbm: float) -> OperatingState:
        """Operating state for a transmit power; the threshold is inclusive on sleep."""
        if tx_power_dbm <= self._profile.sleep_threshold_dbm:
            return OperatingState.SLEEP
        return OperatingState.ACTIVE

    def breakdown(self, tx_power_dbm: float) -> PowerBreakdown:
        """Compute the per-stage power chain for a transmit power.

        Args:
            tx_power_dbm: Transmit power in dBm.

        Returns:
            PowerBreakdown with per-TRX stage values and the per-RU total.
        """
        p = self._profile
        state = self.state_for(tx_power_dbm)

        if state is OperatingState.ACTIVE:
            tx_w = dbm_to_watts(tx_power_dbm)
            pa_w = pa_input_power(tx_w, p.eta_pa, p.delta_af)
            rf_w = pa_w + p.fixed_overhead_w + p.mmwave_overhead_w
            apply_chain = True
        else:
            tx_w = 0.0
            pa_w = 0.0
            rf_w = p.sleep_power_w
            apply_chain = p.losses_in_sleep

        if apply_chain:
            dc_w = apply_loss(rf_w, p.delta_dc)
            mains_w = apply_loss(dc_w, p.delta_ms)
            cooling_w = apply_loss(mains_w, p.delta_cool)
        else:
            dc_w = mains_w = cooling_w = rf_w

        return PowerBreakdown(
            state=state,
            tx_w=tx_w,
            pa_w=pa_w,
            rf_w=rf_w,
            dc_w=dc_w,
            mains_w=mains_w,
            cooling_w=cooling_w,
            total_w=cooling_w * p.num_trx,
        )

    def compute(self, tx_power_dbm: float) -> SampleResult:
        """Compute power and current for a transmit power.

        Args:
            tx_power_dbm: Transmit power in dBm. Negative values are valid.

        Returns:
            SampleResult with power, current, the transmit power used and state.
        """
        chain = self.breakdown(tx_power_dbm)
        return SampleResult(
            power_w=chain.total_w,
            current_a=chain.total_w / self._profile.vdc,
            tx_power_dbm=tx_power_dbm,
            state=chain.state,
        )
