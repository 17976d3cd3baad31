"""Transmit-power providers.

A provider answers one question each sample: which transmit power (dBm)
should the power model be evaluated at? :class:`LiveProvider` reads it from
a bound PHY-like source, :class:`FallbackProvider` returns a configured
static value.
"""

from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

from rupower.exceptions import ConfigurationError

DEFAULT_TX_POWER_DBM = 30.0


@runtime_checkable
class TransmitPowerSource(Protocol):
    """Anything that reports its current transmit power in dBm."""

    def get_current_transmit_power_dbm(self) -> float: ...


class TransmitPowerProvider(Protocol):
    """Resolves the transmit power for one sample."""

    live: bool

    def resolve(self) -> float: ...


class LiveProvider:
    """Read the transmit power from a bound PHY on every call."""

    live = True

    def __init__(self, source: TransmitPowerSource):
        if not isinstance(source, TransmitPowerSource):
            raise TypeError(
                f"{type(source).__name__} does not provide get_current_transmit_power_dbm()"
            )
        self.source = source

    def resolve(self) -> float:
        """Read the source's transmit power.

        Raises:
            ValueError: If the source reports a non-finite value.
        """
        tx_power_dbm = float(self.source.get_current_transmit_power_dbm())
        if not math.isfinite(tx_power_dbm):
            raise ValueError(
                f"{self.source!r} reported non-finite transmit power {tx_power_dbm!r}"
            )
        return tx_power_dbm

    def __repr__(self) -> str:
        return f"LiveProvider(source={self.source!r})"


class FallbackProvider:
    """Return a static, configured transmit power."""

    live = False

    def __init__(self, tx_power_dbm: float = DEFAULT_TX_POWER_DBM):
        if isinstance(tx_power_dbm, bool) or not isinstance(tx_power_dbm, (int, float)):
            raise ConfigurationError(f"TxPowerDbm must be a real number, got {tx_power_dbm!r}")
        if not math.isfinite(tx_power_dbm):
            raise ConfigurationError(f"TxPowerDbm must be finite, got {tx_power_dbm!r}")
        self.tx_power_dbm = float(tx_power_dbm)

    def resolve(self) -> float:
        return self.tx_power_dbm

    def __repr__(self) -> str:
        return f"FallbackProvider(tx_power_dbm={self.tx_power_dbm})"
