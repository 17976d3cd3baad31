"""Simulated PHY acting as a live transmit-power source."""

from __future__ import annotations

import math
from typing import Callable

from rupower.utils.logging import get_logger

logger = get_logger("simulation.phy")


class SimulatedPhy:
    """Transmitter whose power can be changed during a simulation.

    Listeners registered with :meth:`add_tx_power_listener` are called with
    ``(old_dbm, new_dbm)`` whenever the transmit power changes, which lets a
    sampler raise an immediate energy update.
    """

    def __init__(self, tx_power_dbm: float = 30.0):
        self._tx_power_dbm = float(tx_power_dbm)
        self._listeners: list[Callable[[float, float], None]] = []

    def get_current_transmit_power_dbm(self) -> float:
        return self._tx_power_dbm

    def set_tx_power_dbm(self, tx_power_dbm: float) -> None:
        """Change the transmit power and notify listeners."""
        if not math.isfinite(tx_power_dbm):
            raise ValueError(f"tx_power_dbm must be finite, got {tx_power_dbm!r}")
        old = self._tx_power_dbm
        self._tx_power_dbm = float(tx_power_dbm)
        logger.debug(f"Transmit power {old:.2f} -> {self._tx_power_dbm:.2f} dBm")
        for listener in list(self._listeners):
            listener(old, self._tx_power_dbm)

    def add_tx_power_listener(self, callback: Callable[[float, float], None]) -> None:
        self._listeners.append(callback)

    def __repr__(self) -> str:
        return f"SimulatedPhy(tx_power_dbm={self._tx_power_dbm})"
