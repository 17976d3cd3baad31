"""Hardware profiles for radio-unit power modeling.

A :class:`HardwareProfile` bundles the efficiency and loss parameters of one
radio unit. Profiles are frozen; reconfiguration produces a new, fully
re-validated profile so that an out-of-domain value can never reach the
power computation.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

from rupower.exceptions import ConfigurationError
from rupower.utils.logging import get_logger

logger = get_logger("energy.hardware")

# Recognized option names mapped to profile fields.
OPTION_NAMES: dict[str, str] = {
    "EtaPA": "eta_pa",
    "FixedOverheadW": "fixed_overhead_w",
    "MmwaveOverheadW": "mmwave_overhead_w",
    "DeltaAf": "delta_af",
    "DeltaDC": "delta_dc",
    "DeltaMS": "delta_ms",
    "DeltaCool": "delta_cool",
    "NumTrx": "num_trx",
    "Vdc": "vdc",
    "SleepPowerW": "sleep_power_w",
    "SleepThresholdDbm": "sleep_threshold_dbm",
    "LossesInSleep": "losses_in_sleep",
}

LOSS_FIELDS = ("delta_af", "delta_dc", "delta_ms", "delta_cool")


def _require_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a real number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class HardwareProfile:
    """Efficiency and loss parameters of a radio unit.

    Attributes:
        eta_pa: Power amplifier efficiency, in (0, 1].
        fixed_overhead_w: Fixed RF overhead per TRX (W).
        mmwave_overhead_w: Additional mmWave RF overhead per TRX (W).
        delta_af: Antenna feeder loss fraction, in [0, 1).
        delta_dc: DC-DC conversion loss fraction, in [0, 1).
        delta_ms: Mains supply loss fraction, in [0, 1).
        delta_cool: Active cooling loss fraction, in [0, 1).
        num_trx: Number of transmit/receive chains.
        vdc: DC supply voltage (V).
        sleep_power_w: Power per TRX while asleep (W).
        sleep_threshold_dbm: Transmit power at or below which the RU sleeps.
        losses_in_sleep: Whether the supply and cooling chain applies in sleep.
    """

    eta_pa: float = 0.3
    fixed_overhead_w: float = 80.0
    mmwave_overhead_w: float = 0.0
    delta_af: float = 0.0
    delta_dc: float = 0.07
    delta_ms: float = 0.09
    delta_cool: float = 0.10
    num_trx: int = 64
    vdc: float = 48.0
    sleep_power_w: float = 5.0
    sleep_threshold_dbm: float = 0.0
    losses_in_sleep: bool = False

    def __post_init__(self) -> None:
        eta = _require_number("eta_pa", self.eta_pa)
        if not 0.0 < eta <= 1.0:
            raise ConfigurationError(f"eta_pa must be in (0, 1], got {eta}")

        for name in ("fixed_overhead_w", "mmwave_overhead_w", "sleep_power_w"):
            if _require_number(name, getattr(self, name)) < 0.0:
                raise ConfigurationError(f"{name} must be >= 0, got {getattr(self, name)}")

        for name in LOSS_FIELDS:
            loss = _require_number(name, getattr(self, name))
            if not 0.0 <= loss < 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1), got {loss}")

        if _require_number("vdc", self.vdc) <= 0.0:
            raise ConfigurationError(f"vdc must be > 0, got {self.vdc}")

        _require_number("sleep_threshold_dbm", self.sleep_threshold_dbm)

        if isinstance(self.num_trx, bool) or not isinstance(self.num_trx, int):
            raise ConfigurationError(f"num_trx must be an integer, got {self.num_trx!r}")
        if self.num_trx < 0:
            raise ConfigurationError(f"num_trx must be >= 0, got {self.num_trx}")
        if self.num_trx == 0:
            logger.warning("num_trx is 0; the radio unit will draw no power")

        if not isinstance(self.losses_in_sleep, bool):
            raise ConfigurationError(
                f"losses_in_sleep must be a bool, got {self.losses_in_sleep!r}"
            )

    @property
    def supply_chain_factor(self) -> float:
        """Multiplier applied by the DC-DC, mains and cooling stages."""
        return 1.0 / ((1.0 - self.delta_dc) * (1.0 - self.delta_ms) * (1.0 - self.delta_cool))

    def with_changes(self, **changes: Any) -> "HardwareProfile":
        """Return a validated copy with the given fields replaced.

        Args:
            **changes: Field names (snake_case) and their new values.

        Returns:
            New HardwareProfile.

        Raises:
            ConfigurationError: If a field is unknown or a value is out of domain.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ConfigurationError(f"Unknown hardware profile fields: {unknown}")
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "HardwareProfile":
        """Create a HardwareProfile from a configuration mapping.

        Keys may be either field names (``eta_pa``) or recognized option
        names (``EtaPA``). Missing keys keep their defaults.

        Args:
            config: Mapping of parameter names to values.

        Returns:
            HardwareProfile instance.

        Raises:
            ConfigurationError: On unknown keys or out-of-domain values.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in config.items():
            name = OPTION_NAMES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown hardware option: {key!r}")
            if name in kwargs:
                raise ConfigurationError(f"Hardware option given twice: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self, option_names: bool = False) -> dict[str, Any]:
        """Convert to dictionary.

        Args:
            option_names: Use the recognized option names as keys instead of
                field names.

        Returns:
            Dictionary representation of the profile.
        """
        data = asdict(self)
        if option_names:
            reverse = {v: k for k, v in OPTION_NAMES.items()}
            return {reverse[k]: v for k, v in data.items()}
        return data


# Pre-defined hardware profiles
PROFILE_MACRO_64T64R = HardwareProfile()

PROFILE_MACRO_MMWAVE = HardwareProfile(
    eta_pa=0.15,
    fixed_overhead_w=30.0,
    mmwave_overhead_w=20.0,
    num_trx=256,
    sleep_power_w=1.0,
    losses_in_sleep=True,
)

PROFILE_SMALL_CELL = HardwareProfile(
    eta_pa=0.08,
    fixed_overhead_w=3.0,
    delta_dc=0.09,
    delta_ms=0.11,
    delta_cool=0.0,
    num_trx=2,
    vdc=12.0,
    sleep_power_w=1.5,
    sleep_threshold_dbm=-10.0,
)

PROFILES: dict[str, HardwareProfile] = {
    "macro_64t64r": PROFILE_MACRO_64T64R,
    "macro_mmwave": PROFILE_MACRO_MMWAVE,
    "small_cell": PROFILE_SMALL_CELL,
}


def get_profile(name: str) -> HardwareProfile:
    """Retrieve a named hardware profile."""
    key = name.lower()
    if key not in PROFILES:
        raise KeyError(f"Unknown hardware profile: {name}")
    return PROFILES[key]
