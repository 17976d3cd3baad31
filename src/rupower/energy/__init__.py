"""Energy modeling module for rupower.

This module provides the radio-unit power model, the device energy model
that samples it over simulated time, and energy-budget trackers.
"""

from rupower.energy.device import DeviceEnergyModel, EnergyAccount
from rupower.energy.hardware import (
    OPTION_NAMES,
    PROFILE_MACRO_64T64R,
    PROFILE_MACRO_MMWAVE,
    PROFILE_SMALL_CELL,
    PROFILES,
    HardwareProfile,
    get_profile,
)
from rupower.energy.power_model import (
    OperatingState,
    PowerBreakdown,
    PowerModel,
    SampleResult,
    dbm_to_watts,
)
from rupower.energy.providers import (
    DEFAULT_TX_POWER_DBM,
    FallbackProvider,
    LiveProvider,
    TransmitPowerSource,
)
from rupower.energy.source import BasicEnergySource, DrawRecord, EnergyTracker
from rupower.energy.trace import TraceSource

__all__ = [
    # Hardware profiles
    "HardwareProfile",
    "OPTION_NAMES",
    "PROFILES",
    "PROFILE_MACRO_64T64R",
    "PROFILE_MACRO_MMWAVE",
    "PROFILE_SMALL_CELL",
    "get_profile",
    # Power model
    "OperatingState",
    "PowerBreakdown",
    "PowerModel",
    "SampleResult",
    "dbm_to_watts",
    # Transmit-power providers
    "DEFAULT_TX_POWER_DBM",
    "FallbackProvider",
    "LiveProvider",
    "TransmitPowerSource",
    # Energy sources
    "BasicEnergySource",
    "DrawRecord",
    "EnergyTracker",
    # Device model
    "DeviceEnergyModel",
    "EnergyAccount",
    "TraceSource",
]
