"""Simulation module for rupower.

This module provides a discrete-event driver for sampling radio-unit energy
over simulated time.
"""

from rupower.simulation.environment import (
    PeriodicSampler,
    RadioUnitSimulator,
    SimulationConfig,
    SimulationResult,
)
from rupower.simulation.phy import SimulatedPhy
from rupower.simulation.runner import (
    ExperimentResult,
    ExperimentRunner,
)
from rupower.simulation.scheduler import Event, EventScheduler

__all__ = [
    # Scheduling
    "Event",
    "EventScheduler",
    "SimulatedPhy",
    # Environment
    "PeriodicSampler",
    "RadioUnitSimulator",
    "SimulationConfig",
    "SimulationResult",
    # Runner
    "ExperimentResult",
    "ExperimentRunner",
]
