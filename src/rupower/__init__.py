"""rupower: Radio-unit power and energy modeling for network simulation.

This package provides tools for:
- Composing RU power draw from transmit power and hardware efficiency parameters
- Sourcing transmit power from a live PHY or a static fallback
- Accumulating consumed energy against a simulated energy budget
- Driving and evaluating sampled simulations
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("rupower")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = ["__version__"]
