"""Exception types raised by rupower."""

from __future__ import annotations


class RuPowerError(Exception):
    """Base class for rupower errors."""


class ConfigurationError(RuPowerError, ValueError):
    """A configuration value lies outside its declared domain."""


class TrackerNotAttachedError(RuPowerError, RuntimeError):
    """Sampling was requested before an energy tracker was attached."""
