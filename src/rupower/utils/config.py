"""Configuration loading and management utilities.

This module provides utilities for loading and managing YAML configurations
using OmegaConf.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf


def load_config(config_path: str | Path) -> DictConfig:
    """Load a YAML configuration file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Configuration as a DictConfig object.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    return OmegaConf.load(config_path)


def merge_configs(*configs: DictConfig | dict[str, Any]) -> DictConfig:
    """Merge multiple configurations.

    Later configurations override earlier ones.

    Args:
        *configs: Configuration objects (or plain dicts) to merge.

    Returns:
        Merged configuration.
    """
    return OmegaConf.merge(*configs)


def to_dict(config: DictConfig | dict[str, Any]) -> dict[str, Any]:
    """Convert a DictConfig to a plain dictionary.

    Plain dictionaries are returned as a shallow copy.
    """
    if isinstance(config, DictConfig):
        return OmegaConf.to_container(config, resolve=True)
    return dict(config)


def validate_config(config: DictConfig, required_keys: list[str]) -> None:
    """Validate that required keys are present in configuration.

    Args:
        config: Configuration to validate.
        required_keys: List of required key paths (e.g., "simulation.duration_s").

    Raises:
        ValueError: If any required key is missing.
    """
    missing = [key for key in required_keys if OmegaConf.select(config, key) is None]
    if missing:
        raise ValueError(f"Missing required configuration keys: {missing}")


def get_nested(config: DictConfig, key: str, default: Any = None) -> Any:
    """Get a nested configuration value safely.

    Args:
        config: Configuration object.
        key: Dot-separated key path (e.g., "hardware.EtaPA").
        default: Default value if key not found.

    Returns:
        Configuration value or default.
    """
    return OmegaConf.select(config, key, default=default)


def save_config(config: DictConfig | dict[str, Any], path: str | Path) -> None:
    """Save configuration to a YAML file.

    Args:
        config: Configuration to save.
        path: Output file path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not isinstance(config, DictConfig):
        config = OmegaConf.create(config)
    OmegaConf.save(config, path)
