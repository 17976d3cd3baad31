"""Utility functions for rupower.

This module provides configuration, logging, and visualization utilities.
"""

from rupower.utils.config import (
    get_nested,
    load_config,
    merge_configs,
    save_config,
    to_dict,
    validate_config,
)
from rupower.utils.logging import (
    LoggerAdapter,
    get_logger,
    log_metrics,
    setup_logging,
)
from rupower.utils.visualization import (
    plot_power_breakdown,
    plot_power_timeline,
    save_figure,
    setup_plotting_style,
)

__all__ = [
    # config
    "load_config",
    "merge_configs",
    "to_dict",
    "validate_config",
    "get_nested",
    "save_config",
    # logging
    "setup_logging",
    "get_logger",
    "LoggerAdapter",
    "log_metrics",
    # visualization
    "setup_plotting_style",
    "plot_power_timeline",
    "plot_power_breakdown",
    "save_figure",
]
