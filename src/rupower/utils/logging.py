"""Logging setup for rupower.

All package loggers live under the ``rupower`` hierarchy; console output is
rendered with rich by default.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "rupower"

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _plain_formatter() -> logging.Formatter:
    return logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    level: int | str = logging.INFO,
    log_file: str | Path | None = None,
    console: bool = True,
    rich_format: bool = True,
) -> logging.Logger:
    """Configure the ``rupower`` logger hierarchy.

    Calling it again replaces the handlers installed by a previous call, so
    an experiment script can switch level or log file between runs.

    Args:
        level: Logging level (e.g., logging.INFO, "DEBUG").
        log_file: Optional path to a log file; parent directories are created.
        console: Whether to log to stderr.
        rich_format: Render console records with rich instead of plain text.

    Returns:
        Configured package logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handlers: list[logging.Handler] = []
    if console:
        if rich_format:
            console_handler: logging.Handler = RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=True,
                rich_tracebacks=True,
            )
            console_handler.setFormatter(logging.Formatter("%(message)s"))
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(_plain_formatter())
        handlers.append(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(_plain_formatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name relative to the package (defaults to "rupower").

    Returns:
        Logger instance.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with ``[key=value]`` context.

    Device models use it to tag every record with their radio-unit name, so
    interleaved output from several units on one tracker stays readable.
    """

    def __init__(self, logger: logging.Logger, extra: dict[str, Any] | None = None):
        """Initialize the adapter.

        Args:
            logger: Base logger.
            extra: Context rendered in front of every message, e.g. ``{"ru": "ru0"}``.
        """
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Any) -> tuple[str, Any]:
        """Prefix the message with the adapter's context.

        Args:
            msg: Log message.
            kwargs: Keyword arguments passed through to the logger.

        Returns:
            Prefixed message and unchanged kwargs.
        """
        if self.extra:
            prefix = " ".join(f"[{k}={v}]" for k, v in self.extra.items())
            msg = f"{prefix} {msg}"
        return msg, kwargs


def log_metrics(
    logger: logging.Logger | logging.LoggerAdapter,
    metrics: dict[str, Any],
    prefix: str = "",
    level: int = logging.INFO,
) -> None:
    """Log metrics in a formatted way.

    Args:
        logger: Logger to use.
        metrics: Dictionary of metric name to value.
        prefix: Prefix for the log message.
        level: Logging level.
    """
    msg = prefix
    for name, value in metrics.items():
        if isinstance(value, float):
            msg += f" | {name}: {value:.4f}"
        else:
            msg += f" | {name}: {value}"
    logger.log(level, msg.strip(" |"))
