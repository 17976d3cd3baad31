"""Tests for configuration, logging and visualization utilities."""

from __future__ import annotations

import logging

import pytest
from matplotlib.figure import Figure
from omegaconf import OmegaConf

from rupower.energy import PowerModel
from rupower.simulation import RadioUnitSimulator, SimulationConfig
from rupower.utils import (
    LoggerAdapter,
    get_logger,
    get_nested,
    load_config,
    log_metrics,
    merge_configs,
    plot_power_breakdown,
    plot_power_timeline,
    save_config,
    save_figure,
    setup_logging,
    to_dict,
    validate_config,
)


class TestConfig:
    """Tests for configuration helpers."""

    def test_missing_file(self, tmp_path):
        """Test loading a missing config file."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_save_and_load(self, tmp_path):
        """Test saving and reloading a config."""
        path = tmp_path / "nested" / "config.yaml"
        save_config({"hardware": {"EtaPA": 0.35}}, path)

        config = load_config(path)

        assert get_nested(config, "hardware.EtaPA") == 0.35
        assert get_nested(config, "hardware.Vdc", default=48.0) == 48.0

    def test_merge_overrides(self):
        """Test that later configs override earlier ones."""
        base = OmegaConf.create({"simulation": {"duration_s": 10.0, "update_interval_s": 1.0}})
        merged = merge_configs(base, {"simulation": {"duration_s": 20.0}})

        assert to_dict(merged) == {"simulation": {"duration_s": 20.0, "update_interval_s": 1.0}}

    def test_validate_config(self):
        """Test required-key validation."""
        config = OmegaConf.create({"simulation": {"duration_s": 10.0}})

        validate_config(config, ["simulation.duration_s"])
        with pytest.raises(ValueError):
            validate_config(config, ["simulation.update_interval_s"])


class TestLogging:
    """Tests for logging helpers."""

    def test_setup_logging(self, tmp_path):
        """Test plain console and file logging."""
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logging(level="DEBUG", log_file=log_file, rich_format=False)

        get_logger("energy.device").debug("sampled")
        for handler in logger.handlers:
            handler.flush()

        assert logger.name == "rupower"
        assert logger.level == logging.DEBUG
        assert "sampled" in log_file.read_text()
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_rich_handler(self):
        """Test that rich formatting installs a RichHandler."""
        from rich.logging import RichHandler

        logger = setup_logging(level=logging.INFO)

        assert any(isinstance(h, RichHandler) for h in logger.handlers)
        logger.handlers.clear()

    def test_adapter_prefix(self):
        """Test the adapter's context prefix."""
        adapter = LoggerAdapter(get_logger("test"), {"ru": "ru0"})
        msg, _ = adapter.process("hello", {})
        assert msg == "[ru=ru0] hello"

    def test_log_metrics(self, caplog):
        """Test metric log formatting."""
        with caplog.at_level(logging.INFO, logger="rupower"):
            log_metrics(get_logger("test"), {"avg_power_w": 1.5, "samples": 3}, prefix="run")

        assert "run | avg_power_w: 1.5000 | samples: 3" in caplog.text


class TestVisualization:
    """Tests for plotting helpers."""

    def test_power_timeline(self, tmp_path):
        """Test plotting a simulation timeline."""
        config = SimulationConfig(duration_s=20.0, tx_power_schedule=[(10.0, -10.0)])
        result = RadioUnitSimulator(config).run()

        fig = plot_power_timeline(result)
        save_figure(fig, tmp_path / "timeline", formats=["png"])

        assert isinstance(fig, Figure)
        assert len(fig.axes) == 3
        assert (tmp_path / "timeline.png").exists()

    def test_power_breakdown(self):
        """Test plotting a power breakdown."""
        fig = plot_power_breakdown(PowerModel().breakdown(30.0))

        assert isinstance(fig, Figure)
        assert "active" in fig.axes[0].get_title()
