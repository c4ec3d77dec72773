"""
Unit tests for grid rectification config_loader module.

Tests configuration loading, validation, and default values.
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from src.grid_rectification.config_loader import (
    ApproximationConfig,
    DebugConfig,
    GridRectificationConfig,
    MessagesConfig,
    ThresholdConfig,
    get_default_config,
    load_config,
)


def _write_yaml(path: Path, content) -> Path:
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(content, f, allow_unicode=True)
    return path


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_default_config(self):
        """Test loading the bundled configuration file."""
        config = get_default_config()

        assert isinstance(config, GridRectificationConfig)
        assert config.threshold.max_value == 255
        assert config.threshold.block_size == 57
        assert config.threshold.c == 5
        assert config.approximation.epsilon_ratio == pytest.approx(0.01)
        assert config.debug.draw_boundary is False
        assert config.debug.boundary_color == (0, 255, 0)
        assert config.debug.boundary_thickness == 3
        assert config.messages.locale == "en"

    def test_bundled_file_matches_model_defaults(self):
        """Test the bundled YAML and the model defaults agree."""
        assert get_default_config() == GridRectificationConfig()

    def test_load_custom_config(self, tmp_path):
        """Test loading a custom configuration file."""
        config_file = _write_yaml(
            tmp_path / "custom.yaml",
            {
                "threshold": {"block_size": 31, "c": 8},
                "approximation": {"epsilon_ratio": 0.02},
                "debug": {"draw_boundary": True, "boundary_color": [255, 0, 0]},
                "messages": {"locale": "zh-TW"},
            },
        )

        config = load_config(config_file)

        assert config.threshold.block_size == 31
        assert config.threshold.c == 8
        assert config.threshold.max_value == 255
        assert config.approximation.epsilon_ratio == pytest.approx(0.02)
        assert config.debug.draw_boundary is True
        assert config.debug.boundary_color == (255, 0, 0)
        assert config.messages.locale == "zh-TW"

    def test_partial_config_keeps_defaults(self, tmp_path):
        """Test sections missing from the file fall back to defaults."""
        config = load_config(_write_yaml(tmp_path / "partial.yaml", {"threshold": {"c": 2}}))

        assert config.threshold.c == 2
        assert config.threshold.block_size == 57
        assert config.messages.locale == "en"

    def test_empty_file_uses_defaults(self, tmp_path):
        """Test an empty YAML file yields the default configuration."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert load_config(config_file) == GridRectificationConfig()

    def test_missing_file_raises_error(self):
        """Test that missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(Path("nonexistent_config.yaml"))

    def test_non_mapping_rejected(self, tmp_path):
        """Test a YAML list at the top level is rejected."""
        config_file = _write_yaml(tmp_path / "list.yaml", [1, 2, 3])

        with pytest.raises(ValueError, match="expected a mapping"):
            load_config(config_file)

    def test_invalid_values_rejected(self, tmp_path):
        """Test validation errors surface as ValueError."""
        config_file = _write_yaml(tmp_path / "bad.yaml", {"threshold": {"block_size": 56}})

        with pytest.raises(ValueError, match="Invalid configuration file"):
            load_config(config_file)


class TestConfigModels:
    """Tests for individual configuration models."""

    @pytest.mark.parametrize("block_size", [0, 1, 2, 56])
    def test_block_size_must_be_odd_and_above_one(self, block_size):
        """Test adaptive threshold neighborhoods must have an odd side > 1."""
        with pytest.raises(ValidationError):
            ThresholdConfig(block_size=block_size)

    @pytest.mark.parametrize("ratio", [0.0, -0.01, 1.0])
    def test_epsilon_ratio_range(self, ratio):
        """Test the approximation ratio must lie strictly between 0 and 1."""
        with pytest.raises(ValidationError):
            ApproximationConfig(epsilon_ratio=ratio)

    def test_boundary_thickness_positive(self):
        """Test debug outline thickness must be at least one pixel."""
        with pytest.raises(ValidationError):
            DebugConfig(boundary_thickness=0)

    def test_unsupported_locale_rejected(self):
        """Test only supported message locales are accepted."""
        with pytest.raises(ValidationError, match="Unsupported locale"):
            MessagesConfig(locale="fr")
