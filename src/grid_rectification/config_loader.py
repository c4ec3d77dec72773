"""Configuration loader with Pydantic validation for the Grid Rectification module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

import logging
from pathlib import Path
from typing import Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.grid_rectification.types import DEFAULT_LOCALE, SUPPORTED_LOCALES

logger = logging.getLogger(__name__)

# Default configuration path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


class ThresholdConfig(BaseModel):
    """Adaptive threshold configuration for boundary binarization.

    Attributes:
        max_value: Value assigned to foreground (dark ink) pixels
        block_size: Side of the Gaussian-weighted neighborhood (odd, > 1)
        c: Constant subtracted from the weighted local mean
    """

    max_value: int = Field(default=255, ge=1, le=255)
    block_size: int = 57
    c: float = 5.0

    @field_validator("block_size")
    @classmethod
    def _validate_block_size(cls, v: int) -> int:
        if v <= 1 or v % 2 == 0:
            raise ValueError(f"block_size must be odd and greater than 1, got {v}")
        return v


class ApproximationConfig(BaseModel):
    """Polygon approximation configuration.

    Attributes:
        epsilon_ratio: Tolerance as a fraction of the contour's closed arc length
    """

    epsilon_ratio: float = Field(default=0.01, gt=0.0, lt=1.0)


class DebugConfig(BaseModel):
    """Debug drawing configuration.

    Attributes:
        draw_boundary: Draw the detected boundary onto the source image before
            compositing (the drawing then shows up in the output)
        boundary_color: BGR color of the boundary outline
        boundary_thickness: Outline thickness in pixels
    """

    draw_boundary: bool = False
    boundary_color: Tuple[int, int, int] = (0, 255, 0)
    boundary_thickness: int = Field(default=3, ge=1)


class MessagesConfig(BaseModel):
    """User-facing message configuration.

    Attributes:
        locale: Locale of rejection messages ("en" or "zh-TW")
    """

    locale: str = DEFAULT_LOCALE

    @field_validator("locale")
    @classmethod
    def _validate_locale(cls, v: str) -> str:
        if v not in SUPPORTED_LOCALES:
            raise ValueError(f"Unsupported locale {v!r}. Must be one of {SUPPORTED_LOCALES}")
        return v


class GridRectificationConfig(BaseModel):
    """Complete grid rectification configuration.

    Attributes:
        threshold: Adaptive threshold parameters
        approximation: Polygon approximation parameters
        debug: Debug drawing options
        messages: Rejection message options
    """

    threshold: ThresholdConfig = Field(default_factory=ThresholdConfig)
    approximation: ApproximationConfig = Field(default_factory=ApproximationConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> GridRectificationConfig:
    """
    Load grid rectification configuration from YAML file.

    Args:
        config_path: Path to the configuration YAML file.

    Returns:
        Validated GridRectificationConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid.

    Example:
        >>> config = load_config()
        >>> print(config.threshold.block_size)
        57
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.debug(f"Loading grid rectification config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f) or {}

    if not isinstance(raw_config, dict):
        raise ValueError(
            f"Invalid configuration file: expected a mapping, got {type(raw_config).__name__}"
        )

    try:
        config = GridRectificationConfig(**raw_config)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration file: {e}") from e

    logger.info("Successfully loaded grid rectification configuration")
    return config


def get_default_config() -> GridRectificationConfig:
    """Get default configuration from the bundled config.yaml file.

    Falls back to the model defaults if the bundled file is missing.
    """
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    logger.warning(f"Bundled config not found at {DEFAULT_CONFIG_PATH}, using defaults")
    return GridRectificationConfig()
