"""
Common types and utilities shared across all modules.

This module provides standardized geometric data types for the grid
rectification pipeline, ensuring consistency and type safety across the
detection, interpolation and compositing stages.
"""

from src.common.types import Point, Quadrilateral, Rect

__all__ = ["Point", "Quadrilateral", "Rect"]
