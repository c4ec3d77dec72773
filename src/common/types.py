"""
Common type definitions for the grid rectification pipeline.

This module provides Pydantic-based type definitions for the geometric data
structures shared by every stage: points, rectangles and quadrilaterals.

These types provide:
- Type validation and conversion
- Consistent interfaces across modules
- Helper methods for common operations
- Integration with numpy arrays and OpenCV
"""

from typing import Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator


class Point(BaseModel):
    """
    Type-safe representation of a 2D point (x, y) in image pixel space.

    Coordinates are real-valued: line intersections rarely land on whole
    pixels. The y axis grows downward, as in image coordinates.

    Attributes:
        x: X-coordinate (horizontal, typically 0 to image width).
        y: Y-coordinate (vertical, typically 0 to image height).

    Example:
        >>> point = Point(x=100, y=200.5)
        >>> print(point)  # Point(x=100.0, y=200.5)
        >>> point2 = Point.from_numpy(np.array([150, 250]))
    """

    x: float = Field(..., description="X-coordinate (horizontal)")
    y: float = Field(..., description="Y-coordinate (vertical)")

    model_config = {"frozen": True}

    @field_validator("x", "y", mode="before")
    @classmethod
    def _convert_to_float(cls, v: Union[int, float, np.number]) -> float:
        """
        Convert coordinate to a plain Python float.

        Args:
            v: Coordinate value (int, float or numpy scalar).

        Returns:
            Float coordinate.
        """
        if isinstance(v, (int, float, np.number)) and not isinstance(v, bool):
            return float(v)
        raise ValueError(f"Coordinate must be numeric, got {type(v)}")

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Point":
        """
        Create Point from numpy array.

        Args:
            arr: Numpy array of shape (2,) with [x, y] coordinates.

        Returns:
            Point instance.

        Raises:
            ValueError: If array shape is not (2,).
        """
        arr = np.asarray(arr)
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    def to_tuple(self) -> Tuple[float, float]:
        """Convert Point to tuple (x, y)."""
        return (self.x, self.y)

    def __repr__(self) -> str:
        """String representation of Point."""
        return f"Point(x={self.x}, y={self.y})"


class Rect(BaseModel):
    """
    Axis-aligned integer rectangle (x, y, width, height).

    This is the unit of sub-region extraction: every ROI taken from a raster
    is described by a Rect. Float inputs are truncated toward zero, matching
    how OpenCV converts fractional rectangle coordinates.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Horizontal extent in pixels.
        height: Vertical extent in pixels.

    Example:
        >>> rect = Rect(x=10, y=20, width=100, height=50)
        >>> print(rect.x_max, rect.y_max)  # 110, 70
    """

    x: int = Field(..., description="Left edge")
    y: int = Field(..., description="Top edge")
    width: int = Field(..., description="Width in pixels")
    height: int = Field(..., description="Height in pixels")

    model_config = {"frozen": True}

    @field_validator("x", "y", "width", "height", mode="before")
    @classmethod
    def _truncate_to_int(cls, v: Union[int, float, np.number]) -> int:
        """Truncate coordinate toward zero."""
        if isinstance(v, (int, float, np.number)) and not isinstance(v, bool):
            return int(v)
        raise ValueError(f"Coordinate must be numeric, got {type(v)}")

    @model_validator(mode="after")
    def _validate_size(self) -> "Rect":
        """
        Validate rectangle dimensions.

        Raises:
            ValueError: If width or height is not positive.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Invalid rect: width ({self.width}) and height ({self.height}) "
                "must be positive"
            )
        return self

    @classmethod
    def from_corners(cls, top_left: Point, bottom_right: Point) -> "Rect":
        """
        Create the rectangle spanning two opposite corners.

        Args:
            top_left: Top-left corner.
            bottom_right: Bottom-right corner.

        Returns:
            Rect with origin at top_left.
        """
        return cls(
            x=top_left.x,
            y=top_left.y,
            width=bottom_right.x - top_left.x,
            height=bottom_right.y - top_left.y,
        )

    @property
    def x_max(self) -> int:
        """Exclusive right edge (x + width)."""
        return self.x + self.width

    @property
    def y_max(self) -> int:
        """Exclusive bottom edge (y + height)."""
        return self.y + self.height

    def fits_within(self, image_width: int, image_height: int) -> bool:
        """
        Check whether the rectangle lies fully inside an image.

        Args:
            image_width: Image width in pixels.
            image_height: Image height in pixels.

        Returns:
            True if the rectangle does not cross any image border.
        """
        return (
            self.x >= 0
            and self.y >= 0
            and self.x_max <= image_width
            and self.y_max <= image_height
        )

    def to_slices(self) -> Tuple[slice, slice]:
        """
        Convert to numpy (row, column) slices.

        Returns:
            Tuple of (row_slice, column_slice) for indexing an image array.
        """
        return slice(self.y, self.y_max), slice(self.x, self.x_max)

    def __repr__(self) -> str:
        """String representation of Rect."""
        return (
            f"Rect(x={self.x}, y={self.y}, "
            f"width={self.width}, height={self.height})"
        )


class Quadrilateral(BaseModel):
    """
    Four named corners of a (possibly perspective-distorted) quadrilateral.

    Corners are stored by role, never as an unordered list, so call sites
    never depend on positional ordering conventions.

    Attributes:
        top_left: Top-left corner.
        top_right: Top-right corner.
        bottom_left: Bottom-left corner.
        bottom_right: Bottom-right corner.
    """

    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    model_config = {"frozen": True}

    @property
    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Corners in traversal order: TL, BL, BR, TR."""
        return (self.top_left, self.bottom_left, self.bottom_right, self.top_right)

    def to_numpy(self, dtype: type = np.float32) -> np.ndarray:
        """
        Convert to a (4, 2) array in traversal order TL, BL, BR, TR.

        Args:
            dtype: Numpy dtype for output array (default: float32).

        Returns:
            Numpy array of shape (4, 2).
        """
        return np.array([p.to_tuple() for p in self.corners], dtype=dtype)
