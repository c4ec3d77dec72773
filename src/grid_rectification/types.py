"""
Data types and structures for the Grid Rectification module.

Provides type-safe containers for grids, pipeline results and the typed
failures raised by the detection and geometry stages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from src.common.types import Quadrilateral

DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("en", "zh-TW")


class DecisionStatus(Enum):
    """Pipeline decision outcomes."""

    PASS = "PASS"
    REJECT = "REJECT"


class ErrorCode(Enum):
    """Machine-readable failure codes surfaced to the caller."""

    BOUNDARY_UNCLEAR = "GRID-E001"  # Fewer than four usable boundary corners
    DEGENERATE_GEOMETRY = "GRID-E002"  # Parallel grid lines or empty cells


ERROR_MESSAGES: Dict[ErrorCode, Dict[str, str]] = {
    ErrorCode.BOUNDARY_UNCLEAR: {
        "en": "Grid boundary unclear",
        "zh-TW": "網格邊界不清楚",
    },
    ErrorCode.DEGENERATE_GEOMETRY: {
        "en": "Grid cannot be divided into cells",
        "zh-TW": "網格無法分割為儲存格",
    },
}


def localize(code: ErrorCode, locale: str = DEFAULT_LOCALE) -> str:
    """
    Look up the user-facing message for an error code.

    Args:
        code: Error code to describe.
        locale: Locale tag, e.g. "en" or "zh-TW". Unknown locales fall back
            to English.

    Returns:
        Localized message.
    """
    messages = ERROR_MESSAGES[code]
    return messages.get(locale, messages[DEFAULT_LOCALE])


class GridRectificationError(ValueError):
    """
    Base class for detection and geometry failures.

    These are fatal for the image being processed: no partial grid is ever
    returned once one of them is raised.

    Attributes:
        code: Machine-readable error code.
        detail: Technical detail for logs (not shown to end users).
    """

    code: ErrorCode

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def localized_message(self, locale: str = DEFAULT_LOCALE) -> str:
        """Get the user-facing message in the requested locale."""
        return localize(self.code, locale)


class BoundaryUnclearError(GridRectificationError):
    """Raised when the grid boundary cannot be reduced to four corners."""

    code = ErrorCode.BOUNDARY_UNCLEAR


class DegenerateGeometryError(GridRectificationError):
    """Raised when two grid lines have no single intersection point."""

    code = ErrorCode.DEGENERATE_GEOMETRY


@dataclass
class BoundaryDetection:
    """
    Largest contour found in the image and its polygon approximation.

    Attributes:
        contour: Raw contour points, shape (N, 1, 2).
        vertices: Approximated polygon vertices, shape (M, 2).
        area: Area enclosed by the contour.
    """

    contour: np.ndarray
    vertices: np.ndarray
    area: float

    @property
    def vertex_count(self) -> int:
        return int(len(self.vertices))


@dataclass
class CornerNormalization:
    """
    Outcome of reducing a boundary polygon to four named corners.

    Attributes:
        quadrilateral: The ordered corners.
        vertex_count: Number of vertices the polygon approximation produced.
        used_bounding_rect_fallback: True if the polygon had more than four
            vertices and its bounding rectangle was used instead.
    """

    quadrilateral: Quadrilateral
    vertex_count: int
    used_bounding_rect_fallback: bool


@dataclass
class Grid:
    """
    Row-major matrix of perspective-correct cell quadrilaterals.

    Attributes:
        rows: Number of cell rows (>= 1).
        cols: Number of cell columns (>= 1).
        cells: rows * cols cells, row-major.
    """

    rows: int
    cols: int
    cells: List[Quadrilateral] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(
                f"Grid needs at least one row and column, got {self.rows}x{self.cols}"
            )
        if len(self.cells) != self.rows * self.cols:
            raise ValueError(
                f"Grid {self.rows}x{self.cols} expects {self.rows * self.cols} "
                f"cells, got {len(self.cells)}"
            )

    def cell(self, row: int, col: int) -> Quadrilateral:
        """Get the cell at (row, col)."""
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        return self.cells[row * self.cols + col]

    def __len__(self) -> int:
        return len(self.cells)


@dataclass
class GridRectificationResult:
    """
    Output from the grid rectification pipeline.

    Attributes:
        decision: PASS or REJECT status.
        rectified_image: The composited, cropped and re-oriented raster
            (None if rejected).
        rejection_reason: Error code if rejected, None otherwise.
        message: Localized user-facing message for the rejection.
        quadrilateral: Detected grid boundary (None if detection failed).
        grid: Cell grid (None if rejected before or during interpolation).
        vertex_count: Vertices found by polygon approximation.
        used_bounding_rect_fallback: Whether the bounding-rectangle fallback
            replaced a polygon with more than four vertices.
    """

    decision: DecisionStatus
    rectified_image: Optional[np.ndarray]
    rejection_reason: Optional[ErrorCode] = None
    message: str = ""
    quadrilateral: Optional[Quadrilateral] = None
    grid: Optional[Grid] = None
    vertex_count: int = 0
    used_bounding_rect_fallback: bool = False

    def is_pass(self) -> bool:
        """Check if the pipeline passed."""
        return self.decision == DecisionStatus.PASS

    def get_error_message(self) -> str:
        """Get human-readable error message."""
        if self.is_pass():
            return "All stages completed"
        if self.message:
            return self.message
        if self.rejection_reason is not None:
            return localize(self.rejection_reason)
        return "Rejected"
