"""
Grid interpolation for the Grid Rectification module.

Subdivides the boundary quadrilateral into rows x cols cells whose edges
follow the perspective distortion of the boundary. Row boundaries join
matching points on the left and right edges, column boundaries join matching
points on the top and bottom edges, and each cell corner is the intersection
of one row boundary with one column boundary.
"""

import logging
from typing import List

from src.common.types import Quadrilateral
from src.grid_rectification.geometry import Line, interpolate_floor, intersect_lines
from src.grid_rectification.types import Grid

logger = logging.getLogger(__name__)


def row_lines(quad: Quadrilateral, rows: int) -> List[Line]:
    """
    Row boundary lines from the top edge (index 0) to the bottom edge (index rows).

    Args:
        quad: Grid boundary.
        rows: Number of cell rows.

    Returns:
        rows + 1 lines, each running from the left edge to the right edge.
    """
    return [
        (
            interpolate_floor(quad.top_left, quad.bottom_left, i, rows),
            interpolate_floor(quad.top_right, quad.bottom_right, i, rows),
        )
        for i in range(rows + 1)
    ]


def column_lines(quad: Quadrilateral, cols: int) -> List[Line]:
    """
    Column boundary lines from the left edge (index 0) to the right edge (index cols).

    Args:
        quad: Grid boundary.
        cols: Number of cell columns.

    Returns:
        cols + 1 lines, each running from the top edge to the bottom edge.
    """
    return [
        (
            interpolate_floor(quad.top_left, quad.top_right, j, cols),
            interpolate_floor(quad.bottom_left, quad.bottom_right, j, cols),
        )
        for j in range(cols + 1)
    ]


def build_grid(quad: Quadrilateral, rows: int, cols: int) -> Grid:
    """
    Partition a quadrilateral into perspective-correct cells.

    Args:
        quad: Grid boundary with named corners.
        rows: Number of cell rows (>= 1).
        cols: Number of cell columns (>= 1).

    Returns:
        Row-major Grid of rows * cols cells. Cells are generally not
        axis-aligned rectangles.

    Raises:
        ValueError: If rows or cols is less than 1.
        DegenerateGeometryError: If a row and a column boundary are parallel.

    Example:
        >>> quad = Quadrilateral(
        ...     top_left=Point(x=0, y=0), top_right=Point(x=100, y=0),
        ...     bottom_left=Point(x=0, y=100), bottom_right=Point(x=100, y=100),
        ... )
        >>> grid = build_grid(quad, rows=2, cols=2)
        >>> grid.cell(1, 1).top_left
        Point(x=50.0, y=50.0)
    """
    if rows < 1 or cols < 1:
        raise ValueError(f"rows and cols must be at least 1, got {rows}x{cols}")

    horizontal = row_lines(quad, rows)
    vertical = column_lines(quad, cols)

    cells = []
    for r in range(rows):
        for c in range(cols):
            cells.append(
                Quadrilateral(
                    top_left=intersect_lines(horizontal[r], vertical[c]),
                    bottom_left=intersect_lines(horizontal[r + 1], vertical[c]),
                    bottom_right=intersect_lines(horizontal[r + 1], vertical[c + 1]),
                    top_right=intersect_lines(horizontal[r], vertical[c + 1]),
                )
            )

    logger.debug(f"Built {rows}x{cols} grid with {len(cells)} cells")
    return Grid(rows=rows, cols=cols, cells=cells)
