"""
Visualization Utilities

Functions for drawing detection results onto images for debugging.
"""

from typing import Optional, Tuple

import cv2
import numpy as np

from src.common.types import Quadrilateral
from src.grid_rectification.types import Grid


def _polyline(quad: Quadrilateral) -> np.ndarray:
    return np.round(quad.to_numpy()).astype(np.int32).reshape(-1, 1, 2)


def draw_detection_overlay(
    image: np.ndarray,
    quad: Quadrilateral,
    grid: Optional[Grid] = None,
    boundary_color: Tuple[int, int, int] = (0, 255, 0),
    cell_color: Tuple[int, int, int] = (255, 0, 0),
    corner_color: Tuple[int, int, int] = (0, 0, 255),
) -> np.ndarray:
    """
    Draw the detected boundary, its corners and the cell grid.

    Args:
        image: Image array (BGR or grayscale). Not modified.
        quad: Detected grid boundary.
        grid: Optional cell grid to draw.
        boundary_color: BGR color of the boundary outline.
        cell_color: BGR color of cell outlines.
        corner_color: BGR color of corner markers.

    Returns:
        Annotated BGR copy of the image.
    """
    canvas = image.copy()
    if canvas.ndim == 2:
        canvas = cv2.cvtColor(canvas, cv2.COLOR_GRAY2BGR)

    if grid is not None:
        for cell in grid.cells:
            cv2.polylines(canvas, [_polyline(cell)], True, cell_color, 1)

    cv2.polylines(canvas, [_polyline(quad)], True, boundary_color, 3)

    labels = {
        "TL": quad.top_left,
        "TR": quad.top_right,
        "BL": quad.bottom_left,
        "BR": quad.bottom_right,
    }
    for label, point in labels.items():
        center = (int(round(point.x)), int(round(point.y)))
        cv2.circle(canvas, center, 5, corner_color, -1)
        cv2.putText(
            canvas,
            label,
            (center[0] + 6, center[1] - 6),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            corner_color,
            1,
        )

    return canvas
