"""
Corner normalization for the Grid Rectification module.

Reduces an arbitrary boundary polygon to exactly four named corners:

- fewer than four vertices: the boundary is unclear (fatal)
- exactly four vertices: used as-is
- more than four vertices: replaced by the corners of their axis-aligned
  bounding rectangle, trading geometric fidelity for a usable grid
"""

import logging
from typing import List, Sequence, Union

import numpy as np

from src.common.types import Point
from src.grid_rectification.geometry import bounding_rect_corners, classify_corners
from src.grid_rectification.types import BoundaryUnclearError, CornerNormalization

logger = logging.getLogger(__name__)


def _to_points(vertices: Union[np.ndarray, Sequence]) -> List[Point]:
    if isinstance(vertices, np.ndarray):
        return [Point.from_numpy(v) for v in vertices.reshape(-1, 2)]
    return [v if isinstance(v, Point) else Point(x=v[0], y=v[1]) for v in vertices]


def normalize_corners(vertices: Union[np.ndarray, Sequence]) -> CornerNormalization:
    """
    Reduce polygon vertices to an ordered quadrilateral.

    Args:
        vertices: Polygon vertices as an (N, 2) / (N, 1, 2) array, a list of
            [x, y] pairs, or a list of Points.

    Returns:
        CornerNormalization with the named corners and whether the
        bounding-rectangle fallback was used.

    Raises:
        BoundaryUnclearError: If fewer than four vertices are given, or the
            corners cannot be assigned to four distinct quadrants.

    Example:
        >>> result = normalize_corners([[300, 10], [10, 12], [12, 300], [305, 310]])
        >>> result.quadrilateral.top_left
        Point(x=10.0, y=12.0)
    """
    points = _to_points(vertices)
    vertex_count = len(points)

    if vertex_count < 4:
        raise BoundaryUnclearError(
            f"Boundary polygon has only {vertex_count} vertices, need 4"
        )

    used_fallback = vertex_count > 4
    if used_fallback:
        logger.warning(
            f"Boundary polygon has {vertex_count} vertices, "
            "falling back to its bounding rectangle"
        )
        points = list(bounding_rect_corners(points))

    quadrilateral = classify_corners(points)
    logger.debug(f"Normalized corners: {quadrilateral}")

    return CornerNormalization(
        quadrilateral=quadrilateral,
        vertex_count=vertex_count,
        used_bounding_rect_fallback=used_fallback,
    )
