"""
Final crop and orientation for the Grid Rectification module.

Crops the composited image to the grid extent and rotates the crop 90
degrees counter-clockwise into the output orientation.
"""

import logging

from src.common.types import Quadrilateral, Rect
from src.grid_rectification.geometry import span_rect
from src.grid_rectification.image_ops import ImageOps
from src.grid_rectification.raster import RasterImage

logger = logging.getLogger(__name__)


def grid_extent(quad: Quadrilateral) -> Rect:
    """Rectangle from the boundary's top-left corner to its bottom-right corner."""
    return span_rect(quad.top_left, quad.bottom_right)


def crop_and_orient(
    composited: RasterImage, quad: Quadrilateral, ops: ImageOps
) -> RasterImage:
    """
    Crop to the grid extent and rotate 90 degrees counter-clockwise.

    Args:
        composited: Image with reoriented cells. Not modified.
        quad: Grid boundary.
        ops: Image-processing primitives.

    Returns:
        New, caller-owned RasterImage.
    """
    extent = grid_extent(quad)
    with composited.roi(extent) as cropped:
        result = ops.rotate_90(cropped, clockwise=False)

    logger.info(
        f"Cropped grid extent {extent.width}x{extent.height}, "
        f"output {result.width}x{result.height}"
    )
    return result
