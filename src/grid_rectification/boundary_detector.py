"""
Boundary detection for the Grid Rectification module.

Finds the outer boundary of the grid as the largest contour of an adaptively
thresholded image and approximates it by a polygon. The grid boundary is
assumed to be the largest connected region on the page.
"""

import logging

import numpy as np

from src.grid_rectification.config_loader import (
    ApproximationConfig,
    ThresholdConfig,
)
from src.grid_rectification.image_ops import ImageOps
from src.grid_rectification.raster import RasterImage
from src.grid_rectification.types import BoundaryDetection, BoundaryUnclearError

logger = logging.getLogger(__name__)


def find_largest_contour(
    image: RasterImage, ops: ImageOps, threshold: ThresholdConfig
) -> np.ndarray:
    """
    Binarize the image and return its largest contour.

    The grayscale and threshold buffers are released before returning,
    whether or not contour extraction succeeds.

    Args:
        image: Source image (color or gray). Not modified.
        ops: Image-processing primitives.
        threshold: Adaptive threshold parameters.

    Returns:
        Contour with the largest enclosed area, shape (N, 1, 2).

    Raises:
        BoundaryUnclearError: If the binarized image contains no contour.
    """
    with ops.to_grayscale(image) as gray:
        binary = ops.adaptive_threshold(
            gray, threshold.max_value, threshold.block_size, threshold.c
        )
    with binary:
        contours = ops.find_contours(binary)

    if not contours:
        raise BoundaryUnclearError("No contours found in thresholded image")

    areas = [ops.contour_area(contour) for contour in contours]
    largest = int(np.argmax(areas))
    logger.debug(
        f"Found {len(contours)} contours, largest #{largest} "
        f"with area {areas[largest]:.1f}"
    )
    return contours[largest]


def detect_boundary(
    image: RasterImage,
    ops: ImageOps,
    threshold: ThresholdConfig,
    approximation: ApproximationConfig,
) -> BoundaryDetection:
    """
    Detect the grid boundary polygon.

    Args:
        image: Source image. Not modified.
        ops: Image-processing primitives.
        threshold: Adaptive threshold parameters.
        approximation: Polygon approximation parameters.

    Returns:
        BoundaryDetection holding the contour and its approximated vertices.
        The vertex count may be anything; the corner normalizer decides what
        to do with it.

    Raises:
        BoundaryUnclearError: If no contour is found.
    """
    contour = find_largest_contour(image, ops, threshold)

    epsilon = approximation.epsilon_ratio * ops.arc_length(contour, closed=True)
    approx = ops.approx_poly(contour, epsilon, closed=True)
    vertices = np.asarray(approx).reshape(-1, 2)

    logger.info(f"Boundary polygon has {len(vertices)} vertices (epsilon={epsilon:.2f})")

    return BoundaryDetection(
        contour=contour,
        vertices=vertices,
        area=ops.contour_area(contour),
    )
