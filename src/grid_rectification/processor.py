"""
Main processor for the Grid Rectification module.

Orchestrates the complete pipeline:
1. Boundary detection (adaptive threshold + largest contour)
2. Corner normalization (four named corners, bounding-rect fallback)
3. Grid interpolation (perspective-correct cells)
4. Cell reorientation (each cell rotated 90 degrees clockwise)
5. Final crop and orientation (grid extent rotated 90 degrees counter-clockwise)

Implements fail-fast strategy: stops at the first detection or geometry
failure. Every intermediate raster is released on all exit paths; the
returned raster is the only surviving buffer.
"""

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Optional, Union

import numpy as np

from src.grid_rectification.boundary_detector import detect_boundary
from src.grid_rectification.cell_reorienter import reorient_cells
from src.grid_rectification.config_loader import (
    GridRectificationConfig,
    get_default_config,
    load_config,
)
from src.grid_rectification.corner_normalizer import normalize_corners
from src.grid_rectification.final_orienter import crop_and_orient
from src.grid_rectification.grid_interpolator import build_grid
from src.grid_rectification.image_ops import ImageOps, OpenCVImageOps
from src.grid_rectification.raster import RasterImage
from src.grid_rectification.types import (
    DecisionStatus,
    GridRectificationError,
    GridRectificationResult,
)

logger = logging.getLogger(__name__)

ImageSource = Union[RasterImage, np.ndarray]


class GridRectificationProcessor:
    """
    Main processor for grid detection, cell reorientation and output cropping.

    The processor holds only configuration and a stateless ImageOps object,
    so one instance can serve any number of images.

    Example:
        >>> processor = GridRectificationProcessor()
        >>> image = cv2.imread("answer_sheet.jpg")
        >>> result = processor.process(image, rows=10, cols=4)
        >>> if result.is_pass():
        ...     cv2.imwrite("rectified.png", result.rectified_image)
        ... else:
        ...     print(result.get_error_message())
    """

    def __init__(
        self,
        config: Optional[GridRectificationConfig] = None,
        config_path: Optional[Path] = None,
        ops: Optional[ImageOps] = None,
    ):
        """
        Initialize the grid rectification processor.

        Args:
            config: Pre-loaded configuration object. If None, will load from file.
            config_path: Path to config file. If None, uses the bundled default.
            ops: Image-processing primitives. Defaults to OpenCV.
        """
        if config is not None:
            self.config = config
            logger.info("Using provided configuration")
        else:
            self.config = load_config(config_path) if config_path else get_default_config()
            logger.info("Loaded configuration from file")

        self.ops = ops if ops is not None else OpenCVImageOps()

    def rectify(self, image: ImageSource, rows: int, cols: int) -> RasterImage:
        """
        Run the pipeline and return the rectified raster.

        Args:
            image: Source image. A RasterImage stays owned by the caller; a
                numpy array is wrapped without being modified.
            rows: Number of grid rows (>= 1).
            cols: Number of grid columns (>= 1).

        Returns:
            New, caller-owned RasterImage.

        Raises:
            BoundaryUnclearError: If the grid boundary cannot be found.
            DegenerateGeometryError: If grid lines do not intersect or a
                cell is empty.
            ValueError: If rows or cols is less than 1.
        """
        return self._run(image, rows, cols)[0]

    def process(self, image: ImageSource, rows: int, cols: int) -> GridRectificationResult:
        """
        Execute the complete pipeline and report the outcome.

        Detection and geometry failures become a REJECT result carrying the
        error code and a localized message; any other exception propagates.

        Args:
            image: Source image (numpy array or RasterImage).
            rows: Number of grid rows (>= 1).
            cols: Number of grid columns (>= 1).

        Returns:
            GridRectificationResult with the rectified image on PASS.
        """
        logger.info("=" * 60)
        logger.info(f"Starting Grid Rectification Pipeline ({rows}x{cols})")
        logger.info("=" * 60)

        diagnostics = GridRectificationResult(
            decision=DecisionStatus.REJECT, rectified_image=None
        )
        try:
            output, diagnostics = self._run(image, rows, cols, diagnostics)
        except GridRectificationError as e:
            locale = self.config.messages.locale
            logger.warning(f"Pipeline REJECTED: [{e.code.value}] {e.detail}")
            diagnostics.rejection_reason = e.code
            diagnostics.message = e.localized_message(locale)
            return diagnostics

        with output:
            diagnostics.rectified_image = output.to_numpy()

        diagnostics.decision = DecisionStatus.PASS
        logger.info("=" * 60)
        logger.info("Pipeline PASSED")
        logger.info("=" * 60)
        return diagnostics

    def _run(
        self,
        image: ImageSource,
        rows: int,
        cols: int,
        diagnostics: Optional[GridRectificationResult] = None,
    ):
        if rows < 1 or cols < 1:
            raise ValueError(f"rows and cols must be at least 1, got {rows}x{cols}")
        if diagnostics is None:
            diagnostics = GridRectificationResult(
                decision=DecisionStatus.REJECT, rectified_image=None
            )

        with ExitStack() as stack:
            if isinstance(image, RasterImage):
                source = image
            else:
                source = stack.enter_context(RasterImage(np.asarray(image)))

            logger.info("[Stage 1/5] Boundary Detection")
            boundary = detect_boundary(
                source, self.ops, self.config.threshold, self.config.approximation
            )
            diagnostics.vertex_count = boundary.vertex_count

            debug = self.config.debug
            if debug.draw_boundary:
                # Drawn on a private copy so a caller-owned source stays untouched
                source = stack.enter_context(source.clone())
                self.ops.draw_contour(
                    source,
                    boundary.contour,
                    tuple(debug.boundary_color),
                    debug.boundary_thickness,
                )

            logger.info("[Stage 2/5] Corner Normalization")
            corners = normalize_corners(boundary.vertices)
            quad = corners.quadrilateral
            diagnostics.quadrilateral = quad
            diagnostics.used_bounding_rect_fallback = corners.used_bounding_rect_fallback

            logger.info("[Stage 3/5] Grid Interpolation")
            grid = build_grid(quad, rows, cols)
            diagnostics.grid = grid

            logger.info("[Stage 4/5] Cell Reorientation")
            composited = stack.enter_context(reorient_cells(source, grid, self.ops))

            logger.info("[Stage 5/5] Final Crop and Orientation")
            output = crop_and_orient(composited, quad, self.ops)

        return output, diagnostics


def process_image(
    image: ImageSource,
    rows: int,
    cols: int,
    config: Optional[GridRectificationConfig] = None,
    ops: Optional[ImageOps] = None,
) -> RasterImage:
    """
    Convenience function for one-shot grid rectification.

    Args:
        image: Source image (numpy array or RasterImage).
        rows: Number of grid rows.
        cols: Number of grid columns.
        config: Optional custom configuration. Uses default if None.
        ops: Optional image-processing primitives. Uses OpenCV if None.

    Returns:
        Caller-owned RasterImage; release it (or use it as a context manager)
        when done.

    Raises:
        GridRectificationError: On detection or geometry failure.

    Example:
        >>> image = cv2.imread("answer_sheet.jpg")
        >>> with process_image(image, rows=10, cols=4) as result:
        ...     cv2.imwrite("rectified.png", result.data)
    """
    processor = GridRectificationProcessor(config=config, ops=ops)
    return processor.rectify(image, rows, cols)
