"""
Cell reorientation and compositing for the Grid Rectification module.

Every cell is rotated 90 degrees clockwise in place: its content is read from
the untouched source image, rotated, re-centered on the cell and pasted into
a working copy.

Note:
    A cell's footprint is approximated by the axis-aligned rectangle from its
    top-left to its bottom-right corner. The other two corners are ignored,
    so perspective distortion inside a cell is not modeled here.
"""

import logging

from src.common.types import Quadrilateral, Rect
from src.grid_rectification.geometry import span_rect
from src.grid_rectification.image_ops import ImageOps
from src.grid_rectification.raster import RasterImage
from src.grid_rectification.types import Grid

logger = logging.getLogger(__name__)


def cell_footprint(cell: Quadrilateral) -> Rect:
    """
    Axis-aligned rectangle spanning a cell's top-left and bottom-right corners.

    Raises:
        DegenerateGeometryError: If the cell is less than one pixel wide or high.
    """
    return span_rect(cell.top_left, cell.bottom_right)


def centered_placement(
    cell: Quadrilateral, width: int, height: int, image_width: int, image_height: int
) -> Rect:
    """
    Place a width x height region at a cell's center, inside the image.

    The center comes from the cell's exact (fractional) top-left and
    bottom-right corners; the position is truncated only after clamping.

    Args:
        cell: Cell whose content is being placed.
        width: Width of the content to place.
        height: Height of the content to place.
        image_width: Width of the destination image.
        image_height: Height of the destination image.

    Returns:
        Destination rectangle, shifted as needed to stay within the image.
    """
    top_left, bottom_right = cell.top_left, cell.bottom_right
    x = top_left.x + ((bottom_right.x - top_left.x) - width) / 2
    y = top_left.y + ((bottom_right.y - top_left.y) - height) / 2
    x = max(0, min(x, image_width - width))
    y = max(0, min(y, image_height - height))
    return Rect(x=x, y=y, width=width, height=height)


def rotate_cell(
    source: RasterImage, working: RasterImage, cell: Quadrilateral, ops: ImageOps
) -> Rect:
    """
    Rotate one cell's content 90 degrees clockwise into the working copy.

    Args:
        source: Unmodified image to read from.
        working: Image to paste into.
        cell: Cell quadrilateral.
        ops: Image-processing primitives.

    Returns:
        Destination rectangle the rotated content was written to.
    """
    footprint = cell_footprint(cell)
    with source.roi(footprint) as crop:
        rotated = ops.rotate_90(crop, clockwise=True)

    with rotated:
        placement = centered_placement(
            cell, rotated.width, rotated.height, working.width, working.height
        )
        with working.roi(placement) as destination:
            rotated.copy_to(destination)

    return placement


def reorient_cells(source: RasterImage, grid: Grid, ops: ImageOps) -> RasterImage:
    """
    Rotate every grid cell 90 degrees clockwise within a copy of the image.

    Each cell reads only from the untouched source. Cells are pasted in
    row-major order, so where placements overlap the later cell wins.

    Args:
        source: Full-resolution image. Not modified.
        grid: Cell grid over the image.
        ops: Image-processing primitives.

    Returns:
        New, caller-owned RasterImage with every cell rotated.

    Raises:
        DegenerateGeometryError: If a cell footprint is empty.
        ValueError: If a cell footprint falls outside the image.
    """
    working = source.clone()
    try:
        for index, cell in enumerate(grid.cells):
            placement = rotate_cell(source, working, cell, ops)
            logger.debug(
                f"Cell ({index // grid.cols}, {index % grid.cols}) rotated into {placement}"
            )
    except Exception:
        working.release()
        raise

    logger.info(f"Reoriented {len(grid)} cells")
    return working
