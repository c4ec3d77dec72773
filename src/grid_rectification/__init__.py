"""
Grid Rectification: Boundary Detection, Cell Reorientation & Output Cropping

Locates a single distorted rectangular grid (e.g. a photographed answer
sheet) in an image, partitions it into perspective-correct cells, rotates
every cell in place and emits a normalized raster for text recognition.

Pipeline stages:
1. Boundary detection (adaptive threshold + largest contour)
2. Corner normalization (four named corners, bounding-rect fallback)
3. Grid interpolation (rows x cols cells via line intersection)
4. Cell reorientation (each cell rotated 90 degrees clockwise)
5. Final crop and orientation (grid extent rotated 90 degrees counter-clockwise)
"""

from src.grid_rectification.config_loader import (
    GridRectificationConfig,
    get_default_config,
    load_config,
)
from src.grid_rectification.corner_normalizer import normalize_corners
from src.grid_rectification.grid_interpolator import build_grid
from src.grid_rectification.image_ops import ImageOps, OpenCVImageOps
from src.grid_rectification.processor import GridRectificationProcessor, process_image
from src.grid_rectification.raster import RasterImage, ResourceError
from src.grid_rectification.types import (
    BoundaryUnclearError,
    DecisionStatus,
    DegenerateGeometryError,
    ErrorCode,
    Grid,
    GridRectificationError,
    GridRectificationResult,
)

__all__ = [
    "GridRectificationProcessor",
    "process_image",
    "load_config",
    "get_default_config",
    "normalize_corners",
    "build_grid",
    "ImageOps",
    "OpenCVImageOps",
    "RasterImage",
    "ResourceError",
    "GridRectificationConfig",
    "GridRectificationResult",
    "Grid",
    "DecisionStatus",
    "ErrorCode",
    "GridRectificationError",
    "BoundaryUnclearError",
    "DegenerateGeometryError",
]
