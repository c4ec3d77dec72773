"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

from typing import List, Tuple

import numpy as np
import pytest

from src.grid_rectification.image_ops import ImageOps
from src.grid_rectification.raster import RasterImage


class ScriptedImageOps(ImageOps):
    """
    ImageOps fake that reports a fixed boundary polygon.

    Pixel operations are done with plain numpy; every buffer handed out is
    recorded in ``created`` so tests can check it was released.
    """

    def __init__(self, polygon):
        self.polygon = np.array(polygon, dtype=np.int32).reshape(-1, 1, 2)
        self.created: List[RasterImage] = []
        self.drawn: List[np.ndarray] = []

    def _track(self, data: np.ndarray) -> RasterImage:
        image = RasterImage(data)
        self.created.append(image)
        return image

    def to_grayscale(self, image):
        data = image.data
        gray = data if data.ndim == 2 else data.mean(axis=2)
        return self._track(gray.astype(np.uint8))

    def adaptive_threshold(self, gray, max_value, block_size, c):
        return self._track(np.zeros_like(gray.data))

    def find_contours(self, binary):
        return [self.polygon]

    def contour_area(self, contour):
        pts = contour.reshape(-1, 2).astype(np.float64)
        x, y = pts[:, 0], pts[:, 1]
        return float(abs(np.dot(x, np.roll(y, 1)) - np.dot(y, np.roll(x, 1))) / 2)

    def arc_length(self, contour, closed=True):
        pts = contour.reshape(-1, 2).astype(np.float64)
        return float(np.linalg.norm(pts - np.roll(pts, 1, axis=0), axis=1).sum())

    def approx_poly(self, contour, epsilon, closed=True):
        return contour

    def rotate_90(self, image, clockwise):
        return self._track(np.ascontiguousarray(np.rot90(image.data, -1 if clockwise else 1)))

    def draw_contour(self, image, contour, color, thickness):
        self.drawn.append(contour)

    @property
    def live_buffers(self) -> List[RasterImage]:
        return [image for image in self.created if not image.is_released]


@pytest.fixture
def scripted_ops():
    """Factory fixture: scripted_ops(polygon) -> ScriptedImageOps."""
    return ScriptedImageOps


@pytest.fixture
def sample_quadrilateral_points():
    """Fixture providing sample 4-corner points in scrambled order."""
    return np.array(
        [
            [300, 150],  # Top-right area
            [100, 200],  # Top-left area
            [320, 400],  # Bottom-right area
            [80, 380],  # Bottom-left area
        ],
        dtype=np.float32,
    )


def _draw_grid_sheet(
    size: Tuple[int, int], top_left: Tuple[int, int], bottom_right: Tuple[int, int], rows: int, cols: int
) -> np.ndarray:
    import cv2

    height, width = size
    image = np.full((height, width, 3), 255, dtype=np.uint8)
    (x0, y0), (x1, y1) = top_left, bottom_right

    cv2.rectangle(image, (x0, y0), (x1, y1), (0, 0, 0), 3)
    for r in range(1, rows):
        y = y0 + (y1 - y0) * r // rows
        cv2.line(image, (x0, y), (x1, y), (0, 0, 0), 2)
    for c in range(1, cols):
        x = x0 + (x1 - x0) * c // cols
        cv2.line(image, (x, y0), (x, y1), (0, 0, 0), 2)
    return image


@pytest.fixture
def grid_sheet_image():
    """Fixture providing a white page with a clean, undistorted 2x2 grid."""
    return _draw_grid_sheet((400, 400), (60, 60), (340, 340), rows=2, cols=2)


@pytest.fixture
def blank_image():
    """Fixture providing a featureless white page."""
    return np.full((200, 200, 3), 255, dtype=np.uint8)
