"""
Image-processing capability interface.

The detection and compositing stages only talk to an ``ImageOps`` object, so
the geometry and composition logic can be exercised against a fake without a
real image library. ``OpenCVImageOps`` is the production implementation.

Every operation that produces pixels returns a new, caller-owned
RasterImage; the caller is responsible for releasing it.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

import cv2
import numpy as np

from src.grid_rectification.raster import RasterImage


class ImageOps(ABC):
    """Primitive raster operations consumed by the pipeline."""

    @abstractmethod
    def to_grayscale(self, image: RasterImage) -> RasterImage:
        """Convert a color (or already gray) image to single-channel gray."""

    @abstractmethod
    def adaptive_threshold(
        self, gray: RasterImage, max_value: int, block_size: int, c: float
    ) -> RasterImage:
        """Inverse-binary threshold against a Gaussian-weighted local mean."""

    @abstractmethod
    def find_contours(self, binary: RasterImage) -> List[np.ndarray]:
        """Extract all contours with full hierarchy."""

    @abstractmethod
    def contour_area(self, contour: np.ndarray) -> float:
        """Area enclosed by a contour."""

    @abstractmethod
    def arc_length(self, contour: np.ndarray, closed: bool = True) -> float:
        """Perimeter of a contour."""

    @abstractmethod
    def approx_poly(
        self, contour: np.ndarray, epsilon: float, closed: bool = True
    ) -> np.ndarray:
        """Approximate a contour by a polygon within ``epsilon`` pixels."""

    @abstractmethod
    def rotate_90(self, image: RasterImage, clockwise: bool) -> RasterImage:
        """Rotate by 90 degrees into a new buffer."""

    @abstractmethod
    def draw_contour(
        self,
        image: RasterImage,
        contour: np.ndarray,
        color: Tuple[int, int, int],
        thickness: int,
    ) -> None:
        """Draw a contour onto the image in place."""


class OpenCVImageOps(ImageOps):
    """ImageOps backed by OpenCV."""

    def to_grayscale(self, image: RasterImage) -> RasterImage:
        data = image.data
        if data.ndim == 2:
            return RasterImage(data.copy())
        channels = data.shape[2]
        if channels == 1:
            return RasterImage(data[:, :, 0].copy())
        if channels == 4:
            return RasterImage(cv2.cvtColor(data, cv2.COLOR_BGRA2GRAY))
        return RasterImage(cv2.cvtColor(data, cv2.COLOR_BGR2GRAY))

    def adaptive_threshold(
        self, gray: RasterImage, max_value: int, block_size: int, c: float
    ) -> RasterImage:
        binary = cv2.adaptiveThreshold(
            gray.data,
            max_value,
            cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY_INV,
            block_size,
            c,
        )
        return RasterImage(binary)

    def find_contours(self, binary: RasterImage) -> List[np.ndarray]:
        # findContours may modify its input on older OpenCV releases
        contours, _ = cv2.findContours(
            binary.data.copy(), cv2.RETR_TREE, cv2.CHAIN_APPROX_SIMPLE
        )
        return list(contours)

    def contour_area(self, contour: np.ndarray) -> float:
        return float(cv2.contourArea(contour))

    def arc_length(self, contour: np.ndarray, closed: bool = True) -> float:
        return float(cv2.arcLength(contour, closed))

    def approx_poly(
        self, contour: np.ndarray, epsilon: float, closed: bool = True
    ) -> np.ndarray:
        return cv2.approxPolyDP(contour, epsilon, closed)

    def rotate_90(self, image: RasterImage, clockwise: bool) -> RasterImage:
        code = cv2.ROTATE_90_CLOCKWISE if clockwise else cv2.ROTATE_90_COUNTERCLOCKWISE
        return RasterImage(cv2.rotate(image.data, code))

    def draw_contour(
        self,
        image: RasterImage,
        contour: np.ndarray,
        color: Tuple[int, int, int],
        thickness: int,
    ) -> None:
        cv2.drawContours(image.data, [contour], -1, color, thickness)
