"""
Unit tests for the OpenCV-backed ImageOps implementation.
"""

import cv2
import numpy as np
import pytest

from src.grid_rectification.image_ops import OpenCVImageOps
from src.grid_rectification.raster import RasterImage


@pytest.fixture
def ops():
    return OpenCVImageOps()


@pytest.fixture
def color_patch():
    """Non-square 30x50 color image with distinct pixels."""
    rng = np.random.default_rng(seed=7)
    return rng.integers(0, 256, size=(30, 50, 3), dtype=np.uint8)


class TestRotate:
    """Tests for 90-degree rotation."""

    def test_clockwise_swaps_dimensions(self, ops, color_patch):
        """Test a W x H region rotated clockwise becomes H x W."""
        with RasterImage(color_patch) as image, ops.rotate_90(image, clockwise=True) as rotated:
            assert rotated.width == 30
            assert rotated.height == 50

    def test_clockwise_matches_numpy(self, ops, color_patch):
        """Test clockwise means the top-left pixel moves to the top-right."""
        with RasterImage(color_patch) as image, ops.rotate_90(image, clockwise=True) as rotated:
            np.testing.assert_array_equal(rotated.data, np.rot90(color_patch, -1))
            np.testing.assert_array_equal(rotated.data[0, -1], color_patch[0, 0])

    def test_round_trip_restores_content(self, ops, color_patch):
        """Test clockwise then counter-clockwise restores the original region."""
        with RasterImage(color_patch) as image:
            with ops.rotate_90(image, clockwise=True) as rotated:
                with ops.rotate_90(rotated, clockwise=False) as restored:
                    assert restored.shape == color_patch.shape
                    np.testing.assert_array_equal(restored.data, color_patch)

    def test_rotate_view(self, ops, color_patch):
        """Test rotating a non-contiguous sub-region view."""
        from src.common.types import Rect

        with RasterImage(color_patch) as image:
            with image.roi(Rect(x=5, y=3, width=20, height=10)) as view:
                with ops.rotate_90(view, clockwise=True) as rotated:
                    np.testing.assert_array_equal(
                        rotated.data, np.rot90(color_patch[3:13, 5:25], -1)
                    )


class TestDetectionPrimitives:
    """Tests for grayscale, threshold and contour primitives."""

    @pytest.mark.parametrize("channels", [None, 1, 3, 4])
    def test_grayscale_from_any_channel_count(self, ops, channels):
        """Test grayscale conversion accepts gray, BGR and BGRA input."""
        shape = (20, 30) if channels is None else (20, 30, channels)
        with RasterImage(np.full(shape, 200, dtype=np.uint8)) as image:
            with ops.to_grayscale(image) as gray:
                assert gray.shape == (20, 30)
                assert int(gray.data[0, 0]) == 200

    def test_threshold_marks_dark_ink(self, ops, grid_sheet_image):
        """Test inverse thresholding turns lines white and paper black."""
        with RasterImage(grid_sheet_image) as image, ops.to_grayscale(image) as gray:
            with ops.adaptive_threshold(gray, 255, 57, 5) as binary:
                assert binary.data[60, 200] == 255
                assert binary.data[10, 10] == 0

    def test_contour_measurements(self, ops):
        """Test area and perimeter of a square contour."""
        square = np.array([[[0, 0]], [[100, 0]], [[100, 100]], [[0, 100]]], dtype=np.int32)

        assert ops.contour_area(square) == pytest.approx(10000.0)
        assert ops.arc_length(square, closed=True) == pytest.approx(400.0)

    def test_draw_contour_in_place(self, ops, blank_image):
        """Test contours are drawn onto the given buffer."""
        square = np.array([[[20, 20]], [[120, 20]], [[120, 120]], [[20, 120]]], dtype=np.int32)

        with RasterImage(blank_image.copy()) as image:
            ops.draw_contour(image, square, (0, 255, 0), 3)
            assert tuple(image.data[20, 70]) == (0, 255, 0)

    def test_find_contours_does_not_modify_input(self, ops):
        """Test contour extraction leaves the binary image untouched."""
        binary = np.zeros((50, 50), dtype=np.uint8)
        cv2.rectangle(binary, (10, 10), (40, 40), 255, -1)
        before = binary.copy()

        with RasterImage(binary) as image:
            contours = ops.find_contours(image)

        assert len(contours) == 1
        np.testing.assert_array_equal(binary, before)
