"""
Owned raster buffers with explicit release.

A RasterImage wraps a numpy array and tracks its lifetime explicitly so the
pipeline can guarantee that every intermediate buffer is released exactly
once, on every exit path. Views created with ``roi()`` alias their parent and
must be released before it.

Example:
    >>> with RasterImage(np.zeros((100, 200, 3), np.uint8)) as image:
    ...     with image.roi(Rect(x=10, y=10, width=50, height=20)) as view:
    ...         view.data[:] = 255
    >>> image.is_released
    True
"""

from typing import Optional, Tuple

import numpy as np

from src.common.types import Rect


class ResourceError(RuntimeError):
    """Raised on buffer lifetime misuse (double release, use after release)."""


class RasterImage:
    """
    Exclusively-owned, mutable 2-D pixel buffer.

    Attributes:
        parent: The buffer this view aliases, or None for an owning buffer.
    """

    def __init__(self, data: np.ndarray, parent: Optional["RasterImage"] = None):
        """
        Wrap a pixel array.

        Args:
            data: Image array of shape (H, W) or (H, W, C).
            parent: Owning buffer when ``data`` is a view into it.

        Raises:
            ValueError: If the array is empty or not 2-D / 3-D.
        """
        if not isinstance(data, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(data)}")
        if data.size == 0:
            raise ValueError("Image array is empty")
        if data.ndim not in (2, 3):
            raise ValueError(
                f"Expected 2D (grayscale) or 3D (color) image, got shape {data.shape}"
            )

        self._data: Optional[np.ndarray] = data
        self.parent = parent
        self._live_views = 0
        if parent is not None:
            parent._live_views += 1

    @property
    def data(self) -> np.ndarray:
        """Underlying pixel array."""
        if self._data is None:
            raise ResourceError("RasterImage used after release")
        return self._data

    @property
    def is_released(self) -> bool:
        """Whether release() has already been called."""
        return self._data is None

    @property
    def live_views(self) -> int:
        """Number of unreleased views aliasing this buffer."""
        return self._live_views

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.data.shape

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    def clone(self) -> "RasterImage":
        """Create an independent deep copy."""
        return RasterImage(self.data.copy())

    def roi(self, rect: Rect) -> "RasterImage":
        """
        Create a view of a sub-region that aliases this buffer.

        Writes through the view modify this buffer. The view must be released
        before this buffer is.

        Args:
            rect: Region to view; must lie fully inside the image.

        Returns:
            RasterImage view.

        Raises:
            ValueError: If the region crosses the image border.
        """
        if not rect.fits_within(self.width, self.height):
            raise ValueError(
                f"ROI {rect} outside image bounds {self.width}x{self.height}"
            )
        rows, cols = rect.to_slices()
        return RasterImage(self.data[rows, cols], parent=self)

    def copy_to(self, destination: "RasterImage") -> None:
        """
        Copy pixels into another buffer of identical shape.

        Args:
            destination: Target buffer (typically a view).

        Raises:
            ValueError: If shapes differ.
        """
        if destination.shape != self.shape:
            raise ValueError(
                f"Shape mismatch: cannot copy {self.shape} into {destination.shape}"
            )
        np.copyto(destination.data, self.data)

    def to_numpy(self) -> np.ndarray:
        """Get the underlying numpy array."""
        return self.data

    def release(self) -> None:
        """
        Release the buffer.

        Raises:
            ResourceError: If already released, or views of it are still live.
        """
        if self._data is None:
            raise ResourceError("RasterImage released twice")
        if self._live_views:
            raise ResourceError(
                f"RasterImage released while {self._live_views} view(s) still live"
            )
        self._data = None
        if self.parent is not None:
            self.parent._live_views -= 1

    def __enter__(self) -> "RasterImage":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.is_released:
            self.release()

    def __repr__(self) -> str:
        if self.is_released:
            return "RasterImage(released)"
        kind = "view" if self.parent is not None else "owned"
        return f"RasterImage(shape={self.shape}, dtype={self.data.dtype}, {kind})"
