"""
Geometry primitives for grid rectification.

Line intersection, centroid-based corner classification, edge
interpolation and corner-to-corner rectangles. All coordinates are image
pixel coordinates with y growing downward.
"""

import logging
import math
from typing import Dict, Sequence, Tuple

import numpy as np

from src.common.types import Point, Quadrilateral, Rect
from src.grid_rectification.types import BoundaryUnclearError, DegenerateGeometryError

logger = logging.getLogger(__name__)

Line = Tuple[Point, Point]


def _det(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return a[0] * b[1] - a[1] * b[0]


def intersect_lines(line_a: Line, line_b: Line) -> Point:
    """
    Intersect the infinite lines through two segments.

    Uses the two-line determinant formula on the segment end points.

    Args:
        line_a: Two distinct points on the first line.
        line_b: Two distinct points on the second line.

    Returns:
        Intersection point.

    Raises:
        DegenerateGeometryError: If the lines are parallel (or a segment has
            zero length), i.e. the determinant is zero.

    Example:
        >>> intersect_lines(
        ...     (Point(x=0, y=5), Point(x=10, y=5)),
        ...     (Point(x=3, y=0), Point(x=3, y=10)),
        ... )
        Point(x=3.0, y=5.0)
    """
    (a0, a1), (b0, b1) = line_a, line_b
    xdiff = (a0.x - a1.x, b0.x - b1.x)
    ydiff = (a0.y - a1.y, b0.y - b1.y)

    div = _det(xdiff, ydiff)
    if div == 0:
        raise DegenerateGeometryError(
            f"lines do not intersect: {line_a} and {line_b}"
        )

    d = (_det(a0.to_tuple(), a1.to_tuple()), _det(b0.to_tuple(), b1.to_tuple()))
    return Point(x=_det(d, xdiff) / div, y=_det(d, ydiff) / div)


def centroid(points: Sequence[Point]) -> Point:
    """Arithmetic mean of a non-empty point set."""
    if not points:
        raise ValueError("Cannot compute the centroid of an empty point set")
    return Point(
        x=sum(p.x for p in points) / len(points),
        y=sum(p.y for p in points) / len(points),
    )


def classify_corners(points: Sequence[Point]) -> Quadrilateral:
    """
    Assign four corners to named roles by quadrant around their centroid.

    Comparisons are strict and evaluated in a fixed order, so a corner lying
    exactly on a centroid axis falls through to TopRight:

    - x > cx and y > cy -> BottomRight
    - x < cx and y > cy -> BottomLeft
    - x < cx and y < cy -> TopLeft
    - otherwise         -> TopRight

    The assignment depends only on the point values, never on input order.

    Args:
        points: Exactly four corner points.

    Returns:
        Quadrilateral with named corners.

    Raises:
        ValueError: If not given exactly four points.
        BoundaryUnclearError: If two points land in the same quadrant.
    """
    if len(points) != 4:
        raise ValueError(f"Expected exactly 4 corners, got {len(points)}")

    center = centroid(points)
    roles: Dict[str, Point] = {}
    for point in points:
        if point.x > center.x and point.y > center.y:
            role = "bottom_right"
        elif point.x < center.x and point.y > center.y:
            role = "bottom_left"
        elif point.x < center.x and point.y < center.y:
            role = "top_left"
        else:
            role = "top_right"

        if role in roles:
            raise BoundaryUnclearError(
                f"Corners {roles[role]} and {point} both classified as {role} "
                f"around centroid {center}"
            )
        roles[role] = point

    logger.debug(f"Classified corners around centroid {center}: {roles}")
    return Quadrilateral(**roles)


def bounding_rect_corners(points: Sequence[Point]) -> Tuple[Point, Point, Point, Point]:
    """
    Corners of the axis-aligned bounding rectangle of a point set.

    Follows OpenCV's inclusive pixel convention for integer points: the
    rectangle spanning x in [x_min, x_max] has width x_max - x_min + 1.

    Args:
        points: Non-empty point set.

    Returns:
        Corners in the order (x, y), (x + w, y), (x + w, y + h), (x, y + h).
    """
    if not points:
        raise ValueError("Cannot bound an empty point set")

    coords = np.array([p.to_tuple() for p in points], dtype=np.float64)
    x = math.floor(coords[:, 0].min())
    y = math.floor(coords[:, 1].min())
    w = math.floor(coords[:, 0].max()) - x + 1
    h = math.floor(coords[:, 1].max()) - y + 1

    return (
        Point(x=x, y=y),
        Point(x=x + w, y=y),
        Point(x=x + w, y=y + h),
        Point(x=x, y=y + h),
    )


def interpolate_floor(start: Point, end: Point, step: int, steps: int) -> Point:
    """
    Point at fraction step/steps along start->end, floored to whole pixels.

    Args:
        start: Segment start.
        end: Segment end.
        step: Numerator of the fraction (0..steps).
        steps: Denominator of the fraction (>= 1).

    Returns:
        Interpolated point with integer-valued coordinates.
    """
    return Point(
        x=math.floor(start.x + (end.x - start.x) * step / steps),
        y=math.floor(start.y + (end.y - start.y) * step / steps),
    )


def span_rect(top_left: Point, bottom_right: Point) -> Rect:
    """
    Integer rectangle from one corner to the opposite one.

    Coordinates and size are truncated toward zero, as OpenCV does for
    fractional rectangles.

    Args:
        top_left: Top-left corner.
        bottom_right: Bottom-right corner.

    Returns:
        Rect with origin at top_left.

    Raises:
        DegenerateGeometryError: If the truncated width or height is not
            positive, e.g. more grid rows than the boundary has pixels.
    """
    if int(bottom_right.x - top_left.x) <= 0 or int(bottom_right.y - top_left.y) <= 0:
        raise DegenerateGeometryError(
            f"empty region between {top_left} and {bottom_right}"
        )
    return Rect.from_corners(top_left, bottom_right)
