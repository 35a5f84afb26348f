#!/usr/bin/env python3
"""
Bounds Module
Art layer bounding box union and center point math
"""

from typing import Iterable, Optional

import numpy as np

from .scene_data import BoundingBox, CornerPair, Point2d

# Drawing box queries report in native drawing units; 1875 of them make one OGL unit
OGL_UNITS_PER_BOX_UNIT = 1875.0

# Coordinates are rounded to this many decimals before use, matching the
# precision the host formats floating point attributes with
CENTER_DECIMALS = 20


class BoundsAggregator:
    """Accumulates art layer boxes into one drawing-wide corner pair

    Boxes are converted from native drawing units to OGL units on the way in.
    The union is the min of all bottom-left corners and the max of all
    top-right corners, so the result does not depend on layer order.
    """

    def __init__(self, box_units_per_ogl=OGL_UNITS_PER_BOX_UNIT):
        """Initialize aggregator

        Args:
            box_units_per_ogl: Native box units per OGL unit (default: 1875)
        """
        self.box_units_per_ogl = box_units_per_ogl
        self._bottom_lefts = []
        self._top_rights = []

    def add_box(self, box: Optional[BoundingBox]) -> bool:
        """Add one art layer box

        Args:
            box: Box from a host query, None if the layer is empty

        Returns:
            bool: True if the box contributed to the union
        """
        if box is None:
            return False
        self._bottom_lefts.append((box.x0, box.y0))
        self._top_rights.append((box.x1, box.y1))
        return True

    @property
    def is_empty(self) -> bool:
        return not self._bottom_lefts

    def corners(self) -> Optional[CornerPair]:
        """Return the union corners in OGL units, None if no box was added"""
        if self.is_empty:
            return None

        bottom_lefts = np.asarray(self._bottom_lefts, dtype=float) / self.box_units_per_ogl
        top_rights = np.asarray(self._top_rights, dtype=float) / self.box_units_per_ogl

        bl = bottom_lefts.min(axis=0)
        tr = top_rights.max(axis=0)
        return CornerPair(
            bottom_left=Point2d(float(bl[0]), float(bl[1])),
            top_right=Point2d(float(tr[0]), float(tr[1])),
        )


def union_corners(boxes: Iterable[Optional[BoundingBox]],
                  box_units_per_ogl=OGL_UNITS_PER_BOX_UNIT) -> Optional[CornerPair]:
    """Union of a set of art layer boxes, None if every box is empty"""
    aggregator = BoundsAggregator(box_units_per_ogl)
    for box in boxes:
        aggregator.add_box(box)
    return aggregator.corners()


def round_coordinate(value: float, decimals: int = CENTER_DECIMALS) -> float:
    """Round through a fixed-point string, the way the host formats numbers"""
    return float(f"{value:.{decimals}f}")


def mid_point_at(p1: Point2d, p2: Point2d, t: float) -> Point2d:
    """Linear interpolation between two points

    Args:
        p1: Start point
        p2: End point
        t: Interpolation factor (0.5 for the midpoint)

    Returns:
        Point2d: Interpolated point with rounded coordinates
    """
    x = p1.x * (1 - t) + p2.x * t
    y = p1.y * (1 - t) + p2.y * t
    return Point2d(round_coordinate(x), round_coordinate(y))


def center_of(corners: CornerPair) -> Point2d:
    """Center point of a corner pair"""
    return mid_point_at(corners.bottom_left, corners.top_right, 0.5)


def subtract_b_from_a(a: Point2d, b: Point2d) -> Point2d:
    return Point2d(a.x - b.x, a.y - b.y)
