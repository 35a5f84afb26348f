#!/usr/bin/env python3
"""
Core Module
Host-agnostic data structures and bounding box math for pivot centering.
"""

from .bounds import (
    BoundsAggregator,
    OGL_UNITS_PER_BOX_UNIT,
    center_of,
    mid_point_at,
    subtract_b_from_a,
    union_corners,
)
from .scene_data import (
    ArtLayer,
    BoundingBox,
    CornerPair,
    EmbeddedPivotMode,
    NodeType,
    PivotBatchReport,
    PivotWrite,
    Point2d,
    SkippedDrawing,
    SkipReason,
)

__all__ = [
    'BoundsAggregator',
    'OGL_UNITS_PER_BOX_UNIT',
    'center_of',
    'mid_point_at',
    'subtract_b_from_a',
    'union_corners',
    'ArtLayer',
    'BoundingBox',
    'CornerPair',
    'EmbeddedPivotMode',
    'NodeType',
    'PivotBatchReport',
    'PivotWrite',
    'Point2d',
    'SkippedDrawing',
    'SkipReason',
]
