#!/usr/bin/env python3
"""
Scene Data Module
Host-agnostic data structures for the pivot centering batch.

Hosts (in-memory graph, JSON scene file) answer queries with these
structures, and the pivot setter and exporters consume them without
knowledge of where the scene lives.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional

# Node attribute names read and written by the pivot setter
CAN_ANIMATE_ATTR = "canAnimate"
EMBEDDED_PIVOT_ATTR = "useDrawingPivot"
PIVOT_X_ATTR = "pivot.x"
PIVOT_Y_ATTR = "pivot.y"


class NodeType(Enum):
    """Node type tags the pivot setter cares about"""
    READ = "READ"    # Drawing layer
    GROUP = "GROUP"
    PEG = "PEG"
    OTHER = "OTHER"

    @classmethod
    def from_tag(cls, tag: str) -> 'NodeType':
        """Map a raw host type tag to a NodeType, OTHER for anything unknown"""
        for member in cls:
            if member.value == tag and member is not cls.OTHER:
                return member
        return cls.OTHER


class EmbeddedPivotMode(Enum):
    """Value of a drawing's "useDrawingPivot" attribute"""
    PARENT_PEG = "Apply Embedded Pivot on Parent Peg"
    DRAWING_LAYER = "Apply Embedded Pivot on Drawing Layer"
    OTHER = "other"

    @classmethod
    def from_text(cls, text: Optional[str]) -> 'EmbeddedPivotMode':
        if text == cls.PARENT_PEG.value:
            return cls.PARENT_PEG
        if text == cls.DRAWING_LAYER.value:
            return cls.DRAWING_LAYER
        return cls.OTHER


class ArtLayer(IntEnum):
    """The four art layers of a drawing, in host index order"""
    UNDERLAY = 0
    COLOR_ART = 1
    LINE_ART = 2
    OVERLAY = 3

    @classmethod
    def from_name(cls, name: str) -> 'ArtLayer':
        """Accept 'line_art', 'LINE_ART' or an index string like '2'"""
        key = str(name).strip()
        if key.isdigit():
            return cls(int(key))
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown art layer: {name}\n"
                f"Valid art layers: {', '.join(m.name.lower() for m in cls)}"
            )


class SkipReason(Enum):
    """Why a drawing was left untouched"""
    NO_PIVOT_TARGET = "no_pivot_target"
    EMPTY_DRAWING = "empty_drawing"


@dataclass(frozen=True)
class Point2d:
    """2D point, in OGL or field units depending on context"""
    x: float
    y: float

    def is_origin(self) -> bool:
        return self.x == 0 and self.y == 0


@dataclass(frozen=True)
class BoundingBox:
    """Art layer bounding box as returned by a host box query

    Attributes:
        x0: Left bound (native drawing units)
        y0: Bottom bound
        x1: Right bound
        y1: Top bound
    """
    x0: float
    y0: float
    x1: float
    y1: float


@dataclass(frozen=True)
class CornerPair:
    """Union of art layer boxes as two opposing corners in OGL units"""
    bottom_left: Point2d
    top_right: Point2d


@dataclass
class PivotWrite:
    """A pivot written on one node for one drawing

    Attributes:
        drawing: Drawing node the center was measured on
        target: Node that received the pivot (the drawing or its parent peg)
        frame: Frame the artwork was measured at
        center: Center in OGL units after compensation
        pivot_x: Value written to pivot.x (field units)
        pivot_y: Value written to pivot.y (field units)
        reset_first: True if the target's pivot was zeroed before reading
                     back the embedded pivot
        embedded_pivot: Embedded pivot subtracted from the center (OGL units),
                        None if nothing was subtracted
    """
    drawing: str
    target: str
    frame: int
    center: Point2d
    pivot_x: float
    pivot_y: float
    reset_first: bool = False
    embedded_pivot: Optional[Point2d] = None

    @property
    def on_drawing(self) -> bool:
        return self.drawing == self.target


@dataclass
class SkippedDrawing:
    """A drawing the batch could not process"""
    drawing: str
    reason: SkipReason
    message: str


@dataclass
class PivotBatchReport:
    """Outcome of one pivot setter run

    Attributes:
        drawings: Drawings collected from the selection, in processing order
        frame: Current frame at the time of the run (None if nothing ran)
        writes: One entry per drawing whose pivot was written
        skipped: One entry per drawing that was skipped
    """
    drawings: List[str] = field(default_factory=list)
    frame: Optional[int] = None
    writes: List[PivotWrite] = field(default_factory=list)
    skipped: List[SkippedDrawing] = field(default_factory=list)

    def get_write_for(self, drawing: str) -> Optional[PivotWrite]:
        """Find the write made for a drawing

        Args:
            drawing: Drawing node path

        Returns:
            PivotWrite if the drawing was processed, None otherwise
        """
        for write in self.writes:
            if write.drawing == drawing:
                return write
        return None
