#!/usr/bin/env python3
"""
Pivot Setter - Main Orchestrator Module
Sets the layer pivot of selected drawings at the center of their artwork

Each drawing goes through the same steps:
1. Resolve the node that receives the pivot (the drawing or its parent peg)
2. Union the bounding boxes of its four art layers at the current frame
3. Take the center of that box
4. Subtract the embedded drawing pivot when the host would apply it on top
5. Write the center as pivot.x / pivot.y on the target node

v1.1.0 - Host services are injected (BaseHost) instead of read from globals.
"""

from typing import List, Optional

from core.bounds import BoundsAggregator, OGL_UNITS_PER_BOX_UNIT, center_of, subtract_b_from_a
from core.scene_data import (
    CAN_ANIMATE_ATTR,
    EMBEDDED_PIVOT_ATTR,
    PIVOT_X_ATTR,
    PIVOT_Y_ATTR,
    ArtLayer,
    CornerPair,
    EmbeddedPivotMode,
    NodeType,
    PivotBatchReport,
    PivotWrite,
    Point2d,
    SkippedDrawing,
    SkipReason,
)

VERSION = "1.1.0"

UNDO_ACCUM_NAME = "Set layer pivot(s) at the center of drawing(s)"

NO_DRAWINGS_MESSAGE = (
    "Please select at least one drawing node before running this script.\n"
    "You can also select a group that contain multiple drawing nodes."
)

# Attributes are read and written at frame index 1; pivots are not animated here
ATTR_FRAME = 1


class PivotSetter:
    """Layer pivot centering batch (orchestrator)

    The pivot goes on the drawing itself when the drawing is animatable and
    not set to "Apply Embedded Pivot on Parent Peg". Otherwise it goes on the
    nearest peg upstream of the drawing.
    """

    def __init__(self, host, progress_callback=None, box_units_per_ogl=OGL_UNITS_PER_BOX_UNIT):
        """Initialize pivot setter

        Args:
            host: BaseHost providing the scene graph services
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
            box_units_per_ogl: Native box units per OGL unit (default: 1875)
        """
        self.host = host
        self.progress_callback = progress_callback
        self.box_units_per_ogl = box_units_per_ogl

    def log(self, message):
        """Send progress updates to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    def run(self) -> PivotBatchReport:
        """Center the pivots of every drawing in the current selection

        Groups in the selection are expanded into the drawings they contain.
        With no drawing to process, an information dialog is shown and the
        scene is left untouched (no undo accumulation is opened).

        Returns:
            PivotBatchReport: Writes made and drawings skipped
        """
        drawings = self.collect_drawings(self.host.selected_nodes())
        report = PivotBatchReport(drawings=drawings)

        if not drawings:
            self.host.show_information(NO_DRAWINGS_MESSAGE)
            return report

        frame = self.host.current_frame()
        report.frame = frame
        self.log(f"Setting layer pivots for {len(drawings)} drawing(s) at frame {frame}")

        self.host.begin_undo_redo_accum(UNDO_ACCUM_NAME)
        try:
            for drawing in drawings:
                self.process_drawing(drawing, frame, report)
        finally:
            self.host.end_undo_redo_accum()

        self.log(f"✓ Pivots set: {len(report.writes)}, skipped: {len(report.skipped)}")
        return report

    def collect_drawings(self, nodes: List[str]) -> List[str]:
        """Flatten a node list into the drawings it contains

        Drawings are kept, groups are expanded depth-first in child order,
        everything else is dropped.

        Args:
            nodes: Node paths in selection order

        Returns:
            list: Drawing node paths
        """
        drawings = []
        for node in nodes:
            node_type = NodeType.from_tag(self.host.node_type(node))
            if node_type is NodeType.READ:
                drawings.append(node)
            elif node_type is NodeType.GROUP:
                drawings.extend(self.collect_drawings(self.host.sub_nodes(node)))
        return drawings

    def process_drawing(self, drawing: str, frame: int, report: PivotBatchReport) -> Optional[PivotWrite]:
        """Center the pivot of one drawing, recording the outcome in report

        Returns:
            PivotWrite if the pivot was written, None if the drawing was skipped
        """
        animatable = self.host.get_bool_attr(drawing, ATTR_FRAME, CAN_ANIMATE_ATTR)
        mode = EmbeddedPivotMode.from_text(self.host.get_text_attr(drawing, ATTR_FRAME, EMBEDDED_PIVOT_ATTR))

        target = self.resolve_pivot_target(drawing, animatable, mode)
        if not target:
            self._skip(report, drawing, SkipReason.NO_PIVOT_TARGET,
                       f"{drawing} is not animatable, and it does not have a parent peg "
                       f"to set its pivot position.")
            return None

        corners = self.aggregate_corners(drawing, frame)
        if corners is None:
            self._skip(report, drawing, SkipReason.EMPTY_DRAWING,
                       f"{drawing} is empty at frame {frame}. Unable to set its layer pivot.")
            return None

        center = center_of(corners)

        reset_first = self.needs_pivot_inversion(drawing, target, mode)
        embedded_pivot = None
        if reset_first:
            self.host.set_text_attr(target, PIVOT_X_ATTR, ATTR_FRAME, 0)
            self.host.set_text_attr(target, PIVOT_Y_ATTR, ATTR_FRAME, 0)
            draw_pivot = self.host.get_pivot(target, frame)

            if not draw_pivot.is_origin():
                embedded_pivot = Point2d(self.host.to_ogl_x(draw_pivot.x),
                                         self.host.to_ogl_y(draw_pivot.y))
                center = subtract_b_from_a(center, embedded_pivot)

        pivot_x = self.host.from_ogl_x(center.x)
        pivot_y = self.host.from_ogl_y(center.y)
        self.host.set_text_attr(target, PIVOT_X_ATTR, ATTR_FRAME, pivot_x)
        self.host.set_text_attr(target, PIVOT_Y_ATTR, ATTR_FRAME, pivot_y)

        write = PivotWrite(
            drawing=drawing,
            target=target,
            frame=frame,
            center=center,
            pivot_x=pivot_x,
            pivot_y=pivot_y,
            reset_first=reset_first,
            embedded_pivot=embedded_pivot,
        )
        report.writes.append(write)
        self.log(f"  {drawing}: pivot ({pivot_x:.4f}, {pivot_y:.4f}) set on {target}")
        return write

    def resolve_pivot_target(self, drawing: str, animatable: bool, mode: EmbeddedPivotMode) -> str:
        """Pick the node that receives the pivot

        Args:
            drawing: Drawing node path
            animatable: Value of the drawing's "Animate Using Animation Tools" flag
            mode: Drawing's embedded pivot mode

        Returns:
            str: The drawing, its parent peg, or '' if a peg is needed but none exists
        """
        if animatable and mode is not EmbeddedPivotMode.PARENT_PEG:
            return drawing
        return self.find_parent_peg(drawing)

    def find_parent_peg(self, drawing: str) -> str:
        """Nearest peg upstream of a drawing on input port 0, '' if none"""
        src = self.host.src_node(drawing, 0)
        if not src:
            return ""
        if NodeType.from_tag(self.host.node_type(src)) is NodeType.PEG:
            return src
        return self._traverse_chain_up_to_find_peg(src)

    def _traverse_chain_up_to_find_peg(self, last_node: str) -> str:
        """Walk port 0 links upward from a non-peg node until a peg shows up

        A chain inside one group cannot be longer than the number of nodes in
        that group, which bounds the walk. Nodes already visited end it early.
        """
        max_steps = self.host.number_of_sub_nodes(self.host.parent_node(last_node))
        visited = {last_node}
        src = self.host.src_node(last_node, 0)

        for _ in range(max_steps):
            if not src or src in visited:
                return ""
            if NodeType.from_tag(self.host.node_type(src)) is NodeType.PEG:
                return src
            visited.add(src)
            src = self.host.src_node(src, 0)
        return ""

    def aggregate_corners(self, drawing: str, frame: int) -> Optional[CornerPair]:
        """Union of the drawing's art layer boxes in OGL units, None if all are empty"""
        aggregator = BoundsAggregator(self.box_units_per_ogl)
        for art_layer in ArtLayer:
            aggregator.add_box(self.host.get_box(drawing, frame, art_layer))
        return aggregator.corners()

    @staticmethod
    def needs_pivot_inversion(drawing: str, target: str, mode: EmbeddedPivotMode) -> bool:
        """Whether the host will add an embedded pivot on top of the written one

        True when the pivot goes on the parent peg and the drawing applies its
        embedded pivot there, or when the pivot goes on the drawing and the
        drawing applies its embedded pivot on itself.
        """
        if target != drawing and mode is EmbeddedPivotMode.PARENT_PEG:
            return True
        return target == drawing and mode is EmbeddedPivotMode.DRAWING_LAYER

    def _skip(self, report: PivotBatchReport, drawing: str, reason: SkipReason, message: str):
        self.host.trace(message)
        report.skipped.append(SkippedDrawing(drawing=drawing, reason=reason, message=message))


def set_layer_pivots_at_center_of_drawings(host, progress_callback=None) -> PivotBatchReport:
    """Run the batch against a host's current selection and frame"""
    return PivotSetter(host, progress_callback=progress_callback).run()
