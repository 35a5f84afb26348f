#!/usr/bin/env python3
"""
Memory Host Module
Pure Python scene graph implementing the BaseHost interface.

No animation application required - nodes, attributes, art layer boxes and
embedded pivots live in plain Python objects. Every mutation and every piece
of user feedback is recorded so callers can inspect what a batch did.
"""

from typing import Any, Dict, List, Optional, Tuple

from core.scene_data import (
    EMBEDDED_PIVOT_ATTR,
    PIVOT_X_ATTR,
    PIVOT_Y_ATTR,
    ArtLayer,
    BoundingBox,
    EmbeddedPivotMode,
    NodeType,
    Point2d,
)

from .base_host import BaseHost

ROOT_GROUP = "Top"

# Scene width in fields; the camera frame spans half of it on each side of the origin
DEFAULT_FIELD_UNITS = 12.0

TRUE_STRINGS = {'true', 'y', 'yes', '1', 'on'}


def held_value(keyed: Dict[int, Any], frame: int) -> Any:
    """Value of the last key at or before a frame, None before the first key

    Drawings stay exposed until the next drawing change, so per-frame data
    holds its value forward.
    """
    if not keyed:
        return None
    candidates = [f for f in keyed if f <= frame]
    if not candidates:
        return None
    return keyed[max(candidates)]


class SceneNode:
    """One node of the in-memory scene graph"""

    def __init__(self, path: str, node_type: str, sources: Optional[List[str]] = None):
        self.path = path
        self.node_type = node_type  # 'READ', 'GROUP', 'PEG', 'COMPOSITE', etc.
        self.sources: List[str] = list(sources or [])
        self.attributes: Dict[str, Any] = {}
        self.boxes: Dict[int, Dict[ArtLayer, BoundingBox]] = {}  # frame -> layer -> box
        self.embedded_pivots: Dict[int, Point2d] = {}  # frame -> pivot in fields

    @property
    def name(self) -> str:
        return self.path.rsplit('/', 1)[-1]

    @property
    def parent_path(self) -> str:
        if '/' not in self.path:
            return ""
        return self.path.rsplit('/', 1)[0]

    def get_boxes_at(self, frame: int) -> Dict[ArtLayer, BoundingBox]:
        return held_value(self.boxes, frame) or {}

    def get_embedded_pivot_at(self, frame: int) -> Point2d:
        return held_value(self.embedded_pivots, frame) or Point2d(0.0, 0.0)

    def __repr__(self):
        return f"SceneNode({self.path}, {self.node_type})"


class MemoryHost(BaseHost):
    """In-memory host with a recording of every write and message

    Recorded state:
        attribute_writes: (node, attr_name, frame, value) per set_text_attr() call
        dialogs: Text of every information dialog
        trace_messages: Every trace() line
        undo_history: Name of every completed top-level undo accumulation
    """

    def __init__(self, frame: int = 1, field_units_x: float = DEFAULT_FIELD_UNITS,
                 field_units_y: float = DEFAULT_FIELD_UNITS, message_box=None):
        """Initialize an empty scene containing only the root group

        Args:
            frame: Current frame
            field_units_x: Scene width in fields
            field_units_y: Scene height in fields
            message_box: Optional callable(text) used to display dialogs
        """
        if field_units_x <= 0 or field_units_y <= 0:
            raise ValueError(f"Field units must be positive, got {field_units_x} x {field_units_y}")

        self.frame = frame
        self.field_units_x = float(field_units_x)
        self.field_units_y = float(field_units_y)
        self.message_box = message_box

        self.nodes: Dict[str, SceneNode] = {ROOT_GROUP: SceneNode(ROOT_GROUP, NodeType.GROUP.value)}
        self.selection: List[str] = []

        self.attribute_writes: List[Tuple[str, str, int, str]] = []
        self.dialogs: List[str] = []
        self.trace_messages: List[str] = []
        self.undo_history: List[str] = []
        self._open_accums: List[str] = []

    # Scene building

    def add_node(self, path: str, node_type: str, sources: Optional[List[str]] = None,
                 attributes: Optional[Dict[str, Any]] = None) -> SceneNode:
        """Create a node inside an existing group

        Args:
            path: Full node path (e.g., "Top/Character/Head")
            node_type: Raw type tag
            sources: Nodes connected to input ports 0, 1, ...
            attributes: Initial attribute values

        Returns:
            SceneNode: The new node

        Raises:
            ValueError: If the path exists or its parent is not a group
        """
        if path in self.nodes:
            raise ValueError(f"Node already exists: {path}")

        node = SceneNode(path, node_type, sources)
        parent = self.nodes.get(node.parent_path)
        if parent is None or parent.node_type != NodeType.GROUP.value:
            raise ValueError(f"Parent of {path} is not an existing group: '{node.parent_path}'")

        if attributes:
            node.attributes.update(attributes)
        self.nodes[path] = node
        return node

    def get_node(self, path: str) -> SceneNode:
        node = self.nodes.get(path)
        if node is None:
            raise ValueError(f"Unknown node: {path}")
        return node

    def connect(self, src: str, dst: str, port: int = 0):
        """Connect src to an input port of dst"""
        self.get_node(src)
        node = self.get_node(dst)
        while len(node.sources) <= port:
            node.sources.append("")
        node.sources[port] = src

    def set_box(self, path: str, frame: int, art_layer: ArtLayer, box: Optional[BoundingBox]):
        """Set (or clear with None) one art layer box of the drawing exposed from a frame on

        Each frame key is a separate drawing: layers not set on a key are empty
        for as long as that key is exposed.
        """
        layers = self.get_node(path).boxes.setdefault(frame, {})
        if box is None:
            layers.pop(ArtLayer(art_layer), None)
        else:
            layers[ArtLayer(art_layer)] = box

    def set_embedded_pivot(self, path: str, frame: int, x: float, y: float):
        """Set a drawing's embedded pivot (field units) from a frame onward"""
        self.get_node(path).embedded_pivots[frame] = Point2d(float(x), float(y))

    def select(self, *paths: str):
        for path in paths:
            self.get_node(path)
        self.selection = list(paths)

    def get_attr_value(self, path: str, attr_name: str, default=None):
        """Raw stored attribute value, without type conversion"""
        return self.get_node(path).attributes.get(attr_name, default)

    # Selection

    def selected_nodes(self) -> List[str]:
        return list(self.selection)

    # Node introspection

    def node_type(self, node: str) -> str:
        return self.get_node(node).node_type

    def parent_node(self, node: str) -> str:
        return self.get_node(node).parent_path

    def src_node(self, node: str, port: int) -> str:
        sources = self.get_node(node).sources
        if port < 0 or port >= len(sources):
            return ""
        return sources[port]

    def number_of_sub_nodes(self, group: str) -> int:
        return len(self.sub_nodes(group))

    def sub_nodes(self, group: str) -> List[str]:
        if self.node_type(group) != NodeType.GROUP.value:
            return []
        return [n.path for n in self.nodes.values() if n.parent_path == group]

    def dst_nodes(self, node: str, port: int = 0) -> List[str]:
        """Nodes whose input port is fed by node"""
        return [n.path for n in self.nodes.values()
                if port < len(n.sources) and n.sources[port] == node]

    # Attributes

    def current_frame(self) -> int:
        return self.frame

    def get_bool_attr(self, node: str, frame: int, attr_name: str) -> bool:
        value = self.get_node(node).attributes.get(attr_name, False)
        if isinstance(value, str):
            return value.strip().lower() in TRUE_STRINGS
        return bool(value)

    def get_text_attr(self, node: str, frame: int, attr_name: str) -> str:
        value = self.get_node(node).attributes.get(attr_name)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "Y" if value else "N"
        return str(value)

    def set_text_attr(self, node: str, attr_name: str, frame: int, value) -> None:
        text = str(value)
        self.get_node(node).attributes[attr_name] = text
        self.attribute_writes.append((node, attr_name, frame, text))

    def get_pivot(self, node: str, frame: int) -> Point2d:
        scene_node = self.get_node(node)
        x = self._attr_float(scene_node, PIVOT_X_ATTR)
        y = self._attr_float(scene_node, PIVOT_Y_ATTR)
        embedded = self._embedded_pivot_applied_on(scene_node, frame)
        return Point2d(x + embedded.x, y + embedded.y)

    def _attr_float(self, scene_node: SceneNode, attr_name: str) -> float:
        value = scene_node.attributes.get(attr_name)
        if value in (None, ""):
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Attribute {attr_name} of {scene_node.path} is not numeric: {value!r}")

    def _embedded_pivot_applied_on(self, scene_node: SceneNode, frame: int) -> Point2d:
        """Embedded drawing pivot that the host applies on a node

        A drawing in drawing-layer mode applies its own embedded pivot. A peg
        receives the embedded pivot of a parent-peg mode drawing it feeds,
        directly or through non-peg nodes (offsets, effects).
        """
        if scene_node.node_type == NodeType.READ.value:
            mode = EmbeddedPivotMode.from_text(self.get_text_attr(scene_node.path, frame, EMBEDDED_PIVOT_ATTR))
            if mode is EmbeddedPivotMode.DRAWING_LAYER:
                return scene_node.get_embedded_pivot_at(frame)

        elif scene_node.node_type == NodeType.PEG.value:
            drawing = self._downstream_parent_peg_drawing(scene_node.path, frame)
            if drawing is not None:
                return drawing.get_embedded_pivot_at(frame)

        return Point2d(0.0, 0.0)

    def _downstream_parent_peg_drawing(self, peg: str, frame: int) -> Optional[SceneNode]:
        """First parent-peg mode drawing fed by a peg on port 0

        The walk passes through non-peg nodes and stops at other pegs, which
        own the drawings below them.
        """
        visited = {peg}
        pending = list(self.dst_nodes(peg))
        while pending:
            dst = pending.pop(0)
            if dst in visited:
                continue
            visited.add(dst)

            dst_node = self.nodes[dst]
            if dst_node.node_type == NodeType.READ.value:
                mode = EmbeddedPivotMode.from_text(self.get_text_attr(dst, frame, EMBEDDED_PIVOT_ATTR))
                if mode is EmbeddedPivotMode.PARENT_PEG:
                    return dst_node
            elif dst_node.node_type != NodeType.PEG.value:
                pending.extend(self.dst_nodes(dst))
        return None

    # Geometry

    def get_box(self, node: str, frame: int, art_layer: ArtLayer) -> Optional[BoundingBox]:
        scene_node = self.get_node(node)
        if scene_node.node_type != NodeType.READ.value:
            return None
        return scene_node.get_boxes_at(frame).get(ArtLayer(art_layer))

    # Coordinate conversion

    def to_ogl_x(self, value: float) -> float:
        return value / (self.field_units_x / 2)

    def to_ogl_y(self, value: float) -> float:
        return value / (self.field_units_y / 2)

    def from_ogl_x(self, value: float) -> float:
        return value * (self.field_units_x / 2)

    def from_ogl_y(self, value: float) -> float:
        return value * (self.field_units_y / 2)

    # Undo/redo

    def begin_undo_redo_accum(self, name: str) -> None:
        self._open_accums.append(name)

    def end_undo_redo_accum(self) -> None:
        if not self._open_accums:
            raise ValueError("end_undo_redo_accum() called without a matching begin")
        name = self._open_accums.pop()
        if not self._open_accums:
            self.undo_history.append(name)

    @property
    def in_undo_accum(self) -> bool:
        return bool(self._open_accums)

    # User feedback

    def show_information(self, text: str) -> None:
        self.dialogs.append(text)
        if self.message_box:
            self.message_box(text)
        else:
            print(text)

    def trace(self, text: str) -> None:
        self.trace_messages.append(text)
        print(text)

    def get_host_name(self) -> str:
        return "In-memory scene"
