#!/usr/bin/env python3
"""
Base Host Module
Abstract interface to the animation application's scripting services

Everything the pivot setter reads or writes goes through one of these
methods, so a host can be a live application binding, an in-memory graph
or a scene file on disk.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from core.scene_data import ArtLayer, BoundingBox, Point2d


class BaseHost(ABC):
    """Abstract base class for host scene graph services

    Node references are path strings ("Top/Group/Drawing"). An empty string
    stands for "no node", as returned by parent_node() on the root or by
    src_node() on an unconnected port.
    """

    # Selection

    @abstractmethod
    def selected_nodes(self) -> List[str]:
        """Currently selected nodes, in selection order"""
        pass

    # Node introspection

    @abstractmethod
    def node_type(self, node: str) -> str:
        """Raw type tag of a node (e.g., 'READ', 'GROUP', 'PEG')"""
        pass

    @abstractmethod
    def parent_node(self, node: str) -> str:
        """Group that contains a node, '' for the root"""
        pass

    @abstractmethod
    def src_node(self, node: str, port: int) -> str:
        """Node connected to an input port, '' if the port is unconnected"""
        pass

    @abstractmethod
    def number_of_sub_nodes(self, group: str) -> int:
        pass

    @abstractmethod
    def sub_nodes(self, group: str) -> List[str]:
        """Direct children of a group, in graph order"""
        pass

    # Attributes

    @abstractmethod
    def current_frame(self) -> int:
        pass

    @abstractmethod
    def get_bool_attr(self, node: str, frame: int, attr_name: str) -> bool:
        pass

    @abstractmethod
    def get_text_attr(self, node: str, frame: int, attr_name: str) -> str:
        pass

    @abstractmethod
    def set_text_attr(self, node: str, attr_name: str, frame: int, value) -> None:
        """Set an attribute from its text representation

        Args:
            node: Node path
            attr_name: Attribute name (e.g., 'pivot.x')
            frame: Frame index of the value
            value: Value, stored through str()
        """
        pass

    @abstractmethod
    def get_pivot(self, node: str, frame: int) -> Point2d:
        """Resolved pivot of a node at a frame, in field units

        Includes any embedded drawing pivot applied on the node.
        """
        pass

    # Geometry

    @abstractmethod
    def get_box(self, node: str, frame: int, art_layer: ArtLayer) -> Optional[BoundingBox]:
        """Bounding box of one art layer of a drawing

        Returns:
            BoundingBox in native drawing units, None if the layer is empty
        """
        pass

    # Coordinate conversion (field units <-> OGL units)

    @abstractmethod
    def to_ogl_x(self, value: float) -> float:
        pass

    @abstractmethod
    def to_ogl_y(self, value: float) -> float:
        pass

    @abstractmethod
    def from_ogl_x(self, value: float) -> float:
        pass

    @abstractmethod
    def from_ogl_y(self, value: float) -> float:
        pass

    # Undo/redo

    @abstractmethod
    def begin_undo_redo_accum(self, name: str) -> None:
        pass

    @abstractmethod
    def end_undo_redo_accum(self) -> None:
        pass

    # User feedback

    @abstractmethod
    def show_information(self, text: str) -> None:
        """Blocking information dialog"""
        pass

    @abstractmethod
    def trace(self, text: str) -> None:
        """One line in the host's message log"""
        pass

    def get_host_name(self) -> str:
        """Return human-readable host name"""
        return type(self).__name__
