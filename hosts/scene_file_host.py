#!/usr/bin/env python3
"""
Scene File Host Module
JSON scene description loaded into a MemoryHost, with save-back support.

File layout:
    {
      "scene": {"frame": 1, "field_units_x": 12, "field_units_y": 12},
      "selection": ["Top/Character"],
      "nodes": [
        {"path": "Top/Character", "type": "GROUP"},
        {"path": "Top/Character/Peg", "type": "PEG"},
        {"path": "Top/Character/Head", "type": "READ",
         "sources": ["Top/Character/Peg"],
         "attributes": {"canAnimate": true,
                        "useDrawingPivot": "Apply Embedded Pivot on Drawing Layer"},
         "boxes": {"1": {"line_art": [-3750, -1875, 3750, 5625]}},
         "embedded_pivots": {"1": [0.5, 1.0]}}
      ]
    }

Frame keys hold their value until the next key. "Top" is the implicit root
group and is never listed.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from core.scene_data import ArtLayer, BoundingBox

from .memory_host import DEFAULT_FIELD_UNITS, ROOT_GROUP, MemoryHost


class SceneFileHost(MemoryHost):
    """MemoryHost populated from (and savable to) a JSON scene file"""

    def __init__(self, file_path, message_box=None):
        """Load a scene file

        Args:
            file_path: Path to the .json scene file
            message_box: Optional callable(text) used to display dialogs

        Raises:
            ValueError: If the file is missing or malformed
        """
        self.file_path = Path(file_path)
        data = self._read_json(self.file_path)

        scene = data.get('scene', {})
        super().__init__(
            frame=int(scene.get('frame', 1)),
            field_units_x=float(scene.get('field_units_x', DEFAULT_FIELD_UNITS)),
            field_units_y=float(scene.get('field_units_y', DEFAULT_FIELD_UNITS)),
            message_box=message_box,
        )
        self._load_nodes(data.get('nodes', []))
        self.select(*data.get('selection', []))

    def get_host_name(self) -> str:
        return f"Scene file ({self.file_path.name})"

    @staticmethod
    def _read_json(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise ValueError(f"Scene file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Scene file is not valid JSON: {path}\n{e}")
        if not isinstance(data, dict):
            raise ValueError(f"Scene file must contain a JSON object: {path}")
        return data

    def _load_nodes(self, node_entries: List[Dict[str, Any]]):
        """Create nodes parents-first, then validate source links"""
        for index, entry in enumerate(node_entries):
            if 'path' not in entry or 'type' not in entry:
                raise ValueError(f"Node entry {index} needs both 'path' and 'type'")

        # Stable sort keeps file order among siblings, which is the group's child order
        ordered = sorted(node_entries, key=lambda e: e['path'].count('/'))

        for entry in ordered:
            path = entry['path']
            if path == ROOT_GROUP:
                continue
            self.add_node(path, entry['type'],
                          sources=entry.get('sources'),
                          attributes=entry.get('attributes'))

            scene_node = self.get_node(path)
            for frame_key, layers in entry.get('boxes', {}).items():
                # A key without layers is a blank drawing, not a missing key
                scene_node.boxes.setdefault(int(frame_key), {})
                for layer_name, bounds in (layers or {}).items():
                    art_layer = ArtLayer.from_name(layer_name)
                    box = None if bounds is None else self._parse_box(path, bounds)
                    self.set_box(path, int(frame_key), art_layer, box)

            for frame_key, pivot in entry.get('embedded_pivots', {}).items():
                if len(pivot) != 2:
                    raise ValueError(f"Embedded pivot of {path} at frame {frame_key} needs [x, y]")
                self.set_embedded_pivot(path, int(frame_key), pivot[0], pivot[1])

        for node in self.nodes.values():
            for src in node.sources:
                if src and src not in self.nodes:
                    raise ValueError(f"{node.path} is connected to unknown node: {src}")

    @staticmethod
    def _parse_box(path: str, bounds) -> BoundingBox:
        if len(bounds) != 4:
            raise ValueError(f"Box of {path} needs [x0, y0, x1, y1], got {bounds}")
        return BoundingBox(*(float(v) for v in bounds))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the current scene state back to the file layout"""
        nodes = []
        for node in self.nodes.values():
            if node.path == ROOT_GROUP:
                continue
            entry: Dict[str, Any] = {'path': node.path, 'type': node.node_type}
            if node.sources:
                entry['sources'] = list(node.sources)
            if node.attributes:
                entry['attributes'] = dict(node.attributes)
            if node.boxes:
                entry['boxes'] = {
                    str(frame): {
                        layer.name.lower(): [box.x0, box.y0, box.x1, box.y1]
                        for layer, box in sorted(layers.items())
                    }
                    for frame, layers in sorted(node.boxes.items())
                }
            if node.embedded_pivots:
                entry['embedded_pivots'] = {
                    str(frame): [p.x, p.y] for frame, p in sorted(node.embedded_pivots.items())
                }
            nodes.append(entry)

        return {
            'scene': {
                'frame': self.frame,
                'field_units_x': self.field_units_x,
                'field_units_y': self.field_units_y,
            },
            'selection': list(self.selection),
            'nodes': nodes,
        }

    def save(self, output_path=None) -> Path:
        """Write the scene to output_path (default: the file it was loaded from)"""
        path = Path(output_path) if output_path else self.file_path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
        return path
