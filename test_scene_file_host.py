#!/usr/bin/env python3
"""
Tests for the JSON scene file host and the host factory
"""

import json
import shutil
import sys
from pathlib import Path

import pytest

from core.scene_data import ArtLayer, BoundingBox, Point2d, SkipReason
from hosts import SceneFileHost, create_host, is_supported_format
from pivot_setter import PivotSetter

SAMPLE_SCENE = Path(__file__).parent / "samples" / "character_scene.json"


def write_scene(path, data):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f)
    return path


def test_loads_sample_scene():
    host = create_host(SAMPLE_SCENE)

    assert isinstance(host, SceneFileHost)
    assert host.current_frame() == 1
    assert host.selected_nodes() == ["Top/Character", "Top/Background", "Top/Empty"]
    assert host.node_type("Top/Character") == "GROUP"
    assert host.sub_nodes("Top/Character") == [
        "Top/Character/Character-P",
        "Top/Character/Head",
        "Top/Character/Body-P",
        "Top/Character/Body",
    ]
    assert host.number_of_sub_nodes("Top") == 3
    assert host.parent_node("Top/Character/Head") == "Top/Character"
    assert host.parent_node("Top") == ""
    assert host.src_node("Top/Character/Head", 0) == "Top/Character/Character-P"
    assert host.src_node("Top/Background", 0) == ""


def test_attributes_keep_their_types():
    host = create_host(SAMPLE_SCENE)

    assert host.get_bool_attr("Top/Character/Head", 1, "canAnimate") is True
    assert host.get_bool_attr("Top/Character/Body", 1, "canAnimate") is False
    assert host.get_text_attr("Top/Character/Head", 1, "useDrawingPivot") == \
        "Apply Embedded Pivot on Drawing Layer"
    assert host.get_text_attr("Top/Background", 1, "useDrawingPivot") == ""


def test_boxes_hold_until_next_drawing_key():
    host = create_host(SAMPLE_SCENE)
    head = "Top/Character/Head"

    assert host.get_box(head, 1, ArtLayer.LINE_ART) == BoundingBox(-3750, -1875, 3750, 5625)
    assert host.get_box(head, 4, ArtLayer.COLOR_ART) == BoundingBox(-1875, 0, 1875, 1875)
    assert host.get_box(head, 5, ArtLayer.LINE_ART) == BoundingBox(0, 0, 3750, 3750)
    assert host.get_box(head, 5, ArtLayer.COLOR_ART) is None
    assert host.get_box(head, 5, ArtLayer.UNDERLAY) is None
    # Pegs have no artwork
    assert host.get_box("Top/Character/Body-P", 1, ArtLayer.LINE_ART) is None


def test_save_round_trip(tmp_path):
    scene_file = tmp_path / "scene.json"
    shutil.copy(SAMPLE_SCENE, scene_file)

    host = create_host(scene_file)
    host.set_text_attr("Top/Character/Body-P", "pivot.x", 1, 6.0)
    host.set_embedded_pivot("Top/Character/Head", 2, 1.5, -0.5)
    saved = host.save(tmp_path / "out" / "scene_out.json")

    reloaded = create_host(saved)
    assert reloaded.get_text_attr("Top/Character/Body-P", 1, "pivot.x") == "6.0"
    assert reloaded.get_node("Top/Character/Head").embedded_pivots[2] == Point2d(1.5, -0.5)
    assert reloaded.get_box("Top/Character/Head", 1, ArtLayer.COLOR_ART) == \
        BoundingBox(-1875, 0, 1875, 1875)
    assert reloaded.selected_nodes() == host.selected_nodes()
    assert reloaded.sub_nodes("Top/Character") == host.sub_nodes("Top/Character")


def test_blank_drawing_key_ends_previous_drawing(tmp_path):
    scene_file = write_scene(tmp_path / "scene.json", {
        "scene": {"frame": 5},
        "selection": ["Top/D"],
        "nodes": [{"path": "Top/D", "type": "READ", "attributes": {"canAnimate": True},
                   "boxes": {"1": {"line_art": [0, 0, 3750, 3750]}, "5": {}}}]
    })
    host = create_host(scene_file)

    assert host.get_box("Top/D", 4, ArtLayer.LINE_ART) == BoundingBox(0, 0, 3750, 3750)
    assert host.get_box("Top/D", 5, ArtLayer.LINE_ART) is None

    report = PivotSetter(host).run()
    assert report.writes == []
    assert report.skipped[0].reason is SkipReason.EMPTY_DRAWING
    assert host.attribute_writes == []


def test_cleared_layer_survives_save_and_reload(tmp_path):
    scene_file = tmp_path / "scene.json"
    shutil.copy(SAMPLE_SCENE, scene_file)

    host = create_host(scene_file)
    host.set_box("Top/Background", 1, ArtLayer.LINE_ART, BoundingBox(0, 0, 3750, 3750))
    host.set_box("Top/Background", 5, ArtLayer.LINE_ART, None)
    reloaded = create_host(host.save(tmp_path / "cleared.json"))

    assert reloaded.get_box("Top/Background", 1, ArtLayer.LINE_ART) == BoundingBox(0, 0, 3750, 3750)
    assert reloaded.get_box("Top/Background", 5, ArtLayer.LINE_ART) is None


def test_save_defaults_to_source_file(tmp_path):
    scene_file = tmp_path / "scene.json"
    shutil.copy(SAMPLE_SCENE, scene_file)

    host = create_host(scene_file)
    host.set_text_attr("Top/Character/Head", "pivot.y", 1, 2.5)
    assert host.save() == scene_file
    assert create_host(scene_file).get_text_attr("Top/Character/Head", 1, "pivot.y") == "2.5"


def test_children_may_be_listed_before_their_group(tmp_path):
    scene_file = write_scene(tmp_path / "scene.json", {
        "nodes": [
            {"path": "Top/Group/Drawing", "type": "READ"},
            {"path": "Top/Group", "type": "GROUP"},
        ]
    })
    host = create_host(scene_file)
    assert host.sub_nodes("Top/Group") == ["Top/Group/Drawing"]
    assert host.selected_nodes() == []


def test_missing_file_raises(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        create_host(tmp_path / "missing.json")


def test_invalid_json_raises(tmp_path):
    scene_file = tmp_path / "broken.json"
    scene_file.write_text("{ nodes: ", encoding='utf-8')
    with pytest.raises(ValueError, match="not valid JSON"):
        create_host(scene_file)


def test_unknown_source_raises(tmp_path):
    scene_file = write_scene(tmp_path / "scene.json", {
        "nodes": [{"path": "Top/Drawing", "type": "READ", "sources": ["Top/Nowhere"]}]
    })
    with pytest.raises(ValueError, match="unknown node"):
        create_host(scene_file)


def test_node_inside_non_group_raises(tmp_path):
    scene_file = write_scene(tmp_path / "scene.json", {
        "nodes": [
            {"path": "Top/Peg", "type": "PEG"},
            {"path": "Top/Peg/Drawing", "type": "READ"},
        ]
    })
    with pytest.raises(ValueError, match="not an existing group"):
        create_host(scene_file)


def test_bad_box_and_layer_names_raise(tmp_path):
    bad_box = write_scene(tmp_path / "box.json", {
        "nodes": [{"path": "Top/D", "type": "READ", "boxes": {"1": {"line_art": [0, 0, 1]}}}]
    })
    with pytest.raises(ValueError, match="x0, y0, x1, y1"):
        create_host(bad_box)

    bad_layer = write_scene(tmp_path / "layer.json", {
        "nodes": [{"path": "Top/D", "type": "READ", "boxes": {"1": {"sketch": [0, 0, 1, 1]}}}]
    })
    with pytest.raises(ValueError, match="Unknown art layer"):
        create_host(bad_layer)


def test_selection_of_unknown_node_raises(tmp_path):
    scene_file = write_scene(tmp_path / "scene.json", {"selection": ["Top/Ghost"], "nodes": []})
    with pytest.raises(ValueError, match="Unknown node"):
        create_host(scene_file)


def test_unsupported_extension():
    assert is_supported_format("scene.json")
    assert is_supported_format("SCENE.JSON")
    assert not is_supported_format("scene.xstage")
    with pytest.raises(ValueError, match="Unsupported scene format"):
        create_host("scene.xstage")


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
