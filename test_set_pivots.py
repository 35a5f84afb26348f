#!/usr/bin/env python3
"""
Tests for the command line entry point
"""

import json
import shutil
import sys
from pathlib import Path

import pytest

import set_pivots
from hosts import create_host

SAMPLE_SCENE = Path(__file__).parent / "samples" / "character_scene.json"


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / "character_scene.json"
    shutil.copy(SAMPLE_SCENE, path)
    return path


def pivot_of(host, node):
    return (host.get_text_attr(node, 1, "pivot.x"), host.get_text_attr(node, 1, "pivot.y"))


def test_sets_pivots_and_writes_output(scene_file, tmp_path):
    output = tmp_path / "centered.json"

    assert set_pivots.main([str(scene_file), "--output", str(output)]) == 0

    host = create_host(output)
    assert pivot_of(host, "Top/Character/Head") == ("0.0", "6.0")
    assert pivot_of(host, "Top/Character/Body-P") == ("6.0", "6.0")
    # Input is untouched when --output is given
    original = json.loads(scene_file.read_text(encoding='utf-8'))
    assert original == json.loads(SAMPLE_SCENE.read_text(encoding='utf-8'))


def test_overwrites_input_by_default(scene_file):
    assert set_pivots.main([str(scene_file)]) == 0
    assert pivot_of(create_host(scene_file), "Top/Character/Body-P") == ("6.0", "6.0")


def test_frame_and_selection_overrides(scene_file, tmp_path):
    output = tmp_path / "frame5.json"

    code = set_pivots.main([str(scene_file), "--select", "Top/Character/Head",
                            "--frame", "5", "--output", str(output)])

    assert code == 0
    host = create_host(output)
    assert pivot_of(host, "Top/Character/Head") == ("6.0", "6.0")
    assert pivot_of(host, "Top/Character/Body-P") == ("0", "0")
    assert host.current_frame() == 5


def test_exports_harmony_script(scene_file, tmp_path):
    script_dir = tmp_path / "scripts"

    code = set_pivots.main([str(scene_file), "--output", str(tmp_path / "out.json"),
                            "--script-dir", str(script_dir)])

    assert code == 0
    script = script_dir / "character_scene_center_pivots.js"
    assert script.exists()
    assert "function character_scene_center_pivots()" in script.read_text(encoding='utf-8')


def test_nothing_to_do_leaves_scene_alone(scene_file, tmp_path, capsys):
    output = tmp_path / "untouched.json"

    code = set_pivots.main([str(scene_file), "--select", "Top/Character/Body-P",
                            "--output", str(output)])

    assert code == 0
    assert not output.exists()
    assert "Please select at least one drawing node" in capsys.readouterr().out


def test_missing_scene_fails(tmp_path, capsys):
    assert set_pivots.main([str(tmp_path / "nope.json")]) == 1
    assert "Scene file not found" in capsys.readouterr().err


def test_unsupported_extension_fails(tmp_path, capsys):
    scene = tmp_path / "scene.xstage"
    scene.write_text("<xstage/>", encoding='utf-8')
    assert set_pivots.main([str(scene)]) == 1
    assert "Unsupported scene format" in capsys.readouterr().err


def test_unknown_selection_fails(scene_file, capsys):
    assert set_pivots.main([str(scene_file), "--select", "Top/Ghost"]) == 1
    assert "Unknown node: Top/Ghost" in capsys.readouterr().err


def test_gui_dialogs_route_through_message_box(scene_file, monkeypatch):
    shown = []
    monkeypatch.setattr(set_pivots, "tk_message_box", shown.append)

    code = set_pivots.main([str(scene_file), "--select", "Top/Character/Body-P", "--gui-dialogs"])

    assert code == 0
    assert len(shown) == 1


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
