#!/usr/bin/env python3
"""
Hosts Module
Scene graph hosts the pivot setter can run against (in-memory, JSON scene file)
"""

from pathlib import Path

from .base_host import BaseHost
from .memory_host import MemoryHost, SceneNode
from .scene_file_host import SceneFileHost

# Supported file extensions
SCENE_FILE_EXTENSIONS = {'.json'}
SUPPORTED_EXTENSIONS = SCENE_FILE_EXTENSIONS


def create_host(scene_file, message_box=None):
    """Factory function to create the host for a scene file

    Args:
        scene_file: Path to a scene file
        message_box: Optional callable(text) used to display dialogs

    Returns:
        BaseHost: SceneFileHost instance

    Raises:
        ValueError: If file extension is not supported
    """
    ext = Path(scene_file).suffix.lower()

    if ext in SCENE_FILE_EXTENSIONS:
        return SceneFileHost(scene_file, message_box=message_box)
    else:
        raise ValueError(
            f"Unsupported scene format: {ext}\n"
            f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
        )


def is_supported_format(scene_file):
    """Check if a file has a supported format

    Args:
        scene_file: Path to scene file

    Returns:
        bool: True if format is supported
    """
    return Path(scene_file).suffix.lower() in SUPPORTED_EXTENSIONS


__all__ = [
    'BaseHost',
    'MemoryHost',
    'SceneNode',
    'SceneFileHost',
    'create_host',
    'is_supported_format',
    'SCENE_FILE_EXTENSIONS',
    'SUPPORTED_EXTENSIONS',
]
