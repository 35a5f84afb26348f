#!/usr/bin/env python3
"""
Exporters Module
Output formats for completed pivot batches
"""

from .base_exporter import BaseExporter
from .harmony_script_exporter import HarmonyScriptExporter

__all__ = [
    'BaseExporter',
    'HarmonyScriptExporter',
]
