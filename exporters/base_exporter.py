#!/usr/bin/env python3
"""
Base Exporter Module
Abstract base class ensuring consistent interface across batch exporters

Exporters receive a PivotBatchReport, never a host, so a batch computed
against one scene can be replayed somewhere else.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.scene_data import PivotBatchReport


class BaseExporter(ABC):
    """Abstract base class for all batch exporters

    Each exporter turns the writes of a pivot batch into one output format.
    Shared utilities (logging, path validation, summaries) live here.
    """

    def __init__(self, progress_callback=None):
        """Initialize exporter

        Args:
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress/status message

        Args:
            message: Message to log
        """
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    @abstractmethod
    def export(self, report: 'PivotBatchReport', output_path, script_name):
        """Export a pivot batch

        Args:
            report: PivotBatchReport from PivotSetter.run()
            output_path: Output directory path (Path object or string)
            script_name: Base name for created files

        Returns:
            dict: Export results with at least:
                  - 'success': bool
                  - 'files': list of created file paths
                  - 'message': str status message
        """
        pass

    @abstractmethod
    def get_format_name(self):
        """Return human-readable format name (e.g., "Harmony Script")"""
        pass

    @abstractmethod
    def get_file_extension(self):
        """Return primary file extension without dot (e.g., "js")"""
        pass

    def validate_output_path(self, output_path):
        """Return output_path as a directory Path, creating it if needed

        Raises:
            ValueError: If output_path is an existing file or cannot be created
        """
        path = Path(output_path)
        if path.exists() and not path.is_dir():
            raise ValueError(f"Output path is a file, not a directory: {path}")

        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ValueError(f"Cannot create output directory {path}: {e}")
        return path

    def get_export_summary(self, result):
        """Describe an export result in a few lines for the console

        Successful exports also count the pivots written and the drawings the
        batch skipped.
        """
        if not result.get('success'):
            lines = [f"✗ {self.get_format_name()} Export Failed"]
        else:
            lines = [f"✓ {self.get_format_name()} Export Complete"]
            lines.append(f"  Pivots written: {result.get('write_count', 0)}, "
                         f"drawings skipped: {result.get('skipped_count', 0)}")
            for file_path in result.get('files', []):
                lines.append(f"    - {Path(file_path).name}")

        if result.get('message'):
            lines.append(f"  {result['message']}")

        return "\n".join(lines)
