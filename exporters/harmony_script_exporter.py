#!/usr/bin/env python3
"""
Harmony Script Exporter Module
Exports a pivot batch as a Harmony script that replays every pivot write
"""

import json
import re
from pathlib import Path

from pivot_setter import ATTR_FRAME, UNDO_ACCUM_NAME
from core.scene_data import PIVOT_X_ATTR, PIVOT_Y_ATTR

from .base_exporter import BaseExporter


class HarmonyScriptExporter(BaseExporter):
    """Harmony .js exporter

    The script contains one function wrapping all writes in a single undo
    accumulation, so running it in Harmony is one undoable edit. Resets of
    the target pivot are replayed before the centered value, in batch order.
    """

    def get_format_name(self):
        return "Harmony Script"

    def get_file_extension(self):
        return "js"

    def export(self, report, output_path, script_name, source_name=None):
        """Export to a Harmony script

        Args:
            report: PivotBatchReport with the writes to replay
            output_path: Output directory path
            script_name: Script file name and function name
            source_name: Scene the batch was computed on, for the header

        Returns:
            dict: Export results with keys:
                - 'success': bool
                - 'script_file': Path to created script (if any)
                - 'write_count': Number of pivots written by the script
                - 'skipped_count': Drawings the batch skipped
                - 'files': List of created file paths
                - 'message': Status message
        """
        if not report.writes:
            return {
                'success': False,
                'write_count': 0,
                'message': "No pivot writes to export",
                'files': []
            }

        try:
            output_dir = self.validate_output_path(output_path)
            function_name = self._function_name(script_name)

            js_lines = []
            js_lines.extend(self._generate_header(report, source_name))
            js_lines.append(f"function {function_name}()")
            js_lines.append("{")
            js_lines.append(f"\tscene.beginUndoRedoAccum({json.dumps(UNDO_ACCUM_NAME)});")
            js_lines.append("")

            for write in report.writes:
                js_lines.extend(self._generate_write(write))
                js_lines.append("")

            js_lines.append("\tscene.endUndoRedoAccum();")
            js_lines.append("}")
            js_lines.append("")

            # Only the last path component is used, the script always lands in output_dir
            file_stem = Path(str(script_name)).name or function_name
            script_file = output_dir / f"{file_stem}.{self.get_file_extension()}"
            with open(script_file, 'w', encoding='utf-8') as f:
                f.write("\n".join(js_lines))

            self.log(f"✓ Harmony script written to: {script_file}")

            return {
                'success': True,
                'script_file': str(script_file),
                'write_count': len(report.writes),
                'skipped_count': len(report.skipped),
                'message': f"Replays {len(report.writes)} pivot write(s) in {function_name}()",
                'files': [str(script_file)]
            }

        except Exception as e:
            self.log(f"ERROR: {str(e)}")
            import traceback
            self.log(traceback.format_exc())
            return {
                'success': False,
                'write_count': 0,
                'message': f"Export failed: {str(e)}",
                'files': []
            }

    def _generate_header(self, report, source_name):
        """Generate script header comments"""
        lines = []
        lines.append("// Auto-generated Harmony script from a layer pivot batch")
        if source_name:
            lines.append(f"// Computed on: {source_name}")
        lines.append(f"// Frame: {report.frame}")
        lines.append(f"// Pivots: {len(report.writes)}, skipped drawings: {len(report.skipped)}")
        lines.append("")
        return lines

    def _generate_write(self, write):
        """Generate the setTextAttr calls for one pivot write"""
        target = json.dumps(write.target)
        lines = [f"\t// {write.drawing} -> {write.target}"]
        if write.reset_first:
            lines.append(f"\tnode.setTextAttr({target}, \"{PIVOT_X_ATTR}\", {ATTR_FRAME}, 0);")
            lines.append(f"\tnode.setTextAttr({target}, \"{PIVOT_Y_ATTR}\", {ATTR_FRAME}, 0);")
        lines.append(f"\tnode.setTextAttr({target}, \"{PIVOT_X_ATTR}\", {ATTR_FRAME}, "
                     f"{self._format_number(write.pivot_x)});")
        lines.append(f"\tnode.setTextAttr({target}, \"{PIVOT_Y_ATTR}\", {ATTR_FRAME}, "
                     f"{self._format_number(write.pivot_y)});")
        return lines

    @staticmethod
    def _format_number(value):
        return repr(float(value))

    @staticmethod
    def _function_name(script_name):
        """Turn a file name into a valid script identifier"""
        name = re.sub(r'\W', '_', str(script_name))
        if not name or name[0].isdigit():
            name = f"_{name}"
        return name
