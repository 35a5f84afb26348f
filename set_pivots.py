#!/usr/bin/env python3
"""
Set Layer Pivots v1.1.0 - Command Line Version
Sets the layer pivots of selected drawings at the center of their artwork
"""

import argparse
import sys
from pathlib import Path

from exporters.harmony_script_exporter import HarmonyScriptExporter
from hosts import SUPPORTED_EXTENSIONS, create_host
from pivot_setter import PivotSetter

DIALOG_TITLE = "Set Layer Pivots"


def tk_message_box(text):
    """Show an information dialog with tkinter, blocking until dismissed"""
    import tkinter as tk
    from tkinter import messagebox

    root = tk.Tk()
    root.withdraw()
    try:
        messagebox.showinfo(DIALOG_TITLE, text, parent=root)
    finally:
        root.destroy()


def build_parser():
    parser = argparse.ArgumentParser(
        prog='set-layer-pivots',
        description='Set the layer pivot of selected drawings at the center of their artwork',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use the selection and frame stored in the scene file, overwrite it in place
  set-layer-pivots scene.json

  # Select nodes and frame explicitly, keep the input untouched
  set-layer-pivots scene.json --select Top/Character Top/Prop --frame 12 --output scene_centered.json

  # Also write a Harmony script that replays the pivot writes
  set-layer-pivots scene.json --script-dir ./scripts --script-name Center_Pivots_Shot010

Pivot placement:
  The pivot is set on the drawing itself when "Animate Using Animation Tools"
  is on. It is set on the drawing's parent peg when that option is off, or
  when the drawing uses "Apply Embedded Pivot on Parent Peg".
        """
    )

    parser.add_argument('scene', type=str, help='Input scene file (.json)')
    parser.add_argument('--select', nargs='+', metavar='NODE',
                        help='Nodes to process (default: selection stored in the scene)')
    parser.add_argument('--frame', type=int,
                        help='Frame to measure drawings at (default: scene current frame)')
    parser.add_argument('--output', type=str,
                        help='Output scene file (default: overwrite the input scene)')
    parser.add_argument('--script-dir', type=str,
                        help='Also export a Harmony script replaying the writes to this directory')
    parser.add_argument('--script-name', type=str,
                        help='Harmony script name (default: derived from the scene file name)')
    parser.add_argument('--gui-dialogs', action='store_true',
                        help='Show information dialogs in a window instead of the console')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate input file exists
    scene_path = Path(args.scene)
    if not scene_path.exists():
        print(f"Error: Scene file not found: {args.scene}", file=sys.stderr)
        return 1

    # Validate file extension
    file_ext = scene_path.suffix.lower()
    if file_ext not in SUPPORTED_EXTENSIONS:
        print(f"Error: Unsupported scene format: {file_ext}", file=sys.stderr)
        print(f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}", file=sys.stderr)
        return 1

    message_box = tk_message_box if args.gui_dialogs else None

    try:
        host = create_host(str(scene_path), message_box=message_box)
        if args.select:
            host.select(*args.select)
        if args.frame is not None:
            host.frame = args.frame
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("=" * 60)
    print(f"Scene: {scene_path.name}")
    print(f"Selection: {', '.join(host.selected_nodes()) or '(none)'}")
    print(f"Frame: {host.current_frame()}")
    print("=" * 60 + "\n")

    try:
        report = PivotSetter(host).run()

        if not report.writes:
            print("\nNo pivots were set; scene left unchanged")
            return 0

        output_path = host.save(args.output)
        print(f"\n✓ Scene written to: {output_path}")

        if args.script_dir:
            script_name = args.script_name or f"{scene_path.stem}_center_pivots"
            exporter = HarmonyScriptExporter()
            result = exporter.export(report, args.script_dir, script_name, source_name=scene_path.name)
            print(exporter.get_export_summary(result))
            if not result['success']:
                return 1

    except Exception as e:
        print(f"\n✗ Setting pivots failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
