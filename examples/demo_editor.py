"""
Drive a FlowEditor with synthetic input events, the way a canvas renderer would.
"""

import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from flowcanvas.backend import MermaidExporter
from flowcanvas.config import load_config
from flowcanvas.editor import FlowEditor
from flowcanvas.editor.events import DoubleClick, KeyPress, PointerDown, PointerMove, PointerUp, Wheel


def main():
    editor = FlowEditor.from_config(load_config())
    print(f"Starting flow: {editor.graph.node_ids}")

    # Double-click the background to add a node, then describe it
    editor.dispatch(DoubleClick(520, 180))
    new_id = editor.selected_node_id
    editor.store.update_node(new_id, description="Collect the order details")
    print(f"Added {new_id} at {editor.graph.get_node(new_id).x, editor.graph.get_node(new_id).y}")

    # Shift-drag from the welcome node onto the new node to connect them
    editor.dispatch(PointerDown(150, 200, node_id="welcome", shift=True))
    editor.dispatch(PointerMove(540, 200))
    editor.dispatch(PointerUp(540, 200))

    # Pan the canvas and zoom in a little
    editor.dispatch(PointerDown(900, 600))
    editor.dispatch(PointerMove(860, 580))
    editor.dispatch(PointerUp(860, 580))
    editor.dispatch(Wheel(delta_y=-120))
    editor.dispatch(KeyPress("=", ctrl=True))
    state = editor.viewport.state
    print(f"Viewport: pan=({state.pan_x}, {state.pan_y}) zoom={state.zoom:.3f}")

    print(f"Status: {editor.status}")
    for issue in editor.issues:
        print(f"  {issue}")

    print()
    print(MermaidExporter.to_mermaid(editor.graph))
    print()
    print(editor.json_output)


if __name__ == "__main__":
    main()
