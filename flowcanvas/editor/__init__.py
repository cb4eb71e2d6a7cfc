"""
Editing layer over a flow graph.

- FlowStore: Snapshot holder with the graph mutation operations
- Viewport: Pan/zoom cell
- InteractionController: Gesture state machine turning input events into intents
- FlowEditor: Session wiring the three together with selection and derived views
"""

from .store import FlowStore, welcome_flow
from .viewport import Viewport, ViewportState
from .controller import InteractionController, GestureState
from .session import FlowEditor, InvalidFlowError

__all__ = [
    "FlowStore",
    "welcome_flow",
    "Viewport",
    "ViewportState",
    "InteractionController",
    "GestureState",
    "FlowEditor",
    "InvalidFlowError",
]
