"""
Interaction Controller - gesture state machine for the flow canvas.

Translates raw input events into intents:

- pointer-down on a node with shift held starts a connection,
- pointer-down on a node otherwise selects it and starts a drag,
- pointer-down on the background clears the selection and starts a pan,
- pointer-up ends whatever gesture is active,
- double-click on the background adds a node,
- the wheel and Ctrl/Cmd +/- zoom, Delete/Backspace removes the selection.

The controller only reads the store and viewport. Intents are applied by
the caller (see ``flowcanvas.editor.session.FlowEditor``), which keeps a
single writer for each piece of state.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple, Union

from flowcanvas.core.geometry import (
    KEYBOARD_ZOOM_STEP,
    WHEEL_ZOOM_IN,
    WHEEL_ZOOM_OUT,
    Point,
    connect_line_start,
    hit_test,
    node_center,
)
from flowcanvas.editor.events import (
    AddNode,
    ClearSelection,
    ConnectNodes,
    DeleteSelection,
    DoubleClick,
    InputEvent,
    Intent,
    KeyPress,
    MoveNode,
    PointerDown,
    PointerMove,
    PointerUp,
    SelectEdge,
    SelectNode,
    SetPan,
    Wheel,
    ZoomBy,
)
from flowcanvas.editor.store import FlowStore
from flowcanvas.editor.viewport import Viewport

logger = logging.getLogger(__name__)

DELETE_KEYS = ("Delete", "Backspace")


class GestureState(Enum):
    IDLE = "idle"
    DRAGGING_NODE = "dragging_node"
    PANNING = "panning"
    CONNECTING = "connecting"


@dataclass(frozen=True)
class DragGesture:
    node_id: str
    start: Point    # pointer, graph space
    origin: Point   # node position when the drag began


@dataclass(frozen=True)
class PanGesture:
    start: Point    # pointer, screen space
    origin: Point   # pan offset when the pan began


@dataclass(frozen=True)
class ConnectGesture:
    from_node_id: str
    cursor: Point   # tracked endpoint, graph space


Gesture = Union[DragGesture, PanGesture, ConnectGesture]


class InteractionController:
    """Consumes input events one at a time and returns the resulting intents."""

    def __init__(self, store: FlowStore, viewport: Viewport):
        self._store = store
        self._viewport = viewport
        self._gesture: Optional[Gesture] = None

    @property
    def gesture(self) -> Optional[Gesture]:
        return self._gesture

    @property
    def state(self) -> GestureState:
        if isinstance(self._gesture, DragGesture):
            return GestureState.DRAGGING_NODE
        if isinstance(self._gesture, PanGesture):
            return GestureState.PANNING
        if isinstance(self._gesture, ConnectGesture):
            return GestureState.CONNECTING
        return GestureState.IDLE

    def connection_line(self) -> Optional[Tuple[Point, Point]]:
        """Start and end of the live connect preview, or None when not connecting."""
        if not isinstance(self._gesture, ConnectGesture):
            return None
        source = self._store.graph.get_node(self._gesture.from_node_id)
        if source is None:
            return None
        return connect_line_start(source), self._gesture.cursor

    def _enter(self, gesture: Optional[Gesture]) -> None:
        before = self.state
        self._gesture = gesture
        if self.state is not before:
            logger.debug("gesture %s -> %s", before.value, self.state.value)

    def handle(self, event: InputEvent) -> List[Intent]:
        if isinstance(event, PointerDown):
            return self._pointer_down(event)
        if isinstance(event, PointerMove):
            return self._pointer_move(event)
        if isinstance(event, PointerUp):
            return self._pointer_up(event)
        if isinstance(event, DoubleClick):
            return self._double_click(event)
        if isinstance(event, Wheel):
            return [ZoomBy(WHEEL_ZOOM_OUT if event.delta_y > 0 else WHEEL_ZOOM_IN)]
        if isinstance(event, KeyPress):
            return self._key_press(event)
        raise TypeError(f"Unsupported input event: {event!r}")

    def _pointer_down(self, event: PointerDown) -> List[Intent]:
        if event.node_id is not None:
            node = self._store.graph.get_node(event.node_id)
            if node is None:
                return []
            if event.shift:
                self._enter(ConnectGesture(from_node_id=node.id, cursor=node_center(node)))
                return []
            pointer = self._viewport.screen_to_graph(event.x, event.y)
            self._enter(DragGesture(node_id=node.id, start=pointer, origin=Point(node.x, node.y)))
            return [SelectNode(node.id)]

        if event.edge is not None:
            return [SelectEdge(event.edge.node_id, event.edge.edge_id)]

        self._enter(PanGesture(start=Point(event.x, event.y), origin=self._viewport.pan))
        return [ClearSelection()]

    def _pointer_move(self, event: PointerMove) -> List[Intent]:
        gesture = self._gesture
        if isinstance(gesture, DragGesture):
            pointer = self._viewport.screen_to_graph(event.x, event.y)
            return [MoveNode(
                gesture.node_id,
                gesture.origin.x + (pointer.x - gesture.start.x),
                gesture.origin.y + (pointer.y - gesture.start.y),
            )]
        if isinstance(gesture, PanGesture):
            # Raw pixels: panning is not scaled by zoom.
            return [SetPan(
                gesture.origin.x + (event.x - gesture.start.x),
                gesture.origin.y + (event.y - gesture.start.y),
            )]
        if isinstance(gesture, ConnectGesture):
            self._gesture = replace(gesture, cursor=self._viewport.screen_to_graph(event.x, event.y))
        return []

    def _pointer_up(self, event: PointerUp) -> List[Intent]:
        gesture = self._gesture
        self._enter(None)
        if not isinstance(gesture, ConnectGesture):
            return []
        pointer = self._viewport.screen_to_graph(event.x, event.y)
        target = hit_test(self._store.graph.nodes, pointer.x, pointer.y, exclude=gesture.from_node_id)
        if target is None:
            return []
        return [ConnectNodes(gesture.from_node_id, target.id)]

    def _double_click(self, event: DoubleClick) -> List[Intent]:
        if event.node_id is not None:
            return []
        pointer = self._viewport.screen_to_graph(event.x, event.y)
        return [AddNode(pointer.x, pointer.y)]

    def _key_press(self, event: KeyPress) -> List[Intent]:
        if event.key in DELETE_KEYS and not event.in_text_input:
            return [DeleteSelection()]
        if event.ctrl or event.meta:
            if event.key == "=":
                return [ZoomBy(KEYBOARD_ZOOM_STEP)]
            if event.key == "-":
                return [ZoomBy(1 / KEYBOARD_ZOOM_STEP)]
        return []
