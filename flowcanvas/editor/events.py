"""
Input events consumed by the interaction controller, and the intents it emits.

Events carry canvas-relative screen coordinates. The renderer that produced
an event says what was under the pointer (``node_id`` / ``edge``); ``None``
means the empty canvas background.
"""

from dataclasses import dataclass
from typing import Optional, Union

from flowcanvas.core.ir import SelectedEdge


# -- Input events -------------------------------------------------------------

@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float
    node_id: Optional[str] = None
    edge: Optional[SelectedEdge] = None
    shift: bool = False


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    x: float
    y: float


@dataclass(frozen=True)
class DoubleClick:
    x: float
    y: float
    node_id: Optional[str] = None


@dataclass(frozen=True)
class Wheel:
    """``delta_y > 0`` scrolls down (zoom out), anything else zooms in."""
    delta_y: float


@dataclass(frozen=True)
class KeyPress:
    key: str
    ctrl: bool = False
    meta: bool = False
    in_text_input: bool = False


InputEvent = Union[PointerDown, PointerMove, PointerUp, DoubleClick, Wheel, KeyPress]


# -- Intents ------------------------------------------------------------------

@dataclass(frozen=True)
class SelectNode:
    node_id: str


@dataclass(frozen=True)
class SelectEdge:
    node_id: str
    edge_id: str


@dataclass(frozen=True)
class ClearSelection:
    pass


@dataclass(frozen=True)
class MoveNode:
    node_id: str
    x: float
    y: float


@dataclass(frozen=True)
class ConnectNodes:
    from_id: str
    to_id: str


@dataclass(frozen=True)
class AddNode:
    x: float
    y: float


@dataclass(frozen=True)
class SetPan:
    x: float
    y: float


@dataclass(frozen=True)
class ZoomBy:
    factor: float


@dataclass(frozen=True)
class DeleteSelection:
    pass


Intent = Union[
    SelectNode, SelectEdge, ClearSelection, MoveNode, ConnectNodes,
    AddNode, SetPan, ZoomBy, DeleteSelection,
]
