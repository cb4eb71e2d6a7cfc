"""
Coordinate and path math for the flow canvas.

Graph space is where node positions live; screen space is canvas-relative
pixels. The two are related by the viewport's pan offset and zoom factor:

    graph = (screen - pan) / zoom
"""

import math
from typing import Iterable, NamedTuple, Optional

from flowcanvas.core.ir import Node

GRID = 20
NODE_W = 210
NODE_H = 76

MIN_ZOOM = 0.25
MAX_ZOOM = 2.5
WHEEL_ZOOM_IN = 1.08
WHEEL_ZOOM_OUT = 0.92
KEYBOARD_ZOOM_STEP = 1.15

# Imported documents carry no positions; nodes are laid out on this grid.
IMPORT_ORIGIN = 100
IMPORT_COLUMNS = 4
IMPORT_COLUMN_SPACING = 260
IMPORT_ROW_SPACING = 140

# Bezier control points sit this fraction of the horizontal gap away from the ends.
CURVE_TENSION = 0.55


class Point(NamedTuple):
    x: float
    y: float


class EdgeCurve(NamedTuple):
    """Cubic Bezier from a source node's right side to a target's left side."""
    start: Point
    control1: Point
    control2: Point
    end: Point

    def to_svg_path(self) -> str:
        s, c1, c2, e = self
        return (
            f"M {_fmt(s.x)} {_fmt(s.y)} "
            f"C {_fmt(c1.x)} {_fmt(c1.y)}, {_fmt(c2.x)} {_fmt(c2.y)}, {_fmt(e.x)} {_fmt(e.y)}"
        )


def _fmt(value: float) -> str:
    """Render a coordinate without a trailing ``.0`` for whole numbers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def snap_to_grid(value: float) -> int:
    """Round to the nearest grid line, halves rounding up."""
    return int(math.floor(value / GRID + 0.5)) * GRID


def clamp_zoom(zoom: float) -> float:
    return min(MAX_ZOOM, max(MIN_ZOOM, zoom))


def screen_to_graph(sx: float, sy: float, pan_x: float, pan_y: float, zoom: float) -> Point:
    return Point((sx - pan_x) / zoom, (sy - pan_y) / zoom)


def graph_to_screen(gx: float, gy: float, pan_x: float, pan_y: float, zoom: float) -> Point:
    return Point(gx * zoom + pan_x, gy * zoom + pan_y)


def node_center(node: Node) -> Point:
    return Point(node.x + NODE_W / 2, node.y + NODE_H / 2)


def connect_line_start(node: Node) -> Point:
    """Where outgoing edges (and the live connect preview) leave a node."""
    return Point(node.x + NODE_W, node.y + NODE_H / 2)


def node_contains(node: Node, x: float, y: float) -> bool:
    return node.x <= x <= node.x + NODE_W and node.y <= y <= node.y + NODE_H


def hit_test(nodes: Iterable[Node], x: float, y: float, exclude: Optional[str] = None) -> Optional[Node]:
    """Return the first node whose box contains ``(x, y)``, skipping ``exclude``."""
    for node in nodes:
        if exclude is not None and node.id == exclude:
            continue
        if node_contains(node, x, y):
            return node
    return None


def edge_curve(source: Node, target: Node) -> EdgeCurve:
    fx, fy = connect_line_start(source)
    tx = target.x
    ty = target.y + NODE_H / 2
    cp = abs(tx - fx) * CURVE_TENSION
    return EdgeCurve(
        start=Point(fx, fy),
        control1=Point(fx + cp, fy),
        control2=Point(tx - cp, ty),
        end=Point(tx, ty),
    )


def edge_midpoint(source: Node, target: Node) -> Point:
    return Point(
        (source.x + NODE_W + target.x) / 2,
        (source.y + NODE_H / 2 + target.y + NODE_H / 2) / 2,
    )


def import_position(index: int) -> Point:
    """Default position of the ``index``-th node of an imported document."""
    column = index % IMPORT_COLUMNS
    row = index // IMPORT_COLUMNS
    return Point(
        snap_to_grid(IMPORT_ORIGIN + column * IMPORT_COLUMN_SPACING),
        snap_to_grid(IMPORT_ORIGIN + row * IMPORT_ROW_SPACING),
    )


def grid_offset(pan_x: float, pan_y: float, zoom: float) -> Point:
    """Phase of the background dot pattern so it scrolls with the canvas."""
    cell = GRID * zoom
    return Point(math.fmod(pan_x, cell), math.fmod(pan_y, cell))
