"""Pan and zoom state of the canvas, independent of graph content."""

import logging
from dataclasses import dataclass, replace

from flowcanvas.core.geometry import (
    KEYBOARD_ZOOM_STEP,
    Point,
    clamp_zoom,
    graph_to_screen,
    screen_to_graph,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewportState:
    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom: float = 1.0

    @property
    def pan(self) -> Point:
        return Point(self.pan_x, self.pan_y)


class Viewport:
    """Mutable cell holding the current ViewportState."""

    def __init__(self, state: ViewportState = ViewportState()):
        self._state = replace(state, zoom=clamp_zoom(state.zoom))

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def pan(self) -> Point:
        return self._state.pan

    @property
    def zoom(self) -> float:
        return self._state.zoom

    def set_pan(self, x: float, y: float) -> None:
        self._state = replace(self._state, pan_x=x, pan_y=y)

    def pan_by(self, dx: float, dy: float) -> None:
        self.set_pan(self._state.pan_x + dx, self._state.pan_y + dy)

    def set_zoom(self, zoom: float) -> None:
        self._state = replace(self._state, zoom=clamp_zoom(zoom))
        logger.debug("zoom -> %.3f", self._state.zoom)

    def zoom_by(self, factor: float) -> None:
        self.set_zoom(self._state.zoom * factor)

    def zoom_in(self) -> None:
        self.zoom_by(KEYBOARD_ZOOM_STEP)

    def zoom_out(self) -> None:
        self.zoom_by(1 / KEYBOARD_ZOOM_STEP)

    def reset(self) -> None:
        self._state = ViewportState()

    def screen_to_graph(self, sx: float, sy: float) -> Point:
        s = self._state
        return screen_to_graph(sx, sy, s.pan_x, s.pan_y, s.zoom)

    def graph_to_screen(self, gx: float, gy: float) -> Point:
        s = self._state
        return graph_to_screen(gx, gy, s.pan_x, s.pan_y, s.zoom)
