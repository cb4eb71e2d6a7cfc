"""
FlowEditor - the application shell around the store, viewport and controller.

Holds the selection, applies controller intents, and keeps the derived views
(validation issues and the exported document) in step with the current
snapshot. A renderer reads from an editor and feeds it input events.
"""

import logging
from typing import Any, Dict, List, Optional

from flowcanvas.config import CanvasConfig
from flowcanvas.core.ir import FlowGraph, SelectedEdge
from flowcanvas.core.serialization import ImportedFlow, JsonSerializer, MalformedDocument
from flowcanvas.core.validation import ValidationIssue, errors, summarize, validate_flow
from flowcanvas.editor.controller import InteractionController
from flowcanvas.editor.events import (
    AddNode,
    ClearSelection,
    ConnectNodes,
    DeleteSelection,
    InputEvent,
    Intent,
    MoveNode,
    SelectEdge,
    SelectNode,
    SetPan,
    ZoomBy,
)
from flowcanvas.editor.store import FlowStore, welcome_flow
from flowcanvas.editor.viewport import Viewport

logger = logging.getLogger(__name__)


class InvalidFlowError(ValueError):
    """Raised when a flow with validation errors is exported in strict mode."""

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        count = len(errors(issues))
        super().__init__(f"{count} error{'s' if count != 1 else ''} must be fixed before export.")


class FlowEditor:
    """
    Editing session over a single flow.

    Example:
        editor = FlowEditor()
        editor.dispatch(DoubleClick(400, 300))      # adds and selects a node
        editor.store.update_node(editor.selected_node_id, description="Ask for the order")
        print(editor.json_output)
    """

    def __init__(
        self,
        store: Optional[FlowStore] = None,
        viewport: Optional[Viewport] = None,
        seed_welcome: bool = True,
    ):
        if store is None:
            store = FlowStore(welcome_flow() if seed_welcome else None)
        self.store = store
        self.viewport = viewport or Viewport()
        self.controller = InteractionController(self.store, self.viewport)
        self.selected_node_id: Optional[str] = None
        self.selected_edge: Optional[SelectedEdge] = None
        self._issues_for: Optional[FlowGraph] = None
        self._issues: List[ValidationIssue] = []

    @classmethod
    def from_config(cls, config: CanvasConfig) -> "FlowEditor":
        return cls(seed_welcome=config.seed_welcome)

    @property
    def graph(self) -> FlowGraph:
        return self.store.graph

    # -- Derived views -------------------------------------------------------

    @property
    def issues(self) -> List[ValidationIssue]:
        graph = self.store.graph
        if graph is not self._issues_for:
            self._issues = validate_flow(graph)
            self._issues_for = graph
        return list(self._issues)

    @property
    def document(self) -> Dict[str, Any]:
        return JsonSerializer.to_dict(self.store.graph)

    @property
    def json_output(self) -> str:
        return JsonSerializer.to_json(self.store.graph)

    @property
    def status(self) -> str:
        return summarize(self.issues)

    # -- Input ---------------------------------------------------------------

    def dispatch(self, event: InputEvent) -> List[Intent]:
        """Feed one input event through the controller and apply its intents."""
        intents = self.controller.handle(event)
        for intent in intents:
            self.apply(intent)
        return intents

    def apply(self, intent: Intent) -> None:
        if isinstance(intent, SelectNode):
            self.select_node(intent.node_id)
        elif isinstance(intent, SelectEdge):
            self.select_edge(intent.node_id, intent.edge_id)
        elif isinstance(intent, ClearSelection):
            self.clear_selection()
        elif isinstance(intent, MoveNode):
            self.store.move_node(intent.node_id, intent.x, intent.y)
        elif isinstance(intent, ConnectNodes):
            self.store.connect_nodes(intent.from_id, intent.to_id)
        elif isinstance(intent, AddNode):
            self.add_node(intent.x, intent.y)
        elif isinstance(intent, SetPan):
            self.viewport.set_pan(intent.x, intent.y)
        elif isinstance(intent, ZoomBy):
            self.viewport.zoom_by(intent.factor)
        elif isinstance(intent, DeleteSelection):
            self.delete_selection()
        else:
            raise TypeError(f"Unsupported intent: {intent!r}")

    # -- Selection -----------------------------------------------------------

    def select_node(self, node_id: str) -> None:
        self.selected_node_id = node_id
        self.selected_edge = None

    def select_edge(self, node_id: str, edge_id: str) -> None:
        self.selected_edge = SelectedEdge(node_id, edge_id)
        self.selected_node_id = node_id

    def clear_selection(self) -> None:
        self.selected_node_id = None
        self.selected_edge = None

    def delete_selection(self) -> None:
        """Delete the selected node, or else the selected edge."""
        if self.selected_node_id:
            self.store.delete_node(self.selected_node_id)
            self.selected_node_id = None
            self.selected_edge = None
        elif self.selected_edge:
            self.store.delete_edge(self.selected_edge.node_id, self.selected_edge.edge_id)
            self.selected_edge = None

    # -- Editing -------------------------------------------------------------

    def add_node(self, x: Optional[float] = None, y: Optional[float] = None) -> str:
        """Add a node (cascading default positions when none given) and select it."""
        count = len(self.store.nodes)
        node_id = self.store.add_node(
            x if x is not None else 200 + count * 30,
            y if y is not None else 200 + count * 20,
        )
        self.select_node(node_id)
        return node_id

    def rename_node(self, node_id: str, new_id: str) -> str:
        """
        Rename a node the way the inspector does.

        The new id is trimmed and must be non-empty and not used by another
        node. The selection follows the renamed node.

        Raises:
            ValueError: if the new id is empty or already in use.
        """
        value = new_id.strip()
        if not value:
            raise ValueError("Node ID cannot be empty.")
        if value != node_id and self.store.graph.has_node(value):
            raise ValueError(f'"{value}" is already in use.')
        if value == node_id:
            return node_id
        self.store.update_node(node_id, id=value)
        if self.selected_node_id == node_id:
            self.selected_node_id = value
        if self.selected_edge and self.selected_edge.node_id == node_id:
            self.selected_edge = SelectedEdge(value, self.selected_edge.edge_id)
        return value

    def set_edge_parameter(self, node_id: str, edge_id: str, key: str, value: str) -> None:
        key = key.strip()
        if not key:
            return
        edge = self.store.graph.find_edge(node_id, edge_id)
        if edge is None:
            return
        parameters = dict(edge.parameters)
        parameters[key] = value
        self.store.update_edge(node_id, edge_id, parameters=parameters)

    def remove_edge_parameter(self, node_id: str, edge_id: str, key: str) -> None:
        edge = self.store.graph.find_edge(node_id, edge_id)
        if edge is None or key not in edge.parameters:
            return
        parameters = {k: v for k, v in edge.parameters.items() if k != key}
        self.store.update_edge(node_id, edge_id, parameters=parameters)

    # -- Import / export -----------------------------------------------------

    def import_json(self, json_str: str) -> ImportedFlow:
        """
        Replace the flow with a parsed document.

        Raises:
            MalformedDocument: the flow and selection are left untouched.
        """
        try:
            imported = self.store.import_json(json_str)
        except MalformedDocument as e:
            logger.warning("Rejected flow import: %s", e)
            raise
        self.clear_selection()
        return imported

    def export_json(self, require_valid: bool = False, indent: Optional[int] = 2) -> str:
        if require_valid:
            issues = self.issues
            if errors(issues):
                raise InvalidFlowError(issues)
        logger.info("Exporting flow (%s)", self.status)
        return JsonSerializer.to_json(self.store.graph, indent=indent)

    # -- View ----------------------------------------------------------------

    def zoom_in(self) -> None:
        self.viewport.zoom_in()

    def zoom_out(self) -> None:
        self.viewport.zoom_out()

    def reset_view(self) -> None:
        self.viewport.reset()
