"""
The authoritative flow graph and its mutation surface.

``FlowStore`` holds a single ``FlowGraph`` snapshot. Each operation reads the
current snapshot, builds a new one and swaps it in; a snapshot handed out
earlier is never modified, so observers can detect changes by identity.

Operations are total: an id that does not match anything makes the call a
no-op. Structural problems (duplicate ids, dangling targets, a start id that
no longer exists) are allowed here and reported by the validator instead.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional

from flowcanvas.core.geometry import snap_to_grid
from flowcanvas.core.ids import IdGenerator
from flowcanvas.core.ir import Edge, FlowGraph, Node
from flowcanvas.core.serialization import ImportedFlow, JsonSerializer

logger = logging.getLogger(__name__)

DEFAULT_CONDITION = "default"

Listener = Callable[[FlowGraph], None]


def welcome_flow() -> FlowGraph:
    """The one-node flow a fresh editor starts with."""
    welcome = Node(
        id="welcome",
        description="Entry point of the flow",
        prompt="Greet the user and ask what they need help with.",
        x=100,
        y=180,
    )
    return FlowGraph(nodes=(welcome,), start_node_id=welcome.id)


class FlowStore:
    """
    Owns the current FlowGraph snapshot.

    Example:
        store = FlowStore()
        a = store.add_node(100, 100)
        b = store.add_node(400, 100)
        store.connect_nodes(a, b)
        store.set_start_node(a)
        graph = store.graph
    """

    def __init__(self, graph: Optional[FlowGraph] = None, id_generator: Optional[IdGenerator] = None):
        self._graph = graph if graph is not None else FlowGraph()
        self._ids = id_generator or IdGenerator()
        self._listeners: List[Listener] = []

    @property
    def graph(self) -> FlowGraph:
        return self._graph

    @property
    def nodes(self):
        return self._graph.nodes

    @property
    def start_node_id(self) -> Optional[str]:
        return self._graph.start_node_id

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with each new snapshot; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, graph: FlowGraph, action: str) -> None:
        if graph == self._graph:
            return
        self._graph = graph
        logger.debug("%s -> %d node(s), %d edge(s)", action, len(graph.nodes), graph.edge_count)
        for listener in list(self._listeners):
            listener(graph)

    def _new_node_id(self) -> str:
        return self._ids("node", taken=self._graph.node_ids)

    def _new_edge_id(self) -> str:
        taken = [edge.id for node in self._graph.nodes for edge in node.edges]
        return self._ids("edge", taken=taken)

    def _map_node(self, node_id: str, change: Callable[[Node], Node]) -> FlowGraph:
        nodes = tuple(change(node) if node.id == node_id else node for node in self._graph.nodes)
        return replace(self._graph, nodes=nodes)

    # -- Nodes ---------------------------------------------------------------

    def add_node(self, x: float = 300, y: float = 200) -> str:
        node = Node(id=self._new_node_id(), x=snap_to_grid(x), y=snap_to_grid(y))
        self._commit(replace(self._graph, nodes=self._graph.nodes + (node,)), f"add_node({node.id})")
        return node.id

    def delete_node(self, node_id: str) -> None:
        """Remove the node, every edge that targets it, and the start pointer if it was the start."""
        nodes = tuple(
            replace(node, edges=tuple(edge for edge in node.edges if edge.to_node_id != node_id))
            if any(edge.to_node_id == node_id for edge in node.edges) else node
            for node in self._graph.nodes
            if node.id != node_id
        )
        start = self._graph.start_node_id
        graph = FlowGraph(nodes=nodes, start_node_id=None if start == node_id else start)
        self._commit(graph, f"delete_node({node_id})")

    def update_node(
        self,
        node_id: str,
        id: Optional[str] = None,
        description: Optional[str] = None,
        prompt: Optional[str] = None,
    ) -> None:
        """
        Patch a node's id, description and/or prompt.

        A new ``id`` is propagated to every edge that targeted the old id and
        to the start pointer. Uniqueness is not checked here.
        """
        patch: Dict[str, str] = {}
        if id is not None:
            patch["id"] = id
        if description is not None:
            patch["description"] = description
        if prompt is not None:
            patch["prompt"] = prompt
        if not patch:
            return

        renamed = bool(id) and id != node_id
        nodes = []
        for node in self._graph.nodes:
            if node.id == node_id:
                nodes.append(replace(node, **patch))
            elif renamed and any(edge.to_node_id == node_id for edge in node.edges):
                nodes.append(replace(node, edges=tuple(
                    replace(edge, to_node_id=id) if edge.to_node_id == node_id else edge
                    for edge in node.edges
                )))
            else:
                nodes.append(node)

        start = self._graph.start_node_id
        if renamed and start == node_id:
            start = id
        self._commit(FlowGraph(nodes=tuple(nodes), start_node_id=start), f"update_node({node_id})")

    def move_node(self, node_id: str, x: float, y: float) -> None:
        gx, gy = snap_to_grid(x), snap_to_grid(y)
        self._commit(
            self._map_node(node_id, lambda node: replace(node, x=gx, y=gy)),
            f"move_node({node_id}, {gx}, {gy})",
        )

    def set_start_node(self, node_id: Optional[str]) -> None:
        self._commit(replace(self._graph, start_node_id=node_id), f"set_start_node({node_id})")

    # -- Edges ---------------------------------------------------------------

    def _append_edge(self, node_id: str, edge: Edge, action: str) -> Optional[str]:
        if not self._graph.has_node(node_id):
            return None
        self._commit(
            self._map_node(node_id, lambda node: replace(node, edges=node.edges + (edge,))),
            action,
        )
        return edge.id

    def add_edge(self, node_id: str) -> Optional[str]:
        """Append an unset edge to ``node_id``; returns the new edge id, or None if the node is absent."""
        edge = Edge(id=self._new_edge_id())
        return self._append_edge(node_id, edge, f"add_edge({node_id})")

    def connect_nodes(self, from_id: str, to_id: str) -> Optional[str]:
        edge = Edge(id=self._new_edge_id(), to_node_id=to_id, condition=DEFAULT_CONDITION)
        return self._append_edge(from_id, edge, f"connect_nodes({from_id}, {to_id})")

    def update_edge(
        self,
        node_id: str,
        edge_id: str,
        to_node_id: Optional[str] = None,
        condition: Optional[str] = None,
        parameters: Optional[Dict[str, str]] = None,
    ) -> None:
        patch: Dict[str, object] = {}
        if to_node_id is not None:
            patch["to_node_id"] = to_node_id
        if condition is not None:
            patch["condition"] = condition
        if parameters is not None:
            patch["parameters"] = dict(parameters)
        if not patch:
            return
        self._commit(
            self._map_node(node_id, lambda node: replace(node, edges=tuple(
                replace(edge, **patch) if edge.id == edge_id else edge for edge in node.edges
            ))),
            f"update_edge({node_id}, {edge_id})",
        )

    def delete_edge(self, node_id: str, edge_id: str) -> None:
        self._commit(
            self._map_node(node_id, lambda node: replace(
                node, edges=tuple(edge for edge in node.edges if edge.id != edge_id)
            )),
            f"delete_edge({node_id}, {edge_id})",
        )

    # -- Import / export -----------------------------------------------------

    def load_flow(self, nodes: Iterable[Node], start_node_id: Optional[str]) -> None:
        """Replace the whole snapshot. No validation is performed."""
        self._commit(FlowGraph(nodes=tuple(nodes), start_node_id=start_node_id), "load_flow")

    def import_json(self, json_str: str) -> ImportedFlow:
        """
        Parse a flow document and load it.

        The document is decoded completely before the store is touched, so a
        ``MalformedDocument`` leaves the current snapshot in place.
        """
        imported = JsonSerializer.from_json(json_str, id_generator=self._ids)
        self.load_flow(imported.nodes, imported.start_node_id)
        logger.info("Imported flow with %d node(s)", len(imported.nodes))
        return imported

    def export_dict(self) -> dict:
        return JsonSerializer.to_dict(self._graph)

    def export_json(self, indent: Optional[int] = 2) -> str:
        return JsonSerializer.to_json(self._graph, indent=indent)
