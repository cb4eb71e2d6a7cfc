"""
JSON serialization for flow graphs.

The external document shape is fixed and consumed by other tools:

    {"start_node_id": str | null,
     "nodes": [{"id", "description", "prompt",
                "edges": [{"to_node_id", "condition", "parameters"?}]}]}

Positions and internal edge ids are editor-only and never appear in it.
An edge's ``parameters`` key is present only when the map is non-empty.
"""

import json
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from flowcanvas.core.geometry import import_position
from flowcanvas.core.ids import IdFactory, IdGenerator
from flowcanvas.core.ir import Edge, FlowGraph, Node

logger = logging.getLogger(__name__)


class MalformedDocument(ValueError):
    """Raised when text cannot be read as a flow document."""


class ImportedFlow(NamedTuple):
    nodes: Tuple[Node, ...]
    start_node_id: Optional[str]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class JsonSerializer:
    """Converts FlowGraph snapshots to and from the external JSON document."""

    @staticmethod
    def edge_to_dict(edge: Edge) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "to_node_id": edge.to_node_id,
            "condition": edge.condition,
        }
        if edge.parameters:
            data["parameters"] = dict(edge.parameters)
        return data

    @staticmethod
    def to_dict(graph: FlowGraph) -> Dict[str, Any]:
        nodes_data = []
        for node in graph.nodes:
            nodes_data.append({
                "id": node.id,
                "description": node.description,
                "prompt": node.prompt,
                "edges": [JsonSerializer.edge_to_dict(edge) for edge in node.edges],
            })
        return {
            "start_node_id": graph.start_node_id,
            "nodes": nodes_data,
        }

    @staticmethod
    def to_json(graph: FlowGraph, indent: Optional[int] = 2) -> str:
        return json.dumps(JsonSerializer.to_dict(graph), indent=indent, ensure_ascii=False)

    @staticmethod
    def _edge_from_dict(data: Any, where: str, new_id: IdFactory) -> Edge:
        if not isinstance(data, dict):
            raise MalformedDocument(f"{where} is not an object.")
        parameters = data.get("parameters")
        if parameters is None:
            parameters = {}
        elif not isinstance(parameters, dict):
            raise MalformedDocument(f'{where} has a "parameters" value that is not an object.')
        # Incoming edge ids are never trusted; every edge gets a fresh one.
        return Edge(
            id=new_id("edge"),
            to_node_id=_text(data.get("to_node_id")),
            condition=_text(data.get("condition")),
            parameters={str(key): _text(value) for key, value in parameters.items()},
        )

    @staticmethod
    def from_dict(data: Any, id_generator: Optional[IdFactory] = None) -> ImportedFlow:
        """
        Build nodes and a start node id from a parsed document.

        Missing node ids are generated, missing strings default to empty,
        and nodes are laid out on a 4-column grid in document order.

        Raises:
            MalformedDocument: if the document has no ``nodes`` array or
                contains entries of the wrong shape.
        """
        new_id = id_generator or IdGenerator()

        if not isinstance(data, dict):
            raise MalformedDocument("Flow document must be a JSON object.")
        raw_nodes = data.get("nodes")
        if not isinstance(raw_nodes, list):
            raise MalformedDocument('Missing "nodes" array in JSON.')

        declared_ids = {
            _text(entry.get("id")) for entry in raw_nodes
            if isinstance(entry, dict) and entry.get("id")
        }
        nodes: List[Node] = []
        for index, node_data in enumerate(raw_nodes):
            if not isinstance(node_data, dict):
                raise MalformedDocument(f"Node at index {index} is not an object.")
            raw_edges = node_data.get("edges")
            if raw_edges is None:
                raw_edges = []
            elif not isinstance(raw_edges, list):
                raise MalformedDocument(f'Node at index {index} has an "edges" value that is not an array.')

            node_id = node_data.get("id")
            node_id = _text(node_id) if node_id else new_id("node", taken=declared_ids)
            edges = tuple(
                JsonSerializer._edge_from_dict(edge_data, f"Edge {edge_index} of node {node_id!r}", new_id)
                for edge_index, edge_data in enumerate(raw_edges)
            )
            x, y = import_position(index)
            nodes.append(Node(
                id=node_id,
                description=_text(node_data.get("description")),
                prompt=_text(node_data.get("prompt")),
                edges=edges,
                x=int(x),
                y=int(y),
            ))

        start_node_id = data.get("start_node_id")
        if start_node_id is not None:
            start_node_id = _text(start_node_id)
        elif nodes:
            start_node_id = nodes[0].id

        logger.debug("Decoded flow document with %d node(s)", len(nodes))
        return ImportedFlow(tuple(nodes), start_node_id)

    @staticmethod
    def from_json(json_str: str, id_generator: Optional[IdFactory] = None) -> ImportedFlow:
        try:
            data = json.loads(json_str)
        except (TypeError, ValueError) as e:
            raise MalformedDocument(f"Invalid JSON: {e}") from e
        return JsonSerializer.from_dict(data, id_generator=id_generator)

    @staticmethod
    def to_graph(imported: ImportedFlow) -> FlowGraph:
        return FlowGraph(nodes=imported.nodes, start_node_id=imported.start_node_id)
