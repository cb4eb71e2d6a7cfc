"""Immutable data structures for flowcanvas graphs.

Every value here is a frozen snapshot. Mutations happen by building new
values (see ``flowcanvas.editor.store.FlowStore``), never by editing these
in place.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Edge:
    """A directed, conditioned connection owned by its source node.

    ``id`` is internal to the editor and never serialized. An empty
    ``to_node_id`` means the target has not been chosen yet. ``parameters``
    is a read-only copy of the mapping passed in and does not take part in
    hashing.
    """
    id: str
    to_node_id: str = ""
    condition: str = ""
    parameters: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    def __repr__(self):
        return f"<Edge {self.id} -> {self.to_node_id!r} condition={self.condition!r}>"


@dataclass(frozen=True)
class Node:
    """A unit of the flow with descriptive text and outgoing edges."""
    id: str
    description: str = ""
    prompt: str = ""
    edges: Tuple[Edge, ...] = ()
    x: int = 0
    y: int = 0

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def __repr__(self):
        return f"<Node id={self.id!r} edges={len(self.edges)} at=({self.x}, {self.y})>"


@dataclass(frozen=True)
class SelectedEdge:
    """Transient reference to the highlighted edge."""
    node_id: str
    edge_id: str


@dataclass(frozen=True)
class FlowGraph:
    """The full graph state at one instant."""
    nodes: Tuple[Node, ...] = ()
    start_node_id: Optional[str] = None

    @property
    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    @property
    def edge_count(self) -> int:
        return sum(len(node.edges) for node in self.nodes)

    def has_node(self, node_id: str) -> bool:
        return any(node.id == node_id for node in self.nodes)

    def get_node(self, node_id: str) -> Optional[Node]:
        """Return the first node with ``node_id``; duplicates are possible."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def find_edge(self, node_id: str, edge_id: str) -> Optional[Edge]:
        node = self.get_node(node_id)
        if node is None:
            return None
        return node.get_edge(edge_id)

    def __len__(self):
        return len(self.nodes)
