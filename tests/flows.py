"""Small graph builders shared by the test suite."""

import json
from pathlib import Path

from flowcanvas.core.ir import Edge, FlowGraph, Node

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


def make_node(node_id, targets=(), description="A step", prompt="", x=0, y=0, condition="default"):
    edges = tuple(
        Edge(id=f"{node_id}-e{index}", to_node_id=target, condition=condition)
        for index, target in enumerate(targets)
    )
    return Node(id=node_id, description=description, prompt=prompt, edges=edges, x=x, y=y)


def make_flow(*nodes, start=None):
    return FlowGraph(nodes=tuple(nodes), start_node_id=start)


def support_flow_json():
    return (EXAMPLES_DIR / "support_flow.json").read_text(encoding="utf-8")


def support_flow_document():
    return json.loads(support_flow_json())
