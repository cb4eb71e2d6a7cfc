import re
from typing import Dict

from flowcanvas.core.ir import FlowGraph


class MermaidExporter:
    """Exports a FlowGraph to Mermaid.js syntax."""

    # Mermaid shape syntax: the start node uses a stadium, every other node a rectangle
    _SHAPES = {
        "start": ('(["', '"])'),
        "step": ('["', '"]'),
    }

    # Flowchart keywords; a bare `end` node id closes the graph early
    _RESERVED = {
        "end", "graph", "flowchart", "subgraph", "direction",
        "style", "class", "classdef", "linkstyle", "click",
    }

    @staticmethod
    def _sanitize(text: str) -> str:
        """Escape special characters for Mermaid syntax."""
        return text.replace('"', '#quot;').replace("(", "#40;").replace(")", "#41;")

    @staticmethod
    def _aliases(flow: FlowGraph) -> Dict[str, str]:
        """
        Map node ids to Mermaid-safe identifiers.

        Node ids are user-authored and may contain spaces or punctuation, so
        anything outside ``[A-Za-z0-9_]`` is replaced. Mermaid keywords such
        as ``end`` get a ``_node`` suffix. Collisions after replacement get a
        numeric suffix.
        """
        aliases: Dict[str, str] = {}
        used = set()
        for index, node in enumerate(flow.nodes):
            if node.id in aliases:
                continue
            alias = re.sub(r'\W', '_', node.id) or f"node{index}"
            if alias.lower() in MermaidExporter._RESERVED:
                alias = f"{alias}_node"
            if alias in used:
                alias = f"{alias}_{index}"
            aliases[node.id] = alias
            used.add(alias)
        return aliases

    @staticmethod
    def _format_node(alias: str, label: str, shape_key: str) -> str:
        """Format a node with the given shape."""
        left, right = MermaidExporter._SHAPES[shape_key]
        return f'{alias}{left}{label}{right}'

    @staticmethod
    def to_mermaid(flow: FlowGraph, direction: str = "TD", include_descriptions: bool = True) -> str:
        """
        Convert a flow to Mermaid diagram syntax.

        Args:
            flow: The flow to convert
            direction: Graph direction (TD, LR, etc.)
            include_descriptions: If True, include descriptions in node labels
        """
        lines = [f"graph {direction}"]
        aliases = MermaidExporter._aliases(flow)

        emitted = set()
        for node in flow.nodes:
            if node.id in emitted:
                continue
            emitted.add(node.id)
            label = MermaidExporter._sanitize(node.id)
            if include_descriptions and node.description:
                desc = MermaidExporter._sanitize(node.description).replace("\n", "<br/>")
                label = f"{label}<br/><i>{desc}</i>"
            shape = "start" if node.id == flow.start_node_id else "step"
            lines.append("    " + MermaidExporter._format_node(aliases[node.id], label, shape))

        # Edges without a resolvable target are not drawn
        for node in flow.nodes:
            for edge in node.edges:
                if edge.to_node_id not in aliases:
                    continue
                source, target = aliases[node.id], aliases[edge.to_node_id]
                if edge.condition:
                    clean_label = MermaidExporter._sanitize(edge.condition)
                    lines.append(f"    {source} -- {clean_label} --> {target}")
                else:
                    lines.append(f"    {source} --> {target}")

        return "\n".join(lines)
