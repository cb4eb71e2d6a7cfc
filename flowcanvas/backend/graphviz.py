import graphviz
from typing import Optional
from flowcanvas.core.ir import FlowGraph


class GraphvizExporter:
    """Exports a FlowGraph to Graphviz/Dot format or renders it."""

    _SHAPES = {
        "start": "ellipse",
        "step": "box",
    }

    @staticmethod
    def _escape_html(text: str) -> str:
        """Escape HTML special characters for Graphviz."""
        return (
            text.replace('&', '&amp;')
            .replace('<', '&lt;')
            .replace('>', '&gt;')
            .replace('"', '&quot;')
        )

    @staticmethod
    def _html_label(label: str, description: Optional[str] = None) -> str:
        """Generate HTML-like label for a node, optionally including description."""
        label = GraphvizExporter._escape_html(label)
        if description:
            desc_html = GraphvizExporter._escape_html(description).replace('\n', '<BR/>')
            return (
                f'<<TABLE BORDER="0" CELLBORDER="0" CELLSPACING="4" CELLPADDING="8">'
                f'<TR><TD ALIGN="LEFT"><B>{label}</B></TD></TR>'
                f'<TR><TD ALIGN="LEFT" BALIGN="LEFT"><FONT POINT-SIZE="10">{desc_html}</FONT></TD></TR>'
                f'</TABLE>>'
            )
        else:
            return f'<<B>{label}</B>>'

    @staticmethod
    def _edge_label(condition: str, parameters: dict) -> str:
        if not parameters:
            return condition
        params = ", ".join(f"{key}={value}" for key, value in parameters.items())
        return f"{condition}\n({params})"

    @staticmethod
    def to_digraph(flow: FlowGraph, name: str = "flow", include_descriptions: bool = True) -> graphviz.Digraph:
        """
        Converts a FlowGraph to a graphviz.Digraph object.

        Args:
            flow: The flow to convert
            name: Graph name used in the DOT source
            include_descriptions: If True, include node descriptions in HTML labels
        """
        dot = graphviz.Digraph(name=name, comment=name)
        dot.attr(rankdir='LR')

        emitted = set()
        for node in flow.nodes:
            if node.id in emitted:
                continue
            emitted.add(node.id)
            shape = GraphvizExporter._SHAPES["start" if node.id == flow.start_node_id else "step"]
            description = node.description if include_descriptions else None
            label = GraphvizExporter._html_label(node.id, description or None)
            dot.node(node.id, label=label, shape=shape)

        for node in flow.nodes:
            for edge in node.edges:
                # Unset and dangling targets are not drawn
                if edge.to_node_id not in emitted:
                    continue
                dot.edge(node.id, edge.to_node_id, label=GraphvizExporter._edge_label(edge.condition, edge.parameters))

        return dot

    @staticmethod
    def to_dot(flow: FlowGraph, name: str = "flow") -> str:
        """Returns the DOT source string for the flow."""
        return GraphvizExporter.to_digraph(flow, name=name).source

    @staticmethod
    def render(flow: FlowGraph, filename: str, format: str = 'png', view: bool = False):
        """Renders the flow to a file (requires the Graphviz executables)."""
        dot = GraphvizExporter.to_digraph(flow)
        dot.render(filename, format=format, view=view)
