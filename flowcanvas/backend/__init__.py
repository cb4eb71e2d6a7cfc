"""Backend exporters for flow diagrams."""

from flowcanvas.backend.graphviz import GraphvizExporter
from flowcanvas.backend.mermaid import MermaidExporter

__all__ = [
    "GraphvizExporter",
    "MermaidExporter",
]
