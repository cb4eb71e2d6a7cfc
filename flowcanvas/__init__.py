"""
flowcanvas - the model behind a visual flow-graph editor.

Main APIs:
- FlowStore: Authoritative graph snapshot and its mutation operations
- FlowEditor: Editing session (selection, input events, derived views)
- validate_flow: Structural validation with reachability analysis
- JsonSerializer: Export/import of the external JSON document

Backends:
- MermaidExporter: Mermaid.js diagram syntax
- GraphvizExporter: Graphviz DOT format
"""

from flowcanvas.core.ir import FlowGraph, Node, Edge, SelectedEdge
from flowcanvas.core.serialization import JsonSerializer, MalformedDocument, ImportedFlow
from flowcanvas.core.validation import ValidationIssue, Severity, validate_flow
from flowcanvas.editor import FlowStore, FlowEditor, InvalidFlowError, Viewport, ViewportState, InteractionController
from flowcanvas.backend import MermaidExporter, GraphvizExporter

__all__ = [
    # Core IR
    "FlowGraph",
    "Node",
    "Edge",
    "SelectedEdge",
    # Serialization
    "JsonSerializer",
    "MalformedDocument",
    "ImportedFlow",
    # Validation
    "ValidationIssue",
    "Severity",
    "validate_flow",
    # Editor
    "FlowStore",
    "FlowEditor",
    "InvalidFlowError",
    "Viewport",
    "ViewportState",
    "InteractionController",
    # Backends
    "MermaidExporter",
    "GraphvizExporter",
]
