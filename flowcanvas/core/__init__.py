"""Core data structures for flowcanvas graphs."""

from .ir import Node, Edge, FlowGraph, SelectedEdge
from .ids import IdGenerator
from .serialization import JsonSerializer, MalformedDocument, ImportedFlow
from .validation import ValidationIssue, Severity, validate_flow

__all__ = [
    "Node",
    "Edge",
    "FlowGraph",
    "SelectedEdge",
    "IdGenerator",
    "JsonSerializer",
    "MalformedDocument",
    "ImportedFlow",
    "ValidationIssue",
    "Severity",
    "validate_flow",
]
