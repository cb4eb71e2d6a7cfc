"""
Structural validation of flow graphs.

``validate_flow`` never raises and never mutates its input: every problem is
returned as a ``ValidationIssue``. Errors mark the flow as not yet usable,
warnings are advisory. Issues come out in a fixed order:

1. global issues (start node),
2. per node, in node order: id, description, then each edge in edge order,
3. reachability warnings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set

from flowcanvas.core.ir import FlowGraph


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    severity: Severity
    message: str
    node_id: Optional[str] = None
    edge_id: Optional[str] = None
    field: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self):
        where = ""
        if self.node_id is not None:
            where = f" [{self.node_id}"
            if self.field:
                where += f".{self.field}"
            where += "]"
        return f"{self.severity.value}{where}: {self.message}"


def _error(message: str, **refs) -> ValidationIssue:
    return ValidationIssue(Severity.ERROR, message, **refs)


def _warning(message: str, **refs) -> ValidationIssue:
    return ValidationIssue(Severity.WARNING, message, **refs)


def validate_flow(graph: FlowGraph) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    node_ids = set(graph.node_ids)
    start = graph.start_node_id

    if not start:
        issues.append(_error("No start node selected."))
    elif start not in node_ids:
        issues.append(_error("Selected start node no longer exists."))

    seen: Set[str] = set()
    for node in graph.nodes:
        # Only repeats are flagged; the first holder of an id stays clean.
        if not node.id.strip():
            issues.append(_error("Node ID cannot be empty.", node_id=node.id, field="id"))
        elif node.id in seen:
            issues.append(_error(f'Duplicate node ID: "{node.id}".', node_id=node.id, field="id"))
        seen.add(node.id)

        if not node.description.strip():
            issues.append(_error("Description is required.", node_id=node.id, field="description"))

        for edge in node.edges:
            if not edge.to_node_id:
                issues.append(_error("Edge has no target node.", node_id=node.id, edge_id=edge.id))
            elif edge.to_node_id not in node_ids:
                issues.append(_error(
                    f'Target node "{edge.to_node_id}" does not exist.',
                    node_id=node.id,
                    edge_id=edge.id,
                ))
            if not edge.condition.strip():
                issues.append(_error("Edge condition is required.", node_id=node.id, edge_id=edge.id))

    if start and start in node_ids:
        reachable = reachable_from(graph, start)
        for node in graph.nodes:
            if node.id not in reachable:
                issues.append(_warning(
                    f'Node "{node.id}" is unreachable from the start node.',
                    node_id=node.id,
                ))

    return issues


def reachable_from(graph: FlowGraph, start_id: str) -> Set[str]:
    """Ids of every node reachable from ``start_id`` by following edges."""
    reachable: Set[str] = set()
    stack = [start_id]
    while stack:
        current = stack.pop()
        if current in reachable:
            continue
        node = graph.get_node(current)
        if node is None:
            # Dangling target: nothing to follow.
            continue
        reachable.add(current)
        stack.extend(edge.to_node_id for edge in node.edges)
    return reachable


# -- Report helpers ----------------------------------------------------------

def errors(issues: List[ValidationIssue]) -> List[ValidationIssue]:
    return [issue for issue in issues if issue.severity is Severity.ERROR]


def warnings(issues: List[ValidationIssue]) -> List[ValidationIssue]:
    return [issue for issue in issues if issue.severity is Severity.WARNING]


def is_valid(issues: List[ValidationIssue]) -> bool:
    """True when no issue is an error; warnings do not count."""
    return not errors(issues)


def global_issues(issues: List[ValidationIssue]) -> List[ValidationIssue]:
    return [issue for issue in issues if issue.node_id is None]


def issues_for_node(
    issues: List[ValidationIssue], node_id: str, field: Optional[str] = None
) -> List[ValidationIssue]:
    return [
        issue for issue in issues
        if issue.node_id == node_id and (field is None or issue.field == field)
    ]


def issues_for_edge(issues: List[ValidationIssue], node_id: str, edge_id: str) -> List[ValidationIssue]:
    return [issue for issue in issues if issue.node_id == node_id and issue.edge_id == edge_id]


def node_has_error(issues: List[ValidationIssue], node_id: str) -> bool:
    return any(issue.is_error for issue in issues_for_node(issues, node_id))


def node_has_warning(issues: List[ValidationIssue], node_id: str) -> bool:
    return any(issue.severity is Severity.WARNING for issue in issues_for_node(issues, node_id))


def summarize(issues: List[ValidationIssue]) -> str:
    n_errors = len(errors(issues))
    n_warnings = len(warnings(issues))
    return (
        f"{n_errors} error{'s' if n_errors != 1 else ''}, "
        f"{n_warnings} warning{'s' if n_warnings != 1 else ''}"
    )
