"""Tests for the structural validator."""

import pytest
from flowcanvas.core.ir import Edge, FlowGraph, Node
from flowcanvas.core.validation import (
    Severity,
    ValidationIssue,
    errors,
    global_issues,
    is_valid,
    issues_for_edge,
    issues_for_node,
    node_has_error,
    node_has_warning,
    reachable_from,
    summarize,
    validate_flow,
    warnings,
)

from flows import make_flow, make_node


def messages(issues):
    return [issue.message for issue in issues]


class TestValidFlows:

    def test_single_welcome_node_is_clean(self):
        graph = make_flow(Node(id="welcome", description="x"), start="welcome")

        assert validate_flow(graph) == []

    def test_linear_flow_is_clean(self, linear_flow):
        assert validate_flow(linear_flow) == []

    def test_cycles_terminate(self):
        graph = make_flow(
            make_node("A", ["B"]),
            make_node("B", ["A", "B"]),
            start="A",
        )

        assert validate_flow(graph) == []


class TestStartNode:

    def test_missing_start_node(self):
        issues = validate_flow(make_flow(make_node("A")))

        assert messages(issues) == ["No start node selected."]
        assert issues[0].severity is Severity.ERROR
        assert issues[0].node_id is None

    def test_dangling_start_node(self):
        issues = validate_flow(make_flow(make_node("A"), start="gone"))

        assert messages(issues) == ["Selected start node no longer exists."]

    def test_no_reachability_without_a_resolved_start(self):
        graph = make_flow(make_node("A"), make_node("B"), start="gone")

        assert warnings(validate_flow(graph)) == []


class TestNodeRules:

    @pytest.mark.parametrize("node_id", ["", "   "])
    def test_empty_id(self, node_id):
        graph = make_flow(make_node(node_id), start=node_id or None)

        issue = next(i for i in validate_flow(graph) if i.field == "id")
        assert issue.message == "Node ID cannot be empty."
        assert issue.severity is Severity.ERROR

    def test_duplicate_ids_flag_only_repeats(self):
        graph = make_flow(
            make_node("A", description="first"),
            make_node("B"),
            make_node("A", description="second"),
            make_node("A", description="third"),
            start="B",
        )

        dupes = [i for i in validate_flow(graph) if i.field == "id"]

        assert len(dupes) == 2
        assert all(i.message == 'Duplicate node ID: "A".' for i in dupes)

    def test_empty_ids_are_not_reported_as_duplicates(self):
        graph = make_flow(make_node(""), make_node(""), start="")
        id_issues = [i for i in validate_flow(graph) if i.field == "id"]

        assert messages(id_issues) == ["Node ID cannot be empty.", "Node ID cannot be empty."]

    @pytest.mark.parametrize("description", ["", " \n\t"])
    def test_description_required(self, description):
        graph = make_flow(make_node("A", description=description), start="A")

        issues = validate_flow(graph)

        assert len(issues) == 1
        assert issues[0].message == "Description is required."
        assert issues[0].field == "description"
        assert issues[0].node_id == "A"

    def test_empty_prompt_is_fine(self):
        graph = make_flow(make_node("A", prompt=""), start="A")
        assert validate_flow(graph) == []


class TestEdgeRules:

    def test_edge_without_target(self):
        graph = make_flow(
            Node(id="A", description="d", edges=(Edge(id="e1", condition="go"),)),
            start="A",
        )

        issues = validate_flow(graph)

        assert messages(issues) == ["Edge has no target node."]
        assert (issues[0].node_id, issues[0].edge_id) == ("A", "e1")

    def test_target_must_exist(self):
        graph = make_flow(make_node("A", ["B"]), make_node("B", ["C"]), start="A")

        issues = validate_flow(graph)

        assert len(errors(issues)) == 1
        assert issues[0].message == 'Target node "C" does not exist.'
        assert issues[0].node_id == "B"
        assert warnings(issues) == []

    @pytest.mark.parametrize("condition", ["", "   "])
    def test_condition_required(self, condition):
        graph = make_flow(make_node("A", ["A"], condition=condition), start="A")

        assert messages(validate_flow(graph)) == ["Edge condition is required."]

    def test_target_then_condition_order(self):
        graph = make_flow(
            Node(id="A", description="d", edges=(Edge(id="e1"),)),
            start="A",
        )

        assert messages(validate_flow(graph)) == [
            "Edge has no target node.",
            "Edge condition is required.",
        ]


class TestReachability:

    def test_unreachable_node_is_a_single_warning(self):
        graph = make_flow(make_node("A"), make_node("B"), start="A")

        issues = validate_flow(graph)

        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert issues[0].node_id == "B"
        assert issues[0].message == 'Node "B" is unreachable from the start node.'

    def test_dangling_targets_are_not_followed(self):
        graph = make_flow(make_node("A", ["ghost"]), make_node("B"), start="A")

        assert reachable_from(graph, "A") == {"A"}

    def test_reachable_set(self):
        graph = make_flow(
            make_node("A", ["B"]),
            make_node("B", ["C", "A"]),
            make_node("C"),
            make_node("D", ["A"]),
            start="A",
        )

        assert reachable_from(graph, "A") == {"A", "B", "C"}
        assert [i.node_id for i in warnings(validate_flow(graph))] == ["D"]


def test_issue_order():
    graph = make_flow(
        make_node("A", ["B"], description=""),
        make_node("B", ["missing"]),
        make_node("Z"),
        make_node("lonely"),
        start="A",
    )

    issues = validate_flow(graph)

    assert messages(issues) == [
        "Description is required.",
        'Target node "missing" does not exist.',
        'Node "Z" is unreachable from the start node.',
        'Node "lonely" is unreachable from the start node.',
    ]


def test_global_issues_come_first():
    graph = make_flow(make_node("A", description=""))

    issues = validate_flow(graph)

    assert messages(issues) == ["No start node selected.", "Description is required."]


def test_validate_does_not_mutate_input(linear_flow):
    before = linear_flow
    snapshot = FlowGraph(nodes=linear_flow.nodes, start_node_id=linear_flow.start_node_id)

    validate_flow(linear_flow)

    assert linear_flow == snapshot
    assert linear_flow is before


class TestReportHelpers:

    @pytest.fixture
    def issues(self):
        graph = make_flow(
            make_node("A", ["B"]),
            make_node("B", description="", condition=""),
            make_node("C"),
            start="A",
        )
        return validate_flow(graph)

    def test_partition(self, issues):
        assert len(errors(issues)) == 1
        assert len(warnings(issues)) == 1
        assert not is_valid(issues)

    def test_warnings_alone_are_valid(self):
        graph = make_flow(make_node("A"), make_node("B"), start="A")
        assert is_valid(validate_flow(graph))

    def test_per_node_lookups(self, issues):
        assert node_has_error(issues, "B")
        assert not node_has_error(issues, "C")
        assert node_has_warning(issues, "C")
        assert messages(issues_for_node(issues, "B", field="description")) == ["Description is required."]
        assert issues_for_node(issues, "A") == []

    def test_edge_lookup(self):
        graph = make_flow(make_node("A", ["nowhere"]), start="A")
        issues = validate_flow(graph)

        assert len(issues_for_edge(issues, "A", "A-e0")) == 1
        assert issues_for_edge(issues, "A", "other") == []

    def test_global_issues(self):
        issues = validate_flow(make_flow(make_node("A", description="")))
        assert messages(global_issues(issues)) == ["No start node selected."]

    def test_summarize(self, issues):
        assert summarize(issues) == "1 error, 1 warning"
        assert summarize([]) == "0 errors, 0 warnings"


def test_issue_str():
    issue = ValidationIssue(Severity.ERROR, "Description is required.", node_id="A", field="description")
    assert str(issue) == "error [A.description]: Description is required."
    assert str(ValidationIssue(Severity.WARNING, "x")) == "warning: x"


def test_severity_values():
    assert Severity.ERROR.value == "error"
    assert Severity.WARNING == "warning"
