"""Tests for workflow-level expression validation."""

import pytest
from unittest.mock import Mock

from flowlint.config import Settings
from flowlint.exceptions import WorkflowFormatError
from flowlint.expressions import ExpressionValidator
from flowlint.workflows import (
    WorkflowExpressionValidator,
    load_workflow,
    parse_workflow,
)
from flowlint.workflows.graph import (
    build_connection_graph,
    nodes_in_loops,
    nodes_with_input,
)


@pytest.fixture
def workflow_validator(test_settings):
    return WorkflowExpressionValidator(settings=test_settings)


@pytest.mark.unit
class TestWorkflowParsing:
    """Reading workflow documents."""

    def test_parse_n8n_document(self, test_data):
        workflow = parse_workflow(test_data.two_node_workflow({"value": "{{ $json.a }}"}))

        assert workflow.name == "Test Workflow"
        assert workflow.node_names == ["Manual Trigger", "Set"]
        assert workflow.nodes[1].type_version == 1
        assert workflow.connections["Manual Trigger"]["main"][0][0].node == "Set"

    def test_null_output_slots(self, test_data):
        document = test_data.workflow(
            nodes=[test_data.node("IF"), test_data.node("Set")],
            connections={"IF": {"main": [None, [{"node": "Set", "type": "main", "index": 0}]]}},
        )

        graph = build_connection_graph(parse_workflow(document))

        assert nodes_with_input(graph) == {"Set"}

    def test_node_without_name(self, test_data):
        with pytest.raises(WorkflowFormatError):
            parse_workflow(test_data.workflow(nodes=[{"parameters": {}}]))

    def test_document_must_be_object(self):
        with pytest.raises(WorkflowFormatError):
            parse_workflow([])

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(WorkflowFormatError) as exc_info:
            load_workflow(tmp_path / "missing.json")

        assert "not found" in exc_info.value.message

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ nodes: ", encoding="utf-8")

        with pytest.raises(WorkflowFormatError) as exc_info:
            load_workflow(path)

        assert exc_info.value.source == str(path)

    def test_load_workflow_file(self, test_data, write_json):
        path = write_json(test_data.two_node_workflow(), "workflow.json")

        workflow = load_workflow(path)

        assert len(workflow.nodes) == 2


@pytest.mark.unit
class TestConnectionGraph:
    """Input and loop detection."""

    def test_nodes_with_input(self, test_data):
        graph = build_connection_graph(parse_workflow(test_data.two_node_workflow()))

        assert nodes_with_input(graph) == {"Set"}

    def test_cycle_members_are_in_loop(self, test_data):
        document = test_data.workflow(
            nodes=[test_data.node(name) for name in ("Trigger", "Split", "Process", "Done")],
            connections=test_data.connect("Trigger", "Split", "Process", "Split"),
        )
        document["connections"]["Split"]["main"].append(
            [{"node": "Done", "type": "main", "index": 0}]
        )

        graph = build_connection_graph(parse_workflow(document))

        assert nodes_in_loops(graph) == {"Split", "Process"}

    def test_self_loop(self, test_data):
        document = test_data.workflow(
            nodes=[test_data.node("Retry")],
            connections=test_data.connect("Retry", "Retry"),
        )

        assert nodes_in_loops(build_connection_graph(parse_workflow(document))) == {"Retry"}


@pytest.mark.integration
class TestWorkflowExpressionValidator:
    """Validating every node of a workflow."""

    def test_valid_workflow(self, workflow_validator, test_data):
        workflow = parse_workflow(test_data.two_node_workflow({"value": "{{ $json.name }}"}))

        report = workflow_validator.validate(workflow)

        assert report.valid is True
        assert report.errors == []
        assert report.warnings == []
        assert report.suggestions == []
        assert report.statistics.total_nodes == 2
        assert report.statistics.enabled_nodes == 2
        assert report.statistics.expressions_validated == 1

    def test_errors_are_attributed_to_nodes(self, workflow_validator, test_data):
        workflow = parse_workflow(
            test_data.two_node_workflow({"value": '{{ $node["Ghost"].json }}'})
        )

        report = workflow_validator.validate(workflow)

        assert report.valid is False
        assert len(report.errors) == 1
        assert report.errors[0].node == "Set"
        assert report.errors[0].message == (
            'Expression error: value: Referenced node "Ghost" not found in workflow'
        )
        assert "Use {{ }} to wrap expressions" in report.suggestions

    def test_trigger_has_no_input(self, workflow_validator, test_data):
        document = test_data.two_node_workflow()
        document["nodes"][0]["parameters"] = {
            "path": "{{ $input.item.json.path }}",
            "note": "{{ $json.note }}",
        }

        report = workflow_validator.validate(parse_workflow(document))

        assert [issue.node for issue in report.errors] == ["Manual Trigger"]
        assert report.errors[0].message.startswith("Expression error: path:")
        assert report.warnings[0].node == "Manual Trigger"
        assert report.warnings[0].message == (
            "Expression warning: note: Using $json but node might not have input data"
        )

    def test_disabled_nodes_are_skipped(self, workflow_validator, test_data):
        document = test_data.two_node_workflow({"value": "{{}}"})
        document["nodes"][1]["disabled"] = True

        report = workflow_validator.validate(parse_workflow(document))

        assert report.valid is True
        assert report.statistics.total_nodes == 2
        assert report.statistics.enabled_nodes == 1

    def test_expressions_validated_counts_variables(self, workflow_validator, test_data):
        document = test_data.workflow(
            nodes=[
                test_data.node("Start", {"a": "{{ $workflow.id }}"}),
                test_data.node("Set", {"a": "{{ $json.a }}", "b": "{{ $now }}"}),
            ],
            connections=test_data.connect("Start", "Set"),
        )

        report = workflow_validator.validate(parse_workflow(document))

        assert report.statistics.expressions_validated == 3

    def test_code_node_suggestion(self, workflow_validator, test_data):
        parameters = {f"field{i}": f"{{{{ $json.f{i} }}}}" for i in range(6)}
        workflow = parse_workflow(test_data.two_node_workflow(parameters))

        report = workflow_validator.validate(workflow)

        assert report.valid is True
        assert any("Code node" in s and "'Set'" in s for s in report.suggestions)

    def test_threshold_comes_from_settings(self, test_data):
        validator = WorkflowExpressionValidator(settings=Settings(expression_heavy_threshold=1))
        workflow = parse_workflow(
            test_data.two_node_workflow({"a": "{{ $json.a }}", "b": "{{ $json.b }}"})
        )

        report = validator.validate(workflow)

        assert any("Code node" in s for s in report.suggestions)

    def test_contexts_passed_to_expression_validator(self, test_settings, test_data):
        spy = Mock(wraps=ExpressionValidator())
        validator = WorkflowExpressionValidator(expression_validator=spy, settings=test_settings)
        document = test_data.workflow(
            nodes=[test_data.node(name) for name in ("Trigger", "Split", "Process")],
            connections=test_data.connect("Trigger", "Split", "Process", "Split"),
        )

        validator.validate(parse_workflow(document))

        contexts = {
            call.args[1].current_node_name: call.args[1]
            for call in spy.validate_node_expressions.call_args_list
        }
        assert set(contexts) == {"Trigger", "Split", "Process"}
        assert contexts["Trigger"].has_input_data is False
        assert contexts["Trigger"].is_in_loop is False
        assert contexts["Split"].has_input_data is True
        assert contexts["Process"].is_in_loop is True
        assert contexts["Process"].available_nodes == frozenset({"Trigger", "Split", "Process"})
