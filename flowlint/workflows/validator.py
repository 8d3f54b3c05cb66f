"""
Workflow-level expression validation.

Runs the parameter-tree validator over every enabled node of a workflow,
deriving each node's validation context from the workflow itself.
"""

from typing import Optional

import structlog

from flowlint.config import Settings, settings as default_settings
from flowlint.expressions.context import ValidationContext
from flowlint.expressions.validator import ExpressionValidator
from .graph import build_connection_graph, nodes_in_loops, nodes_with_input
from .schemas import (
    Workflow,
    WorkflowExpressionReport,
    WorkflowIssue,
    WorkflowNode,
    WorkflowStatistics,
)

EXPRESSION_TIPS = [
    "Use {{ }} to wrap expressions",
    "Reference data with $json.propertyName",
    'Reference other nodes with $node["Node Name"].json',
    "Use $input.item for input data in loops",
]


class WorkflowExpressionValidator:
    """Validates expressions in all enabled nodes of a workflow."""

    def __init__(
        self,
        expression_validator: Optional[ExpressionValidator] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self.expression_validator = expression_validator or ExpressionValidator(
            max_parameter_depth=self.settings.max_parameter_depth
        )
        self.logger = structlog.get_logger(component="workflow_expression_validator")

    def validate(self, workflow: Workflow) -> WorkflowExpressionReport:
        """
        Validate expressions of every enabled node.

        Args:
            workflow: Parsed workflow document

        Returns:
            Report with node-attributed errors, warnings and statistics
        """
        graph = build_connection_graph(workflow)
        with_input = nodes_with_input(graph)
        looped = nodes_in_loops(graph)
        available_nodes = frozenset(workflow.node_names)

        errors = []
        warnings = []
        suggestions = []
        statistics = WorkflowStatistics(total_nodes=len(workflow.nodes))

        for node in workflow.nodes:
            if node.disabled:
                continue
            statistics.enabled_nodes += 1

            context = ValidationContext(
                available_nodes=available_nodes,
                current_node_name=node.name,
                has_input_data=node.name in with_input,
                is_in_loop=node.name in looped,
            )
            result = self.expression_validator.validate_node_expressions(
                node.parameters, context
            )

            errors.extend(
                WorkflowIssue(node=node.name, message=f"Expression error: {error}")
                for error in result.errors
            )
            warnings.extend(
                WorkflowIssue(node=node.name, message=f"Expression warning: {warning}")
                for warning in result.warnings
            )
            statistics.expressions_validated += len(result.used_variables)

            if self._count_expressions(node) > self.settings.expression_heavy_threshold:
                suggestions.append(
                    "Consider using a Code node for complex data transformations "
                    f"in node '{node.name}'"
                )

        if errors or warnings:
            suggestions.extend(EXPRESSION_TIPS)

        self.logger.info(
            "Validated workflow expressions",
            workflow=workflow.name,
            nodes=statistics.enabled_nodes,
            errors=len(errors),
            warnings=len(warnings),
        )

        return WorkflowExpressionReport(
            valid=not errors,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            statistics=statistics,
        )

    @staticmethod
    def _count_expressions(node: WorkflowNode) -> int:
        count = 0
        seen = set()
        stack = [node.parameters]
        while stack:
            value = stack.pop()
            if isinstance(value, str):
                count += value.count("{{")
                continue
            if id(value) in seen:
                continue
            seen.add(id(value))
            if isinstance(value, dict):
                stack.extend(value.values())
            elif isinstance(value, (list, tuple)):
                stack.extend(value)
        return count
