"""Workflow-level expression validation."""

from .loader import load_json, load_workflow, parse_workflow
from .schemas import (
    NodeConnection,
    Workflow,
    WorkflowExpressionReport,
    WorkflowIssue,
    WorkflowNode,
    WorkflowStatistics,
)
from .validator import WorkflowExpressionValidator

__all__ = [
    "NodeConnection",
    "Workflow",
    "WorkflowExpressionReport",
    "WorkflowExpressionValidator",
    "WorkflowIssue",
    "WorkflowNode",
    "WorkflowStatistics",
    "load_json",
    "load_workflow",
    "parse_workflow",
]
