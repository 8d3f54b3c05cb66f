"""Pytest configuration and fixtures."""

import json

import pytest

from flowlint.config import Settings
from flowlint.expressions import ExpressionValidator, ValidationContext


@pytest.fixture
def validator():
    """Expression validator with default limits."""
    return ExpressionValidator()


@pytest.fixture
def default_context():
    """Context of a Code node connected to a few upstream nodes."""
    return ValidationContext(
        availableNodes=["HTTP Request", "Set", "Slack"],
        currentNodeName="Code",
        hasInputData=True,
        isInLoop=False,
    )


@pytest.fixture
def test_settings():
    """Settings independent of the environment."""
    return Settings(max_parameter_depth=64, expression_heavy_threshold=5)


# Test data factories
class TestDataFactory:
    """Factory for creating test data."""

    @staticmethod
    def node(name, parameters=None, **overrides):
        """Create a workflow node document."""
        data = {
            "id": name.lower().replace(" ", "-"),
            "name": name,
            "type": "n8n-nodes-base.set",
            "typeVersion": 1,
            "position": [0, 0],
            "parameters": parameters or {},
        }
        data.update(overrides)
        return data

    @staticmethod
    def connect(*names):
        """Create a connections mapping chaining ``names`` in order."""
        connections = {}
        for source, target in zip(names, names[1:]):
            outputs = connections.setdefault(source, {"main": [[]]})
            outputs["main"][0].append({"node": target, "type": "main", "index": 0})
        return connections

    @classmethod
    def workflow(cls, nodes=None, connections=None, **overrides):
        """Create a workflow document."""
        data = {
            "name": "Test Workflow",
            "nodes": nodes if nodes is not None else [],
            "connections": connections or {},
        }
        data.update(overrides)
        return data

    @classmethod
    def two_node_workflow(cls, parameters=None):
        """Manual trigger connected to a Set node with ``parameters``."""
        return cls.workflow(
            nodes=[
                cls.node("Manual Trigger", type="n8n-nodes-base.manualTrigger"),
                cls.node("Set", parameters),
            ],
            connections=cls.connect("Manual Trigger", "Set"),
        )


@pytest.fixture
def test_data():
    """Provide test data factory."""
    return TestDataFactory


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to a temporary file and return its path."""
    def _write(data, name="data.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
