"""Workflow Pydantic schemas.

These mirror the n8n workflow export format closely enough to validate node
expressions: node names, parameters, the disabled flag and connections.
Unknown keys are ignored.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class NodeConnection(BaseModel):
    """One edge endpoint inside ``connections``."""
    model_config = ConfigDict(extra="ignore")

    node: str = Field(..., description="Target node name")
    type: str = Field(default="main", description="Connection type")
    index: int = Field(default=0, description="Target input index")


class WorkflowNode(BaseModel):
    """Node as stored in a workflow document."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[Union[str, int]] = Field(None, description="Node id")
    name: str = Field(..., min_length=1, description="Node display name")
    type: str = Field(default="", description="Node type identifier")
    type_version: Optional[float] = Field(None, alias="typeVersion", description="Node type version")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Node parameters")
    disabled: bool = Field(default=False, description="Whether node is disabled")


class Workflow(BaseModel):
    """Workflow document: nodes plus connections keyed by source node name."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, description="Workflow name")
    nodes: List[WorkflowNode] = Field(default_factory=list, description="Workflow nodes")
    # source name -> output type -> output slot -> targets; empty slots may be null
    connections: Dict[str, Dict[str, List[Optional[List[NodeConnection]]]]] = Field(
        default_factory=dict, description="Workflow connections"
    )

    @property
    def node_names(self) -> List[str]:
        return [node.name for node in self.nodes]


class WorkflowIssue(BaseModel):
    """Error or warning attributed to a node."""
    node: Optional[str] = Field(None, description="Node name, None for workflow-level issues")
    message: str = Field(..., description="Human-readable message")


class WorkflowStatistics(BaseModel):
    total_nodes: int = 0
    enabled_nodes: int = 0
    expressions_validated: int = 0


class WorkflowExpressionReport(BaseModel):
    """Result of validating all node expressions in a workflow."""
    valid: bool = Field(..., description="True when no errors were found")
    errors: List[WorkflowIssue] = Field(default_factory=list)
    warnings: List[WorkflowIssue] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    statistics: WorkflowStatistics = Field(default_factory=WorkflowStatistics)
