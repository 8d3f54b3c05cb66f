"""Validation context supplied by the host."""

from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class ValidationContext(BaseModel):
    """
    Facts about the surrounding workflow needed to judge an expression.

    The host is responsible for knowing which nodes exist; the validator
    only tests membership against ``available_nodes``. Both snake_case names
    and the camelCase keys used in workflow JSON are accepted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    available_nodes: FrozenSet[str] = Field(
        default_factory=frozenset,
        alias="availableNodes",
        description="Display names of nodes present in the workflow",
    )
    current_node_name: Optional[str] = Field(
        None, alias="currentNodeName", description="Node whose parameters are validated"
    )
    has_input_data: Optional[bool] = Field(
        None, alias="hasInputData", description="Whether the node receives input items"
    )
    is_in_loop: Optional[bool] = Field(
        False, alias="isInLoop", description="Whether the node runs inside a loop"
    )

    @property
    def input_available(self) -> bool:
        """Omitted input information counts as no input."""
        return bool(self.has_input_data)

    @property
    def in_loop(self) -> bool:
        return self.is_in_loop is True
