"""Validation result schemas."""

from typing import List, Set

from pydantic import BaseModel, Field, computed_field


class ValidationResult(BaseModel):
    """Outcome of validating a single text value."""

    errors: List[str] = Field(default_factory=list, description="Problems that make the text unusable")
    warnings: List[str] = Field(default_factory=list, description="Style and best-practice issues")
    used_variables: Set[str] = Field(default_factory=set, description="Variable tokens referenced")
    used_nodes: Set[str] = Field(default_factory=set, description="Node names referenced")

    @computed_field
    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        if message not in self.errors:
            self.errors.append(message)

    def add_warning(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)


class AggregateValidationResult(ValidationResult):
    """Outcome of validating every string in a parameter tree.

    Messages carry the path of the field they came from, e.g.
    ``"options.headers[0].value: Empty expression found"``.
    """

    def merge(self, result: ValidationResult, path: str = "") -> None:
        """Fold a leaf result into this one, prefixing messages with ``path``."""
        prefix = f"{path}: " if path else ""
        self.errors.extend(f"{prefix}{error}" for error in result.errors)
        self.warnings.extend(f"{prefix}{warning}" for warning in result.warnings)
        self.used_variables.update(result.used_variables)
        self.used_nodes.update(result.used_nodes)
