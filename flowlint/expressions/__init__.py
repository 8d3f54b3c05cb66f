"""
Static validation of ``{{ }}`` expressions in workflow node parameters.

This module provides:
- ExpressionValidator for single values and whole parameter trees
- ValidationContext describing the surrounding workflow
- The table of recognized workflow variables ($json, $node, $input, ...)
"""

from .context import ValidationContext
from .schemas import AggregateValidationResult, ValidationResult
from .validator import (
    ExpressionValidator,
    expression_validator,
    validate_expression,
    validate_node_expressions,
)
from .variables import RECOGNIZED_VARIABLES

__all__ = [
    "AggregateValidationResult",
    "ExpressionValidator",
    "RECOGNIZED_VARIABLES",
    "ValidationContext",
    "ValidationResult",
    "expression_validator",
    "validate_expression",
    "validate_node_expressions",
]
