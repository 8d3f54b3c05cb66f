"""
Static validator for ``{{ ... }}`` expressions in node parameters.

Expressions are never evaluated. The validator looks at the text of each
expression block and reports:
- structural problems (unmatched or nested brackets, empty blocks)
- unsupported syntax (template literals, optional chaining)
- references that cannot resolve in the given context ($input without
  input data, unknown node names)
- style issues (single-quoted bracket access, variables without ``$``)

Every problem is returned as data; nothing here raises for bad input.
"""

import re
from collections.abc import Mapping
from typing import Any, List, Optional, Set

import structlog

from flowlint.config import settings
from .context import ValidationContext
from .schemas import AggregateValidationResult, ValidationResult
from .variables import (
    INPUT_PATTERN,
    JSON_PATTERN,
    MISSING_PREFIX_PATTERN,
    OPTIONAL_CHAINING_PATTERN,
    SINGLE_QUOTE_ACCESS_PATTERN,
    TEMPLATE_LITERAL_PATTERN,
    find_node_references,
    find_variables,
)

OPEN_MARKER = "{{"
CLOSE_MARKER = "}}"

UNMATCHED_BRACKETS = "Unmatched expression brackets {{ }}"
NESTED_EXPRESSIONS = "Nested expressions are not supported"
EMPTY_EXPRESSION = "Empty expression found"
TEMPLATE_LITERALS = "Template literals ${} are not supported. Use string concatenation instead"
OPTIONAL_CHAINING = "Optional chaining (?.) is not supported in n8n expressions"
BRACKET_ACCESS = "Consider using dot notation or double quotes for property access"
INPUT_WITHOUT_DATA = "$input is only available when the node has input data"
JSON_WITHOUT_DATA = "Using $json but node might not have input data"


class ExpressionValidator:
    """
    Validates expression blocks in single values and in parameter trees.

    Instances hold no per-call state and can be shared between threads.
    """

    EXPRESSION_PATTERN = re.compile(r"\{\{([\s\S]*?)\}\}")

    def __init__(self, max_parameter_depth: Optional[int] = None):
        if max_parameter_depth is None:
            max_parameter_depth = settings.max_parameter_depth
        self.max_parameter_depth = max_parameter_depth
        self.logger = structlog.get_logger(component="expression_validator")

    def validate_expression(
        self, text: str, context: ValidationContext
    ) -> ValidationResult:
        """
        Validate every expression block in ``text``.

        Args:
            text: Parameter value that may contain ``{{ }}`` blocks
            context: Workflow facts used for semantic checks

        Returns:
            Result with errors, warnings and the variables and nodes used
        """
        result = ValidationResult()
        if not text or (OPEN_MARKER not in text and CLOSE_MARKER not in text):
            return result

        self._check_structure(text, result)

        blocks = list(self.EXPRESSION_PATTERN.finditer(text))
        for block in blocks:
            self._validate_block(block.group(1), context, result)

        if text.count(OPEN_MARKER) != text.count(CLOSE_MARKER):
            # Fragments cut off by a missing marker still count as usage
            self._collect_usage(self.EXPRESSION_PATTERN.sub(" ", text), result)

        if not result.valid:
            self.logger.debug(
                "Expression failed validation",
                expression=text[:100] + "..." if len(text) > 100 else text,
                errors=len(result.errors),
            )
        return result

    def validate_node_expressions(
        self, parameters: Any, context: ValidationContext, path: str = ""
    ) -> AggregateValidationResult:
        """
        Validate every string found in a node's parameter tree.

        Args:
            parameters: Parameter value as found in the node configuration
            context: Workflow facts used for semantic checks
            path: Path of ``parameters`` inside a larger tree, if any

        Returns:
            Aggregated result with messages prefixed by field path
        """
        result = AggregateValidationResult()
        self._walk(parameters, context, result, path, set(), 0)

        self.logger.debug(
            "Validated node expressions",
            node=context.current_node_name,
            errors=len(result.errors),
            warnings=len(result.warnings),
            variables=sorted(result.used_variables),
        )
        return result

    def _walk(
        self,
        value: Any,
        context: ValidationContext,
        result: AggregateValidationResult,
        path: str,
        ancestors: Set[int],
        depth: int,
    ) -> None:
        if isinstance(value, str):
            result.merge(self.validate_expression(value, context), path)
            return

        if isinstance(value, Mapping):
            children = [
                (f"{path}.{key}" if path else str(key), child)
                for key, child in value.items()
            ]
        elif isinstance(value, (list, tuple)):
            children = [(f"{path}[{index}]", child) for index, child in enumerate(value)]
        else:
            # None, numbers, booleans and other scalars carry no expressions
            return

        if id(value) in ancestors:
            return
        if depth >= self.max_parameter_depth:
            leaf = ValidationResult()
            leaf.add_warning(
                f"Parameter nesting exceeds maximum depth of {self.max_parameter_depth}"
            )
            result.merge(leaf, path)
            return

        ancestors.add(id(value))
        for child_path, child in children:
            self._walk(child, context, result, child_path, ancestors, depth + 1)
        ancestors.discard(id(value))

    def _check_structure(self, text: str, result: ValidationResult) -> None:
        if text.count(OPEN_MARKER) != text.count(CLOSE_MARKER):
            result.add_error(UNMATCHED_BRACKETS)

        # Any second opening marker counts, so sibling blocks such as
        # "{{ a }} {{ b }}" and a trailing unclosed "{{" are reported.
        first_open = text.find(OPEN_MARKER)
        if first_open != -1 and text.find(OPEN_MARKER, first_open + len(OPEN_MARKER)) != -1:
            result.add_error(NESTED_EXPRESSIONS)

    def _validate_block(
        self, block: str, context: ValidationContext, result: ValidationResult
    ) -> None:
        expression = block.strip()
        if not expression:
            result.add_error(EMPTY_EXPRESSION)
            return

        self._check_syntax(expression, result)
        self._check_context(expression, context, result)

        for node_name in self._collect_usage(expression, result):
            if node_name not in context.available_nodes:
                result.add_error(f'Referenced node "{node_name}" not found in workflow')

    def _check_syntax(self, expression: str, result: ValidationResult) -> None:
        if TEMPLATE_LITERAL_PATTERN.search(expression):
            result.add_error(TEMPLATE_LITERALS)

        if OPTIONAL_CHAINING_PATTERN.search(expression):
            result.add_warning(OPTIONAL_CHAINING)

        if SINGLE_QUOTE_ACCESS_PATTERN.search(expression):
            result.add_warning(BRACKET_ACCESS)

        for match in MISSING_PREFIX_PATTERN.finditer(expression):
            name = match.group(1)
            result.add_warning(
                f"Possible missing $ prefix for variable (e.g., use ${name} instead of {name})"
            )

    def _check_context(
        self, expression: str, context: ValidationContext, result: ValidationResult
    ) -> None:
        if INPUT_PATTERN.search(expression) and not context.input_available:
            result.add_error(INPUT_WITHOUT_DATA)

        if (
            JSON_PATTERN.search(expression)
            and not context.input_available
            and not context.in_loop
        ):
            result.add_warning(JSON_WITHOUT_DATA)

    def _collect_usage(self, text: str, result: ValidationResult) -> List[str]:
        """Record variables and node names in ``text``; return node names."""
        result.used_variables.update(find_variables(text))
        node_names = find_node_references(text)
        result.used_nodes.update(node_names)
        return node_names


# Default validator instance
expression_validator = ExpressionValidator()


def validate_expression(text: str, context: ValidationContext) -> ValidationResult:
    """Validate one text value with the default validator."""
    return expression_validator.validate_expression(text, context)


def validate_node_expressions(
    parameters: Any, context: ValidationContext, path: str = ""
) -> AggregateValidationResult:
    """Validate a parameter tree with the default validator."""
    return expression_validator.validate_node_expressions(parameters, context, path)
