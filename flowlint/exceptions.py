"""Base exceptions for FlowLint.

Expression problems are never raised; they are reported in validation
results. These exceptions cover the layers that read input on behalf of the
host (workflow documents, parameter files).
"""


class FlowLintException(Exception):
    """Base exception for all FlowLint errors."""
    pass


class ValidationError(FlowLintException):
    """Raised when input cannot be validated at all."""
    pass


class WorkflowFormatError(ValidationError):
    """Raised when a workflow document is unreadable or malformed."""

    def __init__(self, message: str, source: str = None):
        super().__init__(message)
        self.message = message
        self.source = source
