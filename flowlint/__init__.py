"""FlowLint - static validation of workflow node expressions."""

__version__ = "0.1.0"
