"""Job expansion engine."""

from .engine import ExpansionResult, expand_template

__all__ = ["ExpansionResult", "expand_template"]
