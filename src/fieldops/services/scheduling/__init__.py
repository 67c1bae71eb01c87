"""Schedule assignment services."""

from .assignment import (
    AssignmentResult,
    UnassignResult,
    assign_template,
    get_assignment,
    list_assignments,
    unassign_template,
)

__all__ = [
    "AssignmentResult",
    "UnassignResult",
    "assign_template",
    "get_assignment",
    "list_assignments",
    "unassign_template",
]
