"""Past-due visit reconciliation."""

from .reconciler import (
    ReconciliationResult,
    catch_up_datetime,
    reconcile_past_due_visits,
    should_catch_up_at_startup,
)

__all__ = [
    "ReconciliationResult",
    "catch_up_datetime",
    "reconcile_past_due_visits",
    "should_catch_up_at_startup",
]
