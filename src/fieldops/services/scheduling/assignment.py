"""Calendar assignment of templates to dates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ...data.catalog_repository import (
    SCHEDULES,
    assignment_from_row,
    fetch_assignment,
    fetch_assignments,
    fetch_stations,
    fetch_template,
    fetch_templates,
)
from ...data.visits_repository import JOB_POINTS, JOBS
from ...db.store import RecordStore, eq, gte, in_, lt
from ...errors import ValidationError
from ...models.domain import PENDING, ScheduleAssignment, Template
from ...persistence.transaction import CompensatingTransaction
from ...timeutils import day_bounds
from ..expansion import ExpansionResult, expand_template


@dataclass(slots=True)
class AssignmentResult:
    assignment: ScheduleAssignment
    expansion: ExpansionResult
    replaced_template_id: Optional[str] = None
    removed_visits: int = 0


@dataclass(slots=True)
class UnassignResult:
    date: date
    template_id: Optional[str]
    removed_visits: int = 0
    removed_points: int = 0
    assignment_removed: bool = False


def _remove_pending_station_visits(tx: CompensatingTransaction, template_id: str, day: date) -> tuple[int, int]:
    """Delete the pending visits of ``day`` that match the template's stations.

    Completed visits are history and never match. Points go before their visits.
    """
    start, end = day_bounds(day)
    removed_visits = 0
    removed_points = 0
    for station in fetch_stations(tx, template_id):
        if not station.is_bound:
            continue
        rows = tx.select(
            JOBS,
            [
                eq("status", PENDING),
                eq("customer_id", station.customer_id),
                eq("worker_id", station.worker_id),
                gte("date", start),
                lt("date", end),
            ],
            columns="id",
        )
        job_ids = [str(row["id"]) for row in rows]
        if not job_ids:
            continue
        removed_points += len(tx.delete(JOB_POINTS, [in_("job_id", job_ids)]))
        removed_visits += len(tx.delete(JOBS, [in_("id", job_ids), eq("status", PENDING)]))
    return removed_visits, removed_points


def assign_template(store: RecordStore, day: date, template_id: str) -> AssignmentResult:
    """Assign ``template_id`` to ``day`` and expand it into visits.

    Assigning over an existing assignment replaces it. When the previous
    template differs, its pending visits for the day are removed first.
    """
    if not template_id:
        raise ValidationError("template_id is required")
    fetch_template(store, template_id)

    with CompensatingTransaction(store, label=f"assign template {template_id} to {day}") as tx:
        current = fetch_assignment(tx, day)
        replaced_template_id = None
        removed_visits = 0
        if current is not None and current.template_id != template_id:
            replaced_template_id = current.template_id
            removed_visits, _ = _remove_pending_station_visits(tx, current.template_id, day)

        row = tx.upsert(SCHEDULES, {"date": day.isoformat(), "template_id": template_id}, on_conflict="date")
        expansion = expand_template(tx, template_id, day)

    if replaced_template_id:
        logging.info(
            f"Replaced template {replaced_template_id} with {template_id} on {day} "
            f"({removed_visits} pending visit(s) removed)"
        )
    return AssignmentResult(
        assignment=assignment_from_row(row),
        expansion=expansion,
        replaced_template_id=replaced_template_id,
        removed_visits=removed_visits,
    )


def unassign_template(store: RecordStore, day: date) -> UnassignResult:
    """Remove the assignment of ``day`` together with the pending visits it produced."""
    current = fetch_assignment(store, day)
    if current is None:
        logging.info(f"No template assigned to {day}; nothing to unassign")
        return UnassignResult(date=day, template_id=None)

    with CompensatingTransaction(store, label=f"unassign template {current.template_id} from {day}") as tx:
        removed_visits, removed_points = _remove_pending_station_visits(tx, current.template_id, day)
        tx.delete(SCHEDULES, [eq("date", day.isoformat())])

    logging.info(
        f"Unassigned template {current.template_id} from {day}: "
        f"{removed_visits} pending visit(s) and {removed_points} point(s) removed"
    )
    return UnassignResult(
        date=day,
        template_id=current.template_id,
        removed_visits=removed_visits,
        removed_points=removed_points,
        assignment_removed=True,
    )


def get_assignment(store: RecordStore, day: date) -> ScheduleAssignment | None:
    return fetch_assignment(store, day)


def list_assignments(store: RecordStore, start: date, end: date) -> list[tuple[ScheduleAssignment, Template | None]]:
    """Assignments in ``[start, end]`` paired with their template (None if it vanished)."""
    if end < start:
        raise ValidationError("end must not be before start")
    templates = {template.id: template for template in fetch_templates(store)}
    return [(assignment, templates.get(assignment.template_id)) for assignment in fetch_assignments(store, start, end)]
