"""Calendar assignment endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from ...db.store import RecordStore, get_store
from ...schemas.schedule import AssignmentModel, AssignRequest, AssignResponse, UnassignResponse
from ...schemas.visits import VisitModel
from ...services.scheduling import assign_template, list_assignments, unassign_template

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("", response_model=list[AssignmentModel], status_code=status.HTTP_200_OK)
def get_schedule(
    start: date = Query(..., description="First calendar day (inclusive)"),
    end: date = Query(..., description="Last calendar day (inclusive)"),
    store: RecordStore = Depends(get_store),
) -> list[AssignmentModel]:
    return [
        AssignmentModel(
            date=assignment.date,
            template_id=assignment.template_id,
            template_name=template.name if template else None,
        )
        for assignment, template in list_assignments(store, start, end)
    ]


@router.put("/{day}", response_model=AssignResponse, status_code=status.HTTP_200_OK)
def assign(day: date, payload: AssignRequest, store: RecordStore = Depends(get_store)) -> AssignResponse:
    """Assign a template to a day (replacing any previous one) and generate its visits."""
    result = assign_template(store, day, payload.template_id)
    return AssignResponse(
        assignment=AssignmentModel(date=result.assignment.date, template_id=result.assignment.template_id),
        created_visits=[VisitModel.model_validate(visit) for visit in result.expansion.visits],
        points_created=result.expansion.points_created,
        skipped_station_ids=result.expansion.skipped_station_ids,
        existing_station_ids=result.expansion.existing_station_ids,
        replaced_template_id=result.replaced_template_id,
        removed_visits=result.removed_visits,
    )


@router.delete("/{day}", response_model=UnassignResponse, status_code=status.HTTP_200_OK)
def unassign(day: date, store: RecordStore = Depends(get_store)) -> UnassignResponse:
    """Remove the day's template and the pending visits it generated."""
    result = unassign_template(store, day)
    return UnassignResponse(
        date=result.date,
        template_id=result.template_id,
        removed_visits=result.removed_visits,
        removed_points=result.removed_points,
        assignment_removed=result.assignment_removed,
    )
