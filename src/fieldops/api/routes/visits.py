"""Visit endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from ...db.store import RecordStore, get_store
from ...schemas.visits import (
    ManualVisitRequest,
    ManualVisitResponse,
    OverrideRequest,
    PointImageRequest,
    RescheduleRequest,
    ResolvedPointModel,
    VisitModel,
    VisitPointModel,
)
from ...services import visits as visit_service
from ...services.refill import resolve_visit_quantities

router = APIRouter(tags=["visits"])


@router.post("/visits", response_model=ManualVisitResponse, status_code=status.HTTP_201_CREATED)
def create_visit(payload: ManualVisitRequest, store: RecordStore = Depends(get_store)) -> ManualVisitResponse:
    visit, points = visit_service.create_manual_visit(
        store,
        worker_id=payload.worker_id,
        scheduled_at=payload.scheduled_at,
        customer_id=payload.customer_id,
        one_time_customer_id=payload.one_time_customer_id,
        notes=payload.notes,
        order_number=payload.order_number,
        quantities=payload.quantities,
    )
    return ManualVisitResponse(
        visit=VisitModel.model_validate(visit),
        points=[VisitPointModel.model_validate(point) for point in points],
    )


@router.get("/visits", response_model=list[VisitModel])
def list_visits(
    day: date = Query(..., description="Calendar day"),
    worker_id: str | None = Query(default=None, description="Optional worker filter"),
    store: RecordStore = Depends(get_store),
) -> list[VisitModel]:
    return [VisitModel.model_validate(visit) for visit in visit_service.list_day_visits(store, day, worker_id=worker_id)]


@router.post("/visits/{visit_id}/complete", response_model=VisitModel)
def complete_visit(visit_id: str, store: RecordStore = Depends(get_store)) -> VisitModel:
    return VisitModel.model_validate(visit_service.complete_visit(store, visit_id))


@router.patch("/visits/{visit_id}/time", response_model=VisitModel)
def reschedule_visit(visit_id: str, payload: RescheduleRequest, store: RecordStore = Depends(get_store)) -> VisitModel:
    return VisitModel.model_validate(visit_service.reschedule_visit_time(store, visit_id, payload.time))


@router.get("/visits/{visit_id}/quantities", response_model=list[ResolvedPointModel])
def get_visit_quantities(visit_id: str, store: RecordStore = Depends(get_store)) -> list[ResolvedPointModel]:
    return [ResolvedPointModel.model_validate(point) for point in resolve_visit_quantities(store, visit_id)]


@router.patch("/visit-points/{visit_point_id}/override", response_model=VisitPointModel)
def set_override(
    visit_point_id: str, payload: OverrideRequest, store: RecordStore = Depends(get_store)
) -> VisitPointModel:
    return VisitPointModel.model_validate(visit_service.set_point_override(store, visit_point_id, payload.quantity))


@router.patch("/visit-points/{visit_point_id}/image", response_model=VisitPointModel)
def record_image(
    visit_point_id: str, payload: PointImageRequest, store: RecordStore = Depends(get_store)
) -> VisitPointModel:
    return VisitPointModel.model_validate(
        visit_service.record_point_image(store, visit_point_id, payload.image_url)
    )
