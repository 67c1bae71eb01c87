"""Template catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ...db.store import RecordStore, get_store
from ...schemas.templates import (
    StationCreateRequest,
    StationModel,
    StationUpdateRequest,
    TemplateCreateRequest,
    TemplateModel,
    TemplateRenameRequest,
)
from ...services import templates as catalog
from ...data.catalog_repository import fetch_template

router = APIRouter(tags=["templates"])


@router.get("/templates", response_model=list[TemplateModel], status_code=status.HTTP_200_OK)
def list_templates(store: RecordStore = Depends(get_store)) -> list[TemplateModel]:
    return [
        TemplateModel(
            id=entry.template.id,
            name=entry.template.name,
            created_at=entry.template.created_at,
            station_count=entry.station_count,
        )
        for entry in catalog.list_templates(store)
    ]


@router.post("/templates", response_model=TemplateModel, status_code=status.HTTP_201_CREATED)
def create_template(payload: TemplateCreateRequest, store: RecordStore = Depends(get_store)) -> TemplateModel:
    template = catalog.create_template(store, payload.name)
    return TemplateModel(id=template.id, name=template.name, created_at=template.created_at, station_count=0)


@router.get("/templates/{template_id}", response_model=TemplateModel)
def get_template(template_id: str, store: RecordStore = Depends(get_store)) -> TemplateModel:
    return TemplateModel.model_validate(fetch_template(store, template_id))


@router.patch("/templates/{template_id}", response_model=TemplateModel)
def rename_template(
    template_id: str, payload: TemplateRenameRequest, store: RecordStore = Depends(get_store)
) -> TemplateModel:
    return TemplateModel.model_validate(catalog.rename_template(store, template_id, payload.name))


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: str, store: RecordStore = Depends(get_store)) -> Response:
    catalog.delete_template(store, template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/templates/{template_id}/stations", response_model=list[StationModel])
def list_stations(template_id: str, store: RecordStore = Depends(get_store)) -> list[StationModel]:
    return [StationModel.model_validate(station) for station in catalog.list_stations(store, template_id)]


@router.post("/templates/{template_id}/stations", response_model=StationModel, status_code=status.HTTP_201_CREATED)
def add_station(
    template_id: str, payload: StationCreateRequest, store: RecordStore = Depends(get_store)
) -> StationModel:
    station = catalog.add_station(
        store,
        template_id,
        customer_id=payload.customer_id,
        worker_id=payload.worker_id,
        scheduled_time=payload.scheduled_time,
        order=payload.order,
    )
    return StationModel.model_validate(station)


@router.patch("/stations/{station_id}", response_model=StationModel)
def update_station(
    station_id: str, payload: StationUpdateRequest, store: RecordStore = Depends(get_store)
) -> StationModel:
    changes = payload.model_dump(exclude_unset=True)
    return StationModel.model_validate(catalog.update_station(store, station_id, **changes))


@router.delete("/stations/{station_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_station(station_id: str, store: RecordStore = Depends(get_store)) -> Response:
    catalog.remove_station(store, station_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
