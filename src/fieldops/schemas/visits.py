"""Pydantic request/response models for visits and their points."""

from __future__ import annotations

import datetime as dt
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class VisitModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    worker_id: str
    date: datetime
    status: Literal["pending", "completed"]
    customer_id: Optional[str] = None
    one_time_customer_id: Optional[str] = None
    order_number: Optional[int] = None
    notes: Optional[str] = None
    station_id: Optional[str] = None
    scheduled_for: Optional[dt.date] = None


class VisitPointModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    job_id: str
    service_point_id: str
    custom_refill_amount: Optional[float] = None
    image_url: Optional[str] = None


class ManualVisitRequest(BaseModel):
    worker_id: str
    scheduled_at: datetime = Field(..., description="Visit date-time; naive values use the service timezone.")
    customer_id: Optional[str] = None
    one_time_customer_id: Optional[str] = None
    notes: Optional[str] = None
    order_number: Optional[int] = None
    quantities: dict[str, float] = Field(
        default_factory=dict,
        description="Operator-entered quantity per service point id; equal-to-default entries are ignored.",
    )

    @model_validator(mode="after")
    def _one_customer(self) -> "ManualVisitRequest":
        if bool(self.customer_id) == bool(self.one_time_customer_id):
            raise ValueError("Provide exactly one of customer_id or one_time_customer_id")
        return self


class ManualVisitResponse(BaseModel):
    visit: VisitModel
    points: list[VisitPointModel]


class RescheduleRequest(BaseModel):
    time: str = Field(..., description="New time of day, HH:MM.")


class OverrideRequest(BaseModel):
    quantity: Optional[float] = Field(default=None, ge=0, description="Override quantity; null clears it.")


class ResolvedPointModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    visit_point_id: str
    service_point_id: str
    device_type: str
    scent_type: Optional[str] = None
    default_amount: float
    override_amount: Optional[float] = None
    quantity: float
    is_overridden: bool
    image_url: Optional[str] = None


class PointImageRequest(BaseModel):
    image_url: str = Field(..., min_length=1, description="Storage object name of the uploaded photo.")
