"""Pydantic request/response models for the template catalog."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TemplateCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name of the template.")


class TemplateRenameRequest(BaseModel):
    name: str = Field(..., min_length=1)


class TemplateModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: Optional[datetime] = None
    station_count: Optional[int] = None


class StationCreateRequest(BaseModel):
    customer_id: Optional[str] = None
    worker_id: Optional[str] = None
    scheduled_time: Optional[str] = Field(default=None, description="Time of day, HH:MM. Defaults to 09:00.")
    order: Optional[int] = Field(default=None, description="Position; appended after the last station when omitted.")


class StationUpdateRequest(BaseModel):
    """Only the fields present in the payload are changed; ``null`` unbinds."""

    customer_id: Optional[str] = None
    worker_id: Optional[str] = None
    scheduled_time: Optional[str] = None
    order: Optional[int] = None


class StationModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    template_id: str
    customer_id: Optional[str] = None
    worker_id: Optional[str] = None
    order: int
    scheduled_time: Optional[str] = None
