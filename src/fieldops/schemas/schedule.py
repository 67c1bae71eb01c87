"""Pydantic request/response models for schedule assignment."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from .visits import VisitModel


class AssignRequest(BaseModel):
    template_id: str = Field(..., min_length=1, description="Template to assign to the date.")


class AssignmentModel(BaseModel):
    date: dt.date
    template_id: str
    template_name: Optional[str] = None


class AssignResponse(BaseModel):
    assignment: AssignmentModel
    created_visits: list[VisitModel]
    points_created: int
    skipped_station_ids: list[str]
    existing_station_ids: list[str]
    replaced_template_id: Optional[str] = None
    removed_visits: int = 0


class UnassignResponse(BaseModel):
    date: dt.date
    template_id: Optional[str] = None
    removed_visits: int
    removed_points: int
    assignment_removed: bool
