"""Response models for the reconciliation sweep and daily summaries."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict


class ReconciliationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    message: str
    found: int
    updated: int
    failed_ids: list[str]


class DailySummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    worker_id: str
    date: dt.date
    scents: dict[str, float]
    devices: dict[str, int]
    batteries: dict[str, int]
    visit_count: int
