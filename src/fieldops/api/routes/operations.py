"""Reconciliation trigger and daily summary endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from ...db.store import RecordStore, get_store
from ...schemas.operations import DailySummaryResponse, ReconciliationResponse
from ...services.reconciliation import reconcile_past_due_visits
from ...services.summary import daily_summary

router = APIRouter(tags=["operations"])


@router.post("/reconciliation/run", response_model=ReconciliationResponse, status_code=status.HTTP_200_OK)
def run_reconciliation(store: RecordStore = Depends(get_store)) -> ReconciliationResponse:
    """Run the past-due sweep now (for external schedulers and manual triggers)."""
    return ReconciliationResponse.model_validate(reconcile_past_due_visits(store))


@router.get("/summary/daily", response_model=DailySummaryResponse)
def get_daily_summary(
    worker_id: str = Query(..., description="Worker to summarise"),
    day: date = Query(..., description="Calendar day"),
    store: RecordStore = Depends(get_store),
) -> DailySummaryResponse:
    return DailySummaryResponse.model_validate(daily_summary(store, worker_id, day))
