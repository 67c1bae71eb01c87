"""Operator actions on individual visits."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Mapping, Optional

from ...data.visits_repository import (
    JOB_POINTS,
    JOBS,
    fetch_customer_service_points,
    fetch_day_visits,
    fetch_visit,
    fetch_visit_point,
    visit_from_row,
    visit_point_from_row,
)
from ...db.store import RecordStore, eq
from ...errors import ConflictError, ValidationError
from ...models.domain import COMPLETED, PENDING, Visit, VisitPoint
from ...persistence.transaction import CompensatingTransaction
from ...timeutils import combine_local, local_tz, parse_time_of_day, to_store


def create_manual_visit(
    store: RecordStore,
    *,
    worker_id: str,
    scheduled_at: datetime,
    customer_id: Optional[str] = None,
    one_time_customer_id: Optional[str] = None,
    notes: Optional[str] = None,
    order_number: Optional[int] = None,
    quantities: Optional[Mapping[str, float]] = None,
) -> tuple[Visit, list[VisitPoint]]:
    """Create a one-off visit outside any template.

    Unlike template expansion, the override stays unset unless the operator
    entered a quantity that differs from the service point's default, so later
    default changes still flow into this visit.
    """
    if not worker_id:
        raise ValidationError("worker_id is required")
    if bool(customer_id) == bool(one_time_customer_id):
        raise ValidationError("Exactly one of customer_id or one_time_customer_id is required")
    quantities = dict(quantities or {})
    if any(value < 0 for value in quantities.values()):
        raise ValidationError("Refill quantities must not be negative")

    with CompensatingTransaction(store, label=f"create manual visit for worker {worker_id}") as tx:
        rows = tx.insert(
            JOBS,
            [
                {
                    "customer_id": customer_id,
                    "one_time_customer_id": one_time_customer_id,
                    "worker_id": worker_id,
                    "date": to_store(scheduled_at),
                    "status": PENDING,
                    "notes": notes or None,
                    "order_number": order_number,
                }
            ],
        )
        visit = visit_from_row(rows[0])

        points: list[VisitPoint] = []
        if customer_id:
            service_points = fetch_customer_service_points(tx, customer_id)
            unknown = set(quantities) - {point.id for point in service_points}
            if unknown:
                raise ValidationError(f"Service points {sorted(unknown)} do not belong to customer {customer_id}")
            point_rows = [
                {
                    "job_id": visit.id,
                    "service_point_id": point.id,
                    "custom_refill_amount": (
                        quantities[point.id]
                        if point.id in quantities and quantities[point.id] != point.refill_amount
                        else None
                    ),
                }
                for point in service_points
            ]
            if point_rows:
                points = [visit_point_from_row(row) for row in tx.insert(JOB_POINTS, point_rows)]

    logging.info(f"Created manual visit {visit.id} with {len(points)} point(s)")
    return visit, points


def complete_visit(store: RecordStore, visit_id: str) -> Visit:
    """Mark a visit completed. Completion is terminal; repeating it is a no-op."""
    visit = fetch_visit(store, visit_id)
    if visit.status == COMPLETED:
        return visit
    rows = store.update(JOBS, {"status": COMPLETED}, [eq("id", visit_id), eq("status", PENDING)])
    return visit_from_row(rows[0]) if rows else fetch_visit(store, visit_id)


def set_point_override(store: RecordStore, visit_point_id: str, quantity: Optional[float]) -> VisitPoint:
    """Set (or clear with ``None``) the override of a pending visit's point."""
    if quantity is not None and quantity < 0:
        raise ValidationError("Refill quantity must not be negative")
    point = fetch_visit_point(store, visit_point_id)
    visit = fetch_visit(store, point.job_id)
    if not visit.is_pending:
        raise ConflictError(f"Visit {visit.id} is completed; its quantities can no longer change")
    rows = store.update(JOB_POINTS, {"custom_refill_amount": quantity}, [eq("id", visit_point_id)])
    return visit_point_from_row(rows[0]) if rows else fetch_visit_point(store, visit_point_id)


def record_point_image(store: RecordStore, visit_point_id: str, image_url: str) -> VisitPoint:
    """Attach the uploaded photo reference to a point of a pending visit."""
    image_url = (image_url or "").strip()
    if not image_url:
        raise ValidationError("image_url must not be empty")
    point = fetch_visit_point(store, visit_point_id)
    visit = fetch_visit(store, point.job_id)
    if not visit.is_pending:
        raise ConflictError(f"Visit {visit.id} is completed; its photos can no longer change")
    rows = store.update(JOB_POINTS, {"image_url": image_url}, [eq("id", visit_point_id)])
    return visit_point_from_row(rows[0]) if rows else fetch_visit_point(store, visit_point_id)


def reschedule_visit_time(store: RecordStore, visit_id: str, new_time: str) -> Visit:
    """Move a visit to another time of day, keeping its calendar day."""
    visit = fetch_visit(store, visit_id)
    if not visit.is_pending:
        raise ConflictError(f"Visit {visit.id} is completed and cannot be rescheduled")
    local_day = visit.date.astimezone(local_tz()).date()
    moved = combine_local(local_day, parse_time_of_day(new_time))
    rows = store.update(JOBS, {"date": to_store(moved)}, [eq("id", visit_id)])
    return visit_from_row(rows[0]) if rows else fetch_visit(store, visit_id)


def _daily_order_key(visit: Visit) -> tuple[int, float, float]:
    # numbered visits first, then by time
    if visit.order_number is not None:
        return (0, float(visit.order_number), visit.date.timestamp())
    return (1, 0.0, visit.date.timestamp())


def list_day_visits(store: RecordStore, day: date, *, worker_id: Optional[str] = None) -> list[Visit]:
    """All visits of a day ordered by order number (unnumbered last), then time."""
    return sorted(fetch_day_visits(store, day, worker_id=worker_id), key=_daily_order_key)
