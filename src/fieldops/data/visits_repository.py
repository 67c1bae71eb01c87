"""Row mapping and queries for visits, visit points and service points."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from ..db.store import RecordStore, eq, gte, in_, lt
from ..errors import NotFoundError
from ..models.domain import (
    PENDING,
    InstallationVisit,
    ServicePoint,
    SpecialVisit,
    Visit,
    VisitPoint,
)
from ..timeutils import day_bounds, parse_date, parse_datetime

JOBS = "jobs"
JOB_POINTS = "job_service_points"
SERVICE_POINTS = "service_points"
INSTALLATION_JOBS = "installation_jobs"
SPECIAL_JOBS = "special_jobs"


def _optional_number(value: Any) -> float | None:
    if value is None:
        return None
    return value if isinstance(value, (int, float)) else float(value)


def visit_from_row(row: dict[str, Any]) -> Visit:
    order_number = row.get("order_number")
    scheduled_for = row.get("scheduled_for")
    return Visit(
        id=str(row["id"]),
        worker_id=str(row["worker_id"]),
        date=parse_datetime(row["date"]),
        status=row.get("status") or PENDING,
        customer_id=row.get("customer_id") or None,
        one_time_customer_id=row.get("one_time_customer_id") or None,
        order_number=int(order_number) if order_number is not None else None,
        notes=row.get("notes"),
        station_id=row.get("station_id") or None,
        scheduled_for=parse_date(scheduled_for) if scheduled_for else None,
    )


def visit_point_from_row(row: dict[str, Any]) -> VisitPoint:
    return VisitPoint(
        id=str(row["id"]),
        job_id=str(row["job_id"]),
        service_point_id=str(row["service_point_id"]),
        custom_refill_amount=_optional_number(row.get("custom_refill_amount")),
        image_url=row.get("image_url"),
    )


def service_point_from_row(row: dict[str, Any]) -> ServicePoint:
    return ServicePoint(
        id=str(row["id"]),
        customer_id=str(row["customer_id"]),
        device_type=str(row.get("device_type") or ""),
        scent_type=row.get("scent_type") or None,
        refill_amount=_optional_number(row.get("refill_amount")) or 0,
    )


def fetch_visit(store: RecordStore, visit_id: str) -> Visit:
    rows = store.select(JOBS, [eq("id", visit_id)], limit=1)
    if not rows:
        raise NotFoundError(f"Visit '{visit_id}' not found")
    return visit_from_row(rows[0])


def fetch_visit_point(store: RecordStore, visit_point_id: str) -> VisitPoint:
    rows = store.select(JOB_POINTS, [eq("id", visit_point_id)], limit=1)
    if not rows:
        raise NotFoundError(f"Visit point '{visit_point_id}' not found")
    return visit_point_from_row(rows[0])


def fetch_visit_points(store: RecordStore, job_ids: Iterable[str]) -> list[VisitPoint]:
    job_ids = list(job_ids)
    if not job_ids:
        return []
    return [visit_point_from_row(row) for row in store.select(JOB_POINTS, [in_("job_id", job_ids)])]


def fetch_customer_service_points(store: RecordStore, customer_id: str) -> list[ServicePoint]:
    rows = store.select(SERVICE_POINTS, [eq("customer_id", customer_id)], order_by="created_at")
    return [service_point_from_row(row) for row in rows]


def fetch_service_points(store: RecordStore, point_ids: Iterable[str]) -> dict[str, ServicePoint]:
    point_ids = list(dict.fromkeys(point_ids))
    if not point_ids:
        return {}
    rows = store.select(SERVICE_POINTS, [in_("id", point_ids)])
    return {str(row["id"]): service_point_from_row(row) for row in rows}


def fetch_day_visits(
    store: RecordStore,
    day: date,
    *,
    worker_id: str | None = None,
    status: str | None = None,
) -> list[Visit]:
    start, end = day_bounds(day)
    filters = [gte("date", start), lt("date", end)]
    if worker_id:
        filters.append(eq("worker_id", worker_id))
    if status:
        filters.append(eq("status", status))
    return [visit_from_row(row) for row in store.select(JOBS, filters, order_by="date")]


def fetch_day_installations(store: RecordStore, day: date, worker_id: str) -> list[InstallationVisit]:
    start, end = day_bounds(day)
    rows = store.select(
        INSTALLATION_JOBS,
        [eq("worker_id", worker_id), eq("status", PENDING), gte("date", start), lt("date", end)],
        columns="id, worker_id, date, status, devices:installation_devices(device_type)",
    )
    return [
        InstallationVisit(
            id=str(row["id"]),
            worker_id=str(row["worker_id"]),
            date=parse_datetime(row["date"]),
            device_types=[
                str(device["device_type"]) for device in (row.get("devices") or []) if device.get("device_type")
            ],
        )
        for row in rows
    ]


def fetch_day_special_visits(store: RecordStore, day: date, worker_id: str) -> list[SpecialVisit]:
    start, end = day_bounds(day)
    rows = store.select(
        SPECIAL_JOBS,
        [eq("worker_id", worker_id), eq("status", PENDING), gte("date", start), lt("date", end)],
    )
    return [
        SpecialVisit(
            id=str(row["id"]),
            worker_id=str(row["worker_id"]),
            date=parse_datetime(row["date"]),
            job_type=str(row.get("job_type") or ""),
            battery_type=row.get("battery_type") or None,
        )
        for row in rows
    ]
