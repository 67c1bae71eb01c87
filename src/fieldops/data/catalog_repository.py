"""Row mapping and queries for templates, stations and schedule assignments."""

from __future__ import annotations

from datetime import date
from typing import Any

from ..db.store import RecordStore, eq, gte, lte
from ..errors import NotFoundError
from ..models.domain import ScheduleAssignment, Station, Template
from ..timeutils import format_time_hhmm, parse_date, parse_datetime

TEMPLATES = "work_templates"
STATIONS = "template_stations"
SCHEDULES = "work_schedules"


def template_from_row(row: dict[str, Any]) -> Template:
    created_at = row.get("created_at")
    return Template(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        created_at=parse_datetime(created_at) if created_at else None,
    )


def station_from_row(row: dict[str, Any]) -> Station:
    created_at = row.get("created_at")
    scheduled_time = row.get("scheduled_time")
    return Station(
        id=str(row["id"]),
        template_id=str(row["template_id"]),
        customer_id=row.get("customer_id") or None,
        worker_id=row.get("worker_id") or None,
        order=int(row.get("order") or 0),
        scheduled_time=format_time_hhmm(scheduled_time) if scheduled_time else None,
        created_at=parse_datetime(created_at) if created_at else None,
    )


def assignment_from_row(row: dict[str, Any]) -> ScheduleAssignment:
    return ScheduleAssignment(
        id=str(row["id"]),
        template_id=str(row["template_id"]),
        date=parse_date(row["date"]),
    )


def fetch_template(store: RecordStore, template_id: str) -> Template:
    rows = store.select(TEMPLATES, [eq("id", template_id)], limit=1)
    if not rows:
        raise NotFoundError(f"Template '{template_id}' not found")
    return template_from_row(rows[0])


def fetch_templates(store: RecordStore) -> list[Template]:
    return [template_from_row(row) for row in store.select(TEMPLATES, order_by="created_at")]


def fetch_station(store: RecordStore, station_id: str) -> Station:
    rows = store.select(STATIONS, [eq("id", station_id)], limit=1)
    if not rows:
        raise NotFoundError(f"Station '{station_id}' not found")
    return station_from_row(rows[0])


def fetch_stations(store: RecordStore, template_id: str) -> list[Station]:
    """Stations of a template, stably sorted by position then insertion."""
    rows = store.select(STATIONS, [eq("template_id", template_id)])
    stations = [station_from_row(row) for row in rows]
    # sorted() is stable, so rows without created_at keep the store's order
    stations.sort(key=lambda station: station.created_at.timestamp() if station.created_at else 0.0)
    stations.sort(key=lambda station: station.order)
    return stations


def fetch_assignment(store: RecordStore, day: date) -> ScheduleAssignment | None:
    rows = store.select(SCHEDULES, [eq("date", day.isoformat())], limit=1)
    return assignment_from_row(rows[0]) if rows else None


def fetch_assignments(store: RecordStore, start: date, end: date) -> list[ScheduleAssignment]:
    rows = store.select(
        SCHEDULES,
        [gte("date", start.isoformat()), lte("date", end.isoformat())],
        order_by="date",
    )
    return [assignment_from_row(row) for row in rows if row.get("template_id")]
