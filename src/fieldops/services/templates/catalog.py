"""Template catalog: templates and their ordered stations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ...data.catalog_repository import (
    SCHEDULES,
    STATIONS,
    TEMPLATES,
    fetch_station,
    fetch_stations,
    fetch_template,
    fetch_templates,
    station_from_row,
    template_from_row,
)
from ...db.store import RecordStore, eq
from ...errors import ConflictError, ValidationError
from ...models.domain import Station, Template
from ...persistence.transaction import CompensatingTransaction
from ...timeutils import format_time_hhmm

_UNSET: Any = object()


@dataclass(slots=True)
class TemplateSummary:
    template: Template
    station_count: int


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Template name must not be empty")
    return cleaned


def create_template(store: RecordStore, name: str) -> Template:
    rows = store.insert(TEMPLATES, [{"name": _clean_name(name)}])
    template = template_from_row(rows[0])
    logging.info(f"Created template {template.id} ({template.name})")
    return template


def rename_template(store: RecordStore, template_id: str, name: str) -> Template:
    fetch_template(store, template_id)
    rows = store.update(TEMPLATES, {"name": _clean_name(name)}, [eq("id", template_id)])
    return template_from_row(rows[0]) if rows else fetch_template(store, template_id)


def list_templates(store: RecordStore) -> list[TemplateSummary]:
    """Templates in creation order with their station counts."""
    templates = fetch_templates(store)
    counts: dict[str, int] = {}
    for row in store.select(STATIONS, columns="id, template_id"):
        key = str(row.get("template_id"))
        counts[key] = counts.get(key, 0) + 1
    return [TemplateSummary(template=t, station_count=counts.get(t.id, 0)) for t in templates]


def delete_template(store: RecordStore, template_id: str) -> None:
    """Delete a template and its stations unless a schedule still references it."""
    template = fetch_template(store, template_id)
    references = store.select(SCHEDULES, [eq("template_id", template_id)], columns="id, date", limit=1)
    if references:
        raise ConflictError(
            f"Template '{template.name}' is assigned to {references[0].get('date')}; unassign it first"
        )
    with CompensatingTransaction(store, label=f"delete template {template_id}") as tx:
        tx.delete(STATIONS, [eq("template_id", template_id)])
        tx.delete(TEMPLATES, [eq("id", template_id)])
    logging.info(f"Deleted template {template_id} ({template.name})")


def list_stations(store: RecordStore, template_id: str) -> list[Station]:
    fetch_template(store, template_id)
    return fetch_stations(store, template_id)


def add_station(
    store: RecordStore,
    template_id: str,
    *,
    customer_id: str | None = None,
    worker_id: str | None = None,
    scheduled_time: str | None = None,
    order: int | None = None,
) -> Station:
    """Append a station; placeholders without customer or worker are allowed."""
    fetch_template(store, template_id)
    if order is None:
        last = store.select(
            STATIONS, [eq("template_id", template_id)], columns="order", order_by="order", descending=True, limit=1
        )
        order = int(last[0].get("order") or 0) + 1 if last else 1

    rows = store.insert(
        STATIONS,
        [
            {
                "template_id": template_id,
                "customer_id": customer_id,
                "worker_id": worker_id,
                "order": order,
                "scheduled_time": format_time_hhmm(scheduled_time),
            }
        ],
    )
    return station_from_row(rows[0])


def update_station(
    store: RecordStore,
    station_id: str,
    *,
    customer_id: str | None = _UNSET,
    worker_id: str | None = _UNSET,
    scheduled_time: str | None = _UNSET,
    order: int | None = _UNSET,
) -> Station:
    """Update any subset of a station's fields; passing ``None`` unbinds customer/worker."""
    fetch_station(store, station_id)
    changes: dict[str, Any] = {}
    if customer_id is not _UNSET:
        changes["customer_id"] = customer_id
    if worker_id is not _UNSET:
        changes["worker_id"] = worker_id
    if scheduled_time is not _UNSET:
        changes["scheduled_time"] = format_time_hhmm(scheduled_time)
    if order is not _UNSET:
        if order is None:
            raise ValidationError("Station order must be an integer")
        changes["order"] = int(order)
    if not changes:
        return fetch_station(store, station_id)

    rows = store.update(STATIONS, changes, [eq("id", station_id)])
    return station_from_row(rows[0]) if rows else fetch_station(store, station_id)


def remove_station(store: RecordStore, station_id: str) -> None:
    fetch_station(store, station_id)
    store.delete(STATIONS, [eq("id", station_id)])
