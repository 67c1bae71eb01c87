"""Per-worker daily logistics summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ...data.visits_repository import (
    fetch_day_installations,
    fetch_day_special_visits,
    fetch_day_visits,
    fetch_service_points,
    fetch_visit_points,
)
from ...db.store import RecordStore
from ...models.domain import PENDING
from ..refill import resolve_points

BATTERY_JOB_TYPE = "batteries"


@dataclass(slots=True)
class DailySummary:
    worker_id: str
    date: date
    scents: dict[str, float] = field(default_factory=dict)
    devices: dict[str, int] = field(default_factory=dict)
    batteries: dict[str, int] = field(default_factory=dict)
    visit_count: int = 0


def daily_summary(store: RecordStore, worker_id: str, day: date) -> DailySummary:
    """Sum scent volume and count equipment for one worker's pending work on ``day``.

    Recomputed from the store on every call.
    """
    summary = DailySummary(worker_id=worker_id, date=day)

    visits = fetch_day_visits(store, day, worker_id=worker_id, status=PENDING)
    summary.visit_count = len(visits)
    points = fetch_visit_points(store, (visit.id for visit in visits))
    service_points = fetch_service_points(store, (point.service_point_id for point in points))
    for resolved in resolve_points(points, service_points):
        if resolved.scent_type and resolved.quantity:
            summary.scents[resolved.scent_type] = summary.scents.get(resolved.scent_type, 0) + resolved.quantity

    for installation in fetch_day_installations(store, day, worker_id):
        for device_type in installation.device_types:
            summary.devices[device_type] = summary.devices.get(device_type, 0) + 1

    for special in fetch_day_special_visits(store, day, worker_id):
        if special.job_type == BATTERY_JOB_TYPE and special.battery_type:
            summary.batteries[special.battery_type] = summary.batteries.get(special.battery_type, 0) + 1

    return summary
