"""Expansion of a (template, date) pair into concrete visits."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from ...data.catalog_repository import fetch_stations, fetch_template
from ...data.visits_repository import JOB_POINTS, JOBS, fetch_customer_service_points, visit_from_row
from ...db.store import RecordStore, eq, in_
from ...models.domain import PENDING, Station, Visit
from ...persistence.transaction import CompensatingTransaction
from ...timeutils import combine_local, parse_time_of_day, to_store


@dataclass(slots=True)
class ExpansionResult:
    template_id: str
    date: date
    visits: list[Visit] = field(default_factory=list)
    points_created: int = 0
    skipped_station_ids: list[str] = field(default_factory=list)
    existing_station_ids: list[str] = field(default_factory=list)


def _stations_already_expanded(store: RecordStore, stations: list[Station], target_date: date) -> set[str]:
    """Stations that already produced a visit for ``target_date``.

    Keyed on ``scheduled_for``, the day the visit was expanded for. The
    reconciler moves ``date`` but never this column.
    """
    station_ids = [station.id for station in stations]
    if not station_ids:
        return set()
    rows = store.select(
        JOBS,
        [in_("station_id", station_ids), eq("scheduled_for", target_date.isoformat())],
        columns="id, station_id",
    )
    return {str(row["station_id"]) for row in rows if row.get("station_id")}


def _expand(tx: CompensatingTransaction, template_id: str, target_date: date, skip_existing: bool) -> ExpansionResult:
    fetch_template(tx, template_id)
    stations = fetch_stations(tx, template_id)
    result = ExpansionResult(template_id=template_id, date=target_date)

    bound = [station for station in stations if station.is_bound]
    already_expanded = _stations_already_expanded(tx, bound, target_date) if skip_existing else set()

    for station in stations:
        if not station.is_bound:
            result.skipped_station_ids.append(station.id)
            continue
        if station.id in already_expanded:
            result.existing_station_ids.append(station.id)
            continue

        visit_at = combine_local(target_date, parse_time_of_day(station.scheduled_time))
        rows = tx.insert(
            JOBS,
            [
                {
                    "customer_id": station.customer_id,
                    "worker_id": station.worker_id,
                    "date": to_store(visit_at),
                    "status": PENDING,
                    "station_id": station.id,
                    "scheduled_for": target_date.isoformat(),
                }
            ],
        )
        visit = visit_from_row(rows[0])

        # Snapshot the customer's points and freeze today's default as the override
        service_points = fetch_customer_service_points(tx, station.customer_id)
        if service_points:
            tx.insert(
                JOB_POINTS,
                [
                    {
                        "job_id": visit.id,
                        "service_point_id": point.id,
                        "custom_refill_amount": point.refill_amount,
                    }
                    for point in service_points
                ],
            )
        result.visits.append(visit)
        result.points_created += len(service_points)

    return result


def expand_template(
    store: RecordStore | CompensatingTransaction,
    template_id: str,
    target_date: date,
    *,
    skip_existing: bool = True,
) -> ExpansionResult:
    """Create one pending visit per fully bound station of the template.

    Args:
        store: Record store, or an open transaction to join.
        template_id: Template to expand.
        target_date: Calendar day (local timezone) the visits are scheduled on.
        skip_existing: Skip stations that already produced a visit for that day,
            making repeated expansion idempotent. ``False`` always inserts.

    Returns:
        ExpansionResult with the created visits and the skipped stations.
    """
    if isinstance(store, CompensatingTransaction):
        result = _expand(store, template_id, target_date, skip_existing)
    else:
        with CompensatingTransaction(store, label=f"expand template {template_id} on {target_date}") as tx:
            result = _expand(tx, template_id, target_date, skip_existing)

    logging.info(
        f"Expanded template {template_id} on {target_date}: {len(result.visits)} visit(s), "
        f"{result.points_created} point(s), {len(result.skipped_station_ids)} unbound station(s) skipped, "
        f"{len(result.existing_station_ids)} already expanded"
    )
    return result
