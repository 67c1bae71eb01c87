"""Catch-up sweep for pending visits left behind their scheduled day."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ...data.visits_repository import JOBS
from ...db.store import RecordStore, eq, lt
from ...errors import StoreError
from ...models.domain import PENDING
from ...timeutils import combine_local, local_tz, now_local, parse_datetime, start_of_day, to_store


@dataclass(slots=True)
class ReconciliationResult:
    success: bool
    message: str
    found: int = 0
    updated: int = 0
    failed_ids: list[str] = field(default_factory=list)


def catch_up_datetime(original: datetime, now: datetime) -> datetime:
    """Move ``original``'s local time of day to today, or tomorrow if it already passed.

    Seconds are dropped. The comparison is strict: a slot exactly at ``now``
    stays today.
    """
    tz = local_tz()
    local_now = now.astimezone(tz)
    at = original.astimezone(tz).time()
    candidate = combine_local(local_now.date(), at)
    if local_now > candidate:
        candidate = combine_local(local_now.date() + timedelta(days=1), at)
    return candidate


def reconcile_past_due_visits(store: RecordStore, now: datetime | None = None) -> ReconciliationResult:
    """Advance every pending visit dated before today to its next feasible slot.

    Each visit is updated on its own; any failure on one visit is logged and counted
    without stopping the sweep. Only ``date`` is written.
    """
    now = now or now_local()
    if now.tzinfo is None:
        now = now.replace(tzinfo=local_tz())
    today_start = start_of_day(now.astimezone(local_tz()).date())

    try:
        rows = store.select(JOBS, [eq("status", PENDING), lt("date", to_store(today_start))], columns="id, date")
    except StoreError as exc:
        logging.error(f"Error fetching past due visits: {exc}")
        return ReconciliationResult(success=False, message=f"Failed to fetch past due visits: {exc}")

    if not rows:
        return ReconciliationResult(success=True, message="No past due visits to update")

    updated = 0
    failed_ids: list[str] = []
    for row in rows:
        visit_id = str(row["id"])
        try:
            new_date = catch_up_datetime(parse_datetime(row["date"]), now)
            store.update(JOBS, {"date": to_store(new_date)}, [eq("id", visit_id)])
            updated += 1
        except Exception as exc:
            logging.error(f"Error updating visit {visit_id}: {exc}")
            failed_ids.append(visit_id)

    logging.info(f"Past due sweep: updated {updated} of {len(rows)} visit(s)")
    return ReconciliationResult(
        success=True,
        message=f"Updated {updated} past due visits to new dates",
        found=len(rows),
        updated=updated,
        failed_ids=failed_ids,
    )


def should_catch_up_at_startup(now: datetime, hour: int, minute: int = 0) -> bool:
    """True when a process starting at ``now`` has already missed today's sweep time."""
    local_now = now.astimezone(local_tz())
    return (local_now.hour, local_now.minute) >= (hour, minute)
