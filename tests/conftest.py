from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Sequence

import pytest

from src.fieldops.config import settings
from src.fieldops.db.store import Filter
from src.fieldops.errors import StoreError
from src.fieldops.timeutils import to_store


@dataclass
class FailureRule:
    operation: str
    table: str
    ids: set[str] | None = None
    after: int = 0
    seen: int = 0
    fired: bool = False

    def triggers(self, operation: str, table: str, filters: Sequence[Filter]) -> bool:
        if self.fired or operation != self.operation or table != self.table:
            return False
        if self.ids is not None:
            targeted = {
                str(value)
                for item in filters
                if item.column == "id"
                for value in (item.value if item.op == "in" else [item.value])
            }
            return bool(targeted & self.ids)
        self.seen += 1
        return self.seen > self.after


class MemoryStore:
    """In-memory RecordStore with fault injection.

    ``fail_on`` arms a one-shot failure: the matching call raises
    ``StoreError`` once, later calls (including compensations) succeed.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.failures: list[FailureRule] = []
        self._counter = 0

    def fail_on(self, operation: str, table: str, *, ids: Sequence[str] | None = None, after: int = 0) -> None:
        self.failures.append(FailureRule(operation, table, set(ids) if ids is not None else None, after))

    def _check(self, operation: str, table: str, filters: Sequence[Filter] = ()) -> None:
        for rule in self.failures:
            if rule.triggers(operation, table, filters):
                rule.fired = True
                raise StoreError(f"injected {operation} failure on {table}", table=table, operation=operation)

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def _stamp(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        stored = dict(row)
        number = self._next()
        stored.setdefault("id", f"{table}-{number}")
        stored.setdefault(
            "created_at", (datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=number)).isoformat()
        )
        return stored

    def rows(self, table: str) -> list[dict[str, Any]]:
        return [dict(row) for row in self.tables[table]]

    def select(self, table, filters=(), *, columns="*", order_by=None, descending=False, limit=None):
        self._check("select", table, filters)
        rows = [dict(row) for row in self.tables[table] if all(item.matches(row) for item in filters)]
        if order_by:
            rows.sort(key=lambda row: (row.get(order_by) is None, row.get(order_by)), reverse=descending)
        return rows[:limit] if limit is not None else rows

    def insert(self, table, rows):
        self._check("insert", table)
        stored = [self._stamp(table, row) for row in rows]
        self.tables[table].extend(stored)
        return [dict(row) for row in stored]

    def update(self, table, values, filters):
        self._check("update", table, filters)
        updated = []
        for row in self.tables[table]:
            if all(item.matches(row) for item in filters):
                row.update(values)
                updated.append(dict(row))
        return updated

    def delete(self, table, filters):
        self._check("delete", table, filters)
        kept, removed = [], []
        for row in self.tables[table]:
            (removed if all(item.matches(row) for item in filters) else kept).append(row)
        self.tables[table] = kept
        return [dict(row) for row in removed]

    def upsert(self, table, row, *, on_conflict):
        self._check("upsert", table)
        for existing in self.tables[table]:
            if existing.get(on_conflict) == row.get(on_conflict):
                existing.update(row)
                return dict(existing)
        stored = self._stamp(table, row)
        self.tables[table].append(stored)
        return dict(stored)


class Seeder:
    """Shortcuts for putting reference data into a MemoryStore."""

    def __init__(self, store: MemoryStore) -> None:
        self.store = store

    def template(self, name: str = "Template 1") -> str:
        return self.store.insert("work_templates", [{"name": name}])[0]["id"]

    def station(
        self,
        template_id: str,
        customer_id: str | None,
        worker_id: str | None,
        *,
        order: int = 1,
        scheduled_time: str | None = None,
    ) -> str:
        row = {
            "template_id": template_id,
            "customer_id": customer_id,
            "worker_id": worker_id,
            "order": order,
            "scheduled_time": scheduled_time,
        }
        return self.store.insert("template_stations", [row])[0]["id"]

    def service_point(self, customer_id: str, scent: str | None = "Amber", amount: float = 100, device: str = "Z30") -> str:
        row = {"customer_id": customer_id, "scent_type": scent, "refill_amount": amount, "device_type": device}
        return self.store.insert("service_points", [row])[0]["id"]

    def visit(
        self,
        worker_id: str,
        at: datetime,
        *,
        customer_id: str | None = "cust-1",
        status: str = "pending",
        station_id: str | None = None,
    ) -> str:
        row = {
            "customer_id": customer_id,
            "worker_id": worker_id,
            "date": to_store(at),
            "status": status,
            "station_id": station_id,
        }
        return self.store.insert("jobs", [row])[0]["id"]

    def visit_point(self, job_id: str, service_point_id: str, override: float | None = None) -> str:
        row = {"job_id": job_id, "service_point_id": service_point_id, "custom_refill_amount": override}
        return self.store.insert("job_service_points", [row])[0]["id"]

    def assignment(self, day: date, template_id: str) -> None:
        self.store.upsert("work_schedules", {"date": day.isoformat(), "template_id": template_id}, on_conflict="date")


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def seed(store: MemoryStore) -> Seeder:
    return Seeder(store)


@pytest.fixture
def tz():
    return settings.tz


def local(tz, year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=tz)


@pytest.fixture
def at(tz):
    """Build local datetimes: ``at(2026, 10, 19, 8)``."""

    def build(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
        return local(tz, year, month, day, hour, minute)

    return build
