"""Record store abstraction over the Supabase tables.

Services never talk to the Supabase client directly. They go through a
``RecordStore`` so that every read/write surfaces failures as ``StoreError``
and so tests can swap in an in-memory implementation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Protocol, Sequence

from ..errors import StoreError, StoreNotConfiguredError
from .supabase import get_supabase_client

FilterOp = Literal["eq", "neq", "lt", "lte", "gt", "gte", "in", "is"]

Row = dict[str, Any]


@dataclass(frozen=True, slots=True)
class Filter:
    column: str
    op: FilterOp
    value: Any

    def matches(self, row: Row) -> bool:
        """Evaluate the filter against a plain row (used by in-memory stores)."""
        current = row.get(self.column)
        if self.op == "is":
            return current is None if self.value is None else current is self.value
        if self.op == "in":
            return current in self.value
        if self.op == "eq":
            return current == self.value
        if self.op == "neq":
            return current != self.value
        if current is None:
            return False
        if self.op == "lt":
            return current < self.value
        if self.op == "lte":
            return current <= self.value
        if self.op == "gt":
            return current > self.value
        return current >= self.value


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, "lt", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def in_(column: str, values: Iterable[Any]) -> Filter:
    return Filter(column, "in", list(values))


def is_null(column: str) -> Filter:
    return Filter(column, "is", None)


class RecordStore(Protocol):
    def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        columns: str = "*",
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]: ...

    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]: ...

    def update(self, table: str, values: Row, filters: Sequence[Filter]) -> list[Row]: ...

    def delete(self, table: str, filters: Sequence[Filter]) -> list[Row]: ...

    def upsert(self, table: str, row: Row, *, on_conflict: str) -> Row: ...


def _apply_filters(query: Any, filters: Sequence[Filter]) -> Any:
    for item in filters:
        if item.op == "in":
            query = query.in_(item.column, list(item.value))
        elif item.op == "is":
            query = query.is_(item.column, "null" if item.value is None else str(item.value).lower())
        else:
            query = getattr(query, item.op)(item.column, item.value)
    return query


class SupabaseStore:
    """``RecordStore`` backed by the Supabase PostgREST client."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def _execute(self, table: str, operation: str, query: Any) -> list[Row]:
        try:
            response = query.execute()
        except Exception as exc:
            logging.warning(f"Supabase {operation} on '{table}' failed: {exc}")
            raise StoreError(
                f"Failed to {operation} {table}: {exc}", table=table, operation=operation
            ) from exc
        return list(response.data or [])

    def select(
        self,
        table: str,
        filters: Sequence[Filter] = (),
        *,
        columns: str = "*",
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        query = _apply_filters(self.client.table(table).select(columns), filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        return self._execute(table, "select", query)

    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        if not rows:
            return []
        return self._execute(table, "insert", self.client.table(table).insert(list(rows)))

    def update(self, table: str, values: Row, filters: Sequence[Filter]) -> list[Row]:
        if not filters:
            raise StoreError(f"Refusing to update every row of {table}", table=table, operation="update")
        query = _apply_filters(self.client.table(table).update(values), filters)
        return self._execute(table, "update", query)

    def delete(self, table: str, filters: Sequence[Filter]) -> list[Row]:
        if not filters:
            raise StoreError(f"Refusing to delete every row of {table}", table=table, operation="delete")
        query = _apply_filters(self.client.table(table).delete(), filters)
        return self._execute(table, "delete", query)

    def upsert(self, table: str, row: Row, *, on_conflict: str) -> Row:
        rows = self._execute(table, "upsert", self.client.table(table).upsert(row, on_conflict=on_conflict))
        if not rows:
            raise StoreError(f"Upsert on {table} returned no row", table=table, operation="upsert")
        return rows[0]


def get_store() -> RecordStore:
    """Return the Supabase-backed store, failing loudly when it is not configured."""
    client = get_supabase_client()
    if client is None:
        raise StoreNotConfiguredError(
            "Supabase not configured. Set FIELDOPS_SUPABASE_URL and FIELDOPS_SUPABASE_KEY environment variables."
        )
    return SupabaseStore(client)
