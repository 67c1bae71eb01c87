"""Compensating transactions for multi-record writes.

The record store has no cross-table transactions, so every write made through
``CompensatingTransaction`` registers the inverse action. When the block
fails, the inverse actions run newest-first and the original error is
re-raised. Compensations that fail themselves are logged and kept on
``unrepaired`` so the partial state can be repaired by hand.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from ..db.store import Filter, RecordStore, Row, eq, in_


class CompensatingTransaction:
    """Record/undo wrapper around a ``RecordStore``.

    Reads pass straight through, so services can use a transaction anywhere
    they would use a store::

        with CompensatingTransaction(store, label="unassign 2026-10-19") as tx:
            tx.delete("job_service_points", [in_("job_id", job_ids)])
            tx.delete("jobs", [in_("id", job_ids)])
    """

    def __init__(self, store: RecordStore, *, label: str = "transaction") -> None:
        self.store = store
        self.label = label
        self._undo: list[tuple[str, Callable[[], Any]]] = []
        self.unrepaired: list[str] = []
        self.rolled_back = False

    def __enter__(self) -> "CompensatingTransaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            logging.warning(f"{self.label} failed, rolling back {len(self._undo)} step(s): {exc}")
            self.rollback()
        else:
            self._undo.clear()
        return False

    @property
    def pending_steps(self) -> int:
        return len(self._undo)

    def select(self, table: str, filters: Sequence[Filter] = (), **kwargs: Any) -> list[Row]:
        return self.store.select(table, filters, **kwargs)

    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        inserted = self.store.insert(table, rows)
        ids = [row["id"] for row in inserted if row.get("id") is not None]
        if ids:
            self._undo.append(
                (f"delete {len(ids)} inserted row(s) from {table}", lambda: self.store.delete(table, [in_("id", ids)]))
            )
        return inserted

    def update(self, table: str, values: Row, filters: Sequence[Filter]) -> list[Row]:
        before = self.store.select(table, filters)
        updated = self.store.update(table, values, filters)
        if before:
            columns = list(values)

            def restore() -> None:
                for row in before:
                    self.store.update(table, {column: row.get(column) for column in columns}, [eq("id", row["id"])])

            self._undo.append((f"restore {len(before)} updated row(s) in {table}", restore))
        return updated

    def delete(self, table: str, filters: Sequence[Filter]) -> list[Row]:
        removed = self.store.delete(table, filters)
        if removed:
            self._undo.append(
                (f"re-insert {len(removed)} deleted row(s) into {table}", lambda: self.store.insert(table, removed))
            )
        return removed

    def upsert(self, table: str, row: Row, *, on_conflict: str) -> Row:
        previous = self.store.select(table, [eq(on_conflict, row[on_conflict])], limit=1)
        written = self.store.upsert(table, row, on_conflict=on_conflict)
        if previous:
            old = previous[0]
            self._undo.append(
                (
                    f"restore previous {table} row for {on_conflict}={row[on_conflict]}",
                    lambda: self.store.upsert(table, old, on_conflict=on_conflict),
                )
            )
        elif written.get("id") is not None:
            self._undo.append(
                (f"delete upserted {table} row", lambda: self.store.delete(table, [eq("id", written["id"])]))
            )
        return written

    def rollback(self) -> None:
        while self._undo:
            description, action = self._undo.pop()
            try:
                action()
            except Exception as exc:
                logging.error(f"❌ {self.label}: compensation '{description}' failed: {exc}")
                self.unrepaired.append(description)
        self.rolled_back = True
        if self.unrepaired:
            logging.error(f"❌ {self.label}: {len(self.unrepaired)} step(s) left unrepaired: {self.unrepaired}")
