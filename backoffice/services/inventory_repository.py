"""Owned inventory collection with database write-through.

Every write is two-phase: the change is applied to the in-memory collection,
then written to the ``inventory_items`` table. When the database rejects the
write the local change is reverted and ``RemoteWriteError`` is raised, so the
collection never drifts from what was confirmed.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.core.exceptions import (
    DuplicateSkuError,
    RecordNotFoundError,
    RemoteFetchError,
    RemoteWriteError,
    ValidationError,
)
from backoffice.models.inventory import InventoryItem
from backoffice.services.inventory_records import (
    INVENTORY_FIELDS,
    InventoryRecord,
    apply_row_values,
    record_from_row,
    row_values,
)
from backoffice.services.query_executor import (
    FallbackQueryExecutor,
    MemoryQueryExecutor,
    QueryExecutor,
    TableQueryExecutor,
)

logger = logging.getLogger(__name__)

EVENT_ADDED = "added"
EVENT_UPDATED = "updated"
EVENT_REMOVED = "removed"

Listener = Callable[[str, InventoryRecord], None]


@dataclass
class SyncResult:
    success: bool
    message: str
    synced: int = 0


@dataclass
class UpsertCounts:
    inserted: int = 0
    updated: int = 0


class InventoryRepository:

    def __init__(
        self,
        session_factory: Optional[Callable[[], Session]] = None,
        *,
        sync_batch_size: int = 100,
    ) -> None:
        self._session_factory = session_factory
        self._sync_batch_size = max(int(sync_batch_size), 1)
        self._items: list[InventoryRecord] = []
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

    @property
    def is_remote(self) -> bool:
        return self._session_factory is not None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _fetch_all(self) -> list[InventoryRecord]:
        with self._session_factory() as db:
            rows = (
                db.execute(
                    select(InventoryItem).order_by(
                        InventoryItem.date_added.desc(), InventoryItem.sku
                    )
                )
                .scalars()
                .all()
            )
            return [record_from_row(row) for row in rows]

    def load(self, seed: Optional[Sequence[InventoryRecord]] = None) -> int:
        """Fill the collection from the table, or from ``seed`` when nothing is stored."""
        records: list[InventoryRecord] = []
        if self.is_remote:
            try:
                records = self._fetch_all()
            except SQLAlchemyError:
                logger.exception("Unable to load inventory from the database; using local data.")
        if records or not seed:
            with self._lock:
                self._items = records
            return len(records)

        with self._lock:
            self._items = [record.copy() for record in seed]
        if self.is_remote:
            result = self.sync_to_remote()
            if not result.success:
                logger.warning("Seed inventory kept locally only: %s", result.message)
        logger.info("Loaded %d seed inventory records.", len(seed))
        return len(seed)

    def refresh(self) -> int:
        if not self.is_remote:
            return self.count()
        try:
            records = self._fetch_all()
        except SQLAlchemyError as exc:
            raise RemoteFetchError("Failed to reload inventory from the database") from exc
        with self._lock:
            self._items = records
        return len(records)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> list[InventoryRecord]:
        with self._lock:
            return list(self._items)

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def _index_of(self, record_id: str) -> Optional[int]:
        for idx, item in enumerate(self._items):
            if item.id == record_id:
                return idx
        return None

    def _sku_owner(self, sku: str) -> Optional[InventoryRecord]:
        for item in self._items:
            if item.sku == sku:
                return item
        return None

    def find(self, record_id: str) -> Optional[InventoryRecord]:
        with self._lock:
            idx = self._index_of(record_id)
            return None if idx is None else self._items[idx]

    def get(self, record_id: str) -> InventoryRecord:
        record = self.find(record_id)
        if record is None:
            raise RecordNotFoundError(f"Inventory item {record_id} not found")
        return record

    def get_by_sku(self, sku: str) -> Optional[InventoryRecord]:
        with self._lock:
            return self._sku_owner(sku)

    def executor(self) -> QueryExecutor:
        memory = MemoryQueryExecutor(self.snapshot, INVENTORY_FIELDS)
        if not self.is_remote:
            return memory
        table = TableQueryExecutor(
            self._session_factory,
            InventoryItem,
            INVENTORY_FIELDS,
            record_from_row,
        )
        return FallbackQueryExecutor(table, memory)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _check_sku(self, record: InventoryRecord) -> None:
        if not record.sku or not record.sku.strip():
            raise ValidationError("SKU is required")
        owner = self._sku_owner(record.sku)
        if owner is not None and owner.id != record.id:
            raise DuplicateSkuError(f"SKU {record.sku} is already in use")

    def add(self, record: InventoryRecord) -> InventoryRecord:
        with self._lock:
            if self._index_of(record.id) is not None:
                raise ValidationError(f"Inventory item {record.id} already exists")
            self._check_sku(record)
            self._items.insert(0, record)
            try:
                self._write_remote(upserts=[record])
            except SQLAlchemyError as exc:
                del self._items[self._index_of(record.id)]
                logger.exception("Add of %s failed; reverted.", record.sku)
                raise RemoteWriteError(f"Failed to save item {record.sku}") from exc
        self._publish(EVENT_ADDED, record)
        return record

    def update(self, record: InventoryRecord) -> InventoryRecord:
        with self._lock:
            idx = self._index_of(record.id)
            if idx is None:
                raise RecordNotFoundError(f"Inventory item {record.id} not found")
            self._check_sku(record)
            previous = self._items[idx]
            self._items[idx] = record
            try:
                self._write_remote(upserts=[record])
            except SQLAlchemyError as exc:
                self._items[idx] = previous
                logger.exception("Update of %s failed; reverted.", record.sku)
                raise RemoteWriteError(f"Failed to update item {record.sku}") from exc
        self._publish(EVENT_UPDATED, record)
        return record

    def delete(self, record_id: str) -> InventoryRecord:
        with self._lock:
            idx = self._index_of(record_id)
            if idx is None:
                raise RecordNotFoundError(f"Inventory item {record_id} not found")
            removed = self._items.pop(idx)
            try:
                self._write_remote(deletes=[record_id])
            except SQLAlchemyError as exc:
                self._items.insert(idx, removed)
                logger.exception("Delete of %s failed; reverted.", removed.sku)
                raise RemoteWriteError(f"Failed to delete item {removed.sku}") from exc
        self._publish(EVENT_REMOVED, removed)
        return removed

    def save_many(self, records: Iterable[InventoryRecord]) -> UpsertCounts:
        """Insert or replace several records as one write."""
        records = list(records)
        counts = UpsertCounts()
        events = []
        with self._lock:
            before = list(self._items)
            try:
                for record in records:
                    self._check_sku(record)
                    idx = self._index_of(record.id)
                    if idx is None:
                        self._items.insert(0, record)
                        counts.inserted += 1
                        events.append((EVENT_ADDED, record))
                    else:
                        self._items[idx] = record
                        counts.updated += 1
                        events.append((EVENT_UPDATED, record))
            except ValidationError:
                self._items = before
                raise
            try:
                self._write_remote(upserts=records)
            except SQLAlchemyError as exc:
                self._items = before
                logger.exception("Batch save of %d items failed; reverted.", len(records))
                raise RemoteWriteError("Failed to save inventory changes") from exc
        for event, record in events:
            self._publish(event, record)
        return counts

    def sync_to_remote(self) -> SyncResult:
        """Upsert the whole collection keyed on SKU."""
        if not self.is_remote:
            return SyncResult(False, "No database is configured for inventory.")
        records = self.snapshot()
        synced = 0
        try:
            for start in range(0, len(records), self._sync_batch_size):
                batch = records[start:start + self._sync_batch_size]
                self._write_remote(upserts=batch)
                synced += len(batch)
        except SQLAlchemyError as exc:
            logger.exception("Inventory sync stopped after %d items.", synced)
            return SyncResult(False, f"Failed to sync inventory: {exc.__class__.__name__}", synced)
        logger.info("Synced %d inventory items to the database.", synced)
        return SyncResult(True, f"Successfully synced {synced} items to the database", synced)

    def _write_remote(self, *, upserts: Sequence[InventoryRecord] = (), deletes: Sequence[str] = ()) -> None:
        if not self.is_remote:
            return
        with self._session_factory() as db:
            try:
                if deletes:
                    db.execute(delete(InventoryItem).where(InventoryItem.id.in_(list(deletes))))
                if upserts:
                    _upsert_rows(db, upserts)
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _publish(self, event: str, record: InventoryRecord) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, record)
            except Exception:
                logger.exception("Inventory listener failed for %s event", event)


def _upsert_rows(db: Session, records: Sequence[InventoryRecord]) -> UpsertCounts:
    """Update rows matched by id, then by SKU; insert the rest."""
    ids = [record.id for record in records]
    skus = [record.sku for record in records]
    by_id = {
        row.id: row
        for row in db.execute(select(InventoryItem).where(InventoryItem.id.in_(ids))).scalars()
    }
    by_sku = {
        row.sku: row
        for row in db.execute(select(InventoryItem).where(InventoryItem.sku.in_(skus))).scalars()
    }
    counts = UpsertCounts()
    for record in records:
        row = by_id.get(record.id) or by_sku.get(record.sku)
        if row is None:
            db.add(InventoryItem(**row_values(record)))
            counts.inserted += 1
        else:
            apply_row_values(row, record)
            counts.updated += 1
    return counts


__all__ = [
    "EVENT_ADDED",
    "EVENT_REMOVED",
    "EVENT_UPDATED",
    "InventoryRepository",
    "SyncResult",
    "UpsertCounts",
]
