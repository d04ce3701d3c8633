from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from backoffice.core.exceptions import ValidationError
from backoffice.core.text import fold_text
from backoffice.schemas.inventory import InventoryItemCreate, InventoryItemUpdate
from backoffice.services.inventory_records import (
    InventoryRecord,
    new_record_id,
    utcnow,
)
from backoffice.services.inventory_repository import InventoryRepository, SyncResult, UpsertCounts
from backoffice.services.list_query import ListQuery, Page
from backoffice.services.query_executor import run_list_query

logger = logging.getLogger(__name__)

_LOCATION_CODE = re.compile(r"[^A-Z0-9]+")


@dataclass
class TransferOutcome:
    source: InventoryRecord
    destination: InventoryRecord
    created: bool


def _same_text(left: Optional[str], right: Optional[str]) -> bool:
    return fold_text((left or "").strip()) == fold_text((right or "").strip())


def location_code(location: str) -> str:
    return _LOCATION_CODE.sub("", location.upper())[:8] or "LOC"


class InventoryService:

    def __init__(self, repository: InventoryRepository, *, max_page_size: int = 200) -> None:
        self.repository = repository
        self.max_page_size = max_page_size
        self._executor = repository.executor()

    def list_items(self, query: ListQuery) -> Page:
        if query.page_size > self.max_page_size:
            query = replace(query, page_size=self.max_page_size)
        return run_list_query(self._executor, query)

    def get_item(self, record_id: str) -> InventoryRecord:
        return self.repository.get(record_id)

    def add_item(self, payload: InventoryItemCreate) -> InventoryRecord:
        now = utcnow()
        values = payload.model_dump(exclude={"id"})
        record = InventoryRecord(
            id=payload.id or new_record_id(),
            date_added=now,
            last_updated=now,
            **values,
        )
        record = self.repository.add(record)
        logger.info("Added inventory item %s (%s)", record.sku, record.name)
        return record

    def update_item(self, record_id: str, payload: InventoryItemUpdate) -> InventoryRecord:
        existing = self.repository.get(record_id)
        record = existing.touched(**payload.model_dump())
        return self.repository.update(record)

    def delete_item(self, record_id: str) -> InventoryRecord:
        removed = self.repository.delete(record_id)
        logger.info("Deleted inventory item %s", removed.sku)
        return removed

    def _find_at_location(self, source: InventoryRecord, location: str) -> Optional[InventoryRecord]:
        for record in self.repository.snapshot():
            if record.id == source.id:
                continue
            if not _same_text(record.location, location):
                continue
            if (
                _same_text(record.name, source.name)
                and _same_text(record.brand, source.brand)
                and _same_text(record.category, source.category)
            ):
                return record
        return None

    def _transfer_sku(self, sku: str, location: str) -> str:
        base = f"{sku}-{location_code(location)}"
        candidate = base
        suffix = 1
        while self.repository.get_by_sku(candidate) is not None:
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    def transfer(self, record_id: str, quantity: int, new_location: str) -> TransferOutcome:
        """Move ``quantity`` units to ``new_location``, creating a record there if needed."""
        source = self.repository.get(record_id)
        location = (new_location or "").strip()
        if not location:
            raise ValidationError("Destination location is required")
        if quantity <= 0:
            raise ValidationError("Transfer quantity must be positive")
        if quantity > source.stock:
            raise ValidationError(f"Only {source.stock} units of {source.sku} are in stock")
        if _same_text(source.location, location):
            raise ValidationError(f"{source.sku} is already at {location}")

        now = utcnow()
        updated_source = source.touched(stock=source.stock - quantity, last_updated=now)
        destination = self._find_at_location(source, location)
        created = destination is None
        if created:
            destination = replace(
                source.copy(),
                id=new_record_id(),
                sku=self._transfer_sku(source.sku, location),
                stock=quantity,
                location=location,
                date_added=now,
                last_updated=now,
            )
        else:
            destination = destination.touched(stock=destination.stock + quantity, last_updated=now)

        self.repository.save_many([updated_source, destination])
        logger.info(
            "Transferred %d units of %s from %s to %s",
            quantity,
            source.sku,
            source.location or "(none)",
            location,
        )
        return TransferOutcome(source=updated_source, destination=destination, created=created)

    def reorder_stock(self, record_id: str, quantity: int = 0) -> InventoryRecord:
        """Add stock; without a quantity, top up by the record's reorder amount."""
        record = self.repository.get(record_id)
        if quantity > 0:
            added = quantity
        else:
            added = max(record.min_stock_count, record.low_stock_threshold * 2)
        return self.repository.update(record.touched(stock=record.stock + added))

    def set_active(self, record_id: str, active: bool) -> InventoryRecord:
        record = self.repository.get(record_id)
        if record.is_active == active:
            return record
        return self.repository.update(record.touched(is_active=active))

    def toggle_active(self, record_id: str) -> InventoryRecord:
        record = self.repository.get(record_id)
        return self.set_active(record_id, not record.is_active)

    def reactivate_all(self) -> int:
        now = utcnow()
        inactive = [
            record.touched(is_active=True, last_updated=now)
            for record in self.repository.snapshot()
            if not record.is_active
        ]
        if not inactive:
            return 0
        self.repository.save_many(inactive)
        logger.info("Reactivated %d inventory items", len(inactive))
        return len(inactive)

    def save_records(self, records: Iterable[InventoryRecord]) -> UpsertCounts:
        return self.repository.save_many(records)

    def sync(self) -> SyncResult:
        return self.repository.sync_to_remote()

    def refresh(self) -> int:
        return self.repository.refresh()


__all__ = ["InventoryService", "TransferOutcome", "location_code"]
