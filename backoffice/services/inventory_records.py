from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from backoffice.core.constants import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    DEFAULT_MIN_STOCK_COUNT,
    SORT_ASC,
)
from backoffice.models.inventory import InventoryItem
from backoffice.services.list_query import DATE, NUMBER, STRING, ListFields


INVENTORY_FIELDS = ListFields(
    search=("name", "sku", "category"),
    filters=("category", "location"),
    sortable={
        "sku": STRING,
        "name": STRING,
        "category": STRING,
        "brand": STRING,
        "location": STRING,
        "cost": NUMBER,
        "rrp": NUMBER,
        "stock": NUMBER,
        "low_stock_threshold": NUMBER,
        "date_added": DATE,
        "last_updated": DATE,
    },
    default_sort="name",
    default_direction=SORT_ASC,
    tie_breaker="sku",
    aliases={"price": "rrp"},
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_record_id() -> str:
    return str(uuid.uuid4())


@dataclass
class InventoryRecord:
    id: str
    sku: str
    name: str
    description: str = ""
    category: str = ""
    subcategory: str = ""
    brand: str = ""
    rrp: float = 0.0
    cost: float = 0.0
    stock: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    min_stock_count: int = DEFAULT_MIN_STOCK_COUNT
    location: str = ""
    barcode: str = ""
    supplier: str = ""
    image_url: Optional[str] = None
    dimensions: Optional[dict] = None
    weight: Optional[dict] = None
    tags: list[str] = field(default_factory=list)
    is_active: bool = True
    date_added: datetime = field(default_factory=utcnow)
    last_updated: datetime = field(default_factory=utcnow)

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.low_stock_threshold

    def touched(self, **changes) -> "InventoryRecord":
        """Copy with changes applied and ``last_updated`` bumped."""
        changes.setdefault("last_updated", utcnow())
        return replace(self, **changes)

    def copy(self) -> "InventoryRecord":
        return replace(
            self,
            tags=list(self.tags),
            dimensions=dict(self.dimensions) if self.dimensions else None,
            weight=dict(self.weight) if self.weight else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _dimensions_from_row(value: Optional[Mapping]) -> Optional[dict]:
    if not value:
        return None
    return {
        "length": float(value.get("length") or 0),
        "width": float(value.get("width") or 0),
        "height": float(value.get("height") or 0),
        "unit": value.get("unit") or "cm",
    }


def _weight_from_row(value: Optional[Mapping]) -> Optional[dict]:
    if not value:
        return None
    return {
        "value": float(value.get("value") or 0),
        "unit": value.get("unit") or "kg",
    }


def record_from_row(row: InventoryItem) -> InventoryRecord:
    """Map a table row to a record, filling defaults for missing values."""
    low_stock_threshold = row.low_stock_threshold
    min_stock_count = row.min_stock_count
    return InventoryRecord(
        id=row.id,
        sku=row.sku,
        name=row.name,
        description=row.description or "",
        category=row.category or "",
        subcategory=row.subcategory or "",
        brand=row.brand or "",
        rrp=float(row.rrp or 0),
        cost=float(row.cost or 0),
        stock=int(row.stock or 0),
        low_stock_threshold=(
            DEFAULT_LOW_STOCK_THRESHOLD if low_stock_threshold is None else int(low_stock_threshold)
        ),
        min_stock_count=DEFAULT_MIN_STOCK_COUNT if min_stock_count is None else int(min_stock_count),
        location=row.location or "",
        barcode=row.barcode or "",
        supplier=row.supplier or "",
        image_url=row.image_url,
        dimensions=_dimensions_from_row(row.dimensions),
        weight=_weight_from_row(row.weight),
        tags=list(row.tags or []),
        is_active=True if row.is_active is None else bool(row.is_active),
        date_added=as_utc(row.date_added) or utcnow(),
        last_updated=as_utc(row.last_updated) or utcnow(),
    )


def row_values(record: InventoryRecord) -> dict[str, Any]:
    """Column values for inserting or updating the record's row."""
    values = record.to_dict()
    values["tags"] = list(record.tags)
    return values


def apply_row_values(row: InventoryItem, record: InventoryRecord) -> None:
    for key, value in row_values(record).items():
        setattr(row, key, value)


__all__ = [
    "INVENTORY_FIELDS",
    "InventoryRecord",
    "apply_row_values",
    "as_utc",
    "new_record_id",
    "record_from_row",
    "row_values",
    "utcnow",
]
