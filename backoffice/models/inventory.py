import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Index, Integer, String, Text

from backoffice.core.constants import DEFAULT_LOW_STOCK_THRESHOLD, DEFAULT_MIN_STOCK_COUNT
from backoffice.database.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sku = Column(String, nullable=False, unique=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, default="")
    subcategory = Column(String, nullable=False, default="")
    brand = Column(String, nullable=False, default="")
    supplier = Column(String, nullable=False, default="")
    barcode = Column(String, nullable=False, default="")
    image_url = Column(String)

    # The recommended retail price lives in a column called "price".
    rrp = Column("price", Float, nullable=False, default=0)
    cost = Column(Float, nullable=False, default=0)

    stock = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=DEFAULT_LOW_STOCK_THRESHOLD)
    min_stock_count = Column(Integer, nullable=False, default=DEFAULT_MIN_STOCK_COUNT)
    location = Column(String, nullable=False, default="")

    dimensions = Column(JSON)
    weight = Column(JSON)
    tags = Column(JSON)

    is_active = Column(Boolean, nullable=False, default=True)
    date_added = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("idx_inventory_category", "category"),
        Index("idx_inventory_location", "location"),
        Index("idx_inventory_name", "name"),
    )


__all__ = ["InventoryItem"]
