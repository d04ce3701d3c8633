import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, Date, DateTime, Float, Index, String, Text

from backoffice.database.base import Base


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    po_number = Column(String, nullable=False, unique=True)
    supplier = Column(String, nullable=False)
    status = Column(String, nullable=False, default="draft")

    lines = Column(JSON, nullable=False, default=list)
    total_amount = Column(Float, nullable=False, default=0)

    order_date = Column(Date, nullable=False)
    expected_date = Column(Date)
    notes = Column(Text, nullable=False, default="")

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_purchase_supplier", "supplier"),
        Index("idx_purchase_status", "status"),
    )


__all__ = ["PurchaseOrder"]
