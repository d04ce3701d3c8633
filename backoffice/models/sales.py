import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, Date, DateTime, Float, Index, String

from backoffice.database.base import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sale_number = Column(String, nullable=False, unique=True)
    customer_name = Column(String, nullable=False)
    status = Column(String, nullable=False, default="completed")

    lines = Column(JSON, nullable=False, default=list)
    grand_total = Column(Float, nullable=False, default=0)

    sale_date = Column(Date, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_sales_date", "sale_date"),
        Index("idx_sales_status", "status"),
    )


__all__ = ["Sale"]
