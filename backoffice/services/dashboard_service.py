from datetime import date
from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from backoffice.core.constants import OPEN_PURCHASE_STATUSES
from backoffice.models.purchases import PurchaseOrder
from backoffice.models.sales import Sale
from backoffice.schemas.dashboard import CategoryValue, DashboardSummary
from backoffice.services.inventory_records import InventoryRecord

UNCATEGORIZED = "Uncategorized"


def _month_bounds(today: date):
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def category_values(records: Iterable[InventoryRecord]) -> list[CategoryValue]:
    """Stock value at cost per category, largest first."""
    totals: dict[str, float] = {}
    for record in records:
        name = record.category.strip() or UNCATEGORIZED
        totals[name] = totals.get(name, 0.0) + record.cost * record.stock
    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0].lower()))
    return [CategoryValue(name=name, value=round(value, 2)) for name, value in ordered]


def monthly_revenue(db: Session, today: date) -> float:
    start, end = _month_bounds(today)
    total = db.execute(
        select(func.coalesce(func.sum(Sale.grand_total), 0.0)).where(
            Sale.status == "completed",
            Sale.sale_date >= start,
            Sale.sale_date < end,
        )
    ).scalar_one()
    return round(float(total), 2)


def open_purchase_count(db: Session) -> int:
    return db.execute(
        select(func.count(PurchaseOrder.id)).where(
            PurchaseOrder.status.in_(OPEN_PURCHASE_STATUSES)
        )
    ).scalar_one()


def dashboard_summary(
    db: Session,
    records: Iterable[InventoryRecord],
    today: Optional[date] = None,
) -> DashboardSummary:
    today = today or date.today()
    records = list(records)
    active = [record for record in records if record.is_active]
    return DashboardSummary(
        total_inventory=sum(record.stock for record in active),
        low_stock_items=sum(1 for record in active if record.is_low_stock),
        monthly_revenue=monthly_revenue(db, today),
        active_orders=open_purchase_count(db),
        category_values=category_values(records),
    )


__all__ = ["category_values", "dashboard_summary", "monthly_revenue", "open_purchase_count"]
