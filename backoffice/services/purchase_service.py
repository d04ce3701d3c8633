import logging
import uuid
from contextlib import nullcontext
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.core.constants import FINAL_PURCHASE_STATUSES, SORT_DESC
from backoffice.core.exceptions import DuplicateKeyError, RecordNotFoundError, ValidationError
from backoffice.models.purchases import PurchaseOrder
from backoffice.schemas.purchases import PurchaseOrderCreate
from backoffice.services.list_query import DATE, NUMBER, STRING, ListFields, ListQuery, Page
from backoffice.services.query_executor import TableQueryExecutor, run_list_query

logger = logging.getLogger(__name__)

PURCHASE_FIELDS = ListFields(
    search=("po_number", "supplier"),
    filters=("status",),
    sortable={
        "po_number": STRING,
        "supplier": STRING,
        "status": STRING,
        "total_amount": NUMBER,
        "order_date": DATE,
        "expected_date": DATE,
        "created_at": DATE,
    },
    default_sort="order_date",
    default_direction=SORT_DESC,
    tie_breaker="po_number",
    aliases={"date": "order_date", "total": "total_amount"},
)


def generate_po_number(order_date: date) -> str:
    return "PO-{}-{}".format(order_date.strftime("%Y%m%d"), uuid.uuid4().hex[:6].upper())


def list_purchases(db: Session, query: ListQuery) -> Page:
    executor = TableQueryExecutor(lambda: nullcontext(db), PurchaseOrder, PURCHASE_FIELDS)
    return run_list_query(executor, query)


def get_purchase(db: Session, purchase_id: str) -> PurchaseOrder:
    purchase = db.get(PurchaseOrder, purchase_id)
    if purchase is None:
        raise RecordNotFoundError(f"Purchase order {purchase_id} not found")
    return purchase


def create_purchase(db: Session, payload: PurchaseOrderCreate) -> PurchaseOrder:
    order_date = payload.order_date or date.today()
    if payload.expected_date and payload.expected_date < order_date:
        raise ValidationError("expected_date cannot be before order_date")

    po_number = payload.po_number or generate_po_number(order_date)
    existing = db.execute(
        select(PurchaseOrder.id).where(PurchaseOrder.po_number == po_number)
    ).first()
    if existing:
        raise DuplicateKeyError(f"Purchase order {po_number} already exists")

    lines = [line.model_dump() for line in payload.lines]
    total = round(sum(line["quantity"] * line["unit_cost"] for line in lines), 2)
    purchase = PurchaseOrder(
        po_number=po_number,
        supplier=payload.supplier,
        status=payload.status,
        lines=lines,
        total_amount=total,
        order_date=order_date,
        expected_date=payload.expected_date,
        notes=payload.notes,
    )
    db.add(purchase)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateKeyError(f"Purchase order {po_number} already exists") from exc
    db.refresh(purchase)
    logger.info("Created purchase order %s for %s", purchase.po_number, purchase.supplier)
    return purchase


def update_status(db: Session, purchase_id: str, status: str) -> PurchaseOrder:
    purchase = get_purchase(db, purchase_id)
    if purchase.status in FINAL_PURCHASE_STATUSES and status != purchase.status:
        raise ValidationError(f"Purchase order {purchase.po_number} is already {purchase.status}")
    purchase.status = status
    db.commit()
    db.refresh(purchase)
    return purchase


__all__ = [
    "PURCHASE_FIELDS",
    "create_purchase",
    "generate_po_number",
    "get_purchase",
    "list_purchases",
    "update_status",
]
