import logging
import uuid
from contextlib import nullcontext
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.core.constants import SORT_DESC
from backoffice.core.exceptions import DuplicateKeyError
from backoffice.models.sales import Sale
from backoffice.schemas.sales import SaleCreate
from backoffice.services.list_query import DATE, NUMBER, STRING, ListFields, ListQuery, Page
from backoffice.services.query_executor import TableQueryExecutor, run_list_query

logger = logging.getLogger(__name__)

SALE_FIELDS = ListFields(
    search=("sale_number", "customer_name"),
    filters=("status",),
    sortable={
        "sale_number": STRING,
        "customer_name": STRING,
        "status": STRING,
        "grand_total": NUMBER,
        "sale_date": DATE,
        "created_at": DATE,
    },
    default_sort="sale_date",
    default_direction=SORT_DESC,
    tie_breaker="sale_number",
    aliases={"date": "sale_date", "total": "grand_total", "customer": "customer_name"},
)


def generate_sale_number(sale_date: date) -> str:
    return "S-{}-{}".format(sale_date.strftime("%Y%m%d"), uuid.uuid4().hex[:6].upper())


def list_sales(db: Session, query: ListQuery) -> Page:
    executor = TableQueryExecutor(lambda: nullcontext(db), Sale, SALE_FIELDS)
    return run_list_query(executor, query)


def create_sale(db: Session, payload: SaleCreate) -> Sale:
    sale_date = payload.sale_date or date.today()
    sale_number = payload.sale_number or generate_sale_number(sale_date)
    if db.execute(select(Sale.id).where(Sale.sale_number == sale_number)).first():
        raise DuplicateKeyError(f"Sale {sale_number} already exists")

    lines = [line.model_dump() for line in payload.lines]
    grand_total = round(sum(line["quantity"] * line["unit_price"] for line in lines), 2)
    sale = Sale(
        sale_number=sale_number,
        customer_name=payload.customer_name,
        status=payload.status,
        lines=lines,
        grand_total=grand_total,
        sale_date=sale_date,
    )
    db.add(sale)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateKeyError(f"Sale {sale_number} already exists") from exc
    db.refresh(sale)
    logger.info("Recorded sale %s (%.2f)", sale.sale_number, sale.grand_total)
    return sale


__all__ = ["SALE_FIELDS", "create_sale", "generate_sale_number", "list_sales"]
