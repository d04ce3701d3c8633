from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.config import get_settings
from backoffice.core.exceptions import BackOfficeError
from backoffice.core.http_errors import http_error
from backoffice.dependencies import get_db
from backoffice.schemas.common import ListPage, page_response
from backoffice.schemas.sales import SaleCreate, SaleRead
from backoffice.services.list_query import ListQuery
from backoffice.services.sale_service import create_sale, list_sales

settings = get_settings()

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get("", response_model=ListPage[SaleRead])
def sales(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.SALES_PAGE_SIZE, ge=1, le=settings.INVENTORY_MAX_PAGE_SIZE),
    search: str = Query("", description="Matches sale number or customer"),
    status_filter: str | None = Query(None, alias="status"),
    sort: str | None = Query(None),
    order: str | None = Query(None, description="asc | desc"),
    db: Session = Depends(get_db),
):
    query = ListQuery(
        search=search,
        filters={"status": status_filter},
        sort_field=sort,
        sort_direction=order,
        page=page,
        page_size=page_size,
    )
    return page_response(list_sales(db, query), SaleRead)


@router.post("", response_model=SaleRead, status_code=status.HTTP_201_CREATED)
def record_sale(payload: SaleCreate, db: Session = Depends(get_db)):
    try:
        return create_sale(db, payload)
    except BackOfficeError as exc:
        raise http_error(exc) from exc


__all__ = ["router"]
