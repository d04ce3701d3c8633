from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.config import get_settings
from backoffice.core.exceptions import BackOfficeError
from backoffice.core.http_errors import http_error
from backoffice.dependencies import get_db
from backoffice.schemas.common import ListPage, page_response
from backoffice.schemas.purchases import PurchaseOrderCreate, PurchaseOrderRead, PurchaseStatusUpdate
from backoffice.services.list_query import ListQuery
from backoffice.services.purchase_service import (
    create_purchase,
    get_purchase,
    list_purchases,
    update_status,
)

settings = get_settings()

router = APIRouter(prefix="/purchases", tags=["Purchases"])


@router.get("", response_model=ListPage[PurchaseOrderRead])
def purchase_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.PURCHASES_PAGE_SIZE, ge=1, le=settings.INVENTORY_MAX_PAGE_SIZE),
    search: str = Query("", description="Matches PO number or supplier"),
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
    return page_response(list_purchases(db, query), PurchaseOrderRead)


@router.post("", response_model=PurchaseOrderRead, status_code=status.HTTP_201_CREATED)
def new_purchase_order(payload: PurchaseOrderCreate, db: Session = Depends(get_db)):
    try:
        return create_purchase(db, payload)
    except BackOfficeError as exc:
        raise http_error(exc) from exc


@router.get("/{purchase_id}", response_model=PurchaseOrderRead)
def purchase_order(purchase_id: str, db: Session = Depends(get_db)):
    try:
        return get_purchase(db, purchase_id)
    except BackOfficeError as exc:
        raise http_error(exc) from exc


@router.patch("/{purchase_id}/status", response_model=PurchaseOrderRead)
def change_purchase_status(
    purchase_id: str,
    payload: PurchaseStatusUpdate,
    db: Session = Depends(get_db),
):
    try:
        return update_status(db, purchase_id, payload.status)
    except BackOfficeError as exc:
        raise http_error(exc) from exc


__all__ = ["router"]
