import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder
from openpyxl.utils.exceptions import InvalidFileException

from backoffice.config import get_settings
from backoffice.core.exceptions import BackOfficeError, InvalidQueryError
from backoffice.core.http_errors import http_error
from backoffice.dependencies import get_inventory_service
from backoffice.schemas.common import ListPage, page_response
from backoffice.schemas.inventory import (
    InventoryImportRequest,
    InventoryImportResult,
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
    ReactivateResult,
    RefreshResponse,
    ReorderStockRequest,
    SyncResponse,
    TransferRequest,
    TransferResult,
)
from backoffice.services.import_service import import_workbook
from backoffice.services.inventory_records import INVENTORY_FIELDS
from backoffice.services.inventory_service import InventoryService
from backoffice.services.list_query import ERROR_INVALID_QUERY, ListQuery, query_from_mapping
from backoffice.services.live_list import LiveListSession

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("", response_model=ListPage[InventoryItemRead])
def list_inventory(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.INVENTORY_PAGE_SIZE, ge=1, le=settings.INVENTORY_MAX_PAGE_SIZE),
    search: str = Query("", description="Matches name, SKU or category"),
    category: str | None = Query(None),
    location: str | None = Query(None),
    sort: str | None = Query(None, description="Sort field, e.g. name, sku, rrp, stock"),
    order: str | None = Query(None, description="asc | desc"),
    service: InventoryService = Depends(get_inventory_service),
):
    query = ListQuery(
        search=search,
        filters={"category": category, "location": location},
        sort_field=sort,
        sort_direction=order,
        page=page,
        page_size=page_size,
    )
    return page_response(service.list_items(query), InventoryItemRead)


@router.post("/reactivate-all", response_model=ReactivateResult)
def reactivate_all(service: InventoryService = Depends(get_inventory_service)):
    try:
        count = service.reactivate_all()
    except BackOfficeError as exc:
        raise http_error(exc) from exc
    return ReactivateResult(reactivated=count)


@router.post("/sync", response_model=SyncResponse)
def sync_inventory(service: InventoryService = Depends(get_inventory_service)):
    result = service.sync()
    return SyncResponse(success=result.success, message=result.message, synced=result.synced)


@router.post("/refresh", response_model=RefreshResponse)
def refresh_inventory(service: InventoryService = Depends(get_inventory_service)):
    try:
        loaded = service.refresh()
    except BackOfficeError as exc:
        raise http_error(exc) from exc
    return RefreshResponse(loaded=loaded)


@router.post("/import", response_model=InventoryImportResult)
def import_inventory(
    payload: InventoryImportRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        return import_workbook(service, payload.path, sheet=payload.sheet, dry_run=payload.dry_run)
    except (OSError, ValueError, InvalidFileException) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except BackOfficeError as exc:
        raise http_error(exc) from exc


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
def add_inventory_item(
    payload: InventoryItemCreate,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        record = service.add_item(payload)
    except BackOfficeError as exc:
        raise http_error(exc) from exc
    return InventoryItemRead.model_validate(record)


@router.get("/{item_id}", response_model=InventoryItemRead)
def get_inventory_item(item_id: str, service: InventoryService = Depends(get_inventory_service)):
    try:
        record = service.get_item(item_id)
    except BackOfficeError as exc:
        raise http_error(exc) from exc
    return InventoryItemRead.model_validate(record)


@router.put("/{item_id}", response_model=InventoryItemRead)
def update_inventory_item(
    item_id: str,
    payload: InventoryItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        record = service.update_item(item_id, payload)
    except BackOfficeError as exc:
        raise http_error(exc) from exc
    return InventoryItemRead.model_validate(record)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(item_id: str, service: InventoryService = Depends(get_inventory_service)):
    try:
        service.delete_item(item_id)
    except BackOfficeError as exc:
        raise http_error(exc) from exc


@router.post("/{item_id}/transfer", response_model=TransferResult)
def transfer_inventory_item(
    item_id: str,
    payload: TransferRequest,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        outcome = service.transfer(item_id, payload.quantity, payload.new_location)
    except BackOfficeError as exc:
        raise http_error(exc) from exc
    return TransferResult(
        source=InventoryItemRead.model_validate(outcome.source),
        destination=InventoryItemRead.model_validate(outcome.destination),
        created=outcome.created,
    )


@router.post("/{item_id}/reorder-stock", response_model=InventoryItemRead)
def reorder_stock(
    item_id: str,
    payload: ReorderStockRequest | None = None,
    service: InventoryService = Depends(get_inventory_service),
):
    quantity = payload.quantity if payload else 0
    try:
        record = service.reorder_stock(item_id, quantity)
    except BackOfficeError as exc:
        raise http_error(exc) from exc
    return InventoryItemRead.model_validate(record)


@router.post("/{item_id}/toggle-active", response_model=InventoryItemRead)
def toggle_active(item_id: str, service: InventoryService = Depends(get_inventory_service)):
    try:
        record = service.toggle_active(item_id)
    except BackOfficeError as exc:
        raise http_error(exc) from exc
    return InventoryItemRead.model_validate(record)


@router.websocket("/live")
async def live_inventory(
    websocket: WebSocket,
    service: InventoryService = Depends(get_inventory_service),
):
    await websocket.accept()

    async def publish(generation, page):
        payload = jsonable_encoder(page_response(page, InventoryItemRead))
        payload["generation"] = generation
        await websocket.send_json(payload)

    session = LiveListSession(
        service.list_items,
        on_page=publish,
        debounce_seconds=settings.INVENTORY_SEARCH_DEBOUNCE_MS / 1000,
        fields=INVENTORY_FIELDS,
    )
    service.repository.subscribe(session.notify)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                message = None
            try:
                if not isinstance(message, dict):
                    raise InvalidQueryError("Each message must be a JSON object")
                if message.get("type") == "move":
                    await session.move(str(message.get("id")), str(message.get("direction")))
                    continue
                query = query_from_mapping(
                    message,
                    INVENTORY_FIELDS,
                    default_page_size=settings.INVENTORY_PAGE_SIZE,
                )
            except InvalidQueryError as exc:
                await websocket.send_json(
                    {
                        "generation": session.generation,
                        "items": [],
                        "total": 0,
                        "error": str(exc),
                        "error_kind": ERROR_INVALID_QUERY,
                    }
                )
                continue
            session.submit(query)
    except WebSocketDisconnect:
        logger.debug("Live inventory client disconnected")
    finally:
        service.repository.unsubscribe(session.notify)
        await session.close()


__all__ = ["router"]
