from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.dependencies import get_db, get_inventory_service
from backoffice.schemas.dashboard import DashboardSummary
from backoffice.services.dashboard_service import dashboard_summary
from backoffice.services.inventory_service import InventoryService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def summary(
    db: Session = Depends(get_db),
    service: InventoryService = Depends(get_inventory_service),
):
    return dashboard_summary(db, service.repository.snapshot())


__all__ = ["router"]
