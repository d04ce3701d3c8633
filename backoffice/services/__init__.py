from backoffice.services.dashboard_service import dashboard_summary
from backoffice.services.import_service import import_workbook
from backoffice.services.inventory_repository import InventoryRepository
from backoffice.services.inventory_service import InventoryService
from backoffice.services.live_list import LiveListSession

__all__ = [
    "InventoryRepository",
    "InventoryService",
    "LiveListSession",
    "dashboard_summary",
    "import_workbook",
]
