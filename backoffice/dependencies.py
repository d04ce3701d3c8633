from starlette.requests import HTTPConnection

from backoffice.database.session import get_db
from backoffice.services.inventory_service import InventoryService


def get_inventory_service(connection: HTTPConnection) -> InventoryService:
    return connection.app.state.inventory_service


__all__ = ["get_db", "get_inventory_service"]
