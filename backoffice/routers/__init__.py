from backoffice.routers.dashboard import router as dashboard_router
from backoffice.routers.health import router as health_router
from backoffice.routers.inventory import router as inventory_router
from backoffice.routers.progress import router as progress_router
from backoffice.routers.purchases import router as purchases_router
from backoffice.routers.sales import router as sales_router

__all__ = [
    "dashboard_router",
    "health_router",
    "inventory_router",
    "progress_router",
    "purchases_router",
    "sales_router",
]
