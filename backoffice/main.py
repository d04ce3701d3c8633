import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from backoffice.config import Settings, get_settings
from backoffice.core.constants import INVENTORY_BACKENDS
from backoffice.core.logging import setup_logging
from backoffice.database import Base, SessionLocal, engine, ensure_sqlite_schema
from backoffice.models import import_all_models
from backoffice.routers import (
    dashboard_router,
    health_router,
    inventory_router,
    progress_router,
    purchases_router,
    sales_router,
)
from backoffice.services.inventory_repository import InventoryRepository
from backoffice.services.inventory_service import InventoryService
from backoffice.services.seed_data import demo_inventory

logger = logging.getLogger(__name__)

setup_logging()
settings: Settings = get_settings()

import_all_models()
Base.metadata.create_all(bind=engine)
ensure_sqlite_schema()


def build_inventory_service(app_settings: Settings) -> InventoryService:
    """Load the inventory collection for the configured backend."""
    if app_settings.INVENTORY_BACKEND not in INVENTORY_BACKENDS:
        raise ValueError(f"Unknown INVENTORY_BACKEND: {app_settings.INVENTORY_BACKEND}")
    session_factory = SessionLocal if app_settings.INVENTORY_BACKEND == "database" else None
    repository = InventoryRepository(
        session_factory,
        sync_batch_size=app_settings.INVENTORY_SYNC_BATCH_SIZE,
    )
    seed = demo_inventory() if app_settings.INVENTORY_SEED_DEMO_DATA else None
    loaded = repository.load(seed=seed)
    logger.info(
        "Inventory ready: %d items (%s backend)",
        loaded,
        app_settings.INVENTORY_BACKEND,
    )
    return InventoryService(repository, max_page_size=app_settings.INVENTORY_MAX_PAGE_SIZE)


def create_app(inventory_service: Optional[InventoryService] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "inventory_service", None) is None:
            app.state.inventory_service = build_inventory_service(settings)
        yield

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.inventory_service = inventory_service

    app.include_router(health_router)
    app.include_router(inventory_router)
    app.include_router(purchases_router)
    app.include_router(sales_router)
    app.include_router(progress_router)
    app.include_router(dashboard_router)

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url="/docs", status_code=302)

    return app


app = create_app()


__all__ = ["app", "build_inventory_service", "create_app"]
