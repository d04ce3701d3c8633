from datetime import datetime, timezone

from fastapi import APIRouter, Request

from backoffice.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request):
    settings = get_settings()
    service = getattr(request.app.state, "inventory_service", None)
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "inventory_backend": settings.INVENTORY_BACKEND,
        "inventory_items": service.repository.count() if service else None,
        "time": datetime.now(timezone.utc).isoformat(),
    }
