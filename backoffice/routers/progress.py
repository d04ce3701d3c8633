from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backoffice.core.exceptions import BackOfficeError
from backoffice.core.http_errors import http_error
from backoffice.dependencies import get_db
from backoffice.schemas.progress import ProgressEntryCreate, ProgressEntryRead
from backoffice.services.progress_service import create_entry, list_entries

router = APIRouter(prefix="/progress", tags=["Progress"])


@router.get("", response_model=List[ProgressEntryRead])
def progress_entries(
    limit: int = Query(100, ge=1, le=1000, description="Max entries to return"),
    db: Session = Depends(get_db),
):
    return list_entries(db, limit=limit)


@router.post("", response_model=ProgressEntryRead, status_code=status.HTTP_201_CREATED)
def post_progress(payload: ProgressEntryCreate, db: Session = Depends(get_db)):
    try:
        return create_entry(db, payload)
    except BackOfficeError as exc:
        raise http_error(exc) from exc


__all__ = ["router"]
