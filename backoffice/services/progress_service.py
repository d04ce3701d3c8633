from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice.core.constants import ANONYMOUS_SENDER
from backoffice.core.exceptions import ValidationError
from backoffice.models.progress import ProgressEntry
from backoffice.schemas.progress import ProgressEntryCreate


def list_entries(db: Session, limit: Optional[int] = None) -> list[ProgressEntry]:
    stmt = select(ProgressEntry).order_by(ProgressEntry.created_at.desc(), ProgressEntry.id)
    if limit:
        stmt = stmt.limit(limit)
    return list(db.execute(stmt).scalars().all())


def create_entry(db: Session, payload: ProgressEntryCreate) -> ProgressEntry:
    description = (payload.description or "").strip()
    if not description:
        raise ValidationError("Progress description cannot be empty")
    sender = (payload.sender or "").strip() or ANONYMOUS_SENDER
    entry = ProgressEntry(
        user_id=payload.user_id,
        sender=sender,
        description=description,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


__all__ = ["create_entry", "list_entries"]
