from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProgressEntryCreate(BaseModel):
    description: str
    sender: Optional[str] = None
    user_id: Optional[str] = None


class ProgressEntryRead(BaseModel):
    id: str
    user_id: Optional[str] = None
    sender: str
    description: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
