from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PurchaseStatus = Literal["draft", "ordered", "received", "cancelled"]


class PurchaseLine(BaseModel):
    sku: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    unit_cost: float = Field(0, ge=0)


class PurchaseOrderCreate(BaseModel):
    po_number: Optional[str] = None
    supplier: str = Field(min_length=1)
    status: PurchaseStatus = "draft"
    lines: List[PurchaseLine] = Field(default_factory=list)
    order_date: Optional[date] = None
    expected_date: Optional[date] = None
    notes: str = ""

    model_config = ConfigDict(str_strip_whitespace=True)


class PurchaseOrderRead(BaseModel):
    id: str
    po_number: str
    supplier: str
    status: str
    lines: List[PurchaseLine] = Field(default_factory=list)
    total_amount: float
    order_date: date
    expected_date: Optional[date] = None
    notes: str = ""
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PurchaseStatusUpdate(BaseModel):
    status: PurchaseStatus
