from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SaleStatus = Literal["pending", "completed", "cancelled", "refunded"]


class SaleLine(BaseModel):
    sku: Optional[str] = None
    name: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    unit_price: float = Field(0, ge=0)


class SaleCreate(BaseModel):
    sale_number: Optional[str] = None
    customer_name: str = Field(min_length=1)
    status: SaleStatus = "completed"
    lines: List[SaleLine] = Field(min_length=1)
    sale_date: Optional[date] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class SaleRead(BaseModel):
    id: str
    sale_number: str
    customer_name: str
    status: str
    lines: List[SaleLine] = Field(default_factory=list)
    grand_total: float
    sale_date: date
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
