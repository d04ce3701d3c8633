from typing import List

from pydantic import BaseModel, Field


class CategoryValue(BaseModel):
    name: str
    value: float


class DashboardSummary(BaseModel):
    total_inventory: int
    low_stock_items: int
    monthly_revenue: float
    active_orders: int
    category_values: List[CategoryValue] = Field(default_factory=list)
