from datetime import datetime
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from backoffice.core.constants import DEFAULT_LOW_STOCK_THRESHOLD, DEFAULT_MIN_STOCK_COUNT


class Dimensions(BaseModel):
    length: float = Field(0, ge=0)
    width: float = Field(0, ge=0)
    height: float = Field(0, ge=0)
    unit: Literal["cm", "mm", "in"] = "cm"


class Weight(BaseModel):
    value: float = Field(0, ge=0)
    unit: Literal["kg", "g", "lb"] = "kg"


class InventoryItemBase(BaseModel):
    sku: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    category: str = ""
    subcategory: str = ""
    brand: str = ""
    rrp: float = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("rrp", "price"),
    )
    cost: float = Field(0, ge=0)
    stock: int = Field(0, ge=0)
    low_stock_threshold: int = Field(DEFAULT_LOW_STOCK_THRESHOLD, ge=0)
    min_stock_count: int = Field(DEFAULT_MIN_STOCK_COUNT, ge=0)
    location: str = ""
    barcode: str = ""
    supplier: str = ""
    image_url: Optional[str] = None
    dimensions: Optional[Dimensions] = None
    weight: Optional[Weight] = None
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class InventoryItemCreate(InventoryItemBase):
    id: Optional[str] = None


class InventoryItemUpdate(InventoryItemBase):
    pass


class InventoryItemRead(InventoryItemBase):
    id: str
    date_added: datetime
    last_updated: datetime
    is_low_stock: bool = False

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TransferRequest(BaseModel):
    quantity: int = Field(gt=0)
    new_location: str = Field(min_length=1)


class TransferResult(BaseModel):
    source: InventoryItemRead
    destination: InventoryItemRead
    created: bool


class ReorderStockRequest(BaseModel):
    quantity: int = Field(0, ge=0)


class ReactivateResult(BaseModel):
    reactivated: int


class SyncResponse(BaseModel):
    success: bool
    message: str
    synced: int = 0


class RefreshResponse(BaseModel):
    loaded: int


class InventoryImportRequest(BaseModel):
    path: str
    sheet: Optional[str] = None
    dry_run: bool = False


class InventoryImportResult(BaseModel):
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = Field(default_factory=list)
    dry_run: bool = False
