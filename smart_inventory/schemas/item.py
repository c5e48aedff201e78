from datetime import datetime

from pydantic import BaseModel

from smart_inventory.models.count_adjustment import AdjustmentType
from smart_inventory.models.item import StockStatus


class ItemCreate(BaseModel):
    name: str
    description: str = ""
    sku: str = ""  # empty = generated
    barcode: str = ""
    current_quantity: float = 0.0
    min_quantity: float = 0.0
    max_quantity: float = 0.0
    unit_cost: float = 0.0
    is_out_of_stock: bool = False
    storage_id: str | None = None
    uom_id: str | None = None


class ItemUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    sku: str | None = None
    barcode: str | None = None
    current_quantity: float | None = None
    min_quantity: float | None = None
    max_quantity: float | None = None
    unit_cost: float | None = None
    is_out_of_stock: bool | None = None
    # Explicit null detaches the item
    storage_id: str | None = None
    uom_id: str | None = None


class ItemOut(BaseModel):
    id: str
    name: str
    description: str
    sku: str
    barcode: str
    current_quantity: float
    min_quantity: float
    max_quantity: float
    unit_cost: float
    is_out_of_stock: bool
    storage_id: str | None = None
    uom_id: str | None = None
    storage_name: str = ""
    uom_symbol: str = ""
    is_low_stock: bool
    is_over_stock: bool
    total_value: float
    stock_status: StockStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CountCreate(BaseModel):
    counted_quantity: float
    adjustment_reason: str
    notes: str = ""
    counted_by: str = ""  # empty = caller identity or configured default


class CountOut(BaseModel):
    id: str
    item_id: str
    previous_quantity: float
    counted_quantity: float
    adjustment_reason: str
    notes: str
    count_date: datetime
    counted_by: str
    sequence: int
    variance: float
    variance_percentage: float
    adjustment_type: AdjustmentType

    model_config = {"from_attributes": True}


class DashboardStats(BaseModel):
    total_items: int
    total_storages: int
    total_value: float
    low_stock_count: int
    out_of_stock_count: int
