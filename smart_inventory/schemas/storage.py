from datetime import datetime

from pydantic import BaseModel

from smart_inventory.models.storage import DEFAULT_COLOR


class StorageCreate(BaseModel):
    name: str
    location: str = ""
    description: str = ""
    color: str = DEFAULT_COLOR


class StorageUpdate(BaseModel):
    name: str | None = None
    location: str | None = None
    description: str | None = None
    color: str | None = None


class StorageOut(BaseModel):
    id: str
    name: str
    location: str
    description: str
    color: str
    item_count: int = 0
    total_quantity: float = 0.0
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StorageSummary(BaseModel):
    storage_id: str
    name: str
    item_count: int
    total_quantity: float
    total_value: float
    low_stock_count: int
