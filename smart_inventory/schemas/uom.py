from datetime import datetime

from pydantic import BaseModel


class UnitCreate(BaseModel):
    name: str
    symbol: str
    category: str = ""
    is_default: bool = False


class UnitUpdate(BaseModel):
    name: str | None = None
    symbol: str | None = None
    category: str | None = None
    is_default: bool | None = None


class UnitOut(BaseModel):
    id: str
    name: str
    symbol: str
    category: str
    is_default: bool
    created_at: datetime

    model_config = {"from_attributes": True}
