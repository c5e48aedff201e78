from pydantic import BaseModel


class CurrencyUpdate(BaseModel):
    code: str


class CurrencyOut(BaseModel):
    code: str
    symbol: str
    name: str

    model_config = {"from_attributes": True}
