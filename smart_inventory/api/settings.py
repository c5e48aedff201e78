from fastapi import APIRouter, Depends, Request

from smart_inventory.api.deps import get_commands, get_currency
from smart_inventory.schemas.settings import CurrencyOut, CurrencyUpdate
from smart_inventory.services.commands import InventoryCommands
from smart_inventory.services.currency import CurrencyFormatter

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/currency", response_model=CurrencyOut)
def get_display_currency(currency: CurrencyFormatter = Depends(get_currency)):
    return currency.currency


@router.put("/currency", response_model=CurrencyOut)
def set_display_currency(
    data: CurrencyUpdate,
    request: Request,
    commands: InventoryCommands = Depends(get_commands),
):
    """Change the currency used to format money in reports."""
    return commands.update_currency(data.code, request.app.state).currency
