from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from smart_inventory.api.deps import get_commands
from smart_inventory.database import get_db
from smart_inventory.schemas.item import CountCreate, CountOut, ItemCreate, ItemOut, ItemUpdate
from smart_inventory.services import item_service
from smart_inventory.services.commands import InventoryCommands
from smart_inventory.services.item_service import StockFilter

router = APIRouter(prefix="/items", tags=["Items"])


@router.post("", response_model=ItemOut, status_code=201)
def create_item(data: ItemCreate, commands: InventoryCommands = Depends(get_commands)):
    return commands.create_item(data)


@router.get("", response_model=list[ItemOut])
def list_items(
    storage_id: str | None = None,
    search: str | None = None,
    stock_filter: StockFilter = Query(StockFilter.ALL, alias="filter"),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return item_service.list_items(
        db, storage_id=storage_id, search=search, stock_filter=stock_filter, skip=skip, limit=limit
    )


@router.get("/recent", response_model=list[ItemOut])
def recent_items(limit: int = 5, db: Session = Depends(get_db)):
    return item_service.recent_items(db, limit=limit)


@router.get("/{item_id}", response_model=ItemOut)
def get_item(item_id: str, db: Session = Depends(get_db)):
    item = item_service.get_item(db, item_id)
    if not item:
        raise HTTPException(404, "Item not found")
    return item


@router.patch("/{item_id}", response_model=ItemOut)
def update_item(item_id: str, data: ItemUpdate, commands: InventoryCommands = Depends(get_commands)):
    return commands.update_item(item_id, data)


@router.delete("/{item_id}", status_code=204)
def delete_item(item_id: str, commands: InventoryCommands = Depends(get_commands)):
    commands.delete_item(item_id)


@router.post("/{item_id}/counts", response_model=CountOut, status_code=201)
def record_count(item_id: str, data: CountCreate, commands: InventoryCommands = Depends(get_commands)):
    return commands.record_count(item_id, data)


@router.get("/{item_id}/counts", response_model=list[CountOut])
def count_history(item_id: str, db: Session = Depends(get_db)):
    return item_service.get_count_history(db, item_id)
