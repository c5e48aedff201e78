from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from smart_inventory.api.deps import get_commands
from smart_inventory.database import get_db
from smart_inventory.schemas.item import ItemOut
from smart_inventory.schemas.storage import StorageCreate, StorageOut, StorageSummary, StorageUpdate
from smart_inventory.services import item_service, storage_service
from smart_inventory.services.commands import InventoryCommands

router = APIRouter(prefix="/storages", tags=["Storages"])


@router.post("", response_model=StorageOut, status_code=201)
def create_storage(data: StorageCreate, commands: InventoryCommands = Depends(get_commands)):
    return commands.create_storage(data)


@router.get("", response_model=list[StorageOut])
def list_storages(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return storage_service.list_storages(db, skip=skip, limit=limit)


@router.get("/{storage_id}", response_model=StorageOut)
def get_storage(storage_id: str, db: Session = Depends(get_db)):
    storage = storage_service.get_storage(db, storage_id)
    if not storage:
        raise HTTPException(404, "Storage not found")
    return storage


@router.get("/{storage_id}/summary", response_model=StorageSummary)
def storage_summary(storage_id: str, db: Session = Depends(get_db)):
    return storage_service.storage_summary(db, storage_id)


@router.get("/{storage_id}/items", response_model=list[ItemOut])
def storage_items(storage_id: str, search: str | None = None, db: Session = Depends(get_db)):
    storage_service.require_storage(db, storage_id)
    return item_service.list_items(db, storage_id=storage_id, search=search)


@router.patch("/{storage_id}", response_model=StorageOut)
def update_storage(storage_id: str, data: StorageUpdate, commands: InventoryCommands = Depends(get_commands)):
    return commands.update_storage(storage_id, data)


@router.delete("/{storage_id}")
def delete_storage(storage_id: str, commands: InventoryCommands = Depends(get_commands)):
    removed = commands.delete_storage(storage_id)
    return {"deleted": storage_id, "items_removed": removed}
