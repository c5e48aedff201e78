import logging

from sqlalchemy.orm import Session

from smart_inventory.database import commit, utcnow
from smart_inventory.errors import NotFoundError, ValidationError
from smart_inventory.models.item import InventoryItem
from smart_inventory.models.storage import Storage
from smart_inventory.schemas.storage import StorageCreate, StorageSummary, StorageUpdate

logger = logging.getLogger(__name__)


def _require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("Storage name is required")
    return name.strip()


def create_storage(db: Session, data: StorageCreate) -> Storage:
    storage = Storage(
        name=_require_name(data.name),
        location=data.location,
        description=data.description,
        color=data.color,
    )
    db.add(storage)
    commit(db)
    db.refresh(storage)
    return storage


def get_storage(db: Session, storage_id: str) -> Storage | None:
    return db.query(Storage).filter(Storage.id == storage_id).first()


def require_storage(db: Session, storage_id: str) -> Storage:
    storage = get_storage(db, storage_id)
    if not storage:
        raise NotFoundError(f"Storage {storage_id} not found")
    return storage


def list_storages(db: Session, skip: int = 0, limit: int | None = 100) -> list[Storage]:
    return db.query(Storage).order_by(Storage.created_at).offset(skip).limit(limit).all()


def update_storage(db: Session, storage_id: str, data: StorageUpdate) -> Storage:
    storage = require_storage(db, storage_id)
    update_data = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "name" in update_data:
        update_data["name"] = _require_name(update_data["name"])
    for field, value in update_data.items():
        setattr(storage, field, value)
    storage.updated_at = utcnow()
    commit(db)
    db.refresh(storage)
    return storage


def delete_storage(db: Session, storage_id: str) -> int:
    """Delete a storage with every item it owns (and their count history).

    Returns the number of items removed.
    """
    storage = require_storage(db, storage_id)
    items = db.query(InventoryItem).filter(InventoryItem.storage_id == storage.id).all()
    removed = len(items)
    for item in items:
        db.delete(item)
    db.delete(storage)
    commit(db)
    logger.info("Deleted storage %s with %d items", storage_id, removed)
    return removed


def storage_summary(db: Session, storage_id: str) -> StorageSummary:
    storage = require_storage(db, storage_id)
    return StorageSummary(
        storage_id=storage.id,
        name=storage.name,
        item_count=storage.item_count,
        total_quantity=round(storage.total_quantity, 2),
        total_value=round(storage.total_value, 2),
        low_stock_count=storage.low_stock_count,
    )

