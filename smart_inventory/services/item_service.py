import logging
import math
from enum import Enum as PyEnum

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from smart_inventory.config import settings
from smart_inventory.database import commit, utcnow
from smart_inventory.errors import NotFoundError, ValidationError
from smart_inventory.models.count_adjustment import CountAdjustment
from smart_inventory.models.item import InventoryItem, generate_sku
from smart_inventory.models.storage import Storage
from smart_inventory.models.uom import UnitOfMeasure
from smart_inventory.schemas.item import CountCreate, DashboardStats, ItemCreate, ItemUpdate

logger = logging.getLogger(__name__)


class StockFilter(str, PyEnum):
    ALL = "all"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


def _require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("Item name is required")
    return name.strip()


def _check_refs(db: Session, storage_id: str | None, uom_id: str | None) -> None:
    if storage_id is not None and not db.get(Storage, storage_id):
        raise NotFoundError(f"Storage {storage_id} not found")
    if uom_id is not None and not db.get(UnitOfMeasure, uom_id):
        raise NotFoundError(f"Unit {uom_id} not found")


def create_item(db: Session, data: ItemCreate) -> InventoryItem:
    name = _require_name(data.name)
    _check_refs(db, data.storage_id, data.uom_id)
    item = InventoryItem(
        name=name,
        description=data.description,
        sku=data.sku.strip() or generate_sku(),
        barcode=data.barcode,
        current_quantity=data.current_quantity,
        min_quantity=data.min_quantity,
        max_quantity=data.max_quantity,
        unit_cost=data.unit_cost,
        is_out_of_stock=data.is_out_of_stock,
        storage_id=data.storage_id,
        uom_id=data.uom_id,
    )
    db.add(item)
    commit(db)
    db.refresh(item)
    return item


def get_item(db: Session, item_id: str) -> InventoryItem | None:
    return db.query(InventoryItem).filter(InventoryItem.id == item_id).first()


def require_item(db: Session, item_id: str) -> InventoryItem:
    item = get_item(db, item_id)
    if not item:
        raise NotFoundError(f"Item {item_id} not found")
    return item


def list_items(
    db: Session,
    storage_id: str | None = None,
    search: str | None = None,
    stock_filter: StockFilter = StockFilter.ALL,
    skip: int = 0,
    limit: int = 100,
) -> list[InventoryItem]:
    q = db.query(InventoryItem)
    if storage_id:
        q = q.filter(InventoryItem.storage_id == storage_id)
    if search:
        pattern = f"%{search}%"
        q = q.filter(or_(InventoryItem.name.ilike(pattern), InventoryItem.sku.ilike(pattern)))
    if stock_filter == StockFilter.LOW_STOCK:
        q = q.filter(InventoryItem.current_quantity <= InventoryItem.min_quantity)
    elif stock_filter == StockFilter.OUT_OF_STOCK:
        q = q.filter(InventoryItem.is_out_of_stock.is_(True))
    return q.order_by(InventoryItem.name).offset(skip).limit(limit).all()


def snapshot_items(db: Session, storage_id: str | None = None) -> list[InventoryItem]:
    """All items (optionally of one storage) in one fetch, relations loaded, insertion order."""
    q = db.query(InventoryItem).options(
        selectinload(InventoryItem.storage), selectinload(InventoryItem.uom)
    )
    if storage_id:
        q = q.filter(InventoryItem.storage_id == storage_id)
    return q.order_by(InventoryItem.created_at).all()


def recent_items(db: Session, limit: int = 5) -> list[InventoryItem]:
    return db.query(InventoryItem).order_by(InventoryItem.updated_at.desc()).limit(limit).all()


def update_item(db: Session, item_id: str, data: ItemUpdate) -> InventoryItem:
    item = require_item(db, item_id)
    update_data = data.model_dump(exclude_unset=True)

    # storage/uom accept an explicit null (detach); everything else ignores nulls
    refs = {k: update_data.pop(k) for k in ("storage_id", "uom_id") if k in update_data}
    update_data = {k: v for k, v in update_data.items() if v is not None}

    if "name" in update_data:
        update_data["name"] = _require_name(update_data["name"])
    if "sku" in update_data:
        update_data["sku"] = update_data["sku"].strip() or generate_sku()
    _check_refs(db, refs.get("storage_id"), refs.get("uom_id"))

    for field, value in {**update_data, **refs}.items():
        setattr(item, field, value)
    item.updated_at = utcnow()
    commit(db)
    db.refresh(item)
    return item


def delete_item(db: Session, item_id: str) -> None:
    item = require_item(db, item_id)
    db.delete(item)
    commit(db)


def _validate_count(data: CountCreate) -> None:
    qty = data.counted_quantity
    if qty is None or not math.isfinite(qty) or qty < 0:
        raise ValidationError("Counted quantity must be a non-negative number")
    if not data.adjustment_reason or not data.adjustment_reason.strip():
        raise ValidationError("Adjustment reason is required")


def record_count(db: Session, item_id: str, data: CountCreate, counted_by: str = "") -> CountAdjustment:
    """Reconcile an item against a physical count.

    Snapshots the current quantity, appends a ledger entry and overwrites the
    quantity in a single commit. Callers that may run concurrently for the same
    item must hold that item's lock (see InventoryCommands).
    """
    _validate_count(data)
    item = (
        db.query(InventoryItem)
        .filter(InventoryItem.id == item_id)
        .with_for_update()
        .first()
    )
    if not item:
        raise NotFoundError(f"Item {item_id} not found")

    now = utcnow()
    entry = CountAdjustment(
        previous_quantity=item.current_quantity,
        counted_quantity=data.counted_quantity,
        adjustment_reason=data.adjustment_reason.strip(),
        notes=data.notes,
        count_date=now,
        counted_by=data.counted_by or counted_by or settings.DEFAULT_COUNTED_BY,
        sequence=max((c.sequence for c in item.count_history), default=0) + 1,
    )
    item.count_history.append(entry)
    item.current_quantity = data.counted_quantity
    item.updated_at = now
    commit(db)
    db.refresh(entry)

    logger.info(
        "Count recorded for item %s: %.2f -> %.2f (%s)",
        item.id, entry.previous_quantity, entry.counted_quantity, entry.adjustment_type.value,
    )
    return entry


def get_count_history(db: Session, item_id: str) -> list[CountAdjustment]:
    require_item(db, item_id)
    return (
        db.query(CountAdjustment)
        .filter(CountAdjustment.item_id == item_id)
        .order_by(CountAdjustment.sequence.desc())
        .all()
    )


def dashboard_stats(db: Session) -> DashboardStats:
    items = db.query(InventoryItem).all()
    return DashboardStats(
        total_items=len(items),
        total_storages=db.query(Storage).count(),
        total_value=round(sum(i.total_value for i in items), 2),
        low_stock_count=sum(1 for i in items if i.is_low_stock),
        out_of_stock_count=sum(1 for i in items if i.is_out_of_stock),
    )
