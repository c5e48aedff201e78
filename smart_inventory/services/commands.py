import logging

from sqlalchemy.orm import Session

from smart_inventory.models.count_adjustment import CountAdjustment
from smart_inventory.models.item import InventoryItem
from smart_inventory.models.storage import Storage
from smart_inventory.schemas.item import CountCreate, ItemCreate, ItemUpdate
from smart_inventory.schemas.storage import StorageCreate, StorageUpdate
from smart_inventory.services import item_service, settings_service, storage_service
from smart_inventory.services.currency import CurrencyFormatter
from smart_inventory.services.event_service import CompletionEvent, EventEmitter, KeyedLock

logger = logging.getLogger(__name__)


class InventoryCommands:
    """Mutating operations invoked by the presentation layer.

    Each command runs its entity operation, and only once that has been
    committed emits a single completion event.
    """

    def __init__(self, db: Session, events: EventEmitter, locks: KeyedLock, user_id: str = ""):
        self.db = db
        self.events = events
        self.locks = locks
        self.user_id = user_id

    def create_storage(self, data: StorageCreate) -> Storage:
        storage = storage_service.create_storage(self.db, data)
        logger.info("Storage created: %s (%s)", storage.name, storage.id)
        self.events.emit(CompletionEvent.STORAGE_CREATED, storage_id=storage.id)
        return storage

    def update_storage(self, storage_id: str, data: StorageUpdate) -> Storage:
        storage = storage_service.update_storage(self.db, storage_id, data)
        self.events.emit(CompletionEvent.STORAGE_UPDATED, storage_id=storage.id)
        return storage

    def delete_storage(self, storage_id: str) -> int:
        item_ids = [item.id for item in storage_service.require_storage(self.db, storage_id).items]
        removed = storage_service.delete_storage(self.db, storage_id)
        for item_id in item_ids:
            self.locks.discard(item_id)
        self.events.emit(CompletionEvent.STORAGE_DELETED, storage_id=storage_id, items_removed=removed)
        return removed

    def create_item(self, data: ItemCreate) -> InventoryItem:
        item = item_service.create_item(self.db, data)
        logger.info("Item added: %s (%s)", item.name, item.sku)
        self.events.emit(CompletionEvent.ITEM_ADDED, item_id=item.id, storage_id=item.storage_id)
        return item

    def update_item(self, item_id: str, data: ItemUpdate) -> InventoryItem:
        item = item_service.update_item(self.db, item_id, data)
        self.events.emit(CompletionEvent.ITEM_UPDATED, item_id=item.id)
        return item

    def delete_item(self, item_id: str) -> None:
        item_service.delete_item(self.db, item_id)
        self.locks.discard(item_id)
        self.events.emit(CompletionEvent.ITEM_DELETED, item_id=item_id)

    def record_count(self, item_id: str, data: CountCreate) -> CountAdjustment:
        with self.locks.get(item_id):
            entry = item_service.record_count(self.db, item_id, data, counted_by=self.user_id)
        self.events.emit(
            CompletionEvent.INVENTORY_COUNT_COMPLETED,
            item_id=item_id,
            count_id=entry.id,
            variance=entry.variance,
        )
        return entry

    def update_currency(self, code: str, state) -> CurrencyFormatter:
        """Save the display currency and swap the formatter held on ``state``."""
        currency = settings_service.save_currency(self.db, code)
        state.currency = CurrencyFormatter(currency.code)
        self.events.emit(CompletionEvent.SETTINGS_CHANGED, setting="currency", value=currency.code)
        return state.currency
