import time

import pytest
from sqlalchemy.exc import OperationalError

from smart_inventory.errors import NotFoundError, PersistenceError, ValidationError
from smart_inventory.models.count_adjustment import CountAdjustment
from smart_inventory.models.item import InventoryItem
from smart_inventory.schemas.item import CountCreate, ItemCreate
from smart_inventory.schemas.storage import StorageCreate, StorageOut, StorageUpdate
from smart_inventory.services import item_service, storage_service
from smart_inventory.services.commands import InventoryCommands
from smart_inventory.services.event_service import KeyedLock


def test_create_storage_defaults(db):
    storage = storage_service.create_storage(db, StorageCreate(name="  Garage  "))
    assert storage.name == "Garage"
    assert storage.color == "#007AFF"
    assert storage.item_count == 0
    assert storage.total_quantity == 0


@pytest.mark.parametrize("name", ["", "   "])
def test_create_storage_requires_name(db, name):
    with pytest.raises(ValidationError):
        storage_service.create_storage(db, StorageCreate(name=name))
    assert storage_service.list_storages(db) == []


def test_update_storage(db):
    storage = storage_service.create_storage(db, StorageCreate(name="Garage", location="House"))
    before = storage.updated_at
    time.sleep(0.01)
    updated = storage_service.update_storage(db, storage.id, StorageUpdate(description="Cold", color="#FF0000"))
    assert updated.description == "Cold"
    assert updated.color == "#FF0000"
    assert updated.location == "House"
    assert updated.updated_at > before

    with pytest.raises(ValidationError):
        storage_service.update_storage(db, storage.id, StorageUpdate(name=" "))
    with pytest.raises(NotFoundError):
        storage_service.update_storage(db, "missing", StorageUpdate(name="x"))


def test_storage_aggregates(db):
    storage = storage_service.create_storage(db, StorageCreate(name="Pantry"))
    item_service.create_item(db, ItemCreate(name="Beans", current_quantity=4, unit_cost=2, min_quantity=5,
                                            storage_id=storage.id))
    item_service.create_item(db, ItemCreate(name="Rice", current_quantity=6.5, unit_cost=1,
                                            storage_id=storage.id))
    db.refresh(storage)
    assert storage.item_count == 2
    assert storage.total_quantity == 10.5

    summary = storage_service.storage_summary(db, storage.id)
    assert summary.item_count == 2
    assert summary.total_value == 14.5
    assert summary.low_stock_count == 1


def test_delete_storage_cascades_to_items_and_history(db):
    storage = storage_service.create_storage(db, StorageCreate(name="Shed"))
    other = storage_service.create_storage(db, StorageCreate(name="Attic"))
    item = item_service.create_item(db, ItemCreate(name="Rake", current_quantity=1, storage_id=storage.id))
    keep = item_service.create_item(db, ItemCreate(name="Box", current_quantity=1, storage_id=other.id))
    item_service.record_count(db, item.id, CountCreate(counted_quantity=2, adjustment_reason="Count"))
    item_service.record_count(db, keep.id, CountCreate(counted_quantity=2, adjustment_reason="Count"))

    assert storage_service.delete_storage(db, storage.id) == 1

    assert storage_service.get_storage(db, storage.id) is None
    assert [i.name for i in db.query(InventoryItem).all()] == ["Box"]
    assert [c.item_id for c in db.query(CountAdjustment).all()] == [keep.id]


def test_delete_missing_storage(db):
    with pytest.raises(NotFoundError):
        storage_service.delete_storage(db, "missing")


def test_storage_serialization_round_trip(db):
    storage = storage_service.create_storage(db, StorageCreate(name="Cellar", location="Basement",
                                                               description="Wine, mostly"))
    out = StorageOut.model_validate(storage)
    assert StorageOut.model_validate_json(out.model_dump_json()) == out


def test_storage_commands_emit_events(commands, events):
    storage = commands.create_storage(StorageCreate(name="Van"))
    commands.update_storage(storage.id, StorageUpdate(location="Depot"))
    commands.create_item(ItemCreate(name="Cable", storage_id=storage.id))
    commands.delete_storage(storage.id)
    assert [e["event"] for e in events.recent()] == [
        "storageCreated",
        "storageUpdated",
        "itemAdded",
        "storageDeleted",
    ]
    assert events.recent()[-1]["data"]["items_removed"] == 1


def test_store_failure_rolls_back(db, monkeypatch):
    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)
    with pytest.raises(PersistenceError):
        storage_service.create_storage(db, StorageCreate(name="Garage"))
    monkeypatch.undo()
    assert storage_service.list_storages(db) == []


def test_delete_storage_drops_count_locks_of_removed_items(db, events):
    locks = KeyedLock()
    commands = InventoryCommands(db, events, locks)
    storage = commands.create_storage(StorageCreate(name="Van"))
    item = commands.create_item(ItemCreate(name="Cable", storage_id=storage.id))
    commands.record_count(item.id, CountCreate(counted_quantity=3, adjustment_reason="Count"))
    assert item.id in locks

    commands.delete_storage(storage.id)
    assert item.id not in locks
