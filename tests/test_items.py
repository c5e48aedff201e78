import time

import pytest

from conftest import make_item
from smart_inventory.errors import NotFoundError, ValidationError
from smart_inventory.models.item import StockStatus
from smart_inventory.schemas.item import ItemCreate, ItemOut, ItemUpdate
from smart_inventory.schemas.storage import StorageCreate
from smart_inventory.services import item_service, storage_service
from smart_inventory.services.item_service import StockFilter


# --- derived state ---

def test_in_stock_between_thresholds():
    item = make_item(current_quantity=10, min_quantity=5, max_quantity=20)
    assert item.stock_status == StockStatus.IN_STOCK
    assert item.stock_status.value == "In Stock"


def test_low_stock_at_minimum():
    item = make_item(current_quantity=5, min_quantity=5, max_quantity=20)
    assert item.is_low_stock
    assert item.stock_status.value == "Low Stock"


@pytest.mark.parametrize(
    "qty,min_qty,max_qty,flag,expected",
    [
        (10, 5, 20, True, StockStatus.OUT_OF_STOCK),  # flag wins over healthy quantity
        (0, 5, 20, True, StockStatus.OUT_OF_STOCK),
        (3, 5, 20, False, StockStatus.LOW_STOCK),
        (25, 5, 20, False, StockStatus.OVER_STOCK),
        (20, 5, 20, False, StockStatus.OVER_STOCK),
        (25, 5, 0, False, StockStatus.IN_STOCK),  # no max configured
        (5, 10, 3, False, StockStatus.LOW_STOCK),  # inverted thresholds: low beats over
    ],
)
def test_stock_status_priority(qty, min_qty, max_qty, flag, expected):
    item = make_item(current_quantity=qty, min_quantity=min_qty, max_quantity=max_qty, is_out_of_stock=flag)
    assert item.stock_status == expected


def test_over_stock_requires_positive_max():
    assert not make_item(current_quantity=0, max_quantity=0).is_over_stock
    assert make_item(current_quantity=4, max_quantity=4).is_over_stock


def test_total_value_and_recomputed_on_read():
    item = make_item(current_quantity=4, unit_cost=2.5, min_quantity=1)
    assert item.total_value == 10.0
    assert not item.is_low_stock
    item.current_quantity = 1
    assert item.total_value == 2.5
    assert item.is_low_stock


def test_unassigned_storage_and_unit_labels():
    item = make_item()
    assert item.storage_name == "No Storage"
    assert item.uom_symbol == ""


# --- persistence ---

def test_create_item_generates_sku_when_missing(db):
    item = item_service.create_item(db, ItemCreate(name="Flour", sku="  "))
    assert item.sku.startswith("SKU-")
    assert len(item.sku) == 10


def test_create_item_keeps_given_sku(db):
    item = item_service.create_item(db, ItemCreate(name="Flour", sku="FL-1"))
    assert item.sku == "FL-1"


def test_create_item_requires_name(db):
    with pytest.raises(ValidationError):
        item_service.create_item(db, ItemCreate(name="   "))
    assert item_service.list_items(db) == []


def test_create_item_unknown_storage(db):
    with pytest.raises(NotFoundError):
        item_service.create_item(db, ItemCreate(name="Flour", storage_id="missing"))


def test_negative_quantities_are_accepted(db):
    item = item_service.create_item(
        db, ItemCreate(name="Backordered", current_quantity=-3, min_quantity=5, max_quantity=2)
    )
    assert item.current_quantity == -3
    assert item.stock_status == StockStatus.LOW_STOCK


def test_update_item_bumps_updated_at(db):
    item = item_service.create_item(db, ItemCreate(name="Sugar", current_quantity=3))
    before = item.updated_at
    time.sleep(0.01)
    updated = item_service.update_item(db, item.id, ItemUpdate(unit_cost=1.25, name="Cane Sugar"))
    assert updated.name == "Cane Sugar"
    assert updated.unit_cost == 1.25
    assert updated.current_quantity == 3
    assert updated.updated_at > before
    assert updated.count_history == []


def test_update_item_rejects_blank_name(db):
    item = item_service.create_item(db, ItemCreate(name="Salt"))
    with pytest.raises(ValidationError):
        item_service.update_item(db, item.id, ItemUpdate(name=""))


def test_update_item_can_detach_storage(db):
    storage = storage_service.create_storage(db, StorageCreate(name="Shelf"))
    item = item_service.create_item(db, ItemCreate(name="Salt", storage_id=storage.id))
    assert item.storage_name == "Shelf"
    item = item_service.update_item(db, item.id, ItemUpdate(storage_id=None))
    assert item.storage_id is None
    assert item.storage_name == "No Storage"


def test_update_missing_item(db):
    with pytest.raises(NotFoundError):
        item_service.update_item(db, "nope", ItemUpdate(name="x"))


def test_list_items_filters(db):
    storage = storage_service.create_storage(db, StorageCreate(name="Fridge"))
    item_service.create_item(db, ItemCreate(name="Milk", sku="MLK", current_quantity=1, min_quantity=2,
                                            storage_id=storage.id))
    item_service.create_item(db, ItemCreate(name="Butter", current_quantity=10, min_quantity=2,
                                            is_out_of_stock=True))
    item_service.create_item(db, ItemCreate(name="Cheese", current_quantity=10, min_quantity=2))

    assert [i.name for i in item_service.list_items(db, stock_filter=StockFilter.LOW_STOCK)] == ["Milk"]
    assert [i.name for i in item_service.list_items(db, stock_filter=StockFilter.OUT_OF_STOCK)] == ["Butter"]
    assert [i.name for i in item_service.list_items(db, storage_id=storage.id)] == ["Milk"]
    assert [i.name for i in item_service.list_items(db, search="mlk")] == ["Milk"]
    assert [i.name for i in item_service.list_items(db, search="CHEE")] == ["Cheese"]


def test_dashboard_stats(db):
    item_service.create_item(db, ItemCreate(name="A", current_quantity=2, unit_cost=3, min_quantity=5))
    item_service.create_item(db, ItemCreate(name="B", current_quantity=10, unit_cost=1, is_out_of_stock=True))
    stats = item_service.dashboard_stats(db)
    assert stats.total_items == 2
    assert stats.total_storages == 0
    assert stats.total_value == 16.0
    assert stats.low_stock_count == 1
    assert stats.out_of_stock_count == 1


def test_item_serialization_round_trip(db):
    item = item_service.create_item(
        db, ItemCreate(name="Oil, \"extra\"", current_quantity=2.5, min_quantity=5, unit_cost=4, barcode="123")
    )
    out = ItemOut.model_validate(item)
    assert ItemOut.model_validate_json(out.model_dump_json()) == out
    assert out.stock_status == StockStatus.LOW_STOCK
