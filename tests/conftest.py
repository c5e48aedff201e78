import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smart_inventory.database import get_db, init_db
from smart_inventory.main import app
from smart_inventory.models.item import InventoryItem
from smart_inventory.models.storage import Storage
from smart_inventory.services.commands import InventoryCommands
from smart_inventory.services.currency import CurrencyFormatter
from smart_inventory.services.event_service import EventEmitter, KeyedLock


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def events():
    return EventEmitter()


@pytest.fixture
def commands(db, events):
    return InventoryCommands(db, events, KeyedLock())


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    saved = app.state.events, app.state.count_locks, app.state.currency
    app.dependency_overrides[get_db] = override_get_db
    app.state.events = EventEmitter()
    app.state.count_locks = KeyedLock()
    app.state.currency = CurrencyFormatter("USD")
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.events, app.state.count_locks, app.state.currency = saved


def make_item(name="Widget", storage=None, **fields):
    """Unsaved item with every column filled in, for pure report/derivation tests."""
    values = dict(
        description="",
        sku=f"SKU-{name.upper()[:6]}",
        barcode="",
        current_quantity=0.0,
        min_quantity=0.0,
        max_quantity=0.0,
        unit_cost=0.0,
        is_out_of_stock=False,
        uom=None,
        updated_at=None,
    )
    values.update(fields)
    item = InventoryItem(name=name, **values)
    if storage is not None:
        item.storage = storage
        item.storage_id = storage.id
    return item


def make_storage(storage_id="st-1", name="Main Pantry"):
    return Storage(id=storage_id, name=name, location="", description="", color="#007AFF")
