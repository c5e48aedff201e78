import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from smart_inventory.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from smart_inventory.api import events, items, reports, storages, units
from smart_inventory.api import settings as settings_routes
from smart_inventory.database import SessionLocal, init_db
from smart_inventory.errors import InventoryError
from smart_inventory.services import settings_service, uom_service
from smart_inventory.services.currency import CURRENCIES, CurrencyFormatter
from smart_inventory.services.event_service import EventEmitter, KeyedLock, WebhookSubscriber


def _seed_units():
    db = SessionLocal()
    try:
        uom_service.seed_defaults(db)
    finally:
        db.close()


def _load_currency(app: FastAPI):
    db = SessionLocal()
    try:
        currency = settings_service.load_currency(db, settings.DEFAULT_CURRENCY)
    finally:
        db.close()
    app.state.currency = CurrencyFormatter(currency.code)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.SEED_UNITS_ON_STARTUP:
        _seed_units()
    _load_currency(app)
    yield
    if _webhooks is not None:
        _webhooks.shutdown()


app = FastAPI(
    title="Smart Inventory API",
    description="Storages, stocked items, count reconciliation and inventory reports",
    version="1.0.0",
    lifespan=lifespan,
)

# Shared services handed to request handlers through dependencies (see api/deps.py)
app.state.events = EventEmitter(maxlen=settings.EVENT_LOG_SIZE)
app.state.count_locks = KeyedLock()
app.state.currency = CurrencyFormatter(settings.DEFAULT_CURRENCY)

_webhooks = WebhookSubscriber.from_setting(settings.EVENT_WEBHOOK_URLS)
if _webhooks is not None:
    app.state.events.subscribe(_webhooks)


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return JSON for unhandled exceptions so the client can parse the error."""
    logger.error("Unhandled error: %s\n%s", exc, traceback.format_exc())
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.include_router(units.router, prefix="/api/v1")
app.include_router(storages.router, prefix="/api/v1")
app.include_router(items.router, prefix="/api/v1")
app.include_router(reports.router, prefix="/api/v1")
app.include_router(events.router, prefix="/api/v1")
app.include_router(settings_routes.router, prefix="/api/v1")


@app.get("/api/v1/config")
def get_config():
    """Expose public config for the presentation layer."""
    return {
        "app_name": settings.APP_NAME,
        "currency": app.state.currency.currency.code,
        "default_counted_by": settings.DEFAULT_COUNTED_BY,
    }


@app.get("/api/v1/currencies")
def list_currencies():
    return [{"code": c.code, "symbol": c.symbol, "name": c.name} for c in CURRENCIES]


@app.get("/health")
def health():
    return {"status": "ok"}
