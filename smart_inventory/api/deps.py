from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from smart_inventory.database import get_db
from smart_inventory.services.commands import InventoryCommands
from smart_inventory.services.currency import CurrencyFormatter
from smart_inventory.services.event_service import EventEmitter, KeyedLock


def get_events(request: Request) -> EventEmitter:
    return request.app.state.events


def get_count_locks(request: Request) -> KeyedLock:
    return request.app.state.count_locks


def get_currency(request: Request) -> CurrencyFormatter:
    return request.app.state.currency


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Opaque user id supplied by the identity provider in front of this service."""
    return (x_user_id or "").strip()


def get_commands(
    db: Session = Depends(get_db),
    events: EventEmitter = Depends(get_events),
    locks: KeyedLock = Depends(get_count_locks),
    user_id: str = Depends(get_user_id),
) -> InventoryCommands:
    return InventoryCommands(db, events, locks, user_id=user_id)
