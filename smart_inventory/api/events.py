from fastapi import APIRouter, Depends

from smart_inventory.api.deps import get_events
from smart_inventory.services.event_service import EventEmitter

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("")
def recent_events(limit: int = 50, events: EventEmitter = Depends(get_events)):
    """Completion events in the order they were emitted, oldest first."""
    return events.recent(limit)
