import logging
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Callable

import httpx

logger = logging.getLogger(__name__)


class CompletionEvent(str, PyEnum):
    STORAGE_CREATED = "storageCreated"
    STORAGE_UPDATED = "storageUpdated"
    STORAGE_DELETED = "storageDeleted"
    ITEM_ADDED = "itemAdded"
    ITEM_UPDATED = "itemUpdated"
    ITEM_DELETED = "itemDeleted"
    INVENTORY_COUNT_COMPLETED = "inventoryCountCompleted"
    SETTINGS_CHANGED = "settingsChanged"


Subscriber = Callable[[dict], None]


class EventEmitter:
    """Ordered, fire-and-forget stream of completion events.

    Every emitted event is kept in a bounded in-memory log and handed to each
    subscriber. A failing subscriber is logged and skipped; emit never raises.
    """

    def __init__(self, maxlen: int = 200):
        self._log: deque[dict] = deque(maxlen=maxlen)
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()
        self._seq = 0

    def subscribe(self, handler: Subscriber) -> None:
        self._subscribers.append(handler)

    def emit(self, event: CompletionEvent, **data) -> dict:
        with self._lock:
            self._seq += 1
            payload = {
                "seq": self._seq,
                "event": event.value,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "data": data,
            }
            self._log.append(payload)

        for handler in list(self._subscribers):
            try:
                handler(payload)
            except Exception:
                logger.exception("Event subscriber %r failed for %s", handler, event.value)
        return payload

    def recent(self, limit: int | None = None) -> list[dict]:
        with self._lock:
            events = list(self._log)
        return events[-limit:] if limit else events


class WebhookSubscriber:
    """Posts each event to the configured callback URLs without blocking the caller."""

    def __init__(self, urls: list[str], timeout: float = 10.0, max_workers: int = 2, transport=None):
        self.urls = urls
        self.timeout = timeout
        self.transport = transport
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="event-webhook")

    @classmethod
    def from_setting(cls, value: str) -> "WebhookSubscriber | None":
        urls = [u.strip() for u in value.split(",") if u.strip()]
        return cls(urls) if urls else None

    def __call__(self, payload: dict) -> None:
        self._pool.submit(self.deliver, payload)

    def deliver(self, payload: dict) -> list[dict]:
        results = []
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            for url in self.urls:
                try:
                    resp = client.post(url, json=payload)
                    results.append({"url": url, "status": resp.status_code, "success": resp.is_success})
                except httpx.HTTPError as e:
                    logger.error("Event webhook failed for %s: %s", url, e)
                    results.append({"url": url, "status": 0, "success": False, "error": str(e)})
        return results

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False)


class KeyedLock:
    """One lock per key (item id), created on first use."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def discard(self, key: str) -> None:
        with self._guard:
            self._locks.pop(key, None)

    def __contains__(self, key: str) -> bool:
        with self._guard:
            return key in self._locks
