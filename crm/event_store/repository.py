from __future__ import annotations

import threading
from typing import List, Optional, Protocol

from pymongo import DESCENDING
from pymongo.database import Database

from crm.event_store.models import Event


class EventRepository(Protocol):
    def append(self, event: Event) -> Event: ...
    def list(self, tenant_id: str, event_type: Optional[str] = None, limit: int = 100) -> List[Event]: ...


class InMemoryEventRepository:
    def __init__(self) -> None:
        self._items: List[Event] = []
        self._lock = threading.Lock()

    def append(self, event: Event) -> Event:
        with self._lock:
            self._items.append(event)
        return event

    def list(self, tenant_id: str, event_type: Optional[str] = None, limit: int = 100) -> List[Event]:
        with self._lock:
            matches = [
                e for e in self._items if e.tenant_id == tenant_id and (event_type is None or e.type == event_type)
            ]
        return list(reversed(matches))[:limit]


class MongoEventRepository:
    """Append-only audit trail in ``event_store``."""

    def __init__(self, db: Database, collection: str = "event_store") -> None:
        self._col = db[collection]

    def append(self, event: Event) -> Event:
        self._col.insert_one(event.to_document())
        return event

    def list(self, tenant_id: str, event_type: Optional[str] = None, limit: int = 100) -> List[Event]:
        query = {"tenantId": tenant_id}
        if event_type:
            query["type"] = event_type
        cursor = self._col.find(query).sort("ts", DESCENDING).limit(limit)
        return [Event.model_validate(doc) for doc in cursor]
