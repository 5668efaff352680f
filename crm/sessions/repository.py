from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

from pymongo import ReturnDocument
from pymongo.database import Database

from crm.sessions.models import Message, Session, SessionKey


class SessionRepository(Protocol):
    def ensure(self, key: SessionKey, seed: Message) -> None: ...
    def append_and_fetch(self, key: SessionKey, message: Message) -> Optional[Session]: ...
    def get(self, key: SessionKey) -> Optional[Session]: ...


class InMemorySessionRepository:
    def __init__(self) -> None:
        self._items: Dict[SessionKey, Session] = {}
        self._lock = threading.Lock()

    def ensure(self, key: SessionKey, seed: Message) -> None:
        with self._lock:
            if key in self._items:
                return
            self._items[key] = Session(
                tenant_id=key.tenant_id,
                user_id=key.user_id,
                session_id=key.session_id,
                messages=[seed],
                created_at=seed.ts,
                updated_at=seed.ts,
            )

    def append_and_fetch(self, key: SessionKey, message: Message) -> Optional[Session]:
        with self._lock:
            session = self._items.get(key)
            if session is None:
                return None
            session.messages.append(message)
            session.updated_at = message.ts
            return session.model_copy(deep=True)

    def get(self, key: SessionKey) -> Optional[Session]:
        with self._lock:
            session = self._items.get(key)
            return session.model_copy(deep=True) if session else None


class MongoSessionRepository:
    """One document per (tenantId, userId, sessionId) in ``ai_sessions``."""

    def __init__(self, db: Database, collection: str = "ai_sessions") -> None:
        self._col = db[collection]

    def ensure(self, key: SessionKey, seed: Message) -> None:
        self._col.update_one(
            key.to_query(),
            {
                "$setOnInsert": {
                    **key.to_query(),
                    "messages": [seed.to_document()],
                    "createdAt": seed.ts,
                    "updatedAt": seed.ts,
                }
            },
            upsert=True,
        )

    def append_and_fetch(self, key: SessionKey, message: Message) -> Optional[Session]:
        doc = self._col.find_one_and_update(
            key.to_query(),
            {"$push": {"messages": message.to_document()}, "$set": {"updatedAt": message.ts}},
            return_document=ReturnDocument.AFTER,
            upsert=False,
        )
        if doc is None:
            doc = self._col.find_one(key.to_query())
        return Session.model_validate(doc) if doc else None

    def get(self, key: SessionKey) -> Optional[Session]:
        doc = self._col.find_one(key.to_query())
        return Session.model_validate(doc) if doc else None
