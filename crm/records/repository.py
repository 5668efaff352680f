from __future__ import annotations

import threading
from typing import Any, Dict, List, Mapping, Protocol

from pymongo.database import Database

from crm.store.mongo import to_jsonable


class RecordRepository(Protocol):
    def insert(self, collection: str, doc: Mapping[str, Any]) -> Dict[str, Any]: ...
    def find(
        self, collection: str, tenant_id: str, filter: Mapping[str, Any], limit: int = 100
    ) -> List[Dict[str, Any]]: ...


class InMemoryRecordRepository:
    """Dict-of-lists store; ``find`` supports top-level equality filters only."""

    def __init__(self) -> None:
        self._collections: Dict[str, List[Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def insert(self, collection: str, doc: Mapping[str, Any]) -> Dict[str, Any]:
        stored = dict(doc)
        with self._lock:
            self._collections.setdefault(collection, []).append(stored)
        return dict(stored)

    def find(
        self, collection: str, tenant_id: str, filter: Mapping[str, Any], limit: int = 100
    ) -> List[Dict[str, Any]]:
        query = {**filter, "tenantId": tenant_id}
        with self._lock:
            rows = self._collections.get(collection, [])
            matches = [dict(r) for r in rows if all(r.get(k) == v for k, v in query.items())]
        return matches[:limit]

    def collection_names(self) -> List[str]:
        return sorted(self._collections)


class MongoRecordRepository:
    """Records live in the collection named by their ModelDef."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def insert(self, collection: str, doc: Mapping[str, Any]) -> Dict[str, Any]:
        stored = dict(doc)
        self._db[collection].insert_one(stored)
        return to_jsonable(stored)

    def find(
        self, collection: str, tenant_id: str, filter: Mapping[str, Any], limit: int = 100
    ) -> List[Dict[str, Any]]:
        query = {**filter, "tenantId": tenant_id}
        return [to_jsonable(doc) for doc in self._db[collection].find(query).limit(limit)]
