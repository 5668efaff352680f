from __future__ import annotations

from typing import Any, Dict, List, Mapping, Protocol

from pymongo.database import Database

from crm.store.mongo import to_jsonable

META_KINDS = ("forms", "actions", "components")


class MetaRepository(Protocol):
    def list_active(self, kind: str, tenant_id: str) -> List[Dict[str, Any]]: ...


class InMemoryMetaRepository:
    def __init__(self) -> None:
        self._items: Dict[str, List[Dict[str, Any]]] = {kind: [] for kind in META_KINDS}

    def add(self, kind: str, doc: Mapping[str, Any]) -> None:
        self._items.setdefault(kind, []).append(dict(doc))

    def list_active(self, kind: str, tenant_id: str) -> List[Dict[str, Any]]:
        return [
            dict(d) for d in self._items.get(kind, []) if d.get("tenantId") == tenant_id and d.get("active") is True
        ]


class MongoMetaRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    def list_active(self, kind: str, tenant_id: str) -> List[Dict[str, Any]]:
        return [to_jsonable(doc) for doc in self._db[kind].find({"tenantId": tenant_id, "active": True})]
