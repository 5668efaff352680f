from __future__ import annotations

import threading
from typing import List, Optional, Protocol

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from crm.design.models import ModelDef
from crm.store.mongo import to_jsonable


class ModelAlreadyActive(Exception):
    def __init__(self, tenant_id: str, name: str) -> None:
        self.tenant_id = tenant_id
        self.name = name
        super().__init__(f"An active model named {name} already exists")


class ModelDefRepository(Protocol):
    def create(self, model_def: ModelDef) -> ModelDef: ...
    def get_active(self, tenant_id: str, name: str) -> Optional[ModelDef]: ...
    def list(self, tenant_id: str, active_only: bool = False) -> List[ModelDef]: ...


class InMemoryModelDefRepository:
    def __init__(self) -> None:
        self._items: List[ModelDef] = []
        self._lock = threading.Lock()

    def create(self, model_def: ModelDef) -> ModelDef:
        with self._lock:
            if model_def.active and self._find_active(model_def.tenant_id, model_def.name):
                raise ModelAlreadyActive(model_def.tenant_id, model_def.name)
            self._items.append(model_def)
        return model_def

    def _find_active(self, tenant_id: str, name: str) -> Optional[ModelDef]:
        for item in self._items:
            if item.tenant_id == tenant_id and item.name == name and item.active:
                return item
        return None

    def get_active(self, tenant_id: str, name: str) -> Optional[ModelDef]:
        with self._lock:
            found = self._find_active(tenant_id, name)
            return found.model_copy(deep=True) if found else None

    def list(self, tenant_id: str, active_only: bool = False) -> List[ModelDef]:
        with self._lock:
            return [
                m.model_copy(deep=True)
                for m in self._items
                if m.tenant_id == tenant_id and (m.active or not active_only)
            ]


class MongoModelDefRepository:
    """ModelDefs live in ``models``; one active definition per (tenant, name)."""

    def __init__(self, db: Database, collection: str = "models") -> None:
        self._col = db[collection]

    def create(self, model_def: ModelDef) -> ModelDef:
        try:
            self._col.insert_one(model_def.to_document())
        except DuplicateKeyError as exc:
            raise ModelAlreadyActive(model_def.tenant_id, model_def.name) from exc
        return model_def

    def get_active(self, tenant_id: str, name: str) -> Optional[ModelDef]:
        doc = self._col.find_one({"tenantId": tenant_id, "name": name, "active": True})
        return ModelDef.model_validate(to_jsonable(doc)) if doc else None

    def list(self, tenant_id: str, active_only: bool = False) -> List[ModelDef]:
        query = {"tenantId": tenant_id}
        if active_only:
            query["active"] = True
        return [ModelDef.model_validate(to_jsonable(doc)) for doc in self._col.find(query)]
