from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from crm.common.clock import now_iso
from crm.common.error_envelope import CrmError
from crm.common.identity import RequestContext
from crm.design.service import ModelDesignService, ModelNotFound, get_model_design_service
from crm.event_store.service import EventStoreService, get_event_store_service
from crm.records.repository import InMemoryRecordRepository, RecordRepository

logger = logging.getLogger(__name__)

QUERY_LIMIT = 100


class MissingRequiredFields(CrmError):
    status_code = 422
    error_code = "record.missing_required_fields"
    resource_kind = "record"

    def __init__(self, model: str, fields: List[str]) -> None:
        self.fields = fields
        super().__init__("Missing required fields", details={"model": model, "fields": fields})


class RecordService:
    def __init__(
        self,
        repo: Optional[RecordRepository] = None,
        design: Optional[ModelDesignService] = None,
        events: Optional[EventStoreService] = None,
    ) -> None:
        self.repo = repo or InMemoryRecordRepository()
        self._design = design
        self._events = events

    @property
    def design(self) -> ModelDesignService:
        return self._design or get_model_design_service()

    @property
    def events(self) -> EventStoreService:
        return self._events or get_event_store_service()

    def create_record(
        self,
        ctx: RequestContext,
        model_name: str,
        data: Mapping[str, Any],
        validate_required: bool = True,
    ) -> Dict[str, Any]:
        """Insert a record into the active model's collection and append its audit event.

        No transaction spans the ModelDef lookup and the insert.
        """
        model_def = self.design.get_model(ctx, model_name)
        if validate_required:
            missing = model_def.missing_fields(data)
            if missing:
                raise MissingRequiredFields(model_name, missing)
        now = now_iso()
        doc = {
            **data,
            "tenantId": ctx.tenant_id,
            "createdAt": now,
            "updatedAt": now,
            "createdBy": ctx.actor_id,
            "updatedBy": ctx.actor_id,
        }
        stored = self.repo.insert(model_def.collection, doc)
        self.events.record_created(ctx, model_name, stored)
        logger.info("Created %s record in %s for tenant=%s", model_name, model_def.collection, ctx.tenant_id)
        return stored

    def query_records(
        self, ctx: RequestContext, model_name: str, filter: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        model_def = self.design.find_active(ctx, model_name)
        if not model_def:
            raise ModelNotFound(model_name)
        return self.repo.find(model_def.collection, ctx.tenant_id, filter or {}, limit=QUERY_LIMIT)


_default_service: Optional[RecordService] = None


def get_record_service() -> RecordService:
    global _default_service
    if _default_service is None:
        _default_service = RecordService()
    return _default_service


def set_record_service(service: RecordService) -> None:
    global _default_service
    _default_service = service
