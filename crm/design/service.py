from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from crm.common.clock import now_iso
from crm.common.error_envelope import CrmError
from crm.common.identity import RequestContext
from crm.design.models import ModelDef, ModelDefInput
from crm.design.repository import InMemoryModelDefRepository, ModelAlreadyActive, ModelDefRepository
from crm.event_store.service import EventStoreService, get_event_store_service

logger = logging.getLogger(__name__)

MODEL_DEF_EVENT_MODEL = "ModelDef"


class InvalidModelDef(CrmError):
    status_code = 422
    error_code = "model_def.invalid"
    resource_kind = "model_def"

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        super().__init__("Invalid model definition", details={"errors": errors})


class ModelNotFound(CrmError):
    status_code = 404
    error_code = "model_def.not_found"
    resource_kind = "model_def"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Model not found", details={"model": name})


class DuplicateModel(CrmError):
    status_code = 409
    error_code = "model_def.duplicate"
    resource_kind = "model_def"

    def __init__(self, name: str) -> None:
        super().__init__(f"An active model named {name} already exists", details={"model": name})


def validate_model_payload(payload: Mapping[str, Any]) -> ModelDefInput:
    try:
        return ModelDefInput.model_validate(dict(payload))
    except ValidationError as exc:
        raise InvalidModelDef(json.loads(exc.json(include_url=False))) from exc


class ModelDesignService:
    def __init__(
        self,
        repo: Optional[ModelDefRepository] = None,
        events: Optional[EventStoreService] = None,
    ) -> None:
        self.repo = repo or InMemoryModelDefRepository()
        self._events = events

    @property
    def events(self) -> EventStoreService:
        return self._events or get_event_store_service()

    def create_model(self, ctx: RequestContext, payload: Mapping[str, Any]) -> ModelDef:
        """Validate, stamp and persist a ModelDef, then append its audit event."""
        if "tenantId" in payload:
            raise CrmError("Do not provide tenantId")
        validated = validate_model_payload(payload)
        now = now_iso()
        doc = validated.model_dump(by_alias=True, exclude_none=True)
        doc.update(
            {
                "tenantId": ctx.tenant_id,
                "createdAt": now,
                "updatedAt": now,
                "createdBy": ctx.actor_id,
                "updatedBy": ctx.actor_id,
                "version": validated.version if validated.version is not None else 1,
                "active": validated.active if validated.active is not None else True,
            }
        )
        model_def = ModelDef.model_validate(doc)
        try:
            self.repo.create(model_def)
        except ModelAlreadyActive as exc:
            raise DuplicateModel(exc.name) from exc
        self.events.record_created(ctx, MODEL_DEF_EVENT_MODEL, model_def.to_document())
        logger.info("Created model %s -> %s for tenant=%s", model_def.name, model_def.collection, ctx.tenant_id)
        return model_def

    def find_active(self, ctx: RequestContext, name: str) -> Optional[ModelDef]:
        return self.repo.get_active(ctx.tenant_id, name)

    def get_model(self, ctx: RequestContext, name: str) -> ModelDef:
        model_def = self.find_active(ctx, name)
        if not model_def:
            raise ModelNotFound(name)
        return model_def

    def list_models(self, ctx: RequestContext, active_only: bool = False) -> List[ModelDef]:
        return self.repo.list(ctx.tenant_id, active_only=active_only)


_default_service: Optional[ModelDesignService] = None


def get_model_design_service() -> ModelDesignService:
    global _default_service
    if _default_service is None:
        _default_service = ModelDesignService()
    return _default_service


def set_model_design_service(service: ModelDesignService) -> None:
    global _default_service
    _default_service = service
