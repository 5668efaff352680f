"""Runtime bootstrap: everything a client needs to render a tenant in one call."""
from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, Optional

from crm.common.identity import RequestContext
from crm.design.service import ModelDesignService, get_model_design_service
from crm.runtime.repository import InMemoryMetaRepository, MetaRepository


def version_hash(payload: Any) -> str:
    encoded = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)
    return hashlib.sha1(encoded.encode("utf-8")).hexdigest()


class RuntimeBootstrapService:
    def __init__(self, repo: Optional[MetaRepository] = None, design: Optional[ModelDesignService] = None) -> None:
        self.repo = repo or InMemoryMetaRepository()
        self._design = design

    @property
    def design(self) -> ModelDesignService:
        return self._design or get_model_design_service()

    def bootstrap(self, ctx: RequestContext) -> Dict[str, Any]:
        models = [m.to_document() for m in self.design.list_models(ctx, active_only=True)]
        forms = self.repo.list_active("forms", ctx.tenant_id)
        actions = self.repo.list_active("actions", ctx.tenant_id)
        components = self.repo.list_active("components", ctx.tenant_id)
        return {
            "versionHash": version_hash([models, forms, actions, components]),
            "models": models,
            "forms": forms,
            "actions": actions,
            "components": components,
        }


_default_service: Optional[RuntimeBootstrapService] = None


def get_runtime_service() -> RuntimeBootstrapService:
    global _default_service
    if _default_service is None:
        _default_service = RuntimeBootstrapService()
    return _default_service


def set_runtime_service(service: RuntimeBootstrapService) -> None:
    global _default_service
    _default_service = service
