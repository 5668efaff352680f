"""Apply data-action directives from operator replies.

Every outcome is reported as an ``ActionResult`` plus a one-line annotation for
the reply text; nothing here raises to the turn processor.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel

from crm.common.identity import RequestContext
from crm.design.service import InvalidModelDef, ModelDesignService, ModelNotFound, get_model_design_service
from crm.directives.models import ActionDirective, CreateDocumentAction, CreateModelAction, UnrecognizedAction
from crm.records.service import RecordService, get_record_service

logger = logging.getLogger(__name__)

_VERBS = {"create_model": "create model", "create_document": "create record"}


class ActionResult(BaseModel):
    type: str
    ok: bool
    name: Optional[str] = None
    collection: Optional[str] = None
    model: Optional[str] = None
    error: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


@dataclass
class ActionOutcome:
    result: Optional[ActionResult] = None
    annotation: str = ""


def _describe_invalid(exc: InvalidModelDef) -> str:
    locs = []
    for error in exc.details.get("errors", []):
        loc = ".".join(str(part) for part in error.get("loc", ()))
        if loc and loc not in locs:
            locs.append(loc)
    return f"{exc.message} ({', '.join(locs)})" if locs else exc.message


def _failure(kind: str, reason: str, **extra: Any) -> ActionOutcome:
    verb = _VERBS.get(kind, kind)
    return ActionOutcome(
        result=ActionResult(type=kind, ok=False, error=reason, **extra),
        annotation=f"\n❌ Failed to {verb}: {reason}",
    )


class ActionExecutor:
    def __init__(self, design: Optional[ModelDesignService] = None, records: Optional[RecordService] = None) -> None:
        self._design = design
        self._records = records

    @property
    def design(self) -> ModelDesignService:
        return self._design or get_model_design_service()

    @property
    def records(self) -> RecordService:
        return self._records or get_record_service()

    def execute(self, ctx: RequestContext, directive: Optional[ActionDirective]) -> ActionOutcome:
        if directive is None:
            return ActionOutcome()
        if isinstance(directive, CreateModelAction):
            return self._create_model(ctx, directive)
        if isinstance(directive, CreateDocumentAction):
            return self._create_document(ctx, directive)
        if isinstance(directive, UnrecognizedAction):
            if directive.intended in _VERBS:
                logger.warning("Rejected %s action: %s", directive.intended, directive.reason)
                return _failure(directive.intended, directive.reason)
            logger.info("Ignoring unrecognized action: %s", directive.reason)
            return ActionOutcome()
        logger.warning("Unsupported action directive %r", directive)
        return ActionOutcome()

    def _create_model(self, ctx: RequestContext, action: CreateModelAction) -> ActionOutcome:
        try:
            model_def = self.design.create_model(ctx, action.to_model_payload())
        except InvalidModelDef as exc:
            logger.warning("AI create_model %s rejected for tenant=%s: %s", action.name, ctx.tenant_id, exc.details)
            return _failure("create_model", _describe_invalid(exc), name=action.name, collection=action.collection)
        except Exception as exc:
            logger.exception("AI create_model %s failed for tenant=%s", action.name, ctx.tenant_id)
            return _failure("create_model", str(exc), name=action.name, collection=action.collection)
        return ActionOutcome(
            result=ActionResult(type="create_model", ok=True, name=model_def.name, collection=model_def.collection),
            annotation=f"\n✅ Created model {model_def.name} ({model_def.collection}).",
        )

    def _create_document(self, ctx: RequestContext, action: CreateDocumentAction) -> ActionOutcome:
        try:
            self.records.create_record(ctx, action.model, action.data, validate_required=False)
        except ModelNotFound:
            logger.info("AI create_document: model %s not found for tenant=%s", action.model, ctx.tenant_id)
            return ActionOutcome(
                result=ActionResult(type="create_document", ok=False, model=action.model, error="Model not found"),
                annotation=f"\n❌ Model {action.model} not found.",
            )
        except Exception as exc:
            logger.exception("AI create_document on %s failed for tenant=%s", action.model, ctx.tenant_id)
            return _failure("create_document", str(exc), model=action.model)
        return ActionOutcome(
            result=ActionResult(type="create_document", ok=True, model=action.model),
            annotation=f"\n✅ Created {action.model} record.",
        )
