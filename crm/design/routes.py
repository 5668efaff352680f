from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from crm.common.identity import RequestContext, get_request_context
from crm.design.service import get_model_design_service

router = APIRouter(tags=["design"])


@router.post("/design/models", status_code=201)
def create_model(
    payload: Dict[str, Any] = Body(...),
    context: RequestContext = Depends(get_request_context),
):
    get_model_design_service().create_model(context, payload)
    return {"ok": True}


@router.get("/design/models/{name}")
def get_model(
    name: str,
    context: RequestContext = Depends(get_request_context),
):
    return get_model_design_service().get_model(context, name).to_document()


@router.get("/__meta/models")
def list_model_meta(context: RequestContext = Depends(get_request_context)):
    return [m.to_summary() for m in get_model_design_service().list_models(context)]
