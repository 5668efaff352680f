from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from crm.common.identity import RequestContext, get_request_context
from crm.records.service import get_record_service

router = APIRouter(prefix="/data", tags=["data"])


class RecordQuery(BaseModel):
    filter: Dict[str, Any] = Field(default_factory=dict)


@router.post("/{model}/create", status_code=201)
def create_record(
    model: str,
    payload: Dict[str, Any] = Body(...),
    context: RequestContext = Depends(get_request_context),
):
    get_record_service().create_record(context, model, payload)
    return {"ok": True}


@router.post("/{model}/query")
def query_records(
    model: str,
    payload: Optional[RecordQuery] = None,
    context: RequestContext = Depends(get_request_context),
):
    rows = get_record_service().query_records(context, model, payload.filter if payload else None)
    return {"rows": rows}
