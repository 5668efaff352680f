from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from crm.common.error_envelope import error_response
from crm.common.identity import RequestContext, get_request_context
from crm.operator.service import get_turn_processor
from crm.sessions.service import SessionNotFound


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")


router = APIRouter(prefix="/ai", tags=["ai"])


@router.get("/ping")
def ping():
    return {"ok": True, "text": get_turn_processor().ping()}


@router.post("/chat")
def chat(
    payload: ChatRequest,
    context: RequestContext = Depends(get_request_context),
):
    result = get_turn_processor().process_turn(context, payload.text, payload.session_id)
    return result.to_response()


@router.get("/sessions/{session_id}")
def get_session(
    session_id: str,
    context: RequestContext = Depends(get_request_context),
):
    try:
        session = get_turn_processor().get_session(context, session_id)
    except SessionNotFound:
        error_response(
            code="ai_session.not_found",
            message="Session not found",
            status_code=404,
            resource_kind="ai_session",
            details={"session_id": session_id},
        )
    return session.to_document()
