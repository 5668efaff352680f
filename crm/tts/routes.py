from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Response
from pydantic import BaseModel, ConfigDict, Field

from crm.common.error_envelope import error_response
from crm.tts.client import ElevenLabsClient


class VoiceSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    stability: Optional[float] = None
    similarity_boost: Optional[float] = None
    style: Optional[float] = None
    use_speaker_boost: Optional[bool] = None


class ElevenRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    voice_id: Optional[str] = Field(default=None, alias="voiceId")
    model_id: Optional[str] = Field(default=None, alias="modelId")
    voice_settings: Optional[VoiceSettings] = None


router = APIRouter(prefix="/tts", tags=["tts"])

_client: Optional[ElevenLabsClient] = None


def get_tts_client() -> ElevenLabsClient:
    global _client
    if _client is None:
        _client = ElevenLabsClient()
    return _client


def set_tts_client(client: ElevenLabsClient) -> None:
    global _client
    _client = client


@router.post("/eleven")
def eleven(payload: ElevenRequest):
    if not payload.text or not payload.text.strip():
        error_response(code="tts.missing_text", message="Missing text", status_code=400, resource_kind="tts")
    settings: Optional[Dict[str, Any]] = (
        payload.voice_settings.model_dump(exclude_none=True) if payload.voice_settings else None
    )
    audio = get_tts_client().synthesize(
        payload.text,
        voice_id=payload.voice_id,
        model_id=payload.model_id,
        voice_settings=settings,
    )
    return Response(content=audio, media_type="audio/mpeg", headers={"Cache-Control": "no-store"})
