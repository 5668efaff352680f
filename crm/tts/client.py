from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from crm.common.error_envelope import CrmError
from crm.config import runtime_config

logger = logging.getLogger(__name__)

ELEVEN_BASE_URL = "https://api.elevenlabs.io/v1/text-to-speech"
OUTPUT_QUERY = {"optimize_streaming_latency": "2", "output_format": "mp3_44100_128"}


class MissingElevenKey(CrmError):
    status_code = 500
    error_code = "tts.missing_api_key"
    resource_kind = "tts"

    def __init__(self) -> None:
        super().__init__("Missing ELEVEN_API_KEY")


class ElevenLabsUpstreamError(CrmError):
    status_code = 502
    error_code = "tts.upstream_error"
    resource_kind = "tts"

    def __init__(self, upstream_status: int, upstream_status_text: str, details: str) -> None:
        self.upstream_status = upstream_status
        super().__init__(
            "ElevenLabs error",
            details={
                "upstreamStatus": upstream_status,
                "upstreamStatusText": upstream_status_text,
                "details": details,
            },
        )


class ElevenLabsClient:
    def __init__(self, api_key: Optional[str] = None, client: Optional[httpx.Client] = None, timeout: float = 30.0) -> None:
        self._api_key = api_key
        self._client = client
        self._timeout = timeout

    def synthesize(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
        voice_settings: Optional[Dict[str, Any]] = None,
    ) -> bytes:
        api_key = self._api_key or runtime_config.get_eleven_api_key()
        if not api_key:
            raise MissingElevenKey()
        voice = voice_id or runtime_config.get_eleven_voice_id()
        url = f"{ELEVEN_BASE_URL}/{quote(voice, safe='')}"
        headers = {"xi-api-key": api_key, "Content-Type": "application/json", "Accept": "audio/mpeg"}
        body: Dict[str, Any] = {"text": text, "model_id": model_id or runtime_config.get_eleven_model()}
        if voice_settings is not None:
            body["voice_settings"] = voice_settings

        if self._client is not None:
            resp = self._client.post(url, params=OUTPUT_QUERY, headers=headers, json=body)
        else:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.post(url, params=OUTPUT_QUERY, headers=headers, json=body)
        if resp.is_error:
            logger.warning("ElevenLabs returned %s for voice %s", resp.status_code, voice)
            raise ElevenLabsUpstreamError(resp.status_code, resp.reason_phrase, resp.text)
        return resp.content
