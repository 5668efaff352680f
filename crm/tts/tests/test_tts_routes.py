import json

import httpx
from fastapi.testclient import TestClient

from crm.server import create_app
from crm.tts.client import ElevenLabsClient
from crm.tts.routes import set_tts_client


def _install(handler, api_key="eleven-key"):
    set_tts_client(ElevenLabsClient(api_key=api_key, client=httpx.Client(transport=httpx.MockTransport(handler))))
    return TestClient(create_app())


def test_eleven_streams_audio():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["key"] = request.headers["xi-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, content=b"ID3-audio", headers={"Content-Type": "audio/mpeg"})

    client = _install(handler)
    resp = client.post(
        "/tts/eleven",
        json={"text": "Hello", "voiceId": "voice-1", "modelId": "m1", "voice_settings": {"stability": 0.4}},
    )

    assert resp.status_code == 200
    assert resp.content == b"ID3-audio"
    assert resp.headers["content-type"] == "audio/mpeg"
    assert resp.headers["cache-control"] == "no-store"
    assert seen["path"] == "/v1/text-to-speech/voice-1"
    assert seen["params"] == {"optimize_streaming_latency": "2", "output_format": "mp3_44100_128"}
    assert seen["key"] == "eleven-key"
    assert seen["body"] == {"text": "Hello", "model_id": "m1", "voice_settings": {"stability": 0.4}}


def test_eleven_blank_text_is_400():
    def handler(request):
        raise AssertionError("no upstream call expected")

    client = _install(handler)
    resp = client.post("/tts/eleven", json={"text": "   "})
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Missing text"


def test_eleven_upstream_error_is_502():
    client = _install(lambda request: httpx.Response(401, text='{"detail":"invalid key"}'))
    resp = client.post("/tts/eleven", json={"text": "Hello"})

    assert resp.status_code == 502
    error = resp.json()["error"]
    assert error["message"] == "ElevenLabs error"
    assert error["details"]["upstreamStatus"] == 401
    assert error["details"]["upstreamStatusText"] == "Unauthorized"


def test_eleven_without_key_is_500(monkeypatch):
    monkeypatch.delenv("ELEVEN_API_KEY", raising=False)

    def handler(request):
        raise AssertionError("no upstream call expected")

    client = _install(handler, api_key=None)
    resp = client.post("/tts/eleven", json={"text": "Hello"})
    assert resp.status_code == 500
    assert resp.json()["error"]["message"] == "Missing ELEVEN_API_KEY"
