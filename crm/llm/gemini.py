"""Vertex Gemini text generation.

Uses google-cloud-aiplatform (``vertexai``); tests inject a fake ``TextGenerator``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from crm.common.error_envelope import CrmError
from crm.config import runtime_config

logger = logging.getLogger(__name__)

GENERATION_CONFIG = {"max_output_tokens": 1024, "temperature": 0.6, "top_p": 0.9}


class GenerationError(CrmError):
    status_code = 502
    error_code = "ai.generation_failed"
    resource_kind = "llm"


@dataclass(frozen=True)
class ContentTurn:
    role: str  # "user" | "model"
    text: str


class TextGenerator(Protocol):
    def generate(self, contents: Sequence[ContentTurn]) -> str: ...


def response_text(response: Any) -> str:
    """Join the text parts of the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    return "".join(getattr(p, "text", "") or "" for p in parts).strip()


class GeminiTextGenerator:
    def __init__(
        self,
        model: Optional[Any] = None,
        project: Optional[str] = None,
        location: Optional[str] = None,
        model_name: Optional[str] = None,
    ) -> None:
        self._model = model
        self._project = project
        self._location = location
        self._model_name = model_name

    def _get_model(self) -> Any:
        if self._model is None:
            import vertexai
            from vertexai.generative_models import GenerationConfig, GenerativeModel

            project = self._project or runtime_config.get_vertex_project()
            location = self._location or runtime_config.get_vertex_location()
            model_name = self._model_name or runtime_config.get_vertex_model()
            vertexai.init(project=project, location=location)
            self._model = GenerativeModel(model_name, generation_config=GenerationConfig(**GENERATION_CONFIG))
            logger.info("Gemini model %s ready (project=%s location=%s)", model_name, project, location)
        return self._model

    def generate(self, contents: Sequence[ContentTurn]) -> str:
        from vertexai.generative_models import Content, Part

        payload = [Content(role=turn.role, parts=[Part.from_text(turn.text)]) for turn in contents]
        response = self._get_model().generate_content(payload)
        return response_text(response)
