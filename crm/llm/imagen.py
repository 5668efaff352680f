"""Vertex Imagen image generation, returned as ``data:`` URLs."""
from __future__ import annotations

import base64
import logging
from typing import Any, Optional, Protocol

from crm.config import runtime_config

logger = logging.getLogger(__name__)

# Imagen is only served from this region.
IMAGE_LOCATION = "us-central1"


class ImageGenerator(Protocol):
    def generate_image(self, prompt: str) -> str: ...


def to_data_url(image_bytes: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"


class ImagenImageGenerator:
    def __init__(self, model: Optional[Any] = None, project: Optional[str] = None, model_name: Optional[str] = None) -> None:
        self._model = model
        self._project = project
        self._model_name = model_name

    @property
    def project(self) -> Optional[str]:
        """Configured Vertex project, or ``None`` when VERTEX_PROJECT is unset."""
        if self._project is None:
            try:
                self._project = runtime_config.get_vertex_project()
            except RuntimeError:
                return None
        return self._project

    def _get_model(self) -> Any:
        if self._model is None:
            import vertexai
            from vertexai.preview.vision_models import ImageGenerationModel

            project = self._project or runtime_config.get_vertex_project()
            self._project = project
            vertexai.init(project=project, location=IMAGE_LOCATION)
            self._model = ImageGenerationModel.from_pretrained(self._model_name or runtime_config.get_vertex_image_model())
        return self._model

    def generate_image(self, prompt: str) -> str:
        try:
            result = self._get_model().generate_images(prompt=prompt, number_of_images=1)
            images = list(getattr(result, "images", None) or [])
            image_bytes = getattr(images[0], "_image_bytes", None) if images else None
            if not image_bytes:
                raise RuntimeError("No image generated")
            return to_data_url(image_bytes)
        except Exception:
            logger.error("Imagen generation failed (project=%s location=%s)", self.project, IMAGE_LOCATION)
            raise
