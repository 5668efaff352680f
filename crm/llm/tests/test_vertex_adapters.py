import base64
import logging
from types import SimpleNamespace

import pytest

from crm.llm.gemini import response_text
from crm.llm.imagen import ImagenImageGenerator, to_data_url


def _response(*texts):
    parts = [SimpleNamespace(text=t) for t in texts]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


def test_response_text_joins_parts_of_first_candidate():
    assert response_text(_response("Hello ", "there ")) == "Hello there"


def test_response_text_without_candidates_is_empty():
    assert response_text(SimpleNamespace(candidates=[])) == ""
    assert response_text(SimpleNamespace()) == ""


def test_to_data_url():
    assert to_data_url(b"png-bytes") == "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()


class _ImagenStub:
    def __init__(self, images):
        self.images = images
        self.calls = []

    def generate_images(self, prompt, number_of_images):
        self.calls.append((prompt, number_of_images))
        return SimpleNamespace(images=self.images)


def test_imagen_returns_first_image_as_data_url():
    model = _ImagenStub([SimpleNamespace(_image_bytes=b"\x89PNG")])
    url = ImagenImageGenerator(model=model).generate_image("a red fox")
    assert url == to_data_url(b"\x89PNG")
    assert model.calls == [("a red fox", 1)]


def test_imagen_without_images_raises():
    with pytest.raises(RuntimeError, match="No image generated"):
        ImagenImageGenerator(model=_ImagenStub([])).generate_image("x")


def test_imagen_failure_logs_configured_project(monkeypatch, caplog):
    monkeypatch.setenv("VERTEX_PROJECT", "crm-prod")
    caplog.set_level(logging.ERROR, logger="crm.llm.imagen")
    with pytest.raises(RuntimeError):
        ImagenImageGenerator(model=_ImagenStub([])).generate_image("x")

    assert any("project=crm-prod" in r.getMessage() for r in caplog.records)
