from __future__ import annotations

from typing import Any, Mapping, Optional

from crm.directives.models import (
    ActionDirective,
    CreateDocumentAction,
    CreateModelAction,
    ImageDirective,
    UnrecognizedAction,
    UnrecognizedVisual,
    VideoDirective,
    VisualDirective,
    YouTubeDirective,
)
from crm.directives.parser import parse_youtube_id

_VISUAL_TYPE_ALIASES = {"yt": "youtube"}


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _kind(obj: Mapping[str, Any]) -> str:
    raw = obj.get("type")
    return str(raw).strip().lower() if raw is not None else ""


def normalize_visual(obj: Mapping[str, Any]) -> VisualDirective:
    kind = _kind(obj)
    kind = _VISUAL_TYPE_ALIASES.get(kind, kind)
    caption = _text(obj.get("caption"))

    if kind == "image":
        prompt = _text(obj.get("prompt"))
        if prompt:
            return ImageDirective(prompt=prompt, caption=caption or "")
        return UnrecognizedVisual(raw=dict(obj), reason="image directive requires a prompt")

    if kind == "video":
        url = _text(obj.get("url"))
        if url and url.startswith("http"):
            return VideoDirective(url=url, caption=caption or "")
        return UnrecognizedVisual(raw=dict(obj), reason="video directive requires an http(s) url")

    if kind == "youtube":
        video_id = _text(obj.get("id")) or parse_youtube_id(_text(obj.get("url")) or "")
        if video_id:
            return YouTubeDirective(id=video_id, caption=caption)
        search = _text(obj.get("search")) or _text(obj.get("query")) or _text(obj.get("q"))
        if search:
            return YouTubeDirective(search=search, caption=caption)
        return UnrecognizedVisual(raw=dict(obj), reason="youtube directive requires an id, url or search")

    return UnrecognizedVisual(raw=dict(obj), reason=f"unsupported visual type: {kind or '<missing>'}")


def normalize_action(obj: Mapping[str, Any]) -> ActionDirective:
    kind = _kind(obj)

    if kind == "create_model":
        name = _text(obj.get("name"))
        collection = _text(obj.get("collection"))
        fields = obj.get("fields")
        if name and collection and isinstance(fields, list):
            return CreateModelAction(name=name, collection=collection, field_defs=fields)
        return UnrecognizedAction(
            intended=kind, raw=dict(obj), reason="name, collection and fields are required"
        )

    if kind == "create_document":
        model = _text(obj.get("model"))
        data = obj.get("data")
        if model and isinstance(data, dict):
            return CreateDocumentAction(model=model, data=data)
        return UnrecognizedAction(intended=kind, raw=dict(obj), reason="model and data are required")

    return UnrecognizedAction(raw=dict(obj), reason=f"unsupported action type: {kind or '<missing>'}")
