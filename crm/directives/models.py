"""Tagged directive variants parsed out of generated replies.

Shapes that fail normalization become an explicit ``Unrecognized*`` variant
instead of ``None`` so callers can match exhaustively.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ImageDirective(BaseModel):
    type: Literal["image"] = "image"
    prompt: str
    caption: str = ""


class VideoDirective(BaseModel):
    type: Literal["video"] = "video"
    url: str
    caption: str = ""


class YouTubeDirective(BaseModel):
    type: Literal["youtube"] = "youtube"
    id: Optional[str] = None
    search: Optional[str] = None
    caption: Optional[str] = None


class UnrecognizedVisual(BaseModel):
    type: Literal["unrecognized"] = "unrecognized"
    raw: Dict[str, Any] = Field(default_factory=dict)
    reason: str


VisualDirective = Union[ImageDirective, VideoDirective, YouTubeDirective, UnrecognizedVisual]


class CreateModelAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["create_model"] = "create_model"
    name: str
    collection: str
    field_defs: List[Any] = Field(alias="fields")

    def to_model_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "collection": self.collection, "fields": list(self.field_defs)}


class CreateDocumentAction(BaseModel):
    type: Literal["create_document"] = "create_document"
    model: str
    data: Dict[str, Any]


class UnrecognizedAction(BaseModel):
    type: Literal["unrecognized"] = "unrecognized"
    intended: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)
    reason: str


ActionDirective = Union[CreateModelAction, CreateDocumentAction, UnrecognizedAction]
