from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel


class ImagePayload(BaseModel):
    type: Literal["image"] = "image"
    url: str
    caption: str = ""


class VideoPayload(BaseModel):
    type: Literal["video"] = "video"
    url: str
    caption: str = ""


class YouTubePayload(BaseModel):
    type: Literal["youtube"] = "youtube"
    id: str
    caption: str = ""


VisualPayload = Union[ImagePayload, VideoPayload, YouTubePayload]
