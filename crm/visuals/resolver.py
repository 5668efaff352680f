from __future__ import annotations

import logging
from typing import Optional

from crm.directives.models import (
    ImageDirective,
    UnrecognizedVisual,
    VideoDirective,
    VisualDirective,
    YouTubeDirective,
)
from crm.llm.imagen import ImageGenerator, ImagenImageGenerator
from crm.visuals.models import ImagePayload, VideoPayload, VisualPayload, YouTubePayload
from crm.visuals.youtube import VideoSearch, YouTubeSearchClient

logger = logging.getLogger(__name__)


class VisualResolver:
    """Turn a visual directive into a renderable payload; failures resolve to ``None``."""

    def __init__(self, image_generator: Optional[ImageGenerator] = None, video_search: Optional[VideoSearch] = None) -> None:
        self._images = image_generator or ImagenImageGenerator()
        self._search = video_search or YouTubeSearchClient()

    def resolve(self, directive: Optional[VisualDirective]) -> Optional[VisualPayload]:
        if directive is None:
            return None
        try:
            return self._resolve(directive)
        except Exception:
            logger.exception("Visual resolution failed for %s directive", directive.type)
            return None

    def _resolve(self, directive: VisualDirective) -> Optional[VisualPayload]:
        if isinstance(directive, ImageDirective):
            url = self._images.generate_image(directive.prompt)
            if not url:
                logger.warning("Image generation returned no image for prompt %r", directive.prompt)
                return None
            return ImagePayload(url=url, caption=directive.caption)
        if isinstance(directive, VideoDirective):
            return VideoPayload(url=directive.url, caption=directive.caption)
        if isinstance(directive, YouTubeDirective):
            if directive.id:
                return YouTubePayload(id=directive.id, caption=directive.caption or "")
            if not directive.search:
                return None
            video_id = self._search.search(directive.search)
            if not video_id:
                logger.info("YouTube search %r found nothing", directive.search)
                return None
            caption = directive.caption if directive.caption is not None else directive.search
            return YouTubePayload(id=video_id, caption=caption)
        if isinstance(directive, UnrecognizedVisual):
            logger.info("Dropping unrecognized visual directive: %s", directive.reason)
            return None
        raise TypeError(f"unsupported visual directive: {directive!r}")
