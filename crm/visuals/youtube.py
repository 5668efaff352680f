from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from crm.config import runtime_config

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"


class VideoSearch(Protocol):
    def search(self, query: str) -> Optional[str]: ...


class YouTubeSearchClient:
    """YouTube Data API v3 search returning the first video ID."""

    def __init__(self, api_key: Optional[str] = None, client: Optional[httpx.Client] = None, timeout: float = 10.0) -> None:
        self._api_key = api_key
        self._client = client
        self._timeout = timeout

    def search(self, query: str) -> Optional[str]:
        key = self._api_key or runtime_config.get_youtube_api_key()
        if not key:
            raise RuntimeError("Missing YT_API_KEY")
        params = {"part": "id", "type": "video", "maxResults": "1", "q": query, "key": key}
        if self._client is not None:
            resp = self._client.get(SEARCH_URL, params=params)
        else:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.get(SEARCH_URL, params=params)
        if resp.is_error:
            raise RuntimeError(f"YouTube HTTP {resp.status_code}: {resp.text or resp.reason_phrase}")
        items = resp.json().get("items") or []
        video_id = (items[0].get("id") or {}).get("videoId") if items else None
        logger.debug("YouTube search %r -> %s", query, video_id)
        return video_id
