"""Text grammar for directives embedded in generated replies.

Links
    Markdown ``[label](url)`` (optionally ``![label](url)``) and bare
    ``http(s)://`` URLs, scanned left to right. YouTube video IDs are read from
    ``youtu.be/<id>``, ``youtube.com/watch?v=<id>``, ``/embed/<id>`` and
    ``/shorts/<id>``. Markdown links are always cut from the text; bare URLs
    are cut only when they carry a YouTube ID.

Markers
    ``VISUAL:`` / ``ACTION:`` followed by a JSON object. Only the last
    occurrence of the marker counts. Text before it is the reply. After it,
    code-fence tokens are dropped and the first balanced ``{...}`` span (brace
    counting that skips string literals) is parsed. The span ends the
    directive; anything after it is the tail. An unbalanced span or invalid
    JSON yields no payload, never an exception.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

VISUAL_MARKER = "VISUAL:"
ACTION_MARKER = "ACTION:"

_LINK_PATTERN = re.compile(
    r"!?\[(?P<label>[^\]\n]*)\]\((?P<md_url>[^)\s]+)\)"
    r"|(?P<bare_url>https?://[^\s<>()\[\]{}\"'`]+)"
)
_FENCE_PATTERN = re.compile(r"```[A-Za-z]*")
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_TRAILING_PUNCTUATION = ".,;:!?'\""
_YOUTUBE_HOSTS = frozenset({"youtube.com", "m.youtube.com", "music.youtube.com", "youtube-nocookie.com"})
_PATH_ID_PREFIXES = frozenset({"embed", "shorts"})


@dataclass
class LinkScrape:
    text: str
    youtube_ids: List[str] = field(default_factory=list)


@dataclass
class MarkerSplit:
    found: bool
    before: str
    payload: Optional[Dict[str, Any]] = None
    tail: str = ""


def parse_youtube_id(url: str) -> Optional[str]:
    if not url:
        return None
    candidate = url.strip()
    if not _SCHEME_PATTERN.match(candidate):
        candidate = f"https://{candidate}"
    try:
        parsed = urlparse(candidate)
    except ValueError:
        return None
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    segments = [s for s in parsed.path.split("/") if s]

    video_id: Optional[str] = None
    if host == "youtu.be":
        video_id = segments[0] if segments else None
    elif host in _YOUTUBE_HOSTS:
        if segments[:1] == ["watch"]:
            video_id = (parse_qs(parsed.query).get("v") or [None])[0]
        elif len(segments) >= 2 and segments[0] in _PATH_ID_PREFIXES:
            video_id = segments[1]
    if video_id and _VIDEO_ID_PATTERN.match(video_id):
        return video_id
    return None


def _tidy(text: str) -> str:
    collapsed = re.sub(r"[ \t]{2,}", " ", text)
    return "\n".join(line.rstrip() for line in collapsed.split("\n")).strip()


def scrape_links(text: str) -> LinkScrape:
    ids: List[str] = []

    def _collect(video_id: Optional[str]) -> None:
        if video_id and video_id not in ids:
            ids.append(video_id)

    def _replace(match: re.Match) -> str:
        md_url = match.group("md_url")
        if md_url is not None:
            _collect(parse_youtube_id(md_url))
            return ""
        url = match.group("bare_url")
        stripped = url.rstrip(_TRAILING_PUNCTUATION)
        video_id = parse_youtube_id(stripped)
        if video_id is None:
            return url
        _collect(video_id)
        # keep sentence punctuation that trailed the URL
        return url[len(stripped):]

    cleaned = _LINK_PATTERN.sub(_replace, text)
    if cleaned == text:
        return LinkScrape(text=text, youtube_ids=ids)
    return LinkScrape(text=_tidy(cleaned), youtube_ids=ids)


def find_json_span(text: str) -> Optional[Tuple[int, int]]:
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return start, i + 1
    return None


def parse_json_object(raw: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(raw)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def split_marker(text: str, marker: str) -> MarkerSplit:
    idx = text.rfind(marker)
    if idx < 0:
        return MarkerSplit(found=False, before=text)
    before = text[:idx].strip()
    after = _FENCE_PATTERN.sub("", text[idx + len(marker):])
    span = find_json_span(after)
    if span is None:
        return MarkerSplit(found=True, before=before, tail=after.strip())
    start, end = span
    return MarkerSplit(
        found=True,
        before=before,
        payload=parse_json_object(after[start:end]),
        tail=after[end:].strip(),
    )
