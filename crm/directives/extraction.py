"""Split a generated reply into reply text, visual directive and action directive."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from crm.directives.models import ActionDirective, VisualDirective, YouTubeDirective
from crm.directives.normalize import normalize_action, normalize_visual
from crm.directives.parser import ACTION_MARKER, VISUAL_MARKER, scrape_links, split_marker


@dataclass
class ExtractedReply:
    reply_text: str
    visual: Optional[VisualDirective] = None
    action: Optional[ActionDirective] = None


def extract_directives(raw: str) -> ExtractedReply:
    """Run link scrape, VISUAL fallback, then ACTION extraction, in that order.

    The ``VISUAL:`` line is cut from the reply even when a scraped YouTube link
    already supplied the visual; only its payload is skipped in that case, so
    the raw directive never leaks into the reply text.
    """
    scrape = scrape_links(raw)
    text = scrape.text.strip()
    visual: Optional[VisualDirective] = None
    tail = ""

    if scrape.youtube_ids:
        visual = YouTubeDirective(id=scrape.youtube_ids[0])

    visual_split = split_marker(text, VISUAL_MARKER)
    if visual_split.found:
        text = visual_split.before
        tail = visual_split.tail
        # a scraped YouTube link outranks the explicit directive
        if visual is None and visual_split.payload is not None:
            visual = normalize_visual(visual_split.payload)

    action_payload: Optional[Dict[str, Any]] = None
    action_split = split_marker(text, ACTION_MARKER)
    if action_split.found:
        text = action_split.before
        action_payload = action_split.payload
    elif tail:
        # ACTION line written after the VISUAL line
        action_payload = split_marker(tail, ACTION_MARKER).payload

    action = normalize_action(action_payload) if action_payload is not None else None
    return ExtractedReply(reply_text=text, visual=visual, action=action)
