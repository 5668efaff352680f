from __future__ import annotations

from datetime import datetime, timezone


def now_iso() -> str:
    """UTC timestamp in the millisecond ISO-8601 form stored on every document."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
