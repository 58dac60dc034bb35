"""Duplicate detection between a new radio message and recently logged incidents."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence

from incommand.services.records import field_value, parse_timestamp

MIN_KEYWORD_LEN = 4
MATCH_SHARE = 0.5


def _keywords(text: Optional[str]) -> List[str]:
    return [w for w in (text or "").lower().split() if len(w) >= MIN_KEYWORD_LEN]


def find_duplicate_incident(
    message_text: str,
    recent_incidents: Sequence[Any],
    window_minutes: int = 5,
    now: Optional[datetime] = None,
) -> Optional[Any]:
    """
    Return the id of a recent incident that looks like the same report.

    Only incidents created inside the window are considered. An incident is a
    duplicate when at least half of the message's longer words (rounded up)
    appear in its occurrence text, where a word matches if either contains
    the other.
    """
    message_words = _keywords(message_text)
    if not message_words:
        return None

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - timedelta(minutes=window_minutes)
    required = math.ceil(len(message_words) * MATCH_SHARE)

    for incident in recent_incidents:
        created = parse_timestamp(field_value(incident, "created_at") or field_value(incident, "timestamp"))
        if created is None or created < cutoff:
            continue

        incident_words = _keywords(field_value(incident, "occurrence"))
        matching = [
            kw for kw in message_words
            if any(ikw in kw or kw in ikw for ikw in incident_words)
        ]
        if len(matching) >= required:
            return field_value(incident, "id")

    return None
