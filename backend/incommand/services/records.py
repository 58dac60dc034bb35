"""Helpers for reading caller-supplied incident and radio records."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def field_value(record: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute-style record."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a datetime or ISO timestamp string to an aware UTC datetime; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    try:
        ts = str(value).strip()
        if ts.endswith("Z"):
            ts = ts[:-1] + "+00:00"
        return to_utc(datetime.fromisoformat(ts))
    except (ValueError, TypeError):
        return None
