"""Parsing and formatting of ISO-8601 instants.

All timestamps inside the application are naive ``datetime`` objects in UTC,
the same representation the database returns for DATETIME columns.
"""
from datetime import datetime, timezone
from typing import Any, Optional


def parse_iso_instant(value: str) -> datetime:
    """Parse ``2024-01-15``, ``2024-01-15T08:30:00Z`` or an offset form into naive UTC.

    Raises ValueError for anything ``datetime.fromisoformat`` cannot read.
    """
    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_datetime(value: Any) -> Optional[datetime]:
    """Coerce a value read from a store row into naive UTC ``datetime``."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return parse_iso_instant(str(value))


def format_iso_instant(value: Optional[datetime]) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ``; empty string for None."""
    if value is None:
        return ''
    dt = to_datetime(value)
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + f'{dt.microsecond // 1000:03d}Z'
