"""ISO 8601 instant helpers shared by the engine."""

from __future__ import annotations

from datetime import datetime, timezone


def parse_instant(value: str) -> datetime:
    """Parse an archive timestamp into an aware UTC datetime.

    Accepts a trailing ``Z``; naive timestamps are taken as UTC.
    Raises ValueError on anything else.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_instant(dt: datetime) -> str:
    """Format an instant as ``YYYY-MM-DDTHH:MM:SSZ`` (UTC)."""
    dt = dt.astimezone(timezone.utc)
    if dt.microsecond:
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
