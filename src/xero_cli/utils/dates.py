"""Helpers for Xero's JSON date format."""

from __future__ import annotations

import re
from datetime import datetime, timezone

# /Date(1700000000000+0000)/
_XERO_DATE = re.compile(r"/Date\((-?\d+)([+-]\d{4})?\)/")


def parse_xero_date(value: str | None) -> datetime | None:
    """Parse a ``/Date(ms+zone)/`` string (or ISO string) into a UTC datetime."""
    if not value:
        return None
    match = _XERO_DATE.fullmatch(value.strip())
    if match:
        return datetime.fromtimestamp(int(match.group(1)) / 1000, tz=timezone.utc)
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def format_xero_date(value: str | None) -> str:
    """Render a Xero date as YYYY-MM-DD, passing unknown formats through."""
    parsed = parse_xero_date(value)
    if parsed is None:
        return value or ""
    return parsed.date().isoformat()
