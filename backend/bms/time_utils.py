from __future__ import annotations

import time
from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today_iso() -> str:
    """Today's date as YYYY-MM-DD (the data store's date format)."""
    return utcnow().date().isoformat()


def epoch_millis() -> int:
    return int(time.time() * 1000)


def millis_suffix(digits: int) -> str:
    """Last `digits` digits of the current millisecond timestamp."""
    return str(epoch_millis())[-digits:]


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Parse the date part of an ISO-8601 string.

    - None / "" -> None
    - "YYYY-MM-DD" and full timestamps ("YYYY-MM-DDTHH:MM:SSZ") both accepted
    """
    if value is None:
        return None
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    return date.fromisoformat(s[:10])


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def try_parse_iso_date(value) -> Optional[date]:
    """parse_iso_date for stored values: unparsable input gives None."""
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        return None
