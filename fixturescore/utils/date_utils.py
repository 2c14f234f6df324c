"""
Date utility functions for parsing kickoff times from provider payloads.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from pytz import utc

logger = logging.getLogger(__name__)

# Provider date strings, most specific first.
_DATE_FORMATS = ("%d/%m/%y", "%d/%m/%Y", "%Y-%m-%d", "%m/%d/%Y")


def parse_gametime(event_date_str: str) -> Optional[datetime]:
    """Parse an ISO-8601 kickoff string and return it as a UTC datetime."""
    if not event_date_str:
        return None

    try:
        iso_str = event_date_str.strip().replace('Z', '+00:00')
        dt = datetime.fromisoformat(iso_str)
    except (ValueError, AttributeError):
        return None

    if dt.tzinfo is None:
        return utc.localize(dt)
    return dt.astimezone(utc)


def _from_timestamp(ts: float) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(ts, tz=utc)
    except (OverflowError, OSError, ValueError):
        logger.debug("Kickoff timestamp out of range: %r", ts)
        return None


def _parse_date_and_time(date_str: str, time_str: Optional[str]) -> Optional[datetime]:
    for fmt in _DATE_FORMATS:
        try:
            dt = datetime.strptime(date_str.strip(), fmt)
        except ValueError:
            continue
        if time_str:
            try:
                t = datetime.strptime(time_str.strip(), "%H:%M")
                dt = dt.replace(hour=t.hour, minute=t.minute)
            except ValueError:
                pass
        return utc.localize(dt)
    return None


def parse_kickoff(value: Any) -> Optional[datetime]:
    """
    Parse a kickoff value into a UTC datetime.

    Accepts a datetime, a unix timestamp (seconds), an ISO string, or a
    provider time block such as ``{"uts": 1700000000}`` or
    ``{"date": "21/10/23", "time": "15:00"}``. Returns None when nothing
    usable is present.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return utc.localize(value) if value.tzinfo is None else value.astimezone(utc)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        if value <= 0:
            return None
        return _from_timestamp(value)

    if isinstance(value, str):
        return parse_gametime(value) or _parse_date_and_time(value, None)

    if isinstance(value, dict):
        for key in ("uts", "timestamp"):
            ts = value.get(key)
            if isinstance(ts, (int, float)) and not isinstance(ts, bool) and ts > 0:
                return _from_timestamp(ts)
        date_str = value.get("date")
        if date_str:
            parsed = _parse_date_and_time(str(date_str), value.get("time"))
            if parsed is not None:
                return parsed
            logger.debug("Could not parse kickoff date %r", date_str)
        return None

    return None
