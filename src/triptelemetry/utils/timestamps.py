from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union

TimestampLike = Union[datetime, str, None]


def parse_timestamp(value: TimestampLike) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are taken as UTC. Missing or unparseable input returns None
    so callers can treat it as "no data" rather than an error.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def duration_s(start: TimestampLike, end: TimestampLike) -> Optional[float]:
    t0 = parse_timestamp(start)
    t1 = parse_timestamp(end)
    if t0 is None or t1 is None:
        return None
    return float((t1 - t0).total_seconds())
