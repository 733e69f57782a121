"""Millisecond-precision timestamps (core domain).

Heartbeat times travel through JSON as float unix seconds and through SQLite
as ISO strings. Truncating everything to milliseconds in UTC keeps hashes and
time-window checks stable across those round-trips.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Union

TimeLike = Union[datetime, int, float, str]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _truncate_millis(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def to_custom_time(value: TimeLike) -> datetime:
    """Normalize a datetime, unix seconds or ISO string to UTC milliseconds."""

    if isinstance(value, bool):
        raise TypeError("bool is not a valid timestamp")
    if isinstance(value, (int, float)):
        # Round to whole millis first so 1700000000.123 does not become .122999
        parsed = EPOCH + timedelta(milliseconds=round(value * 1000))
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif isinstance(value, datetime):
        parsed = value
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return _truncate_millis(parsed.astimezone(timezone.utc))


def is_zero(value: datetime) -> bool:
    return to_custom_time(value) == ZERO_TIME


def to_unix_millis(value: datetime) -> int:
    """Return the integer millisecond epoch of a timestamp."""

    delta = to_custom_time(value) - EPOCH
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def now() -> datetime:
    return to_custom_time(datetime.now(timezone.utc))
