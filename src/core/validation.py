"""Structural and temporal acceptance checks (core domain).

Both checks are plain predicates. Callers decide how to reject and what to
tell the submitting client.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from core.custom_time import is_zero, to_custom_time
from core.custom_time import now as current_time

if TYPE_CHECKING:
    from core.models import Heartbeat

# Tolerated client clock skew for heartbeats stamped in the future.
MAX_FUTURE_SKEW = timedelta(hours=1)


def valid(heartbeat: Heartbeat) -> bool:
    """Return True if the heartbeat has a consistent owner and a real time."""

    user = heartbeat.user
    return (
        user is not None
        and heartbeat.user_id != ""
        and user.id == heartbeat.user_id
        and not is_zero(heartbeat.time)
    )


def timely(heartbeat: Heartbeat, max_age: timedelta, now: Optional[datetime] = None) -> bool:
    """Return True if the heartbeat is at most max_age old and under an hour ahead."""

    reference = current_time() if now is None else to_custom_time(now)
    event_time = to_custom_time(heartbeat.time)
    return reference - event_time <= max_age and event_time - reference < MAX_FUTURE_SKEW
