from __future__ import annotations

from datetime import datetime, timedelta, timezone

from core.custom_time import ZERO_TIME
from core.models import Heartbeat, User

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
MAX_AGE = timedelta(hours=2)


def _heartbeat(time: datetime = NOW, user_id: str = "alice", user: User | None = User(id="alice")) -> Heartbeat:
    return Heartbeat(entity="/src/main.py", time=time, user_id=user_id, user=user)


def test_valid_heartbeat() -> None:
    assert _heartbeat().valid()


def test_zero_time_is_invalid() -> None:
    assert not _heartbeat(time=ZERO_TIME).valid()


def test_user_mismatch_is_invalid() -> None:
    assert not _heartbeat(user=User(id="bob")).valid()


def test_missing_user_or_user_id_is_invalid() -> None:
    assert not _heartbeat(user=None).valid()
    assert not _heartbeat(user_id="", user=User(id="")).valid()


def test_timely_past_boundary() -> None:
    assert _heartbeat(time=NOW - timedelta(hours=1, minutes=59)).timely(MAX_AGE, now=NOW)
    assert _heartbeat(time=NOW - MAX_AGE).timely(MAX_AGE, now=NOW)
    assert not _heartbeat(time=NOW - timedelta(hours=2, minutes=1)).timely(MAX_AGE, now=NOW)


def test_timely_future_boundary() -> None:
    assert _heartbeat(time=NOW + timedelta(minutes=59)).timely(MAX_AGE, now=NOW)
    assert not _heartbeat(time=NOW + timedelta(hours=1)).timely(MAX_AGE, now=NOW)
    assert not _heartbeat(time=NOW + timedelta(minutes=61)).timely(MAX_AGE, now=NOW)


def test_timely_defaults_to_current_time() -> None:
    recent = datetime.now(timezone.utc) - timedelta(minutes=5)
    assert _heartbeat(time=recent).timely(MAX_AGE)
