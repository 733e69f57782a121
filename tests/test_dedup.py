from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from core.dedup import HASH_FIELDS, canonical_payload
from core.models import Heartbeat, User

TIME = datetime(2024, 3, 4, 5, 6, 7, 123000, tzinfo=timezone.utc)


def _heartbeat(**overrides) -> Heartbeat:
    fields = dict(
        entity="/home/alice/project/app.py",
        type="file",
        category="coding",
        project="app",
        branch="main",
        language="Python",
        lines=120,
        line_number=12,
        cursor_position=4,
        dependencies=["requests", "flask"],
        is_write=True,
        user_id="alice",
        user=User(id="alice"),
        time=TIME,
    )
    fields.update(overrides)
    return Heartbeat(**fields)


def test_hash_ignores_non_semantic_fields() -> None:
    base = _heartbeat().hashed()
    other = _heartbeat(
        id=42,
        editor="VS Code",
        operating_system="Linux",
        machine="laptop",
        user_agent="wakatime/v1.0",
        origin="import",
        origin_id="abc",
        created_at=TIME + timedelta(days=1),
    ).hashed()
    assert base.hash == other.hash


def test_hash_ignores_user_object() -> None:
    assert _heartbeat().hashed().hash == _heartbeat(user=None).hashed().hash


def test_hash_changes_with_semantic_fields() -> None:
    base = _heartbeat().hashed().hash
    assert _heartbeat(entity="/home/alice/project/other.py").hashed().hash != base
    assert _heartbeat(project="other").hashed().hash != base
    assert _heartbeat(time=TIME + timedelta(milliseconds=1)).hashed().hash != base
    assert _heartbeat(lines=121).hashed().hash != base
    assert _heartbeat(user_id="bob").hashed().hash != base


def test_hash_is_stable_across_sub_millisecond_noise() -> None:
    noisy = _heartbeat(time=TIME + timedelta(microseconds=456)).hashed()
    assert noisy.hash == _heartbeat().hashed().hash


def test_dependency_order_does_not_matter() -> None:
    forward = _heartbeat(dependencies=["flask", "requests"]).hashed()
    backward = _heartbeat(dependencies=["requests", "flask"]).hashed()
    assert forward.hash == backward.hash
    assert forward.dependencies == ["flask", "requests"]


def test_hash_is_hex_and_assigned_in_place() -> None:
    heartbeat = _heartbeat()
    assert heartbeat.hashed() is heartbeat
    assert len(heartbeat.hash) == 64
    int(heartbeat.hash, 16)


def test_payload_covers_exactly_hash_fields() -> None:
    payload = canonical_payload(_heartbeat())
    for name in HASH_FIELDS:
        assert f'"{name}"' in payload
    assert "editor" not in payload


def test_unhashable_value_logs_and_falls_back(caplog) -> None:
    heartbeat = _heartbeat(dependencies=["flask", 3])

    with caplog.at_level(logging.CRITICAL, logger="core.dedup"):
        heartbeat.hashed()

    assert heartbeat.hash
    assert any(record.levelno == logging.CRITICAL for record in caplog.records)


def test_copy_hashes_identically() -> None:
    original = _heartbeat().hashed()
    copy = replace(original, hash="").hashed()
    assert copy.hash == original.hash
