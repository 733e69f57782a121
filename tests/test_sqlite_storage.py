from __future__ import annotations

from datetime import datetime, timezone

import pytest

from adapters.sqlite_storage import SQLiteStorage
from core.models import Heartbeat, User
from core.summary_keys import SummaryDimension

TIME = datetime(2024, 2, 2, 10, 30, 0, 250000, tzinfo=timezone.utc)


@pytest.fixture
def storage(tmp_path) -> SQLiteStorage:
    storage = SQLiteStorage(str(tmp_path / "heartline.db"))
    storage.init_db()
    return storage


def _heartbeat(**overrides) -> Heartbeat:
    fields = dict(
        entity="/src/app.py",
        type="file",
        project="app",
        language="Python",
        dependencies=["flask"],
        is_write=True,
        editor="Neovim",
        user_id="alice",
        user=User(id="alice"),
        time=TIME,
    )
    fields.update(overrides)
    return Heartbeat(**fields).hashed()


def test_insert_if_absent(storage: SQLiteStorage) -> None:
    first = _heartbeat()
    second = _heartbeat(editor="Vim")

    assert storage.insert(first) is True
    assert storage.insert(second) is False
    assert first.id is not None
    assert first.created_at is not None
    assert second.id is None
    assert storage.count("alice") == 1


def test_get_by_hash_round_trips_fields(storage: SQLiteStorage) -> None:
    heartbeat = _heartbeat()
    storage.insert(heartbeat)

    loaded = storage.get_by_hash(heartbeat.hash)

    assert loaded is not None
    assert loaded.entity == "/src/app.py"
    assert loaded.time == TIME
    assert loaded.dependencies == ["flask"]
    assert loaded.is_write is True
    assert loaded.user is None
    assert loaded.user_id == "alice"
    assert loaded.hash == heartbeat.hash
    assert storage.get_by_hash("missing") is None


def test_list_for_user_feeds_summary_keys(storage: SQLiteStorage) -> None:
    storage.insert(_heartbeat(project="web", entity="/web/index.ts"))
    storage.insert(_heartbeat(project=""))
    storage.insert(_heartbeat(project="web", entity="/web/app.ts"))

    heartbeats = storage.list_for_user("alice")
    keys = sorted(heartbeat.get_key(SummaryDimension.PROJECT) for heartbeat in heartbeats)

    assert keys == ["unknown", "web", "web"]
    assert storage.list_for_user("bob") == []


def test_insert_requires_hash(storage: SQLiteStorage) -> None:
    heartbeat = Heartbeat(entity="/src/app.py", user_id="alice", time=TIME)
    with pytest.raises(ValueError):
        storage.insert(heartbeat)
