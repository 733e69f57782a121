"""SQLite storage adapter.

Implements the core HeartbeatStoragePort using a simple SQLite database.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Optional

from core.custom_time import now, to_custom_time
from core.models import Heartbeat

_COLUMNS = (
    "user_id",
    "entity",
    "type",
    "category",
    "project",
    "project_root_count",
    "line_additions",
    "line_deletions",
    "lines",
    "line_number",
    "cursor_position",
    "branch",
    "language",
    "dependencies",
    "is_write",
    "editor",
    "operating_system",
    "machine",
    "user_agent",
    "time",
    "hash",
    "origin",
    "origin_id",
    "created_at",
)


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the HeartbeatStoragePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - heartbeats: one row per accepted heartbeat, unique by hash
        """

        with self._connect() as conn:
            # The unique hash is the only dedup guard; a unique index over all
            # relevant columns would roughly double the table size.
            # Fields worth noting:
            # - dependencies: JSON array as submitted
            # - time/created_at: ISO-8601 UTC with millisecond precision
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS heartbeats (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    entity TEXT NOT NULL,
                    type TEXT,
                    category TEXT,
                    project TEXT,
                    project_root_count INTEGER,
                    line_additions INTEGER,
                    line_deletions INTEGER,
                    lines INTEGER,
                    line_number INTEGER,
                    cursor_position INTEGER,
                    branch TEXT,
                    language TEXT,
                    dependencies TEXT,
                    is_write INTEGER,
                    editor TEXT,
                    operating_system TEXT,
                    machine TEXT,
                    user_agent TEXT,
                    time TIMESTAMP NOT NULL,
                    hash TEXT NOT NULL UNIQUE,
                    origin TEXT,
                    origin_id TEXT,
                    created_at TIMESTAMP
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_time_user ON heartbeats (user_id, time)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_user_project ON heartbeats (user_id, project)")

    def insert(self, heartbeat: Heartbeat) -> bool:
        """Insert a hashed heartbeat unless its hash is already stored."""

        if not heartbeat.hash:
            raise ValueError("heartbeat must be hashed before insert")

        created_at = now()
        values = {
            **{name: getattr(heartbeat, name) for name in _COLUMNS},
            "dependencies": json.dumps(heartbeat.dependencies),
            "is_write": int(heartbeat.is_write),
            "time": to_custom_time(heartbeat.time).isoformat(timespec="milliseconds"),
            "created_at": created_at.isoformat(timespec="milliseconds"),
        }
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._connect() as conn:
            cur = conn.execute(
                f"INSERT OR IGNORE INTO heartbeats ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(values[name] for name in _COLUMNS),
            )
            if cur.rowcount == 0:
                return False
        heartbeat.id = cur.lastrowid
        heartbeat.created_at = created_at
        return True

    def get_by_hash(self, fingerprint: str) -> Optional[Heartbeat]:
        """Return the stored heartbeat for a hash, if any."""

        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM heartbeats WHERE hash = ?",
                (fingerprint,),
            ).fetchone()
        return _from_row(row) if row else None

    def count(self, user_id: str) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS total FROM heartbeats WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        return int(row["total"])

    def list_for_user(self, user_id: str) -> list[Heartbeat]:
        """Return a user's heartbeats ordered by time."""

        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM heartbeats WHERE user_id = ? ORDER BY time, id",
                (user_id,),
            ).fetchall()
        return [_from_row(row) for row in rows]


def _from_row(row: sqlite3.Row) -> Heartbeat:
    data = dict(row)
    data["dependencies"] = json.loads(data["dependencies"] or "[]")
    data["is_write"] = bool(data["is_write"])
    data["time"] = to_custom_time(data["time"])
    if data["created_at"]:
        data["created_at"] = to_custom_time(data["created_at"])
    for key, value in data.items():
        if value is None and key not in ("created_at", "id"):
            data[key] = ""
    return Heartbeat(**data)
