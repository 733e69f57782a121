"""Submission-payload-to-core heartbeat mapping adapter.

This keeps client field naming out of the core pipeline.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, Optional

from core.custom_time import to_custom_time
from core.models import Heartbeat, User


class PayloadError(ValueError):
    """Raised when a submitted heartbeat cannot be mapped."""


# payload key -> Heartbeat attribute
_STRING_FIELDS = {
    "entity": "entity",
    "type": "type",
    "category": "category",
    "project": "project",
    "branch": "branch",
    "language": "language",
    "editor": "editor",
    "operating_system": "operating_system",
    "machine": "machine",
    "user_agent": "user_agent",
}

_COUNTER_FIELDS = {
    "project_root_count": "project_root_count",
    "line_additions": "line_additions",
    "line_deletions": "line_deletions",
    "lines": "lines",
    "lineno": "line_number",
    "cursorpos": "cursor_position",
}


def _string(payload: dict, key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PayloadError(f"{key} must be a string")
    return value


def _counter(payload: dict, key: str) -> int:
    value = payload.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise PayloadError(f"{key} must be an integer")
    if value < 0:
        raise PayloadError(f"{key} must not be negative")
    return value


def _dependencies(payload: dict) -> list[str]:
    value = payload.get("dependencies")
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise PayloadError("dependencies must be a list of strings")
    return list(value)


def build_heartbeat(payload: Any, user: Optional[User] = None) -> Heartbeat:
    """Build a Heartbeat from one submitted JSON object."""

    if not isinstance(payload, dict):
        raise PayloadError("heartbeat payload must be an object")

    entity = _string(payload, "entity")
    if not entity:
        raise PayloadError("entity is required")

    raw_time = payload.get("time")
    if raw_time is None:
        raise PayloadError("time is required")
    try:
        time = to_custom_time(raw_time)
    except (TypeError, ValueError, OverflowError) as exc:
        raise PayloadError(f"invalid time: {raw_time!r}") from exc

    is_write = payload.get("is_write", False)
    if not isinstance(is_write, bool):
        raise PayloadError("is_write must be a boolean")

    heartbeat = Heartbeat(entity=entity, time=time, dependencies=_dependencies(payload), is_write=is_write)
    for key, attribute in _STRING_FIELDS.items():
        setattr(heartbeat, attribute, _string(payload, key))
    for key, attribute in _COUNTER_FIELDS.items():
        setattr(heartbeat, attribute, _counter(payload, key))

    if user is not None:
        heartbeat.user = user
        heartbeat.user_id = user.id
    return heartbeat


def load_payloads(path: str) -> Iterator[tuple[int, Any]]:
    """Yield (position, payload) pairs from a JSON array or JSON-lines file.

    Entries that cannot be decoded are yielded as PayloadError instances so the
    caller can skip them and keep going. A JSON array file that does not parse
    as a whole raises PayloadError.
    """

    text = Path(path).read_text(encoding="utf-8")
    stripped = text.lstrip()
    if stripped.startswith("["):
        try:
            payloads = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise PayloadError(f"{path}: {exc.msg} (line {exc.lineno})") from exc
        if not isinstance(payloads, list):
            raise PayloadError(f"{path}: expected a list of heartbeat objects")
        for index, payload in enumerate(payloads, start=1):
            if not isinstance(payload, dict):
                yield index, PayloadError(f"entry {index}: heartbeat payload must be an object")
                continue
            yield index, payload
        return

    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            yield line_no, json.loads(line)
        except json.JSONDecodeError as exc:
            yield line_no, PayloadError(f"line {line_no}: {exc.msg}")


def read_heartbeats(path: str, user: User) -> tuple[list[Heartbeat], list[PayloadError]]:
    """Map every entry of a payload file, collecting malformed ones separately."""

    heartbeats: list[Heartbeat] = []
    errors: list[PayloadError] = []
    for position, payload in load_payloads(path):
        if isinstance(payload, PayloadError):
            errors.append(payload)
            continue
        try:
            heartbeats.append(build_heartbeat(payload, user))
        except PayloadError as exc:
            errors.append(PayloadError(f"entry {position}: {exc}"))
    return heartbeats, errors
