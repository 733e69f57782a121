"""Heartbeat fingerprinting (core domain).

The fingerprint is the dedup key in storage. Changing HASH_FIELDS or the
payload encoding makes every stored hash unrecognizable, so any change must
bump HASH_VERSION and come with a migration.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import TYPE_CHECKING, Any

from core.custom_time import to_unix_millis

if TYPE_CHECKING:
    from core.models import Heartbeat

LOGGER = logging.getLogger(__name__)

HASH_VERSION = 1

# Editor, OS, machine, user agent and origin info are left out: clients parse
# them inconsistently or they say nothing about the activity itself.
HASH_FIELDS = (
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
    "time",
)


def _field_value(heartbeat: Heartbeat, name: str) -> Any:
    value = getattr(heartbeat, name)
    if name == "time":
        return to_unix_millis(value)
    if name == "dependencies":
        # Submission order carries no meaning.
        return sorted(value)
    return value


def canonical_payload(heartbeat: Heartbeat) -> str:
    """Serialize the hashed fields deterministically."""

    fields = {name: _field_value(heartbeat, name) for name in HASH_FIELDS}
    return json.dumps(
        {"v": HASH_VERSION, "fields": fields},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def compute_fingerprint(heartbeat: Heartbeat) -> str:
    """Return the SHA-256 hex digest of the canonical payload."""

    payload = canonical_payload(heartbeat)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _fallback_fingerprint(heartbeat: Heartbeat) -> str:
    raw = repr(tuple(getattr(heartbeat, name, None) for name in HASH_FIELDS))
    return hashlib.sha256(raw.encode("utf-8", "backslashreplace")).hexdigest()


def hashed(heartbeat: Heartbeat) -> Heartbeat:
    """Assign the fingerprint in place and return the heartbeat.

    Serialization failures are logged and a best-effort digest is stored so
    that a single odd heartbeat never aborts a batch.
    """

    try:
        heartbeat.hash = compute_fingerprint(heartbeat)
    except (TypeError, ValueError, AttributeError):
        LOGGER.critical("Failed to hash heartbeat for %s", heartbeat.user_id, exc_info=True)
        heartbeat.hash = _fallback_fingerprint(heartbeat)
    return heartbeat
