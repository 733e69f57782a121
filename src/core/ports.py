"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for storage adapters so that the core can
be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import Heartbeat


class HeartbeatStoragePort(Protocol):
    """Storage operations required by the core pipeline."""

    def insert(self, heartbeat: Heartbeat) -> bool:
        """Store the heartbeat unless its hash exists; False means duplicate."""
        ...

    def get_by_hash(self, fingerprint: str) -> Optional[Heartbeat]:
        ...

    def count(self, user_id: str) -> int:
        ...
