"""Core heartbeat ingestion pipeline.

This module is storage-agnostic. It only relies on the storage port, so the
same ordering holds for every adapter:
1) Attach the authenticated user
2) Sanitize client quirks
3) Infer the language from the entity suffix
4) Reject invalid or untimely heartbeats
5) Fingerprint and insert-if-absent
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping, Optional

from core.config import HeartbeatConfig
from core.languages import LanguageMappings
from core.models import Heartbeat, User
from core.ports import HeartbeatStoragePort

LOGGER = logging.getLogger(__name__)

ACCEPTED = "accepted"
DUPLICATE = "duplicate"
INVALID = "invalid"
UNTIMELY = "untimely"

OUTCOMES = (ACCEPTED, DUPLICATE, INVALID, UNTIMELY)


@dataclass
class IngestReport:
    """Per-outcome counters for one batch."""

    counts: dict[str, int] = field(default_factory=lambda: dict.fromkeys(OUTCOMES, 0))

    def add(self, outcome: str) -> None:
        self.counts[outcome] = self.counts.get(outcome, 0) + 1

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class HeartbeatProcessor:
    """Orchestrates sanitizing, augmentation, validation, hashing and storage."""

    def __init__(
        self,
        storage: HeartbeatStoragePort,
        config: HeartbeatConfig,
        language_mappings: LanguageMappings,
        user_language_mappings: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> None:
        self._storage = storage
        self._config = config
        self._language_mappings = language_mappings
        self._user_language_mappings = user_language_mappings or {}

    def prepare(self, heartbeat: Heartbeat, user: User, now: Optional[datetime] = None) -> Optional[str]:
        """Run every step up to storage; return a rejection outcome or None."""

        heartbeat.user = user
        if not heartbeat.user_id:
            heartbeat.user_id = user.id

        heartbeat.sanitize()
        heartbeat.augment(self._language_mappings.merged(self._user_language_mappings.get(user.id)))

        if not heartbeat.valid():
            LOGGER.info("Rejected invalid heartbeat for %s: %s", user.id, heartbeat.entity)
            return INVALID
        if not heartbeat.timely(self._config.max_age, now):
            LOGGER.info("Rejected untimely heartbeat for %s at %s", user.id, heartbeat.time.isoformat())
            return UNTIMELY

        heartbeat.hashed()
        return None

    def handle(self, heartbeat: Heartbeat, user: User, now: Optional[datetime] = None) -> str:
        """Process one heartbeat through the pipeline and return its outcome."""

        rejection = self.prepare(heartbeat, user, now)
        if rejection:
            return rejection

        # Dedup is enforced by the storage unique hash, so racing inserts of the
        # same heartbeat still end with a single row.
        if not self._storage.insert(heartbeat):
            LOGGER.debug("Dedup skip for %s (hash %s)", user.id, heartbeat.hash)
            return DUPLICATE
        return ACCEPTED

    def handle_batch(
        self,
        heartbeats: Iterable[Heartbeat],
        user: User,
        now: Optional[datetime] = None,
    ) -> IngestReport:
        report = IngestReport()
        for heartbeat in heartbeats:
            report.add(self.handle(heartbeat, user, now))
        LOGGER.info("Ingested %s heartbeats for %s: %s", report.total, user.id, report.counts)
        return report
