"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

# Clients may flush offline queues long after the fact.
DEFAULT_MAX_AGE = timedelta(days=180)


@dataclass(frozen=True)
class HeartbeatConfig:
    """Acceptance settings for the ingestion pipeline."""

    max_age: timedelta = DEFAULT_MAX_AGE
