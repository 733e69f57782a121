"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any storage or transport-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Mapping, Optional

from core import dedup, languages, sanitizer, summary_keys, validation
from core.custom_time import ZERO_TIME, to_unix_millis


@dataclass(frozen=True)
class User:
    """Already authenticated owner of a heartbeat."""

    id: str


@dataclass
class Heartbeat:
    """One reported snapshot of user activity.

    Instances are mutated in place while passing through the ingestion
    pipeline and treated as read-only once persisted.
    """

    entity: str
    time: datetime = ZERO_TIME
    user_id: str = ""
    user: Optional[User] = None
    id: Optional[int] = None
    type: str = ""
    category: str = ""
    project: str = ""
    project_root_count: int = 0
    line_additions: int = 0
    line_deletions: int = 0
    lines: int = 0
    line_number: int = 0
    cursor_position: int = 0
    branch: str = ""
    language: str = ""
    dependencies: list[str] = field(default_factory=list)
    is_write: bool = False
    editor: str = ""
    operating_system: str = ""
    machine: str = ""
    user_agent: str = ""
    hash: str = ""
    origin: str = ""
    origin_id: str = ""
    created_at: Optional[datetime] = None

    def sanitize(self) -> Heartbeat:
        return sanitizer.sanitize(self)

    def augment(self, language_mappings: Mapping[str, str]) -> Heartbeat:
        return languages.augment(self, language_mappings)

    def valid(self) -> bool:
        return validation.valid(self)

    def timely(self, max_age: timedelta, now: Optional[datetime] = None) -> bool:
        return validation.timely(self, max_age, now)

    def hashed(self) -> Heartbeat:
        return dedup.hashed(self)

    def get_key(self, dimension: summary_keys.SummaryDimension) -> str:
        return summary_keys.get_key(self, dimension)

    def __str__(self) -> str:
        return (
            f"Heartbeat {{user={self.user_id}, entity={self.entity}, type={self.type}, "
            f"category={self.category}, project={self.project}, "
            f"project_root_count={self.project_root_count}, "
            f"line_additions={self.line_additions}, line_deletions={self.line_deletions}, "
            f"lines={self.lines}, lineno={self.line_number}, cursorpos={self.cursor_position}, "
            f"branch={self.branch}, language={self.language}, "
            f"dependencies={self.dependencies}, iswrite={self.is_write}, "
            f"editor={self.editor}, os={self.operating_system}, machine={self.machine}, "
            f"time={to_unix_millis(self.time)}}}"
        )
