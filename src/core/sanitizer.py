"""Cleanup of known client reporting quirks (core domain)."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.models import Heartbeat

# Browser extensions send this keyword to ask for "whatever project was active
# last". Such activity is kept under the unknown project instead.
LAST_PROJECT = "<<LAST_PROJECT>>"
BROWSING_TYPES = frozenset({"url", "domain"})


def capitalize(value: str) -> str:
    """Uppercase the first character only, leaving the rest as sent."""

    if not value:
        return value
    return value[0].upper() + value[1:]


def sanitize(heartbeat: Heartbeat) -> Heartbeat:
    """Normalize a heartbeat in place and return it for chaining."""

    if heartbeat.type in BROWSING_TYPES and heartbeat.project == LAST_PROJECT:
        heartbeat.project = ""

    heartbeat.operating_system = capitalize(heartbeat.operating_system)
    heartbeat.editor = capitalize(heartbeat.editor)
    return heartbeat
