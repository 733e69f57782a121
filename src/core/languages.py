"""Language inference from entity suffixes (core domain)."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from core.models import Heartbeat

LOGGER = logging.getLogger(__name__)

# Suffixes plugins commonly report without (or with a wrong) language.
DEFAULT_LANGUAGE_MAPPINGS: Mapping[str, str] = MappingProxyType(
    {
        "astro": "Astro",
        "cjs": "JavaScript",
        "ipynb": "Python",
        "jsx": "JSX",
        "svelte": "Svelte",
        "tsx": "TSX",
        "vue": "Vue",
    }
)


def precision(suffix: str) -> int:
    """Number of inner dots; compound suffixes like "test.ts" are more specific."""

    return suffix.count(".")


def match_language(entity: str, language_mappings: Mapping[str, str]) -> Optional[str]:
    """Return the language of the most specific suffix matching the entity.

    Candidates are ranked by precision, then by the lexicographically smallest
    suffix, so the result never depends on mapping iteration order.
    """

    best: Optional[str] = None
    for suffix in language_mappings:
        if not entity.endswith(f".{suffix}"):
            continue
        if best is None or (-precision(suffix), suffix) < (-precision(best), best):
            best = suffix

    if best is None:
        return None
    return language_mappings[best]


def augment(heartbeat: Heartbeat, language_mappings: Mapping[str, str]) -> Heartbeat:
    """Set the language from the mapping table when a suffix matches.

    A match overrides whatever language the client reported; no match leaves
    the heartbeat untouched.
    """

    language = match_language(heartbeat.entity, language_mappings)
    if language is not None:
        heartbeat.language = language
    return heartbeat


class LanguageMappings:
    """Reloadable suffix -> language table.

    Readers always get a complete immutable snapshot; reload swaps the whole
    table with a single reference assignment.
    """

    def __init__(self, mappings: Optional[Mapping[str, str]] = None) -> None:
        self._snapshot: Mapping[str, str] = MappingProxyType(
            dict(DEFAULT_LANGUAGE_MAPPINGS if mappings is None else mappings)
        )

    def snapshot(self) -> Mapping[str, str]:
        return self._snapshot

    def reload(self, mappings: Mapping[str, str]) -> None:
        """Replace the table with a fresh copy of the given mappings."""

        self._snapshot = MappingProxyType(dict(mappings))
        LOGGER.info("Language mappings reloaded (%s suffixes)", len(self._snapshot))

    def merged(self, user_mappings: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
        """Return the current table overlaid with per-user mappings."""

        snapshot = self._snapshot
        if not user_mappings:
            return snapshot
        combined = dict(snapshot)
        combined.update(user_mappings)
        return MappingProxyType(combined)
