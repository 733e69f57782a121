"""Static configuration for heartline.

All user-editable settings (heartbeat window, language suffixes, logging) live
in a single JSON file for quick edits without touching Python. Paths can be
overridden from the environment or a local .env file.
"""

import json
import os
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv

from core.languages import DEFAULT_LANGUAGE_MAPPINGS

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Where to store the SQLite database.
DB_PATH = os.getenv("HEARTLINE_DB_PATH", os.path.join(PROJECT_ROOT, "heartline.db"))

CONFIG_PATH = os.getenv("HEARTLINE_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _normalize_languages(raw_languages: dict, base: Optional[dict] = None) -> dict[str, str]:
    """Merge configured suffixes over a base table, dropping blank entries."""

    mappings = dict(base or {})
    for suffix, language in raw_languages.items():
        suffix = str(suffix).strip().lstrip(".")
        if not suffix or not language:
            continue
        mappings[suffix] = str(language)
    return mappings


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Heartbeats older than this are rejected as stale backfills.
_heartbeats = _CONFIG.get("heartbeats", {})
HEARTBEAT_MAX_AGE = timedelta(hours=float(_heartbeats.get("max_age_hours", 4320)))

# Suffix -> language table used when clients omit or misreport the language.
LANGUAGE_MAPPINGS = _normalize_languages(_CONFIG.get("languages", {}), dict(DEFAULT_LANGUAGE_MAPPINGS))

# Per-user suffix overrides, keyed by user id.
USER_LANGUAGE_MAPPINGS = {
    user_id: _normalize_languages(mappings) for user_id, mappings in _CONFIG.get("user_languages", {}).items()
}

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
