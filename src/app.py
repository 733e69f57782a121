"""Application entry point for the heartline ingester."""

from __future__ import annotations

import argparse
import logging
import os
from collections import Counter
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from rich.console import Console
from rich.table import Table

import settings
from adapters.payload_mapper import PayloadError, read_heartbeats
from adapters.sqlite_storage import SQLiteStorage
from core.config import HeartbeatConfig
from core.languages import LanguageMappings
from core.models import User
from core.processor import HeartbeatProcessor, IngestReport
from core.summary_keys import InvalidDimension, parse_dimension

NAME = "HEARTLINE"
FONT = "tarty-1"

MALFORMED = "malformed"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/heartline.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _open_storage() -> SQLiteStorage:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()
    return storage


def _render_report(report: IngestReport, malformed: int) -> None:
    table = Table(title="Ingest result")
    table.add_column("Outcome")
    table.add_column("Heartbeats", justify="right")
    for outcome, count in report.counts.items():
        table.add_row(outcome, str(count))
    if malformed:
        table.add_row(MALFORMED, str(malformed))
    Console().print(table)


def _ingest(path: str, user_id: str) -> None:
    logger = logging.getLogger(__name__)
    if not user_id:
        raise RuntimeError("--user is required for ingest")

    user = User(id=user_id)
    storage = _open_storage()
    processor = HeartbeatProcessor(
        storage=storage,
        config=HeartbeatConfig(max_age=settings.HEARTBEAT_MAX_AGE),
        language_mappings=LanguageMappings(settings.LANGUAGE_MAPPINGS),
        user_language_mappings=settings.USER_LANGUAGE_MAPPINGS,
    )

    try:
        heartbeats, errors = read_heartbeats(path, user)
    except PayloadError as exc:
        raise RuntimeError(f"Cannot read heartbeats: {exc}") from exc
    for error in errors:
        # One broken entry should not cost the client the rest of the batch.
        logger.warning("Skipping malformed heartbeat, %s", error)

    report = processor.handle_batch(heartbeats, user)

    logger.info("Stored %s heartbeats for %s in total", storage.count(user_id), user_id)
    _render_report(report, len(errors))


def _languages() -> None:
    table = Table(title="Language mappings")
    table.add_column("Suffix")
    table.add_column("Language")
    for suffix, language in sorted(settings.LANGUAGE_MAPPINGS.items()):
        table.add_row(f".{suffix}", language)
    Console().print(table)


def _keys(user_id: str, dimension_name: str) -> None:
    try:
        dimension = parse_dimension(dimension_name)
    except InvalidDimension as exc:
        raise RuntimeError(str(exc)) from exc

    storage = _open_storage()
    counts = Counter(heartbeat.get_key(dimension) for heartbeat in storage.list_for_user(user_id))

    table = Table(title=f"{dimension.value} keys for {user_id}")
    table.add_column("Key")
    table.add_column("Heartbeats", justify="right")
    for key, count in counts.most_common():
        table.add_row(key, str(count))
    Console().print(table)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="heartline")
    subparsers = parser.add_subparsers(dest="command")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest a JSON / JSON-lines heartbeat file")
    ingest_parser.add_argument("path")
    ingest_parser.add_argument("--user", required=True)

    subparsers.add_parser("languages", help="Show the active language mappings")

    keys_parser = subparsers.add_parser("keys", help="Show grouping keys of stored heartbeats")
    keys_parser.add_argument("--user", required=True)
    keys_parser.add_argument("--dimension", default="project")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return

    _print_banner()
    _configure_logging()
    if args.command == "ingest":
        _ingest(args.path, args.user)
    elif args.command == "languages":
        _languages()
    elif args.command == "keys":
        _keys(args.user, args.dimension)


if __name__ == "__main__":
    main()
