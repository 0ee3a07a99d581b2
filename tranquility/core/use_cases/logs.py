"""
Log viewing — read back the dated log files written by ``setup_logging``.

File lines look like ``2026-10-17 09:12:44 INFO  tranquility.main:61 — ...``;
lines starting with ``{`` are JSON records carrying a ``level`` key.
Lines with no recognizable level (tracebacks, continuations) always pass
the level filter.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)

LEVELS = ("debug", "info", "warning", "error", "critical")

_ALIASES = {"warn": "warning", "fatal": "critical"}


class LogQueryError(Exception):
    """The log query cannot be answered (bad date, unreadable file)."""


def parse_day(text: str | None) -> date | None:
    """``YYYY-MM-DD`` → date; ``None`` stays ``None``."""
    if text is None:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise LogQueryError(f"Invalid date '{text}', expected YYYY-MM-DD") from e


def extract_level(line: str) -> str | None:
    """Lower-cased level name of a log line, or ``None``."""
    stripped = line.lstrip()
    if stripped.startswith("{"):
        try:
            record = json.loads(stripped)
        except json.JSONDecodeError:
            return None
        level = record.get("level") if isinstance(record, dict) else None
        return _normalize(level) if isinstance(level, str) else None

    parts = stripped.split(maxsplit=3)
    if len(parts) >= 3:
        return _normalize(parts[2])
    return None


def _normalize(level: str) -> str | None:
    name = level.strip("[]").lower()
    name = _ALIASES.get(name, name)
    return name if name in LEVELS else None


def at_least(level: str | None, minimum: str) -> bool:
    if level is None:
        return True
    return LEVELS.index(level) >= LEVELS.index(minimum)


def read_log(
    path: Path,
    *,
    tail: int = 50,
    min_level: str = "info",
    json_only: bool = False,
) -> list[str]:
    """Last ``tail`` lines of ``path`` that pass the filters, oldest first.

    Raises:
        LogQueryError: the file exists but cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise LogQueryError(f"Cannot read {path}: {e}") from e

    kept = [
        line for line in text.splitlines()
        if (not json_only or line.lstrip().startswith("{"))
        and at_least(extract_level(line), min_level)
    ]
    logger.debug("%d of %d log lines match in %s", len(kept), len(text.splitlines()), path)
    return kept[-tail:] if tail > 0 else []
