"""
Logging configuration — central setup for the CLI.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  TRANQUILITY_LOG_LEVEL env var  >  WARNING (default)

The log file is ``<log_directory>/<YYYY-MM-DD>-tranquility.log`` when
settings say ``log_output: primary``; ``TRANQUILITY_LOG_FILE`` overrides it.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ── Format strings ──────────────────────────────────────────────

# WARNING level — message only
_FMT_MINIMAL = "%(message)s"

# INFO level — timestamped with module context
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG level — full diagnostic with file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

# File output — always full detail
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("urllib3",)


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    log_file_level: str | None = "DEBUG",
    quiet_third_party: bool = True,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file; parent directories are created.
        log_file_level: Level for the log file (default DEBUG).
        quiet_third_party: Keep noisy third-party loggers at WARNING
            unless we're at DEBUG level.
    """
    numeric_level = _parse_level(level)

    # ── Console handler (stderr) ────────────────────────────────
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)

    effective_level = numeric_level

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, encoding="utf-8")
        except OSError as e:
            root.warning("Cannot open log file %s: %s", path, e)
        else:
            file_level = _parse_level(log_file_level) if log_file_level else numeric_level
            effective_level = min(effective_level, file_level)
            fh.setLevel(file_level)
            fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
            root.addHandler(fh)

    root.setLevel(effective_level)

    # ── Third-party noise control ───────────────────────────────
    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
