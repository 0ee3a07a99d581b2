"""
Settings loader — find, create, repair and reset ``config.<ext>``.

The settings directory is ``click.get_app_dir("tranquility")`` unless
``TRANQUILITY_CONFIG_DIR`` points elsewhere. A missing settings file is
created from defaults; an existing one must pass validation.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path

import click

from tranquility.core.models.settings import Settings
from tranquility.core.services.validation import (
    SUPPORTED_EXTENSIONS,
    DocumentKind,
    LoadError,
    check_file,
    load_canonical,
    save_document,
)

logger = logging.getLogger(__name__)

APP_NAME = "tranquility"
CONFIG_DIR_ENV = "TRANQUILITY_CONFIG_DIR"


class SettingsError(Exception):
    """Raised when the settings file is invalid or cannot be written."""


def config_dir() -> Path:
    """Directory holding settings, applications, VPS file and logs."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path(click.get_app_dir(APP_NAME))


def _existing_or_default(stem: str, base: Path | None = None) -> Path:
    """``<base>/<stem>.<ext>`` for the first ext that exists, else ``.yaml``."""
    base = base or config_dir()
    for ext in SUPPORTED_EXTENSIONS:
        candidate = base / f"{stem}.{ext}"
        if candidate.is_file():
            return candidate
    return base / f"{stem}.yaml"


def settings_path() -> Path:
    return _existing_or_default("config")


def default_settings() -> Settings:
    base = config_dir()
    return Settings(
        applications_file=_existing_or_default("applications", base),
        vps_file=_existing_or_default("vps", base),
        log_directory=base / "logs",
        log_output="primary",
    )


def resolved(settings: Settings) -> Settings:
    """Copy of ``settings`` with every unset path filled from defaults."""
    defaults = default_settings()
    return settings.model_copy(update={
        name: getattr(defaults, name)
        for name in ("applications_file", "vps_file", "log_directory")
        if not getattr(settings, name) or str(getattr(settings, name)) in ("", ".")
    })


def log_file_path(settings: Settings, day: date | None = None) -> Path:
    """The log file for ``day`` (default today), ``<log_directory>/<YYYY-MM-DD>-tranquility.log``."""
    log_dir = resolved(settings).log_directory
    if log_dir is None:
        raise SettingsError("No log directory configured")
    return log_dir / f"{(day or date.today()).isoformat()}-{APP_NAME}.log"


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    path = path or settings_path()
    try:
        save_document(path, settings, DocumentKind.CONFIG)
    except (OSError, LoadError) as e:
        raise SettingsError(f"Cannot write settings to {path}: {e}") from e
    return path


def load_settings(path: Path | None = None) -> Settings:
    """Load settings, creating the default file when it does not exist.

    Raises:
        SettingsError: the file exists but fails validation.
    """
    path = Path(path) if path else settings_path()

    if not path.is_file():
        logger.info("No settings at %s, writing defaults", path)
        settings = default_settings()
        save_settings(settings, path)
        return settings

    report = check_file(path, DocumentKind.CONFIG)
    if not report.valid:
        problems = report.error or "; ".join(str(v) for v in report.violations)
        raise SettingsError(
            f"Invalid settings file {path}: {problems}. "
            "Run 'tranquility config reset' or 'tranquility doctor --fix'."
        )

    data = load_canonical(path, DocumentKind.CONFIG)
    settings = resolved(Settings.model_validate(data))
    logger.debug("Loaded settings from %s", path)
    return settings


def reset_settings(path: Path | None = None) -> Settings:
    """Overwrite the settings file with defaults."""
    settings = default_settings()
    save_settings(settings, path)
    logger.info("Settings reset to defaults")
    return settings


def fix_settings(path: Path | None = None) -> tuple[Settings, list[str]]:
    """Repair the settings file in place; return the settings and what changed."""
    path = Path(path) if path else settings_path()
    changes: list[str] = []

    if not path.is_file():
        changes.append(f"created {path}")
        return reset_settings(path), changes

    try:
        current = Settings.model_validate(load_canonical(path, DocumentKind.CONFIG))
    except Exception as e:  # unreadable or unparseable: start over
        logger.warning("Settings file %s unusable (%s), recreating", path, e)
        changes.append(f"recreated unreadable {path}")
        return reset_settings(path), changes

    fixed = resolved(current)
    for name in ("applications_file", "vps_file", "log_directory"):
        if getattr(fixed, name) != getattr(current, name):
            changes.append(f"{name} → {getattr(fixed, name)}")

    if changes:
        save_settings(fixed, path)
    return fixed, changes
