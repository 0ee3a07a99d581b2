"""
Override use case — replace a configured file with a validated one.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from tranquility.core.config.settings import SettingsError, resolved, settings_path
from tranquility.core.models.settings import Settings
from tranquility.core.services.validation import (
    DocumentKind,
    ValidationReport,
    check_file,
    file_format,
    load_canonical,
    save_document,
)

logger = logging.getLogger(__name__)


def target_path(
    kind: DocumentKind,
    settings: Settings,
    config_path: Path | None = None,
) -> Path:
    """Where a ``kind`` document lives for these settings."""
    settings = resolved(settings)
    if kind is DocumentKind.CONFIG:
        return config_path or settings_path()
    path = settings.applications_file if kind is DocumentKind.APPLICATIONS else settings.vps_file
    if path is None:
        raise SettingsError(f"No {kind.value} file configured")
    return path


def override_file(
    kind: DocumentKind,
    source: Path,
    settings: Settings,
    config_path: Path | None = None,
) -> tuple[ValidationReport, Path | None]:
    """Validate ``source`` and write it over the configured ``kind`` file.

    Same format: the file is copied as is. Different format: it is
    converted to the configured file's format.
    Returns the report and the written path (``None`` when invalid).
    """
    report = check_file(source, kind)
    if not report.valid:
        return report, None

    target = target_path(kind, settings, config_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    if file_format(source) == file_format(target):
        shutil.copyfile(source, target)
    else:
        model = kind.model.model_validate(load_canonical(source, kind))
        save_document(target, model, kind)
    logger.info("Overrode %s file %s with %s", kind.value, target, source)
    return report, target
