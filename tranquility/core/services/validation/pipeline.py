"""
Validation pipeline — load, check structure, check semantics.

    extension → read → parse → canonical value → schema → semantic rules

Load failures stop the pipeline. Schema and semantic violations are
both collected in full and logged; the file is valid only when there
are none.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tranquility.core.services.validation.loader import (
    DocumentKind,
    LoadError,
    load_canonical,
)
from tranquility.core.services.validation.report import ValidationReport
from tranquility.core.services.validation.rules import RULES
from tranquility.core.services.validation.schema import check_structure

logger = logging.getLogger(__name__)


def check_file(path: Path, kind: DocumentKind | str) -> ValidationReport:
    """Validate ``path`` as a ``kind`` document and return the full report."""
    kind = DocumentKind(kind)
    path = Path(path)
    report = ValidationReport(path=path, kind=kind.value)

    try:
        value = load_canonical(path, kind)
    except LoadError as e:
        report.error = str(e)
        logger.error("%s", e)
        return report

    report.violations.extend(check_structure(value, kind))
    report.violations.extend(RULES[kind](value))

    for violation in report.violations:
        logger.warning("%s: %s", path, violation)
    if report.valid:
        logger.info("%s is a valid %s file", path, kind.value)
    return report


def validate_file(path: Path, kind: DocumentKind | str) -> bool:
    """``True`` when ``path`` loads and passes both validation layers."""
    return check_file(path, kind).valid
