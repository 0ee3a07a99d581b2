"""
Configuration validation — package re-exports.

    from tranquility.core.services.validation import validate_file, DocumentKind
"""

from tranquility.core.services.validation.loader import (  # noqa: F401
    SUPPORTED_EXTENSIONS,
    DocumentKind,
    LoadError,
    ParseError,
    ReadError,
    UnsupportedExtension,
    file_format,
    load_canonical,
    save_document,
)
from tranquility.core.services.validation.pipeline import (  # noqa: F401
    check_file,
    validate_file,
)
from tranquility.core.services.validation.report import (  # noqa: F401
    ValidationReport,
    Violation,
)
from tranquility.core.services.validation.schema import schema_for  # noqa: F401
