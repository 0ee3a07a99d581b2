"""
Canonical loader — any supported file format to one in-memory value.

JSON and YAML parse straight to plain data. XML is first read into the
document kind's typed mirror model, then dumped to plain data. Errors
here are fail-fast: nothing is validated when a file cannot be loaded.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any
from xml.etree.ElementTree import ParseError as XmlParseError

import yaml
from pydantic import BaseModel, ValidationError

from tranquility.core.models.application import ApplicationList
from tranquility.core.models.settings import Settings
from tranquility.core.models.vps import VpsConfig, VpsConfigXml
from tranquility.core.services.validation.xml_codec import dump_xml, parse_xml

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("yaml", "yml", "json", "xml")


class LoadError(Exception):
    """A file could not be turned into a canonical value."""


class UnsupportedExtension(LoadError):
    """File extension is not one of json, yaml, yml, xml."""


class ReadError(LoadError):
    """File could not be read."""


class ParseError(LoadError):
    """File content is not well-formed for its format."""


class DocumentKind(str, Enum):
    """The three kinds of documents tranquility reads."""

    APPLICATIONS = "applications"
    VPS = "vps"
    CONFIG = "config"

    @property
    def model(self) -> type[BaseModel]:
        return {
            DocumentKind.APPLICATIONS: ApplicationList,
            DocumentKind.VPS: VpsConfig,
            DocumentKind.CONFIG: Settings,
        }[self]

    @property
    def xml_mirror(self) -> type[BaseModel]:
        if self is DocumentKind.VPS:
            return VpsConfigXml
        return self.model

    @property
    def root_key(self) -> str | None:
        """Key a bare top-level array is wrapped under."""
        if self is DocumentKind.CONFIG:
            return None
        return self.value

    @property
    def xml_root(self) -> str:
        return {
            DocumentKind.APPLICATIONS: "ApplicationList",
            DocumentKind.VPS: "VpsConfig",
            DocumentKind.CONFIG: "TranquilityConfig",
        }[self]


def file_format(path: Path) -> str:
    """Lowercased extension without the dot.

    Raises:
        UnsupportedExtension: not json/yaml/yml/xml.
    """
    ext = path.suffix.lower().lstrip(".")
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedExtension(
            f"Unsupported file extension '{path.suffix or '<none>'}' for {path} "
            f"(expected one of: {', '.join(SUPPORTED_EXTENSIONS)})"
        )
    return ext


def parse_text(text: str, fmt: str, kind: DocumentKind) -> Any:
    """Parse ``text`` in format ``fmt`` into a canonical value.

    Raises:
        ParseError: malformed content.
    """
    if fmt == "json":
        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON: {e}") from e
    elif fmt in ("yaml", "yml"):
        try:
            value = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParseError(f"Invalid YAML: {e}") from e
    else:
        try:
            mirror = parse_xml(text, kind.xml_mirror)
        except XmlParseError as e:
            raise ParseError(f"Invalid XML: {e}") from e
        except ValidationError as e:
            raise ParseError(f"XML does not match the {kind.value} structure: {e}") from e
        if isinstance(mirror, VpsConfigXml):
            value = mirror.to_canonical()
        else:
            value = mirror.model_dump(mode="json", exclude_unset=True, exclude_none=True)

    if isinstance(value, list) and kind.root_key:
        value = {kind.root_key: value}
    return value


def load_canonical(path: Path, kind: DocumentKind) -> Any:
    """Read ``path`` and return its canonical value.

    Raises:
        UnsupportedExtension: extension not supported.
        ReadError: file missing, unreadable or not UTF-8.
        ParseError: content malformed.
    """
    path = Path(path)
    fmt = file_format(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ReadError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ReadError(f"Cannot read {path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e

    logger.debug("Loading %s document from %s", kind.value, path)
    try:
        return parse_text(text, fmt, kind)
    except ParseError as e:
        raise ParseError(f"{path}: {e}") from e


def render_document(data: dict[str, Any], fmt: str, kind: DocumentKind) -> str:
    """Serialize canonical ``data`` in format ``fmt``."""
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt in ("yaml", "yml"):
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return dump_xml(data, kind.xml_root)


def save_document(path: Path, model: BaseModel, kind: DocumentKind) -> None:
    """Write ``model`` to ``path`` in the format its extension names.

    Atomic: written to a temp file in the same directory, then renamed.
    """
    path = Path(path)
    fmt = file_format(path)
    data = model.model_dump(mode="json", exclude_none=True)
    text = render_document(data, fmt, kind)

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    logger.debug("Saved %s document to %s", kind.value, path)
