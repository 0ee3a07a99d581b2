"""
VPS store — load, repair and persist remote host profiles.

The file keeps its own format: a YAML file is saved back as YAML, an
XML file as XML. Loading repairs ids (generated when missing, suffixed
when duplicated) and expands ``~`` in key and script paths; the
repaired file is written back only when something changed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError

from tranquility.core.models.vps import VpsConfig, VpsEntry, generate_id, unique_id
from tranquility.core.services.validation import (
    DocumentKind,
    LoadError,
    load_canonical,
    save_document,
)
from tranquility.core.services.validation.loader import render_document

logger = logging.getLogger(__name__)

OnConflict = Literal["cancel", "overwrite", "rename"]


class VpsStoreError(Exception):
    """The VPS file cannot be loaded, saved or changed as asked."""


def expand_path(value: str | None) -> str | None:
    if not value:
        return value
    return os.path.expandvars(os.path.expanduser(value))


def fix_config(config: VpsConfig) -> bool:
    """Repair ids and paths in place; return whether anything changed."""
    changed = False
    explicit = {entry.id for entry in config.vps if entry.id}
    seen: set[str] = set()
    for entry in config.vps:
        if entry.id and entry.id not in seen:
            final = entry.id
        else:
            wanted = entry.id or generate_id(entry.name, entry.host, entry.user)
            final = unique_id(seen | explicit, wanted)
        if final != entry.id:
            logger.info("VPS %s: id %r → %r", entry.label, entry.id, final)
            entry.id = final
            changed = True
        seen.add(final)

        for attr in ("private_key", "post_connect_script"):
            current = getattr(entry, attr)
            expanded = expand_path(current)
            if expanded != current:
                setattr(entry, attr, expanded)
                changed = True
    return changed


class VpsStore:
    """VPS profiles persisted at ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> VpsConfig:
        """Read, repair and (if repaired) save back the VPS file.

        Raises:
            VpsStoreError: unreadable, malformed or structurally invalid file.
        """
        if not self.path.is_file():
            return VpsConfig()
        try:
            data = load_canonical(self.path, DocumentKind.VPS)
            config = VpsConfig.model_validate(data or {})
        except (LoadError, ValidationError) as e:
            raise VpsStoreError(f"Cannot load VPS file {self.path}: {e}") from e

        if fix_config(config):
            self.save(config)
        return config

    def save(self, config: VpsConfig) -> None:
        try:
            save_document(self.path, config, DocumentKind.VPS)
        except (OSError, LoadError) as e:
            raise VpsStoreError(f"Cannot save VPS file {self.path}: {e}") from e
        logger.info("Saved %d VPS entries to %s", len(config.vps), self.path)

    def get(self, vps_id: str) -> VpsEntry | None:
        return next((e for e in self.load().vps if e.id == vps_id), None)

    def add(self, entry: VpsEntry, on_conflict: OnConflict = "cancel") -> VpsEntry | None:
        """Add ``entry``; return the stored entry, ``None`` when cancelled."""
        config = self.load()
        entry = entry.model_copy()
        if not entry.id:
            entry.id = generate_id(entry.name, entry.host, entry.user)

        existing = {e.id for e in config.vps if e.id}
        if entry.id in existing:
            if on_conflict == "cancel":
                logger.info("VPS id %s already exists, not added", entry.id)
                return None
            if on_conflict == "overwrite":
                config.vps = [e for e in config.vps if e.id != entry.id]
            else:
                entry.id = unique_id(existing, entry.id)

        fix_config(VpsConfig(vps=[entry]))
        config.vps.append(entry)
        self.save(config)
        return entry

    def update(self, vps_id: str, **changes: Any) -> VpsEntry:
        """Apply non-``None`` ``changes`` to the entry with ``vps_id``.

        Raises:
            VpsStoreError: no such entry, or the result is invalid.
        """
        config = self.load()
        for i, entry in enumerate(config.vps):
            if entry.id != vps_id:
                continue
            data = entry.model_dump()
            data.update({k: v for k, v in changes.items() if v is not None})
            try:
                updated = VpsEntry.model_validate(data)
            except ValidationError as e:
                raise VpsStoreError(f"Invalid update for {vps_id}: {e}") from e
            new_id = updated.id or vps_id
            if new_id != vps_id and any(e.id == new_id for e in config.vps):
                raise VpsStoreError(f"VPS id {new_id} already exists")
            config.vps[i] = updated
            self.save(config)
            return updated
        raise VpsStoreError(f"No VPS with id {vps_id}")

    def delete(self, vps_id: str) -> bool:
        config = self.load()
        remaining = [e for e in config.vps if e.id != vps_id]
        if len(remaining) == len(config.vps):
            return False
        config.vps = remaining
        self.save(config)
        return True

    def delete_file(self) -> bool:
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.info("Deleted VPS file %s", self.path)
        return True


def schema_example(fmt: str = "yaml") -> str:
    """Example VPS document in ``fmt`` (yaml, json or xml)."""
    example = VpsConfig(vps=[
        VpsEntry(
            id="my-server-root",
            name="My Server",
            host="203.0.113.10",
            user="root",
            port=22,
            private_key="~/.ssh/id_ed25519",
            post_connect_script="~/scripts/welcome.sh",
        ),
        VpsEntry(name="Minimal", host="example.com"),
    ])
    return render_document(example.model_dump(mode="json", exclude_none=True), fmt, DocumentKind.VPS)
