"""
VPS model — remote host connection profiles.

Ports may be written as numbers or strings (``22`` or ``"22"``); the
effective port defaults to 22 and the effective user falls back to the
current login name.
"""

from __future__ import annotations

import os
import re
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_SSH_PORT = 22


def generate_id(name: str | None, host: str, user: str | None) -> str:
    """Derive an id from name (or host) and user: ``My Box`` → ``my-box-root``."""
    base = (name or host).lower()
    base = re.sub(r"[^a-z0-9]", "-", base).strip("-")
    return f"{base}-{user or 'user'}"


def unique_id(existing: set[str] | frozenset[str], candidate: str) -> str:
    """Return ``candidate`` or the first free ``candidate-N`` (N ≥ 1)."""
    if candidate not in existing:
        return candidate
    n = 1
    while f"{candidate}-{n}" in existing:
        n += 1
    return f"{candidate}-{n}"


class VpsEntry(BaseModel):
    """One remote host."""

    id: str | None = None
    name: str | None = None
    host: str = Field(min_length=1)
    user: str | None = None
    port: int | str | None = None
    private_key: str | None = None
    post_connect_script: str | None = None

    @property
    def effective_port(self) -> int:
        if self.port is None or self.port == "":
            return DEFAULT_SSH_PORT
        return int(self.port)

    @property
    def effective_user(self) -> str:
        return self.user or os.environ.get("USER") or os.environ.get("USERNAME") or "user"

    @property
    def label(self) -> str:
        return self.name or self.host


class VpsConfig(BaseModel):
    """Root of a VPS file."""

    vps: list[VpsEntry] = Field(default_factory=list)


# ── XML mirror ──────────────────────────────────────────────────
#
# XML carries no type information: every scalar arrives as text.


class VpsEntryXml(BaseModel):
    id: str | None = None
    name: str | None = None
    host: str = ""
    user: str | None = None
    port: str | None = None
    private_key: str | None = None
    post_connect_script: str | None = None


class VpsConfigXml(BaseModel):
    vps: list[VpsEntryXml] = Field(default_factory=list)

    def to_canonical(self) -> dict[str, Any]:
        """Dump to the canonical value; all-digit ports become integers."""
        data = self.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        for entry in data.get("vps", []):
            port = entry.get("port")
            if isinstance(port, str) and port.strip().isdigit():
                entry["port"] = int(port.strip())
        return data
