"""
Program settings — where tranquility keeps its files.

Loaded, reset and repaired by ``tranquility.core.config.settings``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel

LogOutput = Literal["primary", "stdout"]


class Settings(BaseModel):
    """Persisted settings file (``config.yaml`` and friends)."""

    applications_file: Path | None = None
    vps_file: Path | None = None
    log_directory: Path | None = None
    log_output: LogOutput = "primary"
