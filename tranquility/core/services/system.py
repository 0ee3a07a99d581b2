"""
System detection — one read-only snapshot per invocation.

Linux distribution facts come from ``distro``; everything else from
``platform``.
"""

from __future__ import annotations

import logging
import platform

import distro

from tranquility.core.models.system import SystemInfo

logger = logging.getLogger(__name__)

_OS_NAMES = {"Linux": "Linux", "Darwin": "Macos", "Windows": "Windows"}


def detect_system() -> SystemInfo:
    """Inspect the running machine."""
    raw = platform.system()
    os_type = _OS_NAMES.get(raw, raw or "Unknown")

    if os_type == "Linux":
        distro_id = distro.id() or "linux"
        distro_name = distro.name(pretty=True) or "Linux (unknown)"
        version = distro.version()
    elif os_type == "Macos":
        distro_id = "macos"
        version = platform.mac_ver()[0]
        distro_name = f"macOS {version}".strip()
    elif os_type == "Windows":
        distro_id = "windows"
        version = platform.version()
        distro_name = f"Windows {platform.release()}".strip()
    else:
        distro_id = raw.lower()
        distro_name = raw
        version = platform.release()

    info = SystemInfo(
        os_type=os_type,
        distro_id=distro_id,
        distro_name=distro_name,
        version=version,
        arch=platform.machine(),
        cpu_brand=platform.processor(),
    )
    logger.debug("Detected system: %s", info)
    return info
