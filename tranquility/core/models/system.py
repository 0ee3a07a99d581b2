"""
System support model — OS bit flags and the current-system snapshot.

``SystemInfo`` is computed once per invocation (see
``tranquility.core.services.system.detect_system``) and treated as
read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Any


class OsSupport(IntFlag):
    """Operating systems as combinable bit flags."""

    LINUX = 1
    WINDOWS = 2
    MACOS = 4

    @classmethod
    def from_os_type(cls, os_type: str) -> OsSupport | None:
        """Map a normalized OS name to its flag, ``None`` if unsupported."""
        return _OS_FLAGS.get(os_type.lower())


_OS_FLAGS = {
    "linux": OsSupport.LINUX,
    "windows": OsSupport.WINDOWS,
    "macos": OsSupport.MACOS,
}


class SystemSupport(str, Enum):
    """Supported-systems tag declared by an application."""

    CROSS = "Cross"
    MAC_LIN = "MacLin"
    LIN_WIN = "LinWin"
    WIN_MAC = "WinMac"
    LINUX = "Linux"
    WINDOWS = "Windows"
    MACOS = "MacOS"

    @property
    def flags(self) -> OsSupport:
        return _SUPPORT_FLAGS[self]


_SUPPORT_FLAGS = {
    SystemSupport.CROSS: OsSupport.LINUX | OsSupport.WINDOWS | OsSupport.MACOS,
    SystemSupport.MAC_LIN: OsSupport.MACOS | OsSupport.LINUX,
    SystemSupport.LIN_WIN: OsSupport.LINUX | OsSupport.WINDOWS,
    SystemSupport.WIN_MAC: OsSupport.WINDOWS | OsSupport.MACOS,
    SystemSupport.LINUX: OsSupport.LINUX,
    SystemSupport.WINDOWS: OsSupport.WINDOWS,
    SystemSupport.MACOS: OsSupport.MACOS,
}


@dataclass(frozen=True)
class SystemInfo:
    """Facts about the machine tranquility runs on."""

    os_type: str                 # Linux, Macos, Windows (or raw platform name)
    distro_id: str = ""          # ubuntu, fedora, arch, macos, windows, ...
    distro_name: str = ""
    version: str = ""
    arch: str = ""
    cpu_brand: str = ""

    @property
    def os_flag(self) -> OsSupport | None:
        return OsSupport.from_os_type(self.os_type)

    @property
    def is_windows(self) -> bool:
        return self.os_type.lower() == "windows"

    def matches_os(self, identifier: str) -> bool:
        """Case-insensitive match against the OS name or the distro id."""
        wanted = identifier.strip().lower()
        return wanted in (self.os_type.lower(), self.distro_id.lower())

    def to_dict(self) -> dict[str, Any]:
        return {
            "os_type": self.os_type,
            "distro_id": self.distro_id,
            "distro_name": self.distro_name,
            "version": self.version,
            "arch": self.arch,
            "cpu_brand": self.cpu_brand,
        }
