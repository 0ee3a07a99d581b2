"""
Package manager identifiers.

Values are the lowercase canonical names used in configuration files
(``package_manager: apt``). Command tables live in
``tranquility.core.services.package_managers``.
"""

from __future__ import annotations

from enum import Enum


class PackageManager(str, Enum):
    """Closed set of package managers tranquility can drive."""

    APT = "apt"
    DNF = "dnf"
    YUM = "yum"
    ZYPPER = "zypper"
    PORTAGE = "portage"
    APK = "apk"
    PACMAN = "pacman"
    YAY = "yay"
    NIX = "nix"
    FLATPAK = "flatpak"
    SNAP = "snap"
    BREW = "brew"
    CHOCO = "choco"
    WINGET = "winget"
    SCOOP = "scoop"

    def __str__(self) -> str:
        return self.value

    @property
    def requires_sudo(self) -> bool:
        """Whether operations through this manager need elevation."""
        return self in _SUDO_MANAGERS


_SUDO_MANAGERS = frozenset({
    PackageManager.APT,
    PackageManager.APK,
    PackageManager.DNF,
    PackageManager.FLATPAK,
    PackageManager.PACMAN,
    PackageManager.PORTAGE,
    PackageManager.SNAP,
    PackageManager.YAY,
    PackageManager.ZYPPER,
})
