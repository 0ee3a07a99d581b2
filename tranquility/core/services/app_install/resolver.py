"""
L2 Resolver — Application filtering and install method selection.

Pure decisions over the catalog and the system snapshot: which
applications apply here, whether one is already installed, and which
install method to use. Nothing here spawns a process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from tranquility.adapters.shell.command import command_exists
from tranquility.core.models.application import (
    Application,
    ApplicationVersion,
    InstallMethod,
)
from tranquility.core.models.category import Category
from tranquility.core.models.system import SystemInfo

logger = logging.getLogger(__name__)


class ResolutionFailure(Exception):
    """No usable install method for an application on this system."""

    def __init__(self, app: Application, reason: str) -> None:
        self.app = app
        self.reason = reason
        super().__init__(f"{app.name}: {reason}")


@dataclass(frozen=True)
class ResolvedMethod:
    """The selected method and where it sits in the application tree."""

    version: ApplicationVersion
    method: InstallMethod
    version_index: int
    method_index: int

    def trace(self) -> dict[str, Any]:
        return {
            "version": self.version.name,
            "version_index": self.version_index,
            "method_index": self.method_index,
            "os": list(self.method.os),
            "method": self.method.describe(),
        }


def filter_apps(
    apps: list[Application],
    system: SystemInfo,
    server_only: bool = False,
    categories: list[Category] | None = None,
) -> list[Application]:
    """Applications supported on this OS, optionally server-only and by category."""
    flag = system.os_flag
    if flag is None:
        logger.error("Unsupported operating system: %s", system.os_type)
        return []

    wanted = set(categories or [])
    return [
        app for app in apps
        if app.os_flags & flag
        and (not server_only or app.server_compatible)
        and (not wanted or wanted.intersection(app.categories))
    ]


def is_installed(app: Application) -> bool:
    """Whether the first version's check command is on PATH.

    Only the program name is probed; a broken install that still leaves
    the binary on PATH counts as installed.
    """
    check = app.check_command
    if not check or not check.split():
        return False
    return command_exists(check.split()[0])


def select_method(app: Application, system: SystemInfo) -> ResolvedMethod:
    """First install method, in declaration order, whose OS list matches.

    Raises:
        ResolutionFailure: no method lists the current OS.
    """
    for vi, version in enumerate(app.versions):
        for mi, method in enumerate(version.install_methods):
            if any(system.matches_os(os_name) for os_name in method.os):
                logger.debug(
                    "%s: selected version %d method %d (%s)",
                    app.name, vi, mi, method.describe(),
                )
                return ResolvedMethod(version, method, vi, mi)
    raise ResolutionFailure(app, f"no install method for {system.os_type}")
