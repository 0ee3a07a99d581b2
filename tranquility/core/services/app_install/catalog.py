"""
L0 Data — Application catalog.

Built-in applications plus whatever the user's applications file adds.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from tranquility.core.config.settings import resolved
from tranquility.core.models.application import (
    Application,
    ApplicationList,
    ApplicationVersion,
    InstallMethod,
)
from tranquility.core.models.category import Category
from tranquility.core.models.package_manager import PackageManager
from tranquility.core.models.settings import Settings
from tranquility.core.models.system import SystemInfo, SystemSupport
from tranquility.core.services.app_install.resolver import filter_apps
from tranquility.core.services.validation import DocumentKind, LoadError, load_canonical

logger = logging.getLogger(__name__)


BUILTIN_APPS: tuple[Application, ...] = (
    Application(
        name="Alacritty",
        categories=[Category.TERMINAL_EMULATORS],
        supported_systems=[SystemSupport.MAC_LIN],
        versions=[
            ApplicationVersion(
                name="Alacritty",
                check_command="alacritty --version",
                dependencies=["cmake"],
                install_methods=[
                    InstallMethod(
                        os=["Ubuntu", "Debian"],
                        package_manager=PackageManager.APT,
                        package_name="alacritty",
                    ),
                ],
            ),
        ],
    ),
    Application(
        id="fish-shell",
        name="Fish Shell",
        server_compatible=True,
        categories=[Category.SHELLS],
        supported_systems=[SystemSupport.MAC_LIN],
        versions=[
            ApplicationVersion(
                name="Fish",
                check_command="fish --version",
                install_methods=[
                    InstallMethod(
                        os=["Linux", "Macos"],
                        package_manager=PackageManager.APT,
                        package_name="fish",
                    ),
                ],
            ),
        ],
    ),
    Application(
        id="zsh-shell",
        name="ZSH Shell",
        server_compatible=True,
        categories=[Category.SHELLS],
        supported_systems=[SystemSupport.MAC_LIN],
        versions=[
            ApplicationVersion(
                name="ZSH",
                check_command="zsh --version",
                install_methods=[
                    InstallMethod(
                        os=["Linux", "Macos"],
                        package_manager=PackageManager.APT,
                        package_name="zsh",
                    ),
                ],
            ),
        ],
    ),
)


class ApplicationCatalog:
    """Applications known to this invocation."""

    def __init__(self, settings: Settings) -> None:
        self.settings = resolved(settings)

    def user_apps(self) -> list[Application]:
        """Applications from the configured file; ``[]`` when absent or broken."""
        path = self.settings.applications_file
        if path is None or not path.is_file():
            return []
        try:
            data = load_canonical(path, DocumentKind.APPLICATIONS)
            return ApplicationList.model_validate(data).applications
        except (LoadError, ValidationError) as e:
            logger.error("Cannot load applications from %s: %s", path, e)
            return []

    def get_apps(self) -> list[Application]:
        apps = [app.model_copy(deep=True) for app in BUILTIN_APPS]
        apps.extend(self.user_apps())
        return apps

    def filter_apps(
        self,
        system: SystemInfo,
        server_only: bool = False,
        categories: list[Category] | None = None,
    ) -> list[Application]:
        return filter_apps(self.get_apps(), system, server_only, categories)
