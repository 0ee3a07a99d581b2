"""
Application categories — closed set of tags used for filtering.

The serialized value is the PascalCase tag (``TerminalEmulators``).
Each tag also has a display name and a kebab-case CLI name.
"""

from __future__ import annotations

import re
from enum import Enum


class Category(str, Enum):
    """Category tag attached to an application."""

    FONTS = "Fonts"
    PACKAGE_MANAGEMENT = "PackageManagement"
    SHELLS = "Shells"
    BROWSERS = "Browsers"
    SERVERS = "Servers"
    TERMINAL_EMULATORS = "TerminalEmulators"
    PASSWORD_MANAGEMENT = "PasswordManagement"
    ENCRYPTION = "Encryption"
    REMOTE_DESKTOP = "RemoteDesktop"
    VPN = "VPN"
    DOWNLOAD_MANAGEMENT = "DownloadManagement"
    IMAGING = "Imaging"
    WINDOW_MANAGEMENT = "WindowManagement"
    CLI_TOOLS = "CLITools"
    CUSTOMIZATION = "Customization"
    COMMUNICATION = "Communication"
    CREATIVE = "Creative"
    PRODUCTIVITY = "Productivity"
    UTILITIES = "Utilities"
    OFFICE = "Office"
    OFFICE_ADDONS = "OfficeAddons"
    NOTE_TAKING = "NoteTaking"
    TASK_MANAGEMENT = "TaskManagement"
    VIRTUALIZATION = "Virtualization"
    GAMING = "Gaming"
    NETWORKING = "Networking"
    ESSENTIAL = "Essential"
    DEVELOPMENT = "Development"
    RECORDING = "Recording"
    STREAMING = "Streaming"
    DATABASE_MANAGEMENT = "DatabaseManagement"
    PROGRAMMING_LANGUAGES = "ProgrammingLanguages"
    EDITORS = "Editors"
    CONTAINERIZATION = "Containerization"
    ENGINES = "Engines"
    AI = "AI"
    DEV_TOOLS = "DevTools"

    @property
    def display_name(self) -> str:
        """Human label, e.g. ``Terminal Emulators``."""
        return _DISPLAY_OVERRIDES.get(self, _split_words(self.value))

    @property
    def cli_name(self) -> str:
        """Kebab-case name accepted on the command line."""
        return "-".join(_split_words(self.value).lower().split())

    @classmethod
    def parse(cls, text: str) -> Category:
        """Look up a category by tag, display name or CLI name."""
        wanted = re.sub(r"[^a-z0-9]", "", text.lower())
        for cat in cls:
            if re.sub(r"[^a-z0-9]", "", cat.value.lower()) == wanted:
                return cat
        raise ValueError(f"Unknown category: {text}")


_DISPLAY_OVERRIDES = {
    Category.CLI_TOOLS: "CLI Tools",
    Category.VPN: "VPN",
    Category.AI: "AI",
    Category.DEV_TOOLS: "Development Tools",
    Category.OFFICE_ADDONS: "Office Add-ons",
}


def _split_words(tag: str) -> str:
    return re.sub(r"(?<=[a-z])(?=[A-Z])", " ", tag)
