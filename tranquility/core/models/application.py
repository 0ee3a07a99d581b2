"""
Application model — what can be installed and how.

An ``Application`` owns ordered ``ApplicationVersion`` entries, each of
which owns ordered ``InstallMethod`` entries. Resolution walks them in
declaration order and picks the first method matching the current OS.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, model_validator

from tranquility.core.models.category import Category
from tranquility.core.models.package_manager import PackageManager
from tranquility.core.models.system import OsSupport, SystemSupport


def to_kebab_case(text: str) -> str:
    """``Fish Shell`` → ``fish-shell``, ``VSCode`` → ``vs-code``."""
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", text)
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", text)
    words = re.split(r"[^A-Za-z0-9]+", text)
    return "-".join(w.lower() for w in words if w)


class InstallSteps(BaseModel):
    """Shell command lines run around (or instead of) a package manager."""

    preinstall_steps: list[str] = Field(default_factory=list)
    install: list[str] = Field(default_factory=list)
    postinstall_steps: list[str] = Field(default_factory=list)
    uninstall: list[str] = Field(default_factory=list)
    postuninstall_steps: list[str] = Field(default_factory=list)


class InstallMethod(BaseModel):
    """One way of installing an application on a set of OSes."""

    os: list[str] = Field(default_factory=list)
    package_manager: PackageManager | None = None
    package_name: str | None = None
    is_cask: bool | None = None
    steps: InstallSteps | None = None

    @property
    def has_package(self) -> bool:
        """Package manager and package name are both set."""
        return self.package_manager is not None and bool(self.package_name)

    @property
    def can_install(self) -> bool:
        return bool(self.steps and self.steps.install) or self.has_package

    @property
    def can_uninstall(self) -> bool:
        return bool(self.steps and self.steps.uninstall) or self.has_package

    def describe(self) -> str:
        if self.package_manager is not None:
            return f"{self.package_manager.value}:{self.package_name or '?'}"
        return "steps"


class ApplicationVersion(BaseModel):
    name: str
    check_command: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    install_methods: list[InstallMethod] = Field(default_factory=list)


class Application(BaseModel):
    """An installable application."""

    id: str | None = None
    name: str
    server_compatible: bool = False
    categories: list[Category]
    supported_systems: list[SystemSupport]
    versions: list[ApplicationVersion]

    @model_validator(mode="after")
    def _derive_id(self) -> Application:
        if not self.id:
            self.id = to_kebab_case(self.name)
        return self

    @property
    def os_flags(self) -> OsSupport:
        """Union of the flags of every supported-systems tag."""
        flags = OsSupport(0)
        for support in self.supported_systems:
            flags |= support.flags
        return flags

    @property
    def check_command(self) -> str | None:
        """Check command of the first version (``None`` if absent)."""
        if not self.versions:
            return None
        return self.versions[0].check_command


class ApplicationList(BaseModel):
    """Root of an applications file."""

    applications: list[Application] = Field(default_factory=list)
