"""
Package manager registry — availability, bootstrap and uniform operations.

Every manager is one row in ``MANAGERS``: executable, argv templates for
install / uninstall / update, and an optional bootstrap. A single
``build_command`` renders any operation from that table.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import click

from tranquility.adapters.shell.command import (
    ExecutionFailure,
    ShellCommand,
    command_exists,
)
from tranquility.core.models.package_manager import PackageManager
from tranquility.core.models.result import CommandResult
from tranquility.core.models.system import SystemInfo

logger = logging.getLogger(__name__)

PM = PackageManager
PKG = "{package}"


@dataclass(frozen=True)
class ManagerSpec:
    """Command table row for one package manager."""

    executable: str
    install: tuple[str, ...]
    uninstall: tuple[str, ...]
    update: tuple[tuple[str, ...], ...] = ()
    convenience: bool = False     # tranquility may bootstrap it


MANAGERS: dict[PackageManager, ManagerSpec] = {
    PM.APT: ManagerSpec(
        "apt", ("install", PKG, "-y"), ("remove", PKG, "-y"),
        update=(("update",), ("upgrade", "-y")),
    ),
    PM.DNF: ManagerSpec(
        "dnf", ("install", PKG, "-y"), ("remove", PKG, "-y"),
        update=(("upgrade", "-y"),),
    ),
    PM.YUM: ManagerSpec(
        "yum", ("install", PKG, "-y"), ("remove", PKG, "-y"),
        update=(("update", "-y"),),
    ),
    PM.ZYPPER: ManagerSpec(
        "zypper", ("install", "-y", PKG), ("remove", "-y", PKG),
        update=(("refresh",), ("update", "-y")),
    ),
    PM.PORTAGE: ManagerSpec(
        "emerge", (PKG,), ("-C", PKG),
        update=(("--sync",), ("-uDN", "@world")),
    ),
    PM.APK: ManagerSpec(
        "apk", ("add", PKG), ("del", PKG),
        update=(("update",), ("upgrade",)),
    ),
    PM.PACMAN: ManagerSpec(
        "pacman", ("-S", PKG, "--noconfirm"), ("-R", PKG, "--noconfirm"),
        update=(("-Syu", "--noconfirm"),),
    ),
    PM.YAY: ManagerSpec(
        "yay", ("-S", PKG, "--noconfirm"), ("-R", PKG, "--noconfirm"),
        update=(("-Syu", "--noconfirm"),), convenience=True,
    ),
    PM.NIX: ManagerSpec(
        "nix-env", ("-iA", f"nixpkgs.{PKG}"), ("-e", PKG),
        update=(("-u",),), convenience=True,
    ),
    PM.FLATPAK: ManagerSpec(
        "flatpak", ("install", "flathub", PKG), ("uninstall", "-y", PKG),
        update=(("update", "-y"),), convenience=True,
    ),
    PM.SNAP: ManagerSpec(
        "snap", ("install", PKG), ("remove", PKG),
        update=(("refresh",),), convenience=True,
    ),
    PM.BREW: ManagerSpec(
        "brew", ("install", PKG), ("uninstall", PKG),
        update=(("update",), ("upgrade",)), convenience=True,
    ),
    PM.CHOCO: ManagerSpec(
        "choco", ("install", PKG, "-y"), ("uninstall", PKG, "-y"),
        update=(("upgrade", "all", "-y"),), convenience=True,
    ),
    PM.WINGET: ManagerSpec(
        "winget", ("install", PKG), ("uninstall", PKG),
        update=(("upgrade", "--all"),),
    ),
    PM.SCOOP: ManagerSpec(
        "scoop", ("install", PKG), ("uninstall", PKG),
        update=(("update", "*"),), convenience=True,
    ),
}

# ── Availability by OS family ───────────────────────────────────

_DEBIAN = (PM.APT, PM.SNAP, PM.FLATPAK, PM.NIX)

SUPPORTED_ON: dict[str, tuple[PackageManager, ...]] = {
    "debian": _DEBIAN,
    "fedora": (PM.DNF, PM.SNAP, PM.FLATPAK, PM.NIX),
    "redhat": (PM.YUM, PM.NIX),
    "alpine": (PM.APK, PM.NIX),
    "arch": (PM.PACMAN, PM.YAY, PM.FLATPAK, PM.SNAP, PM.NIX),
    "suse": (PM.ZYPPER, PM.NIX),
    "gentoo": (PM.PORTAGE, PM.NIX),
    "macos": (PM.BREW, PM.NIX),
    "windows": (PM.WINGET, PM.CHOCO, PM.SCOOP, PM.NIX),
}

_FAMILY_ALIASES = {
    "ubuntu": "debian",
    "debian": "debian",
    "pop": "debian",
    "linuxmint": "debian",
    "linux": "debian",
    "fedora": "fedora",
    "redhat": "redhat",
    "rhel": "redhat",
    "centos": "redhat",
    "rocky": "redhat",
    "almalinux": "redhat",
    "alpine": "alpine",
    "arch": "arch",
    "manjaro": "arch",
    "endeavouros": "arch",
    "suse": "suse",
    "opensuse": "suse",
    "opensuse-leap": "suse",
    "opensuse-tumbleweed": "suse",
    "sles": "suse",
    "gentoo": "gentoo",
    "macos": "macos",
    "darwin": "macos",
    "windows": "windows",
}


def os_family(os_id: str) -> str | None:
    """Map a distro id or OS name to its package-manager family."""
    return _FAMILY_ALIASES.get(os_id.strip().lower())


def supported_on(os_id: str) -> list[PackageManager]:
    """Ordered managers available for an OS (``[]`` when unknown)."""
    family = os_family(os_id)
    if family is None:
        return []
    return list(SUPPORTED_ON[family])


def build_command(
    pm: PackageManager,
    operation: str,
    package: str = "",
    *,
    cask: bool | None = None,
) -> list[ShellCommand]:
    """Render ``install`` / ``uninstall`` / ``update`` for ``pm``."""
    spec = MANAGERS[pm]
    if operation == "update":
        templates = spec.update
    elif operation in ("install", "uninstall"):
        templates = (getattr(spec, operation),)
    else:
        raise ValueError(f"Unknown package manager operation: {operation}")

    commands = []
    for template in templates:
        args = [a.replace(PKG, package) for a in template]
        if pm is PM.BREW and operation == "install" and cask:
            args.insert(1, "--cask")
        commands.append(
            ShellCommand(spec.executable).with_args(args).with_sudo(pm.requires_sudo)
        )
    return commands


# ── Bootstrap scripts ───────────────────────────────────────────

_BREW_SCRIPT = (
    '/bin/bash -c "$(curl -fsSL '
    'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)
_CHOCO_SCRIPT = (
    "Set-ExecutionPolicy Bypass -Scope Process -Force; "
    "[System.Net.ServicePointManager]::SecurityProtocol = "
    "[System.Net.ServicePointManager]::SecurityProtocol -bor 3072; "
    "iex ((New-Object System.Net.WebClient).DownloadString("
    "'https://community.chocolatey.org/install.ps1'))"
)
_SCOOP_SCRIPT = "iwr -useb get.scoop.sh | iex"
_YAY_SCRIPT = (
    "git clone https://aur.archlinux.org/yay.git /tmp/yay && "
    "cd /tmp/yay && makepkg -si --noconfirm && rm -rf /tmp/yay"
)
_NIX_SCRIPT = "sh <(curl -L https://nixos.org/nix/install) {mode}"

# snap / flatpak come from the distro's own manager
_NATIVE_FOR_FAMILY = {"debian": PM.APT, "fedora": PM.DNF, "arch": PM.PACMAN}


class PackageManagerRegistry:
    """Uniform operations over every package manager on one system.

    Args:
        system: Current system snapshot.
        confirm: Prompt used before bootstrapping a missing manager.
    """

    def __init__(
        self,
        system: SystemInfo,
        confirm: Callable[..., bool] = click.confirm,
    ) -> None:
        self.system = system
        self.confirm = confirm

    # ── Availability ────────────────────────────────────────────

    def supported(self) -> list[PackageManager]:
        return supported_on(self.system.distro_id or self.system.os_type)

    def default_manager(self) -> PackageManager | None:
        """First manager of the OS family, else the first one on PATH."""
        supported = self.supported()
        if supported:
            return supported[0]
        for pm in (PM.APT, PM.DNF, PM.YUM, PM.APK, PM.PACMAN, PM.BREW, PM.WINGET):
            if self.check_installed(pm):
                return pm
        return None

    @staticmethod
    def check_installed(pm: PackageManager) -> bool:
        """PATH probe only; never installs anything."""
        return command_exists(MANAGERS[pm].executable)

    def check_install(self, pm: PackageManager) -> bool:
        """Probe ``pm``; offer to bootstrap it when it is a convenience manager."""
        if self.check_installed(pm):
            return True

        if not MANAGERS[pm].convenience:
            logger.error(
                "Package manager '%s' is not installed. Please install it manually.", pm,
            )
            return False

        if not self.confirm(f"{pm} is not installed. Install it?", default=True):
            logger.info("Skipped bootstrapping %s", pm)
            return False

        commands = self._bootstrap_commands(pm)
        if not commands:
            logger.error("Don't know how to install %s on %s", pm, self.system.distro_id)
            return False

        try:
            for cmd in commands:
                cmd.run()
        except ExecutionFailure as e:
            logger.error("Failed to install %s: %s", pm, e)
            return False

        click.secho(
            f"⚠️  {pm} installed — you may need to restart your terminal.", fg="yellow",
        )
        return True

    def bootstrap_missing(self) -> list[PackageManager]:
        """Run ``check_install`` over every supported manager; return the usable ones."""
        return [pm for pm in self.supported() if self.check_install(pm)]

    def _bootstrap_commands(self, pm: PackageManager) -> list[ShellCommand]:
        if pm is PM.BREW:
            return [ShellCommand.from_script(_BREW_SCRIPT)]
        if pm is PM.CHOCO:
            return [ShellCommand.from_script(_CHOCO_SCRIPT)]
        if pm is PM.SCOOP:
            return [ShellCommand.from_script(_SCOOP_SCRIPT)]
        if pm is PM.YAY:
            return [
                ShellCommand("pacman").with_args(
                    ["-S", "--needed", "git", "base-devel", "--noconfirm"]
                ).with_sudo(True),
                ShellCommand.from_script(_YAY_SCRIPT),
            ]
        if pm is PM.NIX:
            mode = "--no-daemon"
            if self.system.os_type.lower() == "linux" and self.confirm(
                "Install nix with the multi-user daemon?", default=True,
            ):
                mode = "--daemon"
            elif self.system.os_type.lower() == "macos":
                mode = ""
            return [ShellCommand("bash").with_args(["-c", _NIX_SCRIPT.format(mode=mode).strip()])]
        if pm in (PM.SNAP, PM.FLATPAK):
            native = _NATIVE_FOR_FAMILY.get(os_family(self.system.distro_id) or "")
            if native is None:
                return []
            package = "snapd" if pm is PM.SNAP else "flatpak"
            return build_command(native, "install", package)
        return []

    # ── Operations ──────────────────────────────────────────────

    def install(
        self,
        pm: PackageManager,
        package: str,
        *,
        cask: bool | None = None,
        dry_run: bool = False,
        use_sudo: bool | None = None,
    ) -> CommandResult:
        """Install ``package`` through ``pm``.

        Raises:
            ExecutionFailure: the package manager command failed.
        """
        if pm is PM.NIX:
            return self._nix_guidance(f"nix-env -iA nixpkgs.{package}")
        return self._run(build_command(pm, "install", package, cask=cask), dry_run, use_sudo)

    def uninstall(
        self,
        pm: PackageManager,
        package: str,
        *,
        dry_run: bool = False,
        use_sudo: bool | None = None,
    ) -> CommandResult:
        if pm is PM.NIX:
            return self._nix_guidance(f"nix-env -e {package}")
        return self._run(build_command(pm, "uninstall", package), dry_run, use_sudo)

    def update(
        self,
        pm: PackageManager,
        *,
        dry_run: bool = False,
        use_sudo: bool | None = None,
    ) -> CommandResult:
        """Refresh indexes and upgrade everything managed by ``pm``."""
        if pm is PM.NIX:
            return self._nix_guidance("nix-channel --update && nix-env -u")
        return self._run(build_command(pm, "update"), dry_run, use_sudo)

    @staticmethod
    def _run(
        commands: list[ShellCommand],
        dry_run: bool,
        use_sudo: bool | None,
    ) -> CommandResult:
        result: CommandResult | None = None
        for cmd in commands:
            if use_sudo is not None:
                cmd.with_sudo(use_sudo)
            result = cmd.run(dry_run)
        if result is None:
            raise ValueError("no commands to run")
        return result

    @staticmethod
    def _nix_guidance(command: str) -> CommandResult:
        logger.warning("nix packages are not managed automatically; run: %s", command)
        click.secho(f"💡 Run manually: {command}", fg="yellow")
        return CommandResult.skip(command, "nix operations are manual")
