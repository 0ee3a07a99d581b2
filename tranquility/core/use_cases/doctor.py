"""
Doctor use case — check (and optionally repair) the local setup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tranquility.core.config.settings import (
    SettingsError,
    fix_settings,
    resolved,
    settings_path,
)
from tranquility.core.models.settings import Settings
from tranquility.core.models.system import SystemInfo
from tranquility.core.services.app_install.catalog import ApplicationCatalog
from tranquility.core.services.package_managers import PackageManagerRegistry
from tranquility.core.services.validation import DocumentKind, check_file
from tranquility.core.services.vps_store import VpsStore, VpsStoreError


@dataclass
class DoctorReport:
    """Result of a doctor run."""

    system: dict[str, Any] = field(default_factory=dict)
    package_managers: dict[str, bool] = field(default_factory=dict)
    app_count: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    fixes: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "system": self.system,
            "package_managers": self.package_managers,
            "app_count": self.app_count,
            "errors": self.errors,
            "warnings": self.warnings,
            "fixes": self.fixes,
        }


def run_doctor(
    settings: Settings,
    system: SystemInfo,
    registry: PackageManagerRegistry,
    fix: bool = False,
    config_path: Path | None = None,
) -> DoctorReport:
    """Inspect settings, data files, log directory and package managers."""
    report = DoctorReport(system=system.to_dict())

    if fix:
        try:
            settings, changes = fix_settings(config_path)
            report.fixes.extend(changes)
        except SettingsError as e:
            report.errors.append(str(e))
    settings = resolved(settings)

    cfg = config_path or settings_path()
    if cfg.is_file():
        cfg_report = check_file(cfg, DocumentKind.CONFIG)
        if not cfg_report.valid:
            report.errors.append(f"settings file {cfg} is invalid")
    else:
        report.warnings.append(f"no settings file at {cfg}")

    # ── Data files ──
    apps_file = settings.applications_file
    if apps_file and apps_file.is_file():
        if not check_file(apps_file, DocumentKind.APPLICATIONS).valid:
            report.errors.append(f"applications file {apps_file} is invalid")
    else:
        report.warnings.append(f"no applications file at {apps_file} (built-ins only)")

    vps_file = settings.vps_file
    if vps_file and vps_file.is_file():
        try:
            if fix:
                VpsStore(vps_file).load()  # load() repairs and saves
                report.fixes.append(f"checked ids in {vps_file}")
            if not check_file(vps_file, DocumentKind.VPS).valid:
                report.errors.append(f"VPS file {vps_file} is invalid")
        except VpsStoreError as e:
            report.errors.append(str(e))

    # ── Log directory ──
    log_dir = settings.log_directory
    if log_dir is not None:
        if not log_dir.is_dir() and fix:
            log_dir.mkdir(parents=True, exist_ok=True)
            report.fixes.append(f"created {log_dir}")
        if not log_dir.is_dir():
            report.warnings.append(f"log directory {log_dir} does not exist")
        elif not os.access(log_dir, os.W_OK):
            report.errors.append(f"log directory {log_dir} is not writable")

    # ── Package managers ──
    supported = registry.supported()
    if not supported:
        report.warnings.append(f"no known package managers for {system.distro_id or system.os_type}")
    for pm in supported:
        report.package_managers[pm.value] = registry.check_installed(pm)

    report.app_count = len(ApplicationCatalog(settings).filter_apps(system))
    return report
