"""
L5 Orchestration — install / uninstall a batch of applications.

Per application: installed check → confirmation → resolution →
execution. A failure on one application is logged and recorded; the
batch always moves on to the next one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

import click

from tranquility.core.models.application import Application
from tranquility.core.models.system import SystemInfo
from tranquility.core.services.app_install.execution import InstallRunner, RunOutcome
from tranquility.core.services.app_install.resolver import (
    ResolutionFailure,
    is_installed,
    select_method,
)
from tranquility.core.services.package_managers import PackageManagerRegistry

logger = logging.getLogger(__name__)

Status = Literal["done", "skipped", "declined", "unresolved", "failed"]


@dataclass(frozen=True)
class InstallOptions:
    """Knobs for one engine run."""

    dry_run: bool = False
    auto: bool = False          # no per-application confirmation


@dataclass
class AppOutcome:
    app_id: str
    name: str
    status: Status
    method: dict[str, Any] | None = None
    commands: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.app_id,
            "name": self.name,
            "status": self.status,
            "method": self.method,
            "commands": self.commands,
            "errors": self.errors,
        }


@dataclass
class BatchReport:
    """Result of one install or uninstall batch."""

    operation: str
    dry_run: bool = False
    outcomes: list[AppOutcome] = field(default_factory=list)
    resolution_failures: list[ResolutionFailure] = field(default_factory=list)
    execution_failures: int = 0

    @property
    def ok(self) -> bool:
        return not self.resolution_failures and not self.execution_failures

    def by_status(self, status: Status) -> list[AppOutcome]:
        return [o for o in self.outcomes if o.status == status]

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "dry_run": self.dry_run,
            "ok": self.ok,
            "resolution_failures": len(self.resolution_failures),
            "execution_failures": self.execution_failures,
            "applications": [o.to_dict() for o in self.outcomes],
        }


class InstallEngine:
    """Resolve and run install methods for many applications."""

    def __init__(
        self,
        system: SystemInfo,
        registry: PackageManagerRegistry,
        options: InstallOptions,
        confirm: Callable[..., bool] = click.confirm,
    ) -> None:
        self.system = system
        self.registry = registry
        self.options = options
        self.confirm = confirm

    def install(self, apps: list[Application]) -> BatchReport:
        return self._batch("install", apps)

    def uninstall(self, apps: list[Application]) -> BatchReport:
        return self._batch("uninstall", apps)

    def _batch(self, operation: str, apps: list[Application]) -> BatchReport:
        report = BatchReport(operation=operation, dry_run=self.options.dry_run)
        for app in apps:
            report.outcomes.append(self._one(operation, app, report))
        logger.info(
            "%s batch: %d apps, %d resolution failures, %d execution failures",
            operation, len(apps), len(report.resolution_failures), report.execution_failures,
        )
        return report

    def _one(self, operation: str, app: Application, report: BatchReport) -> AppOutcome:
        outcome = AppOutcome(app_id=app.id or "", name=app.name, status="skipped")
        installing = operation == "install"

        installed = is_installed(app)
        if installing and installed:
            logger.info("Skipping %s: already installed", app.name)
            return outcome
        if not installing and not installed:
            logger.info("Skipping %s: not installed", app.name)
            return outcome

        if not self.options.auto:
            question = (
                f"Do you want to install: {app.name}?" if installing
                else f"Are you sure you want to uninstall: {app.name}?"
            )
            if not self.confirm(question, default=installing):
                outcome.status = "declined"
                return outcome

        try:
            resolved = select_method(app, self.system)
            outcome.method = resolved.trace()
            runner = InstallRunner(app, resolved, self.registry, self.options.dry_run)
            run: RunOutcome = runner.run_install() if installing else runner.run_uninstall()
        except ResolutionFailure as e:
            logger.warning("No valid install method found for %s (%s)", app.name, e.reason)
            report.resolution_failures.append(e)
            outcome.status = "unresolved"
            outcome.errors.append(e.reason)
            return outcome

        outcome.commands = run.commands
        if run.ok:
            outcome.status = "done"
        else:
            outcome.status = "failed"
            outcome.errors.extend(str(f) for f in run.failures)
            report.execution_failures += len(run.failures)
        return outcome
