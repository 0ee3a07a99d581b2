"""
L4 Execution — run one resolved install method.

Each step is its own shell invocation. A failing step is recorded and
the remaining steps still run; the caller decides what a failure means
for the batch.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from tranquility.adapters.shell.command import ExecutionFailure, ShellCommand
from tranquility.core.models.application import Application
from tranquility.core.models.result import CommandResult
from tranquility.core.services.app_install.resolver import ResolutionFailure, ResolvedMethod
from tranquility.core.services.package_managers import PackageManagerRegistry

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    """What one install or uninstall run did."""

    results: list[CommandResult] = field(default_factory=list)
    failures: list[ExecutionFailure] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def commands(self) -> list[str]:
        return [r.command for r in self.results]


class InstallRunner:
    """Install or uninstall one application through its resolved method."""

    def __init__(
        self,
        app: Application,
        resolved: ResolvedMethod,
        registry: PackageManagerRegistry,
        dry_run: bool = False,
    ) -> None:
        self.app = app
        self.resolved = resolved
        self.registry = registry
        self.dry_run = dry_run

    def run_install(self) -> RunOutcome:
        """preinstall → install steps or package manager → postinstall.

        Raises:
            ResolutionFailure: the method has neither install steps nor
                a package manager with a package name.
        """
        method = self.resolved.method
        if not method.can_install:
            raise ResolutionFailure(self.app, "install method has no install steps or package")

        steps = method.steps
        outcome = RunOutcome()
        start = time.monotonic()

        if steps:
            self._run_steps(steps.preinstall_steps, outcome)
        if steps and steps.install:
            self._run_steps(steps.install, outcome)
        else:
            self._attempt(outcome, lambda: self.registry.install(
                method.package_manager,
                method.package_name,
                cask=method.is_cask,
                dry_run=self.dry_run,
            ))
        if steps:
            self._run_steps(steps.postinstall_steps, outcome)

        outcome.duration_ms = int((time.monotonic() - start) * 1000)
        logger.info("Installed %s in %.2fs", self.app.name, outcome.duration_ms / 1000)
        return outcome

    def run_uninstall(self) -> RunOutcome:
        """uninstall steps or package manager → postuninstall."""
        method = self.resolved.method
        if not method.can_uninstall:
            raise ResolutionFailure(self.app, "install method has no uninstall steps or package")

        steps = method.steps
        outcome = RunOutcome()
        start = time.monotonic()

        if steps and steps.uninstall:
            self._run_steps(steps.uninstall, outcome)
        else:
            self._attempt(outcome, lambda: self.registry.uninstall(
                method.package_manager,
                method.package_name,
                dry_run=self.dry_run,
            ))
        if steps:
            self._run_steps(steps.postuninstall_steps, outcome)

        outcome.duration_ms = int((time.monotonic() - start) * 1000)
        logger.info("Uninstalled %s in %.2fs", self.app.name, outcome.duration_ms / 1000)
        return outcome

    # ── Internals ───────────────────────────────────────────────

    def _run_steps(self, steps: list[str], outcome: RunOutcome) -> None:
        for step in steps:
            self._attempt(outcome, lambda step=step: ShellCommand.from_script(step).run(self.dry_run))

    def _attempt(self, outcome: RunOutcome, action: Callable[[], CommandResult]) -> None:
        try:
            outcome.results.append(action())
        except ExecutionFailure as e:
            logger.warning("%s: step failed: %s", self.app.name, e)
            outcome.results.append(e.result)
            outcome.failures.append(e)
