"""
Shell command runner — build and execute one external command.

The SINGLE PLACE where ``subprocess.run`` is called. Package manager
operations, install steps and bootstrap scripts all go through
``ShellCommand.run``; dry runs stop right before the spawn.
"""

from __future__ import annotations

import logging
import os
import platform
import shlex
import shutil
import subprocess
import time
from collections.abc import Iterable

import click

from tranquility.core.models.result import CommandResult

logger = logging.getLogger(__name__)


class ExecutionFailure(Exception):
    """A command exited non-zero or could not be spawned."""

    def __init__(self, result: CommandResult) -> None:
        self.result = result
        detail = result.stderr.strip() or result.error or "unknown error"
        super().__init__(f"{result.command}: {detail}")


def _is_windows() -> bool:
    return platform.system() == "Windows"


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def command_exists(name: str) -> bool:
    """Whether ``name`` resolves to an executable on PATH."""
    return bool(name) and shutil.which(name) is not None


class ShellCommand:
    """Builder for one external command.

    Usage::

        ShellCommand("apt").with_args(["install", "fish", "-y"]).with_sudo(True).run()
    """

    def __init__(self, program: str) -> None:
        self.program = program
        self.args: list[str] = []
        self.sudo = False

    @classmethod
    def from_script(cls, script: str, *, sudo: bool = False) -> ShellCommand:
        """Run a full command line through the platform shell."""
        if _is_windows():
            cmd = cls("powershell").with_args(["-Command", script])
        else:
            cmd = cls("sh").with_args(["-c", script])
        return cmd.with_sudo(sudo)

    def with_args(self, args: Iterable[str]) -> ShellCommand:
        self.args.extend(str(a) for a in args)
        return self

    def with_sudo(self, sudo: bool = True) -> ShellCommand:
        self.sudo = sudo
        return self

    @property
    def argv(self) -> list[str]:
        """Final argument vector, elevation prefix included."""
        argv = [self.program, *self.args]
        if self.sudo and not _is_windows() and not _is_root():
            argv = ["sudo", *argv]
        return argv

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)

    def run(
        self,
        dry_run: bool = False,
        *,
        check: bool = True,
        timeout: int | None = None,
    ) -> CommandResult:
        """Execute the command (or print it when ``dry_run``).

        Raises:
            ExecutionFailure: non-zero exit or spawn error, when ``check``.
        """
        line = self.command_line
        if dry_run:
            logger.info("[dry-run] %s", line)
            click.echo(f"💡 [dry-run] {line}")
            return CommandResult.dry(line)

        logger.debug("Executing: %s", line)
        start = time.monotonic()
        try:
            proc = subprocess.run(
                self.argv,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            result = CommandResult.failure(line, f"Command timed out ({timeout}s)")
        except OSError as e:
            result = CommandResult.failure(line, f"Could not start command: {e}")
        else:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            if proc.returncode == 0:
                result = CommandResult.success(
                    line,
                    stdout=proc.stdout or "",
                    stderr=proc.stderr or "",
                    returncode=0,
                    duration_ms=elapsed_ms,
                )
            else:
                result = CommandResult.failure(
                    line,
                    f"Command failed (exit {proc.returncode})",
                    returncode=proc.returncode,
                    stdout=proc.stdout or "",
                    stderr=proc.stderr or "",
                    duration_ms=elapsed_ms,
                )

        if result.failed:
            logger.error("%s — %s", line, result.stderr.strip() or result.error)
            if check:
                raise ExecutionFailure(result)
        return result
