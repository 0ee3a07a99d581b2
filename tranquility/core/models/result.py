"""
Command result model — outcome of one shell invocation.

The runner fills one of these for every command, live or dry-run.
Failures are captured here and, when the caller asks for it, raised
wrapped in ``ExecutionFailure``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Result of running (or pretending to run) one command."""

    command: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    dry_run: bool = False
    duration_ms: int = 0

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, command: str, stdout: str = "", **kwargs: Any) -> CommandResult:
        """Create a success result."""
        return cls(command=command, status="ok", stdout=stdout, **kwargs)

    @classmethod
    def failure(cls, command: str, error: str, **kwargs: Any) -> CommandResult:
        """Create a failure result."""
        return cls(command=command, status="failed", error=error, **kwargs)

    @classmethod
    def dry(cls, command: str) -> CommandResult:
        """Synthetic success for a command that was only printed."""
        return cls(command=command, status="ok", dry_run=True, returncode=0)

    @classmethod
    def skip(cls, command: str, reason: str = "") -> CommandResult:
        return cls(command=command, status="skipped", stdout=reason)
