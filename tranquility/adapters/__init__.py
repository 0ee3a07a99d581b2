"""Adapters — bindings to the outside world.

Public re-exports for convenient access.
"""

from tranquility.adapters.shell.command import ExecutionFailure, ShellCommand, command_exists

__all__ = [
    "ExecutionFailure",
    "ShellCommand",
    "command_exists",
]
