"""
Shared helpers for CLI commands — context lookups.
"""

from __future__ import annotations

import sys

import click

from tranquility.core.models.settings import Settings
from tranquility.core.models.system import SystemInfo
from tranquility.core.services.package_managers import PackageManagerRegistry


def require_settings(ctx: click.Context) -> Settings:
    """Settings loaded by the root command; exit 1 if the file was invalid."""
    error = ctx.obj.get("settings_error")
    if error:
        click.secho(f"❌ {error}", fg="red", err=True)
        sys.exit(1)
    return ctx.obj["settings"]


def current_system(ctx: click.Context) -> SystemInfo:
    """System snapshot, detected once per invocation."""
    system = ctx.obj.get("system")
    if system is None:
        from tranquility.core.services.system import detect_system

        system = detect_system()
        ctx.obj["system"] = system
    return system


def registry_for(ctx: click.Context) -> PackageManagerRegistry:
    registry = ctx.obj.get("registry")
    if registry is None:
        registry = PackageManagerRegistry(current_system(ctx))
        ctx.obj["registry"] = registry
    return registry
