"""
CLI commands for package managers — list, update.
"""

from __future__ import annotations

import json
import sys

import click

from tranquility.adapters.shell.command import ExecutionFailure
from tranquility.core.models.package_manager import PackageManager
from tranquility.ui.cli._common import current_system, registry_for


@click.group()
def pm() -> None:
    """Package managers — list, update."""


@pm.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_managers(ctx: click.Context, as_json: bool) -> None:
    """Show package managers for this OS and whether they are installed."""
    registry = registry_for(ctx)
    rows = [
        {"name": m.value, "installed": registry.check_installed(m), "sudo": m.requires_sudo}
        for m in registry.supported()
    ]

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    system = current_system(ctx)
    if not rows:
        click.secho(f"⚠️  No known package managers for {system.distro_id or system.os_type}",
                    fg="yellow")
        return
    click.secho(f"📦 Package managers ({system.distro_name or system.os_type}):",
                fg="cyan", bold=True)
    for row in rows:
        icon = "✅" if row["installed"] else "❌"
        sudo = " (sudo)" if row["sudo"] else ""
        click.echo(f"   {icon} {row['name']}{sudo}")


@pm.command()
@click.option(
    "--manager", "-m", type=click.Choice([m.value for m in PackageManager]), default=None,
    help="Only this manager (default: every installed one).",
)
@click.pass_context
def update(ctx: click.Context, manager: str | None) -> None:
    """Refresh and upgrade packages."""
    registry = registry_for(ctx)
    dry_run = ctx.obj.get("dry_run", False)

    if manager:
        targets = [PackageManager(manager)]
    else:
        targets = [m for m in registry.supported() if registry.check_installed(m)]

    failed = False
    for target in targets:
        click.secho(f"🔄 {target.value}", fg="cyan")
        try:
            registry.update(target, dry_run=dry_run)
        except ExecutionFailure as e:
            click.secho(f"❌ {e}", fg="red")
            failed = True
    if failed:
        sys.exit(1)
