"""
CLI command for the doctor check.
"""

from __future__ import annotations

import json
import sys

import click

from tranquility.core.use_cases.doctor import run_doctor
from tranquility.ui.cli._common import current_system, registry_for


@click.command()
@click.option("--fix", is_flag=True, help="Repair what can be repaired.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doctor(ctx: click.Context, fix: bool, as_json: bool) -> None:
    """Check settings, data files, log directory and package managers."""
    if ctx.obj.get("settings_error") and not fix:
        click.secho(f"❌ {ctx.obj['settings_error']}", fg="red")
        click.echo("   Run 'tranquility doctor --fix' to repair it.")
        sys.exit(1)

    report = run_doctor(
        ctx.obj["settings"],
        current_system(ctx),
        registry_for(ctx),
        fix=fix,
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        if not report.ok:
            sys.exit(1)
        return

    system = report.system
    click.secho(f"🩺 {system.get('distro_name') or system.get('os_type')} ({system.get('arch')})",
                fg="cyan", bold=True)
    for name, present in report.package_managers.items():
        click.echo(f"   {'✅' if present else '❌'} {name}")
    click.echo(f"   📦 {report.app_count} application(s) available")
    for fix_done in report.fixes:
        click.secho(f"   🔧 {fix_done}", fg="blue")
    for warning in report.warnings:
        click.secho(f"   ⚠️  {warning}", fg="yellow")
    for error in report.errors:
        click.secho(f"   ❌ {error}", fg="red")

    click.echo()
    if report.ok:
        click.secho("✅ All good", fg="green")
    else:
        sys.exit(1)
