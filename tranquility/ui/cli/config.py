"""
CLI commands for configuration files — validate, override, reset, show.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from tranquility.core.config.settings import reset_settings, resolved, settings_path
from tranquility.core.models.application import ApplicationList
from tranquility.core.models.vps import VpsConfig
from tranquility.core.services.validation import DocumentKind, ValidationReport, check_file, save_document
from tranquility.core.use_cases.override import override_file, target_path

_TARGET = click.Choice([k.value for k in DocumentKind])


def _print_report(report: ValidationReport) -> None:
    if report.error:
        click.secho(f"❌ {report.error}", fg="red")
        return
    if report.valid:
        click.secho(f"✅ {report.path} is a valid {report.kind} file", fg="green")
        return
    click.secho(f"❌ {report.path}: {len(report.violations)} problem(s)", fg="red", bold=True)
    for violation in report.violations:
        click.echo(f"   • {violation}")


@click.group()
def config() -> None:
    """Configuration — validate, override, reset, show."""


@config.command()
@click.argument("target", type=_TARGET)
@click.option(
    "--file", "-f", "file_path", type=click.Path(dir_okay=False), default=None,
    help="File to validate (default: the configured one).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate(ctx: click.Context, target: str, file_path: str | None, as_json: bool) -> None:
    """Validate a settings, applications or VPS file."""
    kind = DocumentKind(target)
    path = Path(file_path) if file_path else target_path(
        kind, ctx.obj["settings"], ctx.obj.get("config_path"),
    )
    report = check_file(path, kind)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(report)
    if not report.valid:
        sys.exit(1)


@config.command()
@click.argument("target", type=_TARGET)
@click.option(
    "--file", "-f", "file_path", type=click.Path(exists=True, dir_okay=False), required=True,
    help="Replacement file.",
)
@click.pass_context
def override(ctx: click.Context, target: str, file_path: str) -> None:
    """Replace the configured file after validating the new one."""
    report, written = override_file(
        DocumentKind(target), Path(file_path), ctx.obj["settings"], ctx.obj.get("config_path"),
    )
    if written is None:
        _print_report(report)
        sys.exit(1)
    click.secho(f"✅ {target} file replaced: {written}", fg="green")


@config.command()
@click.argument("target", type=_TARGET, required=False, default="config")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def reset(ctx: click.Context, target: str, yes: bool) -> None:
    """Reset the settings (or empty the applications / VPS file)."""
    kind = DocumentKind(target)
    config_path = ctx.obj.get("config_path")
    path = target_path(kind, ctx.obj["settings"], config_path)

    if not yes and not click.confirm(f"Reset {path}?", default=False):
        click.echo("Cancelled.")
        return

    if kind is DocumentKind.CONFIG:
        reset_settings(config_path)
    elif kind is DocumentKind.APPLICATIONS:
        save_document(path, ApplicationList(), kind)
    else:
        save_document(path, VpsConfig(), kind)
    click.secho(f"✅ {target} reset: {path}", fg="green")


@config.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, as_json: bool) -> None:
    """Show the effective settings."""
    settings = resolved(ctx.obj["settings"])
    path = ctx.obj.get("config_path") or settings_path()
    data = settings.model_dump(mode="json")

    if as_json:
        click.echo(json.dumps({"path": str(path), **data}, indent=2))
        return

    click.secho(f"⚙️  Settings ({path})", fg="cyan", bold=True)
    for key, value in data.items():
        click.echo(f"   {key:<18} {value}")
    if ctx.obj.get("settings_error"):
        click.secho(f"⚠️  {ctx.obj['settings_error']}", fg="yellow")
