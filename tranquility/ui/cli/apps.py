"""
CLI commands for applications — install, uninstall, list, categories.

Thin wrappers over ``tranquility.core.services.app_install``.
"""

from __future__ import annotations

import json
import sys

import click

from tranquility.core.models.category import Category
from tranquility.core.services.app_install import (
    ApplicationCatalog,
    BatchReport,
    InstallEngine,
    InstallOptions,
    is_installed,
)
from tranquility.ui.cli._common import current_system, registry_for, require_settings

_STATUS_ICONS = {
    "done": "✅",
    "skipped": "⏭️ ",
    "declined": "🚫",
    "unresolved": "⚠️ ",
    "failed": "❌",
}


def _parse_categories(values: tuple[str, ...]) -> list[Category]:
    try:
        return [Category.parse(v) for v in values]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--category") from e


_filter_options = [
    click.option("--server", is_flag=True, help="Only server-compatible applications."),
    click.option(
        "--category", "categories", multiple=True,
        help="Only applications in this category (repeatable).",
    ),
]


def _with_filters(fn):
    for option in reversed(_filter_options):
        fn = option(fn)
    return fn


@click.group()
def apps() -> None:
    """Applications — install, uninstall, list, categories."""


# ── Act ─────────────────────────────────────────────────────────


def _run_batch(ctx: click.Context, operation: str, auto: bool, server: bool, categories) -> None:
    settings = require_settings(ctx)
    system = current_system(ctx)
    registry = registry_for(ctx)
    dry_run = ctx.obj.get("dry_run", False)

    selected = ApplicationCatalog(settings).filter_apps(
        system, server_only=server, categories=_parse_categories(categories),
    )
    if not selected:
        click.secho("⚠️  No applications match this system and filters", fg="yellow")
        return

    engine = InstallEngine(system, registry, InstallOptions(dry_run=dry_run, auto=auto))
    if operation == "install":
        if not dry_run:
            registry.bootstrap_missing()
        report = engine.install(selected)
    else:
        report = engine.uninstall(selected)

    _print_report(report)
    if not report.ok:
        sys.exit(1)


def _print_report(report: BatchReport) -> None:
    click.echo()
    title = f"📦 {report.operation.capitalize()}"
    if report.dry_run:
        title += " (dry run)"
    click.secho(title, fg="cyan", bold=True)
    for outcome in report.outcomes:
        icon = _STATUS_ICONS.get(outcome.status, "•")
        click.echo(f"   {icon} {outcome.name:<24} {outcome.status}")
        for error in outcome.errors:
            click.secho(f"      {error}", fg="red")
    click.echo()
    if report.ok:
        click.secho("✅ Done", fg="green")
    else:
        click.secho(
            f"❌ {len(report.resolution_failures)} unresolved, "
            f"{report.execution_failures} failed steps",
            fg="red",
        )


@apps.command()
@click.option("--all", "auto", is_flag=True, help="Install everything without asking.")
@_with_filters
@click.pass_context
def install(ctx: click.Context, auto: bool, server: bool, categories: tuple[str, ...]) -> None:
    """Install applications supported on this system."""
    _run_batch(ctx, "install", auto, server, categories)


@apps.command()
@click.option("--all", "auto", is_flag=True, help="Uninstall everything without asking.")
@_with_filters
@click.pass_context
def uninstall(ctx: click.Context, auto: bool, server: bool, categories: tuple[str, ...]) -> None:
    """Uninstall applications supported on this system."""
    _run_batch(ctx, "uninstall", auto, server, categories)


# ── Observe ─────────────────────────────────────────────────────


@apps.command("list")
@_with_filters
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_apps(ctx: click.Context, server: bool, categories: tuple[str, ...], as_json: bool) -> None:
    """List applications available on this system."""
    settings = require_settings(ctx)
    system = current_system(ctx)
    selected = ApplicationCatalog(settings).filter_apps(
        system, server_only=server, categories=_parse_categories(categories),
    )

    if as_json:
        rows = [
            {**app.model_dump(mode="json", exclude_none=True), "installed": is_installed(app)}
            for app in selected
        ]
        click.echo(json.dumps(rows, indent=2))
        return

    if not selected:
        click.secho("⚠️  No applications for this system", fg="yellow")
        return

    click.secho(f"📦 Applications ({system.distro_name or system.os_type}):", fg="cyan", bold=True)
    for app in selected:
        mark = "✅" if is_installed(app) else "  "
        cats = ", ".join(c.display_name for c in app.categories)
        server_mark = " [server]" if app.server_compatible else ""
        click.echo(f"   {mark} {app.name:<24} {cats}{server_mark}")
    click.echo()


@apps.command()
def categories() -> None:
    """List application categories."""
    click.secho("🏷️  Categories:", fg="cyan", bold=True)
    for cat in Category:
        click.echo(f"   {cat.cli_name:<24} {cat.display_name}")
