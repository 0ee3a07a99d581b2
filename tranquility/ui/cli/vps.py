"""
CLI commands for VPS profiles — add, list, update, delete, schema.

Thin wrappers over ``tranquility.core.services.vps_store``.
"""

from __future__ import annotations

import json
import sys

import click

from tranquility.core.config.settings import resolved
from tranquility.core.models.vps import VpsEntry, generate_id
from tranquility.core.services.vps_store import VpsStore, VpsStoreError, schema_example
from tranquility.ui.cli._common import require_settings

_CONFLICT_CHOICES = {
    "1": "cancel",
    "2": "overwrite",
    "3": "rename",
}


def _store(ctx: click.Context) -> VpsStore:
    settings = resolved(require_settings(ctx))
    return VpsStore(settings.vps_file)


def _load(store: VpsStore):
    try:
        return store.load()
    except VpsStoreError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group()
def vps() -> None:
    """VPS profiles — add, list, update, delete, schema."""


@vps.command()
@click.option("--id", "vps_id", default=None, help="Identifier (default: derived from name and user).")
@click.option("--name", default=None, help="Display name.")
@click.option("--host", default=None, help="Host name or IP address.")
@click.option("--user", default=None, help="SSH user.")
@click.option("--port", type=click.IntRange(1, 65535), default=None, help="SSH port (default 22).")
@click.option("--private-key", default=None, help="Path to the private key.")
@click.option("--post-connect-script", default=None, help="Script to run after connecting.")
@click.pass_context
def add(
    ctx: click.Context,
    vps_id: str | None,
    name: str | None,
    host: str | None,
    user: str | None,
    port: int | None,
    private_key: str | None,
    post_connect_script: str | None,
) -> None:
    """Add a VPS (prompts for anything not given as an option)."""
    store = _store(ctx)
    config = _load(store)

    interactive = host is None
    if interactive:
        name = name or click.prompt("Name")
        host = click.prompt("Host")
        user = user or click.prompt("User", default="", show_default=False) or None
        port = port or click.prompt("Port", default=22, type=click.IntRange(1, 65535))
        private_key = private_key or click.prompt(
            "Private key path", default="", show_default=False,
        ) or None

    entry = VpsEntry(
        id=vps_id,
        name=name,
        host=host,
        user=user,
        port=port,
        private_key=private_key,
        post_connect_script=post_connect_script,
    )
    wanted = entry.id or generate_id(entry.name, entry.host, entry.user)

    on_conflict = "cancel"
    if any(e.id == wanted for e in config.vps):
        if not interactive:
            click.secho(f"❌ A VPS with id '{wanted}' already exists", fg="red")
            sys.exit(1)
        click.echo(f"A VPS with id '{wanted}' already exists:")
        click.echo("   1) Cancel\n   2) Overwrite\n   3) Use a different ID")
        choice = click.prompt("Choice", type=click.Choice(list(_CONFLICT_CHOICES)), default="1")
        on_conflict = _CONFLICT_CHOICES[choice]

    try:
        stored = store.add(entry, on_conflict=on_conflict)
    except VpsStoreError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if stored is None:
        click.echo("Cancelled.")
        return
    click.secho(f"✅ Added {stored.label} as '{stored.id}'", fg="green")


@vps.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_vps(ctx: click.Context, as_json: bool) -> None:
    """List VPS profiles."""
    config = _load(_store(ctx))

    if as_json:
        click.echo(json.dumps(config.model_dump(mode="json", exclude_none=True), indent=2))
        return

    if not config.vps:
        click.secho("⚠️  No VPS configured. Add one with 'tranquility vps add'.", fg="yellow")
        return

    click.secho("🖥️  VPS:", fg="cyan", bold=True)
    for entry in config.vps:
        click.echo(
            f"   • {entry.id:<28} {entry.effective_user}@{entry.host}:{entry.effective_port}"
            f"  ({entry.label})"
        )


@vps.command()
@click.option("--id", "vps_id", required=True, help="VPS to change.")
@click.option("--new-id", default=None, help="Rename the VPS.")
@click.option("--name", default=None)
@click.option("--host", default=None)
@click.option("--user", default=None)
@click.option("--port", type=click.IntRange(1, 65535), default=None)
@click.option("--private-key", default=None)
@click.option("--post-connect-script", default=None)
@click.pass_context
def update(
    ctx: click.Context,
    vps_id: str,
    new_id: str | None,
    name: str | None,
    host: str | None,
    user: str | None,
    port: int | None,
    private_key: str | None,
    post_connect_script: str | None,
) -> None:
    """Change fields of an existing VPS."""
    try:
        updated = _store(ctx).update(
            vps_id,
            id=new_id,
            name=name,
            host=host,
            user=user,
            port=port,
            private_key=private_key,
            post_connect_script=post_connect_script,
        )
    except VpsStoreError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    click.secho(f"✅ Updated '{updated.id}'", fg="green")


@vps.command()
@click.option("--id", "vps_id", default=None, help="VPS to delete (default: choose interactively).")
@click.option("--config-file", "whole_file", is_flag=True, help="Delete the whole VPS file.")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def delete(ctx: click.Context, vps_id: str | None, whole_file: bool, yes: bool) -> None:
    """Delete one VPS, or the whole VPS file."""
    store = _store(ctx)

    if whole_file:
        if not yes and not click.confirm(f"Delete {store.path}?", default=False):
            click.echo("Cancelled.")
            return
        if store.delete_file():
            click.secho(f"✅ Deleted {store.path}", fg="green")
        else:
            click.secho(f"⚠️  {store.path} does not exist", fg="yellow")
        return

    if vps_id is None:
        config = _load(store)
        if not config.vps:
            click.secho("⚠️  No VPS configured", fg="yellow")
            return
        for i, entry in enumerate(config.vps, start=1):
            click.echo(f"   {i}) {entry.id}  ({entry.label})")
        index = click.prompt("Delete which", type=click.IntRange(1, len(config.vps)))
        vps_id = config.vps[index - 1].id

    if not yes and not click.confirm(f"Are you sure you want to delete '{vps_id}'?", default=False):
        click.echo("Cancelled.")
        return

    if store.delete(vps_id):
        click.secho(f"✅ Deleted '{vps_id}'", fg="green")
    else:
        click.secho(f"❌ No VPS with id '{vps_id}'", fg="red")
        sys.exit(1)


@vps.command()
@click.option(
    "--format", "fmt", type=click.Choice(["yaml", "json", "xml"]), default="yaml",
    help="Output format.",
)
def schema(fmt: str) -> None:
    """Print an example VPS file."""
    click.echo(schema_example(fmt), nl=False)
