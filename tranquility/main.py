"""
Tranquility — CLI entrypoint.

Usage:
    tranquility --help
    tranquility apps install
    tranquility config validate applications --file apps.yaml
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from tranquility import __version__
from tranquility.core.config.settings import (
    SettingsError,
    default_settings,
    load_settings,
    log_file_path,
)
from tranquility.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="tranquility")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option("--dry-run", is_flag=True, help="Print commands instead of running them.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to the settings file (default: config.yaml in the app directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    dry_run: bool,
    config_path: str | None,
) -> None:
    """Tranquility — bootstrap applications, VPS profiles and configuration."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["dry_run"] = dry_run
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Settings (once per invocation, passed explicitly) ───────
    try:
        settings = load_settings(ctx.obj["config_path"])
        ctx.obj["settings_error"] = None
    except SettingsError as e:
        settings = default_settings()
        ctx.obj["settings_error"] = str(e)
    ctx.obj["settings"] = settings

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("TRANQUILITY_LOG_LEVEL", "WARNING")

    log_file = os.environ.get("TRANQUILITY_LOG_FILE")
    if not log_file and settings.log_output == "primary":
        log_file = str(log_file_path(settings))

    setup_logging(
        level=level,
        log_file=log_file,
        log_file_level=os.environ.get("TRANQUILITY_LOG_FILE_LEVEL", "DEBUG"),
        quiet_third_party=not debug,
    )


# ── Sub-groups ──────────────────────────────────────────────────

from tranquility.ui.cli.apps import apps  # noqa: E402
from tranquility.ui.cli.config import config  # noqa: E402
from tranquility.ui.cli.doctor import doctor  # noqa: E402
from tranquility.ui.cli.logs import logs  # noqa: E402
from tranquility.ui.cli.pm import pm  # noqa: E402
from tranquility.ui.cli.vps import vps  # noqa: E402

cli.add_command(apps)
cli.add_command(config)
cli.add_command(doctor)
cli.add_command(logs)
cli.add_command(pm)
cli.add_command(vps)


if __name__ == "__main__":
    cli()
