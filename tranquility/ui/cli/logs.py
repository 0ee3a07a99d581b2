"""
CLI command for reading the dated log files.
"""

from __future__ import annotations

import sys

import click

from tranquility.core.config.settings import SettingsError, log_file_path
from tranquility.core.use_cases.logs import LEVELS, LogQueryError, parse_day, read_log


@click.command()
@click.option("--tail", default=50, show_default=True, type=click.IntRange(min=0),
              help="Show the last N matching lines.")
@click.option("--level", "min_level", default="info", show_default=True,
              type=click.Choice(LEVELS, case_sensitive=False),
              help="Lowest level to show.")
@click.option("--date", "day", metavar="YYYY-MM-DD", help="Log file of this day (default today).")
@click.option("--json-only", is_flag=True, help="Only show JSON lines.")
@click.option("--path", "path_only", is_flag=True, help="Only print the log file path.")
@click.pass_context
def logs(
    ctx: click.Context,
    tail: int,
    min_level: str,
    day: str | None,
    json_only: bool,
    path_only: bool,
) -> None:
    """Show recent lines from the log file."""
    try:
        path = log_file_path(ctx.obj["settings"], parse_day(day))
    except (LogQueryError, SettingsError) as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if path_only:
        click.echo(str(path))
        return

    if not path.is_file():
        click.secho(f"⚠️  No log file: {path}", fg="yellow")
        return

    try:
        lines = read_log(path, tail=tail, min_level=min_level.lower(), json_only=json_only)
    except LogQueryError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"📄 Showing last {len(lines)} log line(s) from {path}:", fg="cyan")
    for line in lines:
        click.echo(line)
